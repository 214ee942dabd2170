"""Password policy and login validation for person credential inputs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class CredentialViolation:
    """One violated credential rule."""

    field: str
    rule: str
    message: str


@dataclass(frozen=True)
class PasswordPolicy:
    """Configurable password length bounds."""

    min_length: int = 6
    max_length: int = 20

    def __post_init__(self) -> None:
        if self.min_length < 1:
            raise ValueError("min_length must be positive")
        if self.max_length < self.min_length:
            raise ValueError("max_length must not be lower than min_length")


class CredentialValidationError(ValueError):
    """Raised when login or password input violates the credential policy."""

    def __init__(self, violations: Sequence[CredentialViolation]) -> None:
        self.violations = tuple(violations)
        super().__init__(
            "; ".join(f"{item.message} (rule: {item.rule})" for item in self.violations)
        )


class DuplicateLoginError(CredentialValidationError):
    """Raised when a login is already taken by another person."""

    def __init__(self, *, login: str) -> None:
        super().__init__(
            [CredentialViolation(field="login", rule="unique", message="login already taken")]
        )
        self.login = login


def validate_login(login: str | None) -> list[CredentialViolation]:
    """Return violations for one login value."""

    if login is None:
        return [CredentialViolation(field="login", rule="required", message="login is required")]
    if not login.strip():
        return [CredentialViolation(field="login", rule="blank", message="login cannot be blank")]
    return []


def validate_password(
    password: str | None,
    policy: PasswordPolicy,
    *,
    enforce_max_length: bool = False,
) -> list[CredentialViolation]:
    """Return violations for one plaintext password.

    The upper length bound applies only when ``enforce_max_length`` is set; the
    bcrypt byte limit always applies.
    """

    if password is None:
        return [
            CredentialViolation(field="password", rule="required", message="password is required")
        ]

    violations: list[CredentialViolation] = []
    if len(password) < policy.min_length:
        violations.append(
            CredentialViolation(
                field="password",
                rule="min_length",
                message=f"password length must be at least {policy.min_length} characters",
            )
        )
    if enforce_max_length and len(password) > policy.max_length:
        violations.append(
            CredentialViolation(
                field="password",
                rule="max_length",
                message=(
                    f"password length must be between {policy.min_length} "
                    f"and {policy.max_length} characters"
                ),
            )
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        violations.append(
            CredentialViolation(
                field="password",
                rule="max_bytes",
                message=f"password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes",
            )
        )
    return violations


def validate_credentials(
    *,
    login: str | None,
    password: str | None,
    policy: PasswordPolicy,
) -> list[CredentialViolation]:
    """Return combined violations for a login/password pair."""

    return [*validate_login(login), *validate_password(password, policy)]


def require_valid(violations: Sequence[CredentialViolation]) -> None:
    """Raise when any violation was collected."""

    if violations:
        raise CredentialValidationError(violations)


def normalize_login(*, login: str) -> str:
    """Strip surrounding whitespace from one login and reject blank values."""

    normalized = login.strip()
    if not normalized:
        raise CredentialValidationError(validate_login(normalized))
    return normalized
