"""Application authentication service for login credential verification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from person_auth.application.ports.password_hasher_port import PasswordHasherPort
from person_auth.application.ports.person_repository_port import (
    PersonRecord,
    PersonRepositoryPort,
)

logger = logging.getLogger(__name__)

UNKNOWN_LOGIN_PASSWORD = "unknown-login-placeholder"


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


class InvalidCredentialsError(PermissionError):
    """Raised when a login/password pair does not match a stored person."""

    def __init__(self) -> None:
        super().__init__("invalid credentials")


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    person: PersonRecord | None = None


class AuthService:
    """Authenticate login credentials against stored password hashes."""

    def __init__(
        self,
        *,
        persons: PersonRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._persons = persons
        self._password_hasher = password_hasher
        self._dummy_password_hash: str | None = None

    async def authenticate(self, *, login: str, password: str) -> AuthResult:
        """Return success with the person only when the password hash matches."""

        person = await self._persons.get_by_login(login=login.strip())
        if person is None:
            # Pay the same bcrypt cost as a wrong password.
            await self._verify(password=password, password_hash=await self._dummy_hash())
            logger.info("login_failed login=%s reason=unknown_login", login)
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS)

        is_valid = await self._verify(password=password, password_hash=person.password)
        if not is_valid:
            logger.info("login_failed login=%s reason=wrong_password", login)
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS)

        logger.info("login_success person_id=%s", person.person_id)
        return AuthResult(outcome=AuthOutcome.SUCCESS, person=person)

    async def _verify(self, *, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=password_hash,
        )

    async def _dummy_hash(self) -> str:
        if self._dummy_password_hash is None:
            self._dummy_password_hash = await asyncio.to_thread(
                self._password_hasher.hash_password,
                UNKNOWN_LOGIN_PASSWORD,
            )
        return self._dummy_password_hash
