"""Signed JWT issuance and stateless verification for person logins."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

JwtAlgorithm = Literal["HS256", "HS384", "HS512"]

DEFAULT_TOKEN_TTL = timedelta(days=10)
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]

logger = logging.getLogger(__name__)


class AuthTokenError(PermissionError):
    """Base class for bearer token authentication failures."""


class MissingAuthTokenError(AuthTokenError):
    """Raised when a bearer token is required but not provided."""


class MalformedAuthTokenError(AuthTokenError):
    """Raised when a bearer header or token cannot be decoded or trusted."""


class ExpiredAuthTokenError(AuthTokenError):
    """Raised when a well-formed token is past its expiry."""


@dataclass(frozen=True)
class IssuedToken:
    """Issued bearer token and its expiry."""

    token: str
    expires_at: datetime


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class JwtTokenService:
    """Issue and verify HMAC-signed JWTs carrying the login as subject."""

    def __init__(
        self,
        *,
        secret: str,
        algorithm: JwtAlgorithm = "HS512",
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token secret cannot be blank")
        self._secret = secret
        self._algorithm = algorithm
        self._token_ttl = token_ttl
        self._now = now

    def issue_token(self, login: str) -> IssuedToken:
        """Return a signed token for `login` expiring after the configured TTL."""

        issued_at = self._now().replace(microsecond=0)
        expires_at = issued_at + self._token_ttl
        payload = {
            "sub": login,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        logger.debug("auth_token_issued login=%s expires_at=%s", login, expires_at.isoformat())
        return IssuedToken(token=token, expires_at=expires_at)

    def verify_token(self, token: str) -> str:
        """Return the login carried by a valid token.

        Raises:
            ExpiredAuthTokenError: token signature is valid but `exp` has passed.
            MalformedAuthTokenError: token is undecodable, badly signed or lacks claims.
        """

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_iat": False},
            )
        except ExpiredSignatureError as exc:
            raise ExpiredAuthTokenError("auth token expired") from exc
        except InvalidTokenError as exc:
            raise MalformedAuthTokenError(f"invalid auth token: {exc}") from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedAuthTokenError("invalid auth token: empty subject")
        return subject
