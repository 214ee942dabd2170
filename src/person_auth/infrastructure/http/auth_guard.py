"""Bearer header parsing and token-backed caller resolution."""

from __future__ import annotations

from collections.abc import Iterable

from person_auth.infrastructure.security.token_service import (
    JwtTokenService,
    MalformedAuthTokenError,
    MissingAuthTokenError,
)


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract token from standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError("missing bearer token")

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise MalformedAuthTokenError("invalid bearer token header")

    return parts[1]


class BearerAuthGuard:
    """Resolve the caller login from a bearer header, skipping public routes."""

    def __init__(
        self,
        *,
        token_service: JwtTokenService,
        public_routes: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._token_service = token_service
        self._public_routes = frozenset(
            (method.upper(), path) for method, path in public_routes
        )

    def is_public(self, *, method: str, path: str) -> bool:
        """Return whether `method path` matches one public route exactly."""

        return (method.upper(), path) in self._public_routes

    def require_login(self, *, authorization_header: str | None) -> str:
        """Return authenticated login or raise an `AuthTokenError` subclass."""

        token = extract_bearer_token(authorization_header)
        return self._token_service.verify_token(token)
