"""FastAPI router for credential login and bearer token issuance."""

from __future__ import annotations

from fastapi import APIRouter, Response

from person_auth.application.dto.person_models import LoginRequest, TokenResponse
from person_auth.application.services.auth_service import (
    AuthOutcome,
    AuthService,
    InvalidCredentialsError,
)
from person_auth.infrastructure.security.token_service import JwtTokenService

DEFAULT_LOGIN_PATH = "/login"


def build_auth_router(
    *,
    auth_service: AuthService,
    token_service: JwtTokenService,
    login_path: str = DEFAULT_LOGIN_PATH,
) -> APIRouter:
    """Build router exposing the login endpoint."""

    router = APIRouter(tags=["auth"])

    @router.post(login_path, response_model=TokenResponse)
    async def login(payload: LoginRequest, response: Response) -> TokenResponse:
        result = await auth_service.authenticate(login=payload.login, password=payload.password)
        if result.outcome is not AuthOutcome.SUCCESS or result.person is None:
            raise InvalidCredentialsError()

        issued = token_service.issue_token(result.person.login)
        response.headers["Authorization"] = f"Bearer {issued.token}"
        return TokenResponse(token=issued.token, expires_at=issued.expires_at)

    return router
