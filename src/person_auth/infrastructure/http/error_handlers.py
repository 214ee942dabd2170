"""Exception-to-response mapping for the person API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from person_auth.application.dto.person_models import ErrorResponse
from person_auth.application.ports.person_repository_port import PersonStoreError
from person_auth.application.services.auth_service import InvalidCredentialsError
from person_auth.application.services.person_service import PersonNotFoundError
from person_auth.domain.auth.credentials import CredentialValidationError
from person_auth.domain.person.merge import MergeFieldPairingError
from person_auth.infrastructure.security.token_service import AuthTokenError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "internal server error"

ERROR_STATUS_CODES: tuple[tuple[type[Exception], int], ...] = (
    (CredentialValidationError, 400),
    (MergeFieldPairingError, 400),
    (InvalidCredentialsError, 401),
    (AuthTokenError, 401),
    (PersonNotFoundError, 404),
    (PersonStoreError, 500),
)


def error_response(
    *,
    status_code: int,
    message: str,
    error_type: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the `{message, type}` error body."""

    body = ErrorResponse(message=message, type=error_type)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def log_request_error(
    request: Request,
    *,
    status_code: int,
    exc: Exception,
    message: str,
    exc_info: bool = False,
) -> None:
    """Log one rejected request with its original error message."""

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed method=%s path=%s status=%s type=%s message=%s",
        request.method,
        request.url.path,
        status_code,
        type(exc).__name__,
        message,
        exc_info=exc if exc_info else None,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers producing `{message, type}` bodies; unmapped errors become 500."""

    for error_type, status_code in ERROR_STATUS_CODES:
        app.add_exception_handler(error_type, _build_handler(status_code))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        log_request_error(request, status_code=400, exc=exc, message=message)
        return error_response(status_code=400, message=message, error_type=type(exc).__name__)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        message = str(exc.detail)
        log_request_error(request, status_code=exc.status_code, exc=exc, message=message)
        return error_response(
            status_code=exc.status_code,
            message=message,
            error_type="HTTPException",
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log_request_error(request, status_code=500, exc=exc, message=str(exc), exc_info=True)
        return error_response(
            status_code=500,
            message=INTERNAL_ERROR_MESSAGE,
            error_type=type(exc).__name__,
        )


def _build_handler(
    status_code: int,
) -> Callable[[Request, Exception], Awaitable[JSONResponse]]:
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        message = str(exc)
        log_request_error(request, status_code=status_code, exc=exc, message=message)
        if status_code >= 500:
            message = INTERNAL_ERROR_MESSAGE
        return error_response(
            status_code=status_code,
            message=message,
            error_type=type(exc).__name__,
        )

    return handle
