"""Ordered `(request, call_next)` interceptors installed as HTTP middleware."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from fastapi import FastAPI, Request, Response

from person_auth.infrastructure.http.auth_guard import BearerAuthGuard
from person_auth.infrastructure.http.error_handlers import error_response
from person_auth.infrastructure.security.token_service import (
    AuthTokenError,
    ExpiredAuthTokenError,
    MissingAuthTokenError,
)

CallNext = Callable[[Request], Awaitable[Response]]
RequestInterceptor = Callable[[Request, CallNext], Awaitable[Response]]

logger = logging.getLogger(__name__)


def install_interceptors(app: FastAPI, interceptors: Sequence[RequestInterceptor]) -> None:
    """Install interceptors so the first one in `interceptors` runs outermost."""

    # Starlette wraps earlier middleware with later registrations.
    for interceptor in reversed(interceptors):
        app.middleware("http")(interceptor)


def build_request_logging_interceptor() -> RequestInterceptor:
    """Build interceptor logging method, path, status and duration per request."""

    async def log_request(request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http_request method=%s path=%s status=%s duration_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    return log_request


def build_auth_interceptor(*, auth_guard: BearerAuthGuard) -> RequestInterceptor:
    """Build interceptor that rejects unauthenticated calls to protected routes."""

    async def authenticate(request: Request, call_next: CallNext) -> Response:
        if request.method == "OPTIONS" or auth_guard.is_public(
            method=request.method, path=request.url.path
        ):
            return await call_next(request)

        try:
            login = auth_guard.require_login(
                authorization_header=request.headers.get("authorization")
            )
        except (MissingAuthTokenError, ExpiredAuthTokenError) as exc:
            logger.info(
                "auth_rejected reason=unauthenticated method=%s path=%s message=%s",
                request.method,
                request.url.path,
                exc,
            )
            return _unauthorized(exc)
        except AuthTokenError as exc:
            logger.warning(
                "auth_rejected reason=malformed method=%s path=%s type=%s message=%s",
                request.method,
                request.url.path,
                type(exc).__name__,
                exc,
            )
            return _unauthorized(exc)

        request.state.login = login
        return await call_next(request)

    return authenticate


def _unauthorized(exc: AuthTokenError) -> Response:
    return error_response(
        status_code=401,
        message=str(exc),
        error_type=type(exc).__name__,
        headers={"WWW-Authenticate": "Bearer"},
    )
