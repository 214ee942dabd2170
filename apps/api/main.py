"""person-auth API entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from datetime import timedelta

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from person_auth.application.ports.password_hasher_port import PasswordHasherPort
from person_auth.application.ports.person_repository_port import PersonRepositoryPort
from person_auth.application.services.auth_service import AuthService
from person_auth.application.services.person_service import PersonService
from person_auth.config.settings import Settings, load_settings
from person_auth.domain.auth.credentials import PasswordPolicy
from person_auth.infrastructure.db.person_repository import SqlAlchemyPersonRepository
from person_auth.infrastructure.db.session import create_session_factory
from person_auth.infrastructure.http.auth_guard import BearerAuthGuard
from person_auth.infrastructure.http.auth_router import build_auth_router
from person_auth.infrastructure.http.error_handlers import register_error_handlers
from person_auth.infrastructure.http.interceptors import (
    build_auth_interceptor,
    build_request_logging_interceptor,
    install_interceptors,
)
from person_auth.infrastructure.http.person_router import build_person_router
from person_auth.infrastructure.logging import configure_logging
from person_auth.infrastructure.security.password_hasher import BcryptPasswordHasher
from person_auth.infrastructure.security.token_service import JwtTokenService

API_HOST = "0.0.0.0"
API_PORT = 8000
logger = logging.getLogger(__name__)


def build_person_repository(database_url: str) -> PersonRepositoryPort:
    """Build person repository with SQLAlchemy session factory."""

    return SqlAlchemyPersonRepository(create_session_factory(database_url))


def build_token_service(settings: Settings) -> JwtTokenService:
    """Build JWT token service from runtime settings."""

    return JwtTokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        token_ttl=timedelta(seconds=settings.token_ttl_seconds),
    )


def create_app(
    *,
    settings: Settings | None = None,
    person_repository: PersonRepositoryPort | None = None,
    password_hasher: PasswordHasherPort | None = None,
    token_service: JwtTokenService | None = None,
) -> FastAPI:
    """Create FastAPI app exposing person credential and login routes."""

    if settings is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)

    if person_repository is None:
        person_repository = build_person_repository(settings.database_url)
    if password_hasher is None:
        password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    if token_service is None:
        token_service = build_token_service(settings)

    person_service = PersonService(
        persons=person_repository,
        password_hasher=password_hasher,
        password_policy=PasswordPolicy(
            min_length=settings.password_min_length,
            max_length=settings.password_max_length,
        ),
    )
    auth_service = AuthService(persons=person_repository, password_hasher=password_hasher)
    auth_guard = BearerAuthGuard(
        token_service=token_service,
        public_routes=[("POST", settings.sign_up_path), ("POST", settings.login_path)],
    )

    app = FastAPI(title="person-auth")
    register_error_handlers(app)
    app.include_router(
        build_auth_router(
            auth_service=auth_service,
            token_service=token_service,
            login_path=settings.login_path,
        )
    )
    app.include_router(
        build_person_router(
            person_service=person_service,
            sign_up_path=settings.sign_up_path,
        )
    )
    install_interceptors(
        app,
        [
            build_request_logging_interceptor(),
            build_auth_interceptor(auth_guard=auth_guard),
        ],
    )
    # Registered last so CORS preflight is answered before authentication.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    logger.info(
        "api_app_created sign_up_path=%s login_path=%s jwt_algorithm=%s",
        settings.sign_up_path,
        settings.login_path,
        settings.jwt_algorithm,
    )
    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the API as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run person-auth API process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
