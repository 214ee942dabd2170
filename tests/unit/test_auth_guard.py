from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from person_auth.infrastructure.http.auth_guard import BearerAuthGuard, extract_bearer_token
from person_auth.infrastructure.security.token_service import (
    ExpiredAuthTokenError,
    JwtTokenService,
    MalformedAuthTokenError,
    MissingAuthTokenError,
)

SECRET = "guard-test-signing-secret-" + "z" * 64


def _guard(token_service: JwtTokenService | None = None) -> BearerAuthGuard:
    return BearerAuthGuard(
        token_service=token_service or JwtTokenService(secret=SECRET),
        public_routes=[("post", "/person/sign-up"), ("POST", "/login")],
    )


def test_extract_bearer_token_returns_token_value() -> None:
    assert extract_bearer_token("Bearer some.jwt.value") == "some.jwt.value"
    assert extract_bearer_token("bearer some.jwt.value") == "some.jwt.value"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_extract_bearer_token_treats_empty_header_as_missing(header: str | None) -> None:
    with pytest.raises(MissingAuthTokenError, match="missing bearer token"):
        extract_bearer_token(header)


@pytest.mark.parametrize("header", ["Basic token", "Bearer", "Bearer a b"])
def test_extract_bearer_token_rejects_malformed_header(header: str) -> None:
    with pytest.raises(MalformedAuthTokenError, match="invalid bearer token header"):
        extract_bearer_token(header)


def test_public_routes_match_exact_method_and_path() -> None:
    guard = _guard()

    assert guard.is_public(method="POST", path="/person/sign-up") is True
    assert guard.is_public(method="post", path="/login") is True
    assert guard.is_public(method="GET", path="/person/sign-up") is False
    assert guard.is_public(method="POST", path="/person/sign-up/") is False
    assert guard.is_public(method="POST", path="/person") is False


def test_require_login_returns_token_subject() -> None:
    token_service = JwtTokenService(secret=SECRET)
    guard = _guard(token_service)
    token = token_service.issue_token("bob").token

    assert guard.require_login(authorization_header=f"Bearer {token}") == "bob"


def test_require_login_rejects_expired_token() -> None:
    past = datetime.now(tz=UTC) - timedelta(days=2)
    token_service = JwtTokenService(secret=SECRET, token_ttl=timedelta(days=1), now=lambda: past)
    guard = _guard(token_service)
    token = token_service.issue_token("bob").token

    with pytest.raises(ExpiredAuthTokenError):
        guard.require_login(authorization_header=f"Bearer {token}")


def test_require_login_rejects_missing_header() -> None:
    with pytest.raises(MissingAuthTokenError):
        _guard().require_login(authorization_header=None)
