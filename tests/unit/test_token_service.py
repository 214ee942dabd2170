from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from person_auth.infrastructure.security.token_service import (
    AuthTokenError,
    ExpiredAuthTokenError,
    JwtTokenService,
    MalformedAuthTokenError,
)

SECRET = "unit-test-signing-secret-" + "x" * 64


def test_issued_token_verifies_to_login() -> None:
    service = JwtTokenService(secret=SECRET)

    issued = service.issue_token("bob")

    assert issued.token.count(".") == 2
    assert service.verify_token(issued.token) == "bob"


def test_token_carries_subject_issued_at_and_expiry() -> None:
    fixed_now = datetime(2026, 2, 15, 0, 0, 0, tzinfo=UTC)
    service = JwtTokenService(
        secret=SECRET,
        algorithm="HS256",
        token_ttl=timedelta(hours=1),
        now=lambda: fixed_now,
    )

    issued = service.issue_token("bob")
    claims = jwt.decode(issued.token, options={"verify_signature": False})
    header = jwt.get_unverified_header(issued.token)

    assert header["alg"] == "HS256"
    assert claims["sub"] == "bob"
    assert claims["iat"] == int(fixed_now.timestamp())
    assert claims["exp"] == int((fixed_now + timedelta(hours=1)).timestamp())
    assert issued.expires_at == fixed_now + timedelta(hours=1)


def test_expired_token_is_rejected() -> None:
    past = datetime.now(tz=UTC) - timedelta(hours=2)
    service = JwtTokenService(secret=SECRET, token_ttl=timedelta(hours=1), now=lambda: past)

    issued = service.issue_token("bob")

    with pytest.raises(ExpiredAuthTokenError):
        service.verify_token(issued.token)


def test_future_issued_at_is_accepted_while_not_expired() -> None:
    future = datetime.now(tz=UTC) + timedelta(hours=1)
    service = JwtTokenService(secret=SECRET, token_ttl=timedelta(hours=2), now=lambda: future)

    issued = service.issue_token("bob")

    assert service.verify_token(issued.token) == "bob"


def test_token_signed_with_other_secret_is_malformed() -> None:
    issuer = JwtTokenService(secret="other-secret-" + "y" * 64)
    verifier = JwtTokenService(secret=SECRET)

    token = issuer.issue_token("bob").token

    with pytest.raises(MalformedAuthTokenError):
        verifier.verify_token(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_undecodable_token_is_malformed(token: str) -> None:
    service = JwtTokenService(secret=SECRET)

    with pytest.raises(MalformedAuthTokenError):
        service.verify_token(token)


def test_token_without_expiry_is_malformed() -> None:
    service = JwtTokenService(secret=SECRET)
    token = jwt.encode({"sub": "bob", "iat": datetime.now(tz=UTC)}, SECRET, algorithm="HS512")

    with pytest.raises(MalformedAuthTokenError):
        service.verify_token(token)


def test_tampered_payload_is_rejected() -> None:
    service = JwtTokenService(secret=SECRET)
    header, _, signature = service.issue_token("bob").token.split(".")
    now = datetime.now(tz=UTC)
    forged_payload = jwt.encode(
        {"sub": "mallory", "iat": now, "exp": now + timedelta(hours=1)},
        "attacker",
        algorithm="HS512",
    ).split(".")[1]

    with pytest.raises(AuthTokenError):
        service.verify_token(f"{header}.{forged_payload}.{signature}")


def test_blank_secret_is_rejected() -> None:
    with pytest.raises(ValueError, match="secret"):
        JwtTokenService(secret="")
