"""Pydantic models for person credential HTTP contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# Store ids are signed 64-bit integers.
MAX_PERSON_ID = 2**63 - 1

PersonId = Annotated[int, Field(ge=1, le=MAX_PERSON_ID)]


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class PersonCredentialsRequest(StrictModel):
    """Create and sign-up payload; policy checks run in the service layer."""

    login: str | None = None
    password: str | None = None


class PersonUpdateRequest(StrictModel):
    """Full replace payload for an existing person."""

    id: PersonId
    login: str | None = None
    password: str | None = None


class PersonPatchBody(StrictModel):
    """Partial update payload; omitted or null fields keep stored values."""

    id: PersonId
    login: str | None = None
    password: str | None = None


class PasswordChangeRequest(StrictModel):
    """Password-only update payload."""

    password: str | None = None


class PersonResponse(StrictModel):
    """Person representation returned to clients; never includes the password."""

    id: int
    login: str


class LoginRequest(StrictModel):
    """Credential payload for token issuance."""

    login: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(StrictModel):
    """Issued bearer token payload."""

    token: str
    token_type: Literal["Bearer"] = "Bearer"
    expires_at: datetime


class ErrorResponse(StrictModel):
    """Client-facing error body."""

    message: str
    type: str
