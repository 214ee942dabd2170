"""Port for person credential persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class PersonStoreError(RuntimeError):
    """Raised when the credential store fails to complete an operation."""


@dataclass(frozen=True)
class PersonRecord:
    """Person persistence model; `password` always holds a hash."""

    person_id: int
    login: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class PersonCreateInput:
    """Insert payload for one person row."""

    login: str
    password: str = field(repr=False)


class PersonRepositoryPort(Protocol):
    """Person repository contract."""

    async def list_persons(self) -> list[PersonRecord]:
        """Return every stored person ordered by id."""

    async def get_by_id(self, *, person_id: int) -> PersonRecord | None:
        """Return person by id or None."""

    async def get_by_login(self, *, login: str) -> PersonRecord | None:
        """Return person by exact login or None."""

    async def exists_by_id(self, *, person_id: int) -> bool:
        """Return whether a person row exists for id."""

    async def create_person(self, payload: PersonCreateInput) -> PersonRecord:
        """Insert one person and return the row with its assigned id."""

    async def update_person(self, record: PersonRecord) -> PersonRecord | None:
        """Replace login and password for an existing id, or return None when absent."""

    async def delete_by_id(self, *, person_id: int) -> bool:
        """Delete one person and return whether a row was removed."""
