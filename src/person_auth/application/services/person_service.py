"""Application service for person credential lifecycle operations."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from person_auth.application.ports.password_hasher_port import PasswordHasherPort
from person_auth.application.ports.person_repository_port import (
    PersonCreateInput,
    PersonRecord,
    PersonRepositoryPort,
)
from person_auth.domain.auth.credentials import (
    CredentialViolation,
    DuplicateLoginError,
    PasswordPolicy,
    normalize_login,
    require_valid,
    validate_credentials,
    validate_login,
    validate_password,
)
from person_auth.domain.person.merge import PersonPatch, merge_person

logger = logging.getLogger(__name__)


class PersonNotFoundError(LookupError):
    """Raised when no person exists for the requested id."""

    def __init__(self, *, person_id: int) -> None:
        super().__init__(f"person not found: {person_id}")
        self.person_id = person_id


@dataclass(frozen=True)
class PersonPatchRequest:
    """Plaintext partial update for one person; `None` fields are left untouched."""

    person_id: int
    login: str | None = None
    password: str | None = field(default=None, repr=False)


class PersonService:
    """Validate, hash and persist person credential records."""

    def __init__(
        self,
        *,
        persons: PersonRepositoryPort,
        password_hasher: PasswordHasherPort,
        password_policy: PasswordPolicy | None = None,
    ) -> None:
        self._persons = persons
        self._password_hasher = password_hasher
        self._password_policy = password_policy or PasswordPolicy()

    async def list_persons(self) -> list[PersonRecord]:
        """Return every stored person."""

        return await self._persons.list_persons()

    async def get_person(self, *, person_id: int) -> PersonRecord:
        """Return one person or raise not-found."""

        person = await self._persons.get_by_id(person_id=person_id)
        if person is None:
            raise PersonNotFoundError(person_id=person_id)
        return person

    async def create_person(self, *, login: str | None, password: str | None) -> PersonRecord:
        """Create one person through the administrative create route."""

        created = await self._register(login=login, password=password)
        logger.info("person_created person_id=%s login=%s", created.person_id, created.login)
        return created

    async def sign_up(self, *, login: str | None, password: str | None) -> PersonRecord:
        """Create one person through the public sign-up route."""

        created = await self._register(login=login, password=password)
        logger.info("person_signed_up person_id=%s login=%s", created.person_id, created.login)
        return created

    async def update_person(
        self,
        *,
        person_id: int,
        login: str | None,
        password: str | None,
    ) -> PersonRecord:
        """Fully replace login and password of an existing person."""

        require_valid(
            validate_credentials(login=login, password=password, policy=self._password_policy)
        )
        assert login is not None and password is not None
        normalized_login = normalize_login(login=login)

        if not await self._persons.exists_by_id(person_id=person_id):
            raise PersonNotFoundError(person_id=person_id)
        await self._require_login_available(login=normalized_login, person_id=person_id)

        password_hash = await self._hash(password)
        updated = await self._persons.update_person(
            PersonRecord(person_id=person_id, login=normalized_login, password=password_hash)
        )
        if updated is None:
            raise PersonNotFoundError(person_id=person_id)
        logger.info("person_updated person_id=%s", person_id)
        return updated

    async def delete_person(self, *, person_id: int) -> None:
        """Delete one existing person or raise not-found."""

        if not await self._persons.exists_by_id(person_id=person_id):
            raise PersonNotFoundError(person_id=person_id)
        if not await self._persons.delete_by_id(person_id=person_id):
            raise PersonNotFoundError(person_id=person_id)
        logger.info("person_deleted person_id=%s", person_id)

    async def patch_person(self, request: PersonPatchRequest) -> PersonRecord:
        """Merge non-null fields of `request` onto the stored person."""

        violations: list[CredentialViolation] = []
        if request.login is not None:
            violations.extend(validate_login(request.login))
        if request.password is not None:
            violations.extend(validate_password(request.password, self._password_policy))
        require_valid(violations)

        existing = await self.get_person(person_id=request.person_id)

        login = normalize_login(login=request.login) if request.login is not None else None
        if login is not None:
            await self._require_login_available(login=login, person_id=existing.person_id)
        password_hash = None
        if request.password is not None:
            password_hash = await self._hash(request.password)

        merged = merge_person(existing, PersonPatch(login=login, password=password_hash))
        updated = await self._persons.update_person(merged)
        if updated is None:
            raise PersonNotFoundError(person_id=request.person_id)
        logger.info(
            "person_patched person_id=%s login_changed=%s password_changed=%s",
            updated.person_id,
            login is not None,
            password_hash is not None,
        )
        return updated

    async def change_password(self, *, person_id: int, password: str | None) -> PersonRecord:
        """Replace only the password, enforcing both policy length bounds."""

        require_valid(
            validate_password(password, self._password_policy, enforce_max_length=True)
        )
        assert password is not None

        existing = await self.get_person(person_id=person_id)
        password_hash = await self._hash(password)
        updated = await self._persons.update_person(
            merge_person(existing, PersonPatch(password=password_hash))
        )
        if updated is None:
            raise PersonNotFoundError(person_id=person_id)
        logger.info("person_password_changed person_id=%s", person_id)
        return updated

    async def _register(self, *, login: str | None, password: str | None) -> PersonRecord:
        require_valid(
            validate_credentials(login=login, password=password, policy=self._password_policy)
        )
        assert login is not None and password is not None
        normalized_login = normalize_login(login=login)

        await self._require_login_available(login=normalized_login, person_id=None)
        password_hash = await self._hash(password)
        return await self._persons.create_person(
            PersonCreateInput(login=normalized_login, password=password_hash)
        )

    async def _require_login_available(self, *, login: str, person_id: int | None) -> None:
        owner = await self._persons.get_by_login(login=login)
        if owner is not None and owner.person_id != person_id:
            raise DuplicateLoginError(login=login)

    async def _hash(self, password: str) -> str:
        # bcrypt is CPU bound; keep it off the event loop.
        return await asyncio.to_thread(self._password_hasher.hash_password, password)
