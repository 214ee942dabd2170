"""SQLAlchemy adapter for person credential persistence."""

from __future__ import annotations

import logging
from typing import Any, cast

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from person_auth.application.ports.person_repository_port import (
    PersonCreateInput,
    PersonRecord,
    PersonRepositoryPort,
    PersonStoreError,
)
from person_auth.domain.auth.credentials import DuplicateLoginError
from person_auth.infrastructure.db.metadata import persons

logger = logging.getLogger(__name__)

_PERSON_COLUMNS = (persons.c.id, persons.c.login, persons.c.password)


class SqlAlchemyPersonRepository(PersonRepositoryPort):
    """Person repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_persons(self) -> list[PersonRecord]:
        statement = sa.select(*_PERSON_COLUMNS).order_by(persons.c.id)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as exc:
            raise _store_error("list_persons", exc) from exc

        return [_to_person_record(row) for row in result.mappings().all()]

    async def get_by_id(self, *, person_id: int) -> PersonRecord | None:
        statement = sa.select(*_PERSON_COLUMNS).where(persons.c.id == person_id).limit(1)
        return await self._fetch_one(statement, operation="get_by_id")

    async def get_by_login(self, *, login: str) -> PersonRecord | None:
        statement = sa.select(*_PERSON_COLUMNS).where(persons.c.login == login).limit(1)
        return await self._fetch_one(statement, operation="get_by_login")

    async def exists_by_id(self, *, person_id: int) -> bool:
        statement = sa.select(sa.exists().where(persons.c.id == person_id))

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as exc:
            raise _store_error("exists_by_id", exc) from exc

        return bool(result.scalar())

    async def create_person(self, payload: PersonCreateInput) -> PersonRecord:
        """Insert one person row and return it with the store-assigned id."""

        statement = (
            sa.insert(persons)
            .values(login=payload.login, password=payload.password)
            .returning(*_PERSON_COLUMNS)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
        except IntegrityError as exc:
            raise DuplicateLoginError(login=payload.login) from exc
        except SQLAlchemyError as exc:
            raise _store_error("create_person", exc) from exc

        return _to_person_record(row)

    async def update_person(self, record: PersonRecord) -> PersonRecord | None:
        """Replace login and password for one id; return None when the id is absent."""

        statement = (
            sa.update(persons)
            .where(persons.c.id == record.person_id)
            .values(
                login=record.login,
                password=record.password,
                updated_at=sa.text("CURRENT_TIMESTAMP"),
            )
        )

        try:
            async with self._session_factory() as session:
                result = cast(CursorResult[Any], await session.execute(statement))
                await session.commit()
        except IntegrityError as exc:
            raise DuplicateLoginError(login=record.login) from exc
        except SQLAlchemyError as exc:
            raise _store_error("update_person", exc) from exc

        if not result.rowcount:
            return None
        return record

    async def delete_by_id(self, *, person_id: int) -> bool:
        statement = sa.delete(persons).where(persons.c.id == person_id)

        try:
            async with self._session_factory() as session:
                result = cast(CursorResult[Any], await session.execute(statement))
                await session.commit()
        except SQLAlchemyError as exc:
            raise _store_error("delete_by_id", exc) from exc

        return bool(result.rowcount)

    async def _fetch_one(self, statement: sa.Select[Any], *, operation: str) -> PersonRecord | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as exc:
            raise _store_error(operation, exc) from exc

        row = result.mappings().first()
        if row is None:
            return None
        return _to_person_record(row)


def _store_error(operation: str, exc: SQLAlchemyError) -> PersonStoreError:
    logger.error("person_store_failed operation=%s error=%s", operation, exc)
    return PersonStoreError(f"person store failed during {operation}")


def _to_person_record(row: sa.RowMapping) -> PersonRecord:
    return PersonRecord(
        person_id=int(row["id"]),
        login=cast(str, row["login"]),
        password=cast(str, row["password"]),
    )
