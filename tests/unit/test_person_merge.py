from __future__ import annotations

from dataclasses import dataclass

import pytest

from person_auth.application.ports.person_repository_port import PersonRecord
from person_auth.domain.person.merge import (
    PATCHABLE_PERSON_FIELDS,
    MergeFieldPairingError,
    PersonPatch,
    merge_person,
)


def test_non_null_patch_fields_override_existing_values() -> None:
    existing = PersonRecord(person_id=1, login="a", password="h1")

    merged = merge_person(existing, PersonPatch(login=None, password="h2"))

    assert merged == PersonRecord(person_id=1, login="a", password="h2")


def test_empty_patch_keeps_record_unchanged() -> None:
    existing = PersonRecord(person_id=7, login="bob", password="h1")

    assert merge_person(existing, PersonPatch()) == existing


def test_all_fields_can_be_replaced_but_id_is_kept() -> None:
    existing = PersonRecord(person_id=3, login="old", password="h1")

    merged = merge_person(existing, PersonPatch(login="new", password="h9"))

    assert merged.person_id == 3
    assert merged.login == "new"
    assert merged.password == "h9"


def test_merge_does_not_mutate_existing_record() -> None:
    existing = PersonRecord(person_id=1, login="a", password="h1")

    merge_person(existing, PersonPatch(login="b"))

    assert existing.login == "a"


def test_patchable_fields_table_lists_login_and_password() -> None:
    assert PATCHABLE_PERSON_FIELDS == ("login", "password")


def test_unpaired_field_fails_with_diagnostic() -> None:
    existing = PersonRecord(person_id=1, login="a", password="h1")

    with pytest.raises(MergeFieldPairingError) as exc_info:
        merge_person(existing, PersonPatch(login="b"), fields=("login", "email"))

    assert exc_info.value.field_name == "email"
    message = str(exc_info.value)
    assert "'email'" in message
    assert "login='a'" in message
    assert "h1" not in message


def test_field_missing_on_patch_type_fails() -> None:
    @dataclass(frozen=True)
    class ExtendedRecord:
        person_id: int
        login: str
        password: str
        display_name: str

    existing = ExtendedRecord(person_id=1, login="a", password="h1", display_name="A")

    with pytest.raises(MergeFieldPairingError, match="display_name"):
        merge_person(existing, PersonPatch(), fields=("display_name",))


def test_identifier_is_never_patchable() -> None:
    existing = PersonRecord(person_id=1, login="a", password="h1")

    with pytest.raises(MergeFieldPairingError, match="person_id"):
        merge_person(existing, PersonPatch(), fields=("person_id",))


def test_pairing_error_does_not_expose_patched_password() -> None:
    existing = PersonRecord(person_id=1, login="a", password="h1")
    patch = PersonPatch(login="b", password="$2b$12$secret-hash")

    with pytest.raises(MergeFieldPairingError) as exc_info:
        merge_person(existing, patch, fields=("email",))

    message = str(exc_info.value)
    assert "login='b'" in message
    assert "secret-hash" not in message
    assert "h1" not in message
