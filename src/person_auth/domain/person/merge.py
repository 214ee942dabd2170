"""Field-wise merge of partial person updates onto stored records."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

PATCHABLE_PERSON_FIELDS: tuple[str, ...] = ("login", "password")

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class PersonPatch:
    """Partial person update; `None` keeps the stored value.

    `password` carries an already-hashed value.
    """

    login: str | None = None
    password: str | None = field(default=None, repr=False)


class MergeFieldPairingError(ValueError):
    """Raised when a patchable field has no counterpart on the record or the patch."""

    def __init__(self, *, field_name: str, existing: object, patch: object) -> None:
        super().__init__(
            f"cannot merge field '{field_name}' into {existing!r} from {patch!r}; "
            "check record and patch field pairs"
        )
        self.field_name = field_name


def merge_person(
    existing: RecordT,
    patch: PersonPatch,
    *,
    fields: Sequence[str] = PATCHABLE_PERSON_FIELDS,
) -> RecordT:
    """Return `existing` with every non-null patch field applied.

    Every name in `fields` must exist on both dataclasses; identifiers are
    never patchable.
    """

    record_fields = {item.name for item in dataclasses.fields(existing)}  # type: ignore[arg-type]
    patch_fields = {item.name for item in dataclasses.fields(patch)}

    changes: dict[str, Any] = {}
    for name in fields:
        if name == "person_id" or name not in record_fields or name not in patch_fields:
            raise MergeFieldPairingError(field_name=name, existing=existing, patch=patch)
        value = getattr(patch, name)
        if value is not None:
            changes[name] = value

    return dataclasses.replace(existing, **changes)  # type: ignore[type-var]
