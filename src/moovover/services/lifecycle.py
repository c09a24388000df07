"""Helpers for updating entities without partial mutation."""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

EntityT = TypeVar("EntityT")


def candidate_for(entity: EntityT, fields: Iterable[str], changes: Mapping[str, Any]) -> EntityT:
    """Build a detached copy of ``entity`` with ``changes`` applied.

    The copy is what gets normalized and validated, so a failed update
    never touches the stored entity.
    """
    values = {field: changes.get(field, getattr(entity, field)) for field in fields}
    return type(entity)(id=entity.id, **values)


def apply_candidate(entity: Any, candidate: Any, fields: Iterable[str]) -> None:
    """Copy validated (and normalized) field values onto the stored entity."""
    for field in fields:
        setattr(entity, field, getattr(candidate, field))
