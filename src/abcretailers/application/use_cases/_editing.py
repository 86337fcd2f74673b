"""Helpers shared by the services that edit stored entities."""

from dataclasses import fields
from typing import Any, Iterable, Mapping

from ...domain.entities import TableEntity
from ...domain.errors import InvalidEntityDataError


def coerce_field(entity: TableEntity, field_name: str, value: Any) -> Any:
    """
    Convert ``value`` with the column cast declared for ``field_name``.

    Form input arrives as text, so ``"9.99"`` becomes ``9.99`` for a float
    column. Values the cast rejects raise :class:`InvalidEntityDataError`.
    """
    if value is None:
        return value
    cast = None
    for f in fields(entity):
        if f.name == field_name:
            cast = f.metadata.get("cast")
            break
    if cast is None:
        return value
    try:
        return cast(value)
    except (TypeError, ValueError):
        expected = getattr(cast, "__name__", "value")
        raise InvalidEntityDataError(field_name, value, f"expected a {expected}") from None


def apply_changes(entity: TableEntity, changes: Mapping[str, Any], editable: Iterable[str]) -> None:
    """Copy ``changes`` onto ``entity``, rejecting fields that are not editable."""
    allowed = set(editable)
    for field_name, value in changes.items():
        if field_name not in allowed:
            raise InvalidEntityDataError(field_name, value, "field cannot be edited")
        setattr(entity, field_name, coerce_field(entity, field_name, value))
