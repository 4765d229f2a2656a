"""Sorting and filtering for the record tables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

RowT = TypeVar("RowT")


def _field(row: Any, path: str) -> Any:
    value = row
    for part in path.split("."):
        value = getattr(value, part, None) if value is not None else None
    return value


def _sort_key(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def sort_rows(rows: Iterable[RowT], key: str, direction: str = "asc") -> list[RowT]:
    """Sort by a dotted attribute path, e.g. ``"company.name"``.

    Rows missing the field always come last, in either direction.
    """
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction: {direction}")
    rows = list(rows)
    present = [r for r in rows if _field(r, key) is not None]
    missing = [r for r in rows if _field(r, key) is None]
    present.sort(key=lambda r: _sort_key(_field(r, key)), reverse=direction == "desc")
    return present + missing


def filter_rows(rows: Iterable[RowT], query: str, fields: Sequence[str]) -> list[RowT]:
    needle = query.strip().casefold()
    if not needle:
        return list(rows)
    return [
        r for r in rows
        if any(needle in str(_field(r, f) or "").casefold() for f in fields)
    ]
