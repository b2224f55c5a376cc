"""Filtering and ordering of normalized file records.

Pure post-processing applied to a complete listing; it never calls the
backend.
"""

from __future__ import annotations

import operator as op
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from drivepath.schemas.records import FileRecord

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": op.eq,
    "neq": op.ne,
    "lt": op.lt,
    "lte": op.le,
    "gt": op.gt,
    "gte": op.ge,
}

# Field names accepted from callers: wire alias or attribute name
FIELD_NAMES: dict[str, str] = {
    **{name: name for name in FileRecord.model_fields},
    **{info.alias: name for name, info in FileRecord.model_fields.items() if info.alias},
}


def _field(name: str) -> str:
    try:
        return FIELD_NAMES[name]
    except KeyError:
        raise ValueError(f"Cannot compare or sort by unknown field {name!r}") from None


def _coerce(sample: Any, value: Any) -> Any:
    """Convert a caller-supplied value to the type of the record field."""
    if value is None or sample is None:
        return value
    if isinstance(sample, datetime):
        if not isinstance(value, datetime):
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        # Timestamps without an offset are taken as UTC
        if sample.tzinfo is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, type(sample)):
        return value
    if isinstance(sample, bool):
        return str(value).lower() in ("1", "true", "yes")
    if isinstance(sample, int):
        return int(value)
    return str(value)


def sort_records(
    records: list[FileRecord],
    compare_with: str | None = None,
    operator: str | None = None,
    value: Any = None,
    order_by: str | None = None,
    direction: str | None = None,
) -> list[FileRecord]:
    """Filter records by one field comparison, then order them.

    Args:
        records: Normalized records of one listing.
        compare_with: Field to compare (e.g. ``size`` or ``lastModifiedTime``).
        operator: One of eq, neq, lt, lte, gt, gte.
        value: Value to compare against; coerced to the field's type.
        order_by: Field to sort by.
        direction: ``asc`` (default) or ``desc``.

    Returns:
        A new list; records whose compared or sorted field is None are
        dropped by the filter and placed last by the sort.

    Raises:
        ValueError: On an unknown field, operator or direction.
    """
    result = list(records)

    if compare_with and operator:
        attr = _field(compare_with)
        try:
            compare = OPERATORS[operator]
        except KeyError:
            raise ValueError(f"Unknown comparison operator {operator!r}") from None

        filtered = []
        for record in result:
            current = getattr(record, attr)
            if current is None:
                continue
            if compare(current, _coerce(current, value)):
                filtered.append(record)
        result = filtered

    if order_by:
        attr = _field(order_by)
        if direction not in (None, "asc", "desc"):
            raise ValueError(f"Unknown sort direction {direction!r}")

        present = [r for r in result if getattr(r, attr) is not None]
        missing = [r for r in result if getattr(r, attr) is None]
        present.sort(key=lambda r: getattr(r, attr), reverse=direction == "desc")
        result = present + missing

    return result
