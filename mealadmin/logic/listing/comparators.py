"""Field comparator registry.

Maps a field kind to a sort-key function. Malformed values never raise: they
fall back to a sentinel (0 for numbers, the smallest value for strings/dates)
so one bad row cannot break sorting for a whole page.
"""
from __future__ import annotations
import math
import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from mealadmin.domain.Resource_Type import FieldDescriptor, FieldKind
from mealadmin.logic.identifiers.allocator import parse_suffix

__all__ = [
    "SortDirection", "COMPARATORS", "sort_key", "compare", "sort_records",
    "to_epoch_ms", "parse_direction",
]

_TRAILING_DIGITS = re.compile(r"(\d+)\s*$")

# ISO-8601 parsing that accepts any fraction length and a trailing Z
_DATETIME = TypeAdapter(datetime)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
    NONE = "none"


def parse_direction(value: Any) -> SortDirection:
    """Accept 'asc'/'desc'/'none' (any case), None or an existing SortDirection."""
    if isinstance(value, SortDirection):
        return value
    if value is None or str(value).strip() == "":
        return SortDirection.NONE
    return SortDirection(str(value).strip().lower())


def _string_key(value: Any, prefix: Optional[str] = None) -> str:
    if value is None:
        return ""
    return str(value).lower()


def _numeric_key(value: Any, prefix: Optional[str] = None) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _prefixed_id_key(value: Any, prefix: Optional[str] = None) -> int:
    if prefix:
        return parse_suffix(value, prefix)
    # no known prefix: compare on the trailing number (DES10 -> 10)
    match = _TRAILING_DIGITS.search(value) if isinstance(value, str) else None
    return int(match.group(1)) if match else 0


def to_epoch_ms(value: Any) -> float:
    """Epoch milliseconds for ISO strings, datetimes and dates; -inf when unparsable."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            dt = _DATETIME.validate_python(value.strip())
        except ValidationError:
            return float("-inf")
    else:
        return float("-inf")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp() * 1000


def _date_key(value: Any, prefix: Optional[str] = None) -> float:
    return to_epoch_ms(value)


def _boolean_key(value: Any, prefix: Optional[str] = None) -> int:
    # true -> 0, false -> 1 so active rows come first in ascending order
    if isinstance(value, str):
        value = value.strip().lower() in ("true", "1", "yes")
    return 0 if value else 1


COMPARATORS: Dict[FieldKind, Callable[[Any, Optional[str]], Any]] = {
    FieldKind.STRING: _string_key,
    FieldKind.NUMERIC: _numeric_key,
    FieldKind.PREFIXED_ID: _prefixed_id_key,
    FieldKind.DATE: _date_key,
    FieldKind.BOOLEAN: _boolean_key,
}


def _value(record: Any, name: str) -> Any:
    getter = getattr(record, "get", None)
    if callable(getter):
        return getter(name)
    return getattr(record, name, None)


def sort_key(record: Any, field: FieldDescriptor, prefix: Optional[str] = None) -> Any:
    """Sort key of one record; an explicit ``prefix`` overrides the descriptor's own."""
    return COMPARATORS[field.kind](_value(record, field.name), prefix or field.prefix)


def compare(a: Any, b: Any, field: FieldDescriptor, prefix: Optional[str] = None,
            direction: SortDirection = SortDirection.ASC) -> int:
    """Three-way comparison of two records on ``field`` (-1, 0 or 1)."""
    ka = sort_key(a, field, prefix)
    kb = sort_key(b, field, prefix)
    result = (ka > kb) - (ka < kb)
    if parse_direction(direction) is SortDirection.DESC:
        result = -result
    return result


def sort_records(records: Iterable[Any], field: Optional[FieldDescriptor], direction: Any,
                 prefix: Optional[str] = None) -> List[Any]:
    """Stable sort of ``records``; neutral direction or no field keeps input order."""
    items = list(records)
    direction = parse_direction(direction)
    if field is None or direction is SortDirection.NONE:
        return items
    return sorted(items, key=lambda r: sort_key(r, field, prefix),
                  reverse=direction is SortDirection.DESC)
