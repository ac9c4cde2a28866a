"""Typed, stable ordering of records.

Values are compared by kind: numbers numerically, dates and ISO-8601 strings
chronologically, everything else as case-sensitive strings. ``None`` sorts
after every other value when ascending. Descending order negates the
ascending comparator so ties keep their original relative order in both
directions.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from functools import cmp_to_key
from numbers import Real
from typing import Any, Callable, Iterable, Optional, TypeVar

from dateutil.parser import isoparse

from ..models.query import SortDirection

T = TypeVar("T")

Comparator = Callable[[Any, Any], int]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$")

# Kind ranks: mixed kinds order by rank, ``None`` last.
_NUMBER, _DATE, _TEXT, _MISSING = range(4)


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and _ISO_DATE.match(value.strip()):
        try:
            moment = isoparse(value.strip())
        except ValueError:
            return None
    else:
        return None
    # Naive and aware values must stay comparable; naive ones are read as UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _classify(value: Any) -> tuple[int, Any]:
    if value is None:
        return _MISSING, None
    if isinstance(value, (Real, Decimal)):
        return _NUMBER, value
    moment = _as_datetime(value)
    if moment is not None:
        return _DATE, moment
    return _TEXT, str(value)


def compare_values(left: Any, right: Any) -> int:
    """Ascending three-way comparison of two field values."""
    left_kind, left_key = _classify(left)
    right_kind, right_key = _classify(right)
    if left_kind != right_kind:
        return -1 if left_kind < right_kind else 1
    if left_kind == _MISSING:
        return 0
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def directed(comparator: Comparator, direction: SortDirection) -> Comparator:
    """Return *comparator* for *direction*; descending negates the result."""
    if direction is SortDirection.DESC:
        return lambda a, b: -comparator(a, b)
    return comparator


def stable_sort(
    items: Iterable[T],
    comparator: Callable[[T, T], int],
    direction: SortDirection = SortDirection.ASC,
) -> list[T]:
    """Sort *items* with a three-way *comparator*; equal items keep their order."""
    return sorted(items, key=cmp_to_key(directed(comparator, direction)))


def field_comparator(accessor: Callable[[Any, str], Any], key: str) -> Callable[[Any, Any], int]:
    """Build a record comparator comparing the *key* field via :func:`compare_values`."""

    def _compare(left: Any, right: Any) -> int:
        return compare_values(accessor(left, key), accessor(right, key))

    return _compare
