"""Result value objects produced by the result coordinator."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class ResultSet:
    """Records for one page plus the count they were drawn from.

    ``total_count`` is ``None`` while a remote source has not reported a
    count.
    """

    records: tuple = field(default_factory=tuple)
    total_count: Optional[int] = None
    query_version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self) -> int:
        return len(self.records)

    def total_pages(self, page_size: int) -> Optional[int]:
        if self.total_count is None:
            return None
        if page_size <= 0 or self.total_count <= 0:
            return 0
        return (self.total_count + page_size - 1) // page_size


@dataclass(frozen=True)
class FetchPage:
    """Normalised payload returned by a remote fetch function."""

    records: tuple = field(default_factory=tuple)
    total_count: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))


class PageSelection(Enum):
    """Tri-state of the select-all checkbox for the visible page."""

    NONE = "none"
    PARTIAL = "partial"
    ALL = "all"


def _optional_count(value: Any) -> Optional[int]:
    if value is None:
        return None
    return max(0, int(value))


def coerce_fetch_result(payload: Any) -> FetchPage:
    """Accept the shapes a fetch function may return and build a ``FetchPage``.

    Supported: ``FetchPage``/``ResultSet`` or any object exposing ``records``
    (and optionally ``total_count``), a mapping with ``records`` and
    ``total_count`` or ``totalCount``, or a bare sequence of records.
    """

    if isinstance(payload, FetchPage):
        return payload
    if isinstance(payload, Mapping):
        if "records" not in payload:
            raise TypeError("fetch result mapping has no 'records' entry")
        total = payload.get("total_count", payload.get("totalCount"))
        return FetchPage(records=tuple(payload["records"]), total_count=_optional_count(total))
    if hasattr(payload, "records"):
        total = getattr(payload, "total_count", None)
        return FetchPage(records=tuple(payload.records), total_count=_optional_count(total))
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        return FetchPage(records=tuple(payload), total_count=None)
    raise TypeError(f"unsupported fetch result: {type(payload).__name__}")
