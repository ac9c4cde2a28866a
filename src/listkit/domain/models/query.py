"""Query state value objects.

``QueryState`` is the canonical description of what the user wants to see:
sort, filters, free-text search and pagination. Every transition returns a new
instance; nothing here mutates in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from ...config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortSpec:
    key: Optional[str] = None
    direction: Optional[SortDirection] = None

    def __post_init__(self) -> None:
        if (self.key is None) != (self.direction is None):
            raise ValueError("SortSpec.direction must be set exactly when key is set")

    @property
    def is_active(self) -> bool:
        return self.key is not None

    def toggled(self, key: str) -> "SortSpec":
        """Same key flips the direction; a new key starts ascending."""
        if key == self.key and self.direction is not None:
            return SortSpec(key, self.direction.flipped())
        return SortSpec(key, SortDirection.ASC)


def _freeze(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({k: v for k, v in values.items() if v != ""})


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(1, int(self.page)))
        object.__setattr__(self, "page_size", clamp_page_size(self.page_size))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def clamp_page_size(size: int) -> int:
    return min(MAX_PAGE_SIZE, max(1, int(size)))


@dataclass(frozen=True)
class QueryState:
    sort: SortSpec = field(default_factory=SortSpec)
    filters: Mapping[str, str] = field(default_factory=dict)
    search_text: str = ""
    pagination: Pagination = field(default_factory=Pagination)

    def __post_init__(self) -> None:
        # Empty filter values mean "not filtering"; drop them so that absent
        # and empty entries compare equal.
        object.__setattr__(self, "filters", _freeze(self.filters))
        object.__setattr__(self, "search_text", self.search_text.strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryState):
            return NotImplemented
        return (
            self.sort == other.sort
            and dict(self.filters) == dict(other.filters)
            and self.search_text == other.search_text
            and self.pagination == other.pagination
        )

    def __hash__(self) -> int:
        return hash((self.sort, frozenset(self.filters.items()), self.search_text, self.pagination))

    # -- derived -----------------------------------------------------------

    @property
    def page(self) -> int:
        return self.pagination.page

    @property
    def page_size(self) -> int:
        return self.pagination.page_size

    def active_filters(self) -> dict[str, str]:
        return dict(self.filters)

    def has_constraints(self) -> bool:
        return bool(self.filters) or bool(self.search_text)

    # -- transitions -------------------------------------------------------

    def set_sort(self, key: str) -> "QueryState":
        return replace(self, sort=self.sort.toggled(key))

    def set_filter(self, filter_id: str, value: str) -> "QueryState":
        filters = dict(self.filters)
        if value:
            filters[filter_id] = value
        else:
            filters.pop(filter_id, None)
        return replace(self, filters=filters, pagination=replace(self.pagination, page=1))

    def set_filters(self, changes: Mapping[str, str]) -> "QueryState":
        """Apply several filter changes as one transition (page resets once)."""
        filters = dict(self.filters)
        for filter_id, value in changes.items():
            if value:
                filters[filter_id] = value
            else:
                filters.pop(filter_id, None)
        return replace(self, filters=filters, pagination=replace(self.pagination, page=1))

    def set_search_text(self, text: str) -> "QueryState":
        # Page is left alone: the input governor resets it once typing settles.
        return replace(self, search_text=text)

    def set_page(self, page: int, upper_bound: Optional[int] = None) -> "QueryState":
        page = max(1, int(page))
        if upper_bound is not None and upper_bound >= 1:
            page = min(page, upper_bound)
        return replace(self, pagination=replace(self.pagination, page=page))

    def set_page_size(self, page_size: int) -> "QueryState":
        return replace(self, pagination=Pagination(page=1, page_size=page_size))

    def clear(self) -> "QueryState":
        """Start over: no filters, no search, no sort, first page."""
        return QueryState(pagination=Pagination(page=1, page_size=self.page_size))
