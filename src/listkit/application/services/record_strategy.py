"""Caller-supplied functions describing how to read records.

The list controller never looks inside a record on its own. Everything it
needs (identity, field access, filter predicates, search text, comparator
overrides) goes through a :class:`RecordStrategy`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Optional

from ...config import DEFAULT_ID_FIELD
from ...domain.services.ordering import field_comparator

RecordId = Hashable
FieldAccessor = Callable[[Any, str], Any]
FilterPredicate = Callable[[Any, str], bool]
SearchPredicate = Callable[[Any, str], bool]
RecordComparator = Callable[[Any, Any], int]


def default_accessor(record: Any, key: str) -> Any:
    """Read *key* from a mapping record or an attribute record."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def default_serializer(record: Any) -> str:
    """Join a record's field values into one searchable string."""
    if isinstance(record, Mapping):
        values = record.values()
    elif hasattr(record, "__dict__"):
        values = vars(record).values()
    else:
        return str(record)
    return " ".join("" if value is None else str(value) for value in values)


@dataclass
class RecordStrategy:
    """Strategy object the controller is polymorphic over.

    ``filter_predicates`` maps a filter id to ``predicate(record, value)``.
    Filters without a predicate match when the field named like the filter
    equals the value, ignoring case. ``comparators`` maps a sort key to a
    record comparator that replaces the typed default for that key.
    """

    id_field: str = DEFAULT_ID_FIELD
    accessor: FieldAccessor = default_accessor
    id_getter: Optional[Callable[[Any], RecordId]] = None
    filter_predicates: Dict[str, FilterPredicate] = field(default_factory=dict)
    search_predicate: Optional[SearchPredicate] = None
    serializer: Callable[[Any], str] = default_serializer
    comparators: Dict[str, RecordComparator] = field(default_factory=dict)

    def record_id(self, record: Any) -> RecordId:
        if self.id_getter is not None:
            return self.id_getter(record)
        return self.accessor(record, self.id_field)

    def matches_filter(self, record: Any, filter_id: str, value: str) -> bool:
        predicate = self.filter_predicates.get(filter_id)
        if predicate is not None:
            return bool(predicate(record, value))
        field_value = self.accessor(record, filter_id)
        if field_value is None:
            return False
        return str(field_value).casefold() == value.casefold()

    def matches_search(self, record: Any, text: str) -> bool:
        if self.search_predicate is not None:
            return bool(self.search_predicate(record, text))
        return text.casefold() in self.serializer(record).casefold()

    def comparator_for(self, key: str) -> RecordComparator:
        override = self.comparators.get(key)
        if override is not None:
            return override
        return field_comparator(self.accessor, key)
