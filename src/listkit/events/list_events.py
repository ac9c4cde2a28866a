from dataclasses import dataclass, field
from typing import Any, Optional

from .bus import Event


@dataclass(kw_only=True)
class QueryChangedEvent(Event):
    list_id: str = ""
    query: Any = None
    query_version: int = 0


@dataclass(kw_only=True)
class ResultsAcceptedEvent(Event):
    list_id: str = ""
    query_version: int = 0
    record_count: int = 0
    total_count: Optional[int] = None


@dataclass(kw_only=True)
class SelectionChangedEvent(Event):
    list_id: str = ""
    selected_ids: frozenset = field(default_factory=frozenset)
    selected_count: int = 0


@dataclass(kw_only=True)
class FetchFailedEvent(Event):
    list_id: str = ""
    query_version: int = 0
    message: str = ""
