from .bus import Event, EventBus, Subscription
from .list_events import (
    FetchFailedEvent,
    QueryChangedEvent,
    ResultsAcceptedEvent,
    SelectionChangedEvent,
)

__all__ = [
    "Event",
    "EventBus",
    "FetchFailedEvent",
    "QueryChangedEvent",
    "ResultsAcceptedEvent",
    "SelectionChangedEvent",
    "Subscription",
]
