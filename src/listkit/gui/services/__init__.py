"""Qt adapters for the pure-Python list layer."""

from .qt_debounce_timer import QtDebounceTimer
from .qt_fetch_executor import QtFetchExecutor

__all__ = [
    "QtDebounceTimer",
    "QtFetchExecutor",
]
