"""Background tasks and workers."""

from __future__ import annotations

from .fetch_worker import FetchWorker, FetchWorkerSignals

__all__ = [
    "FetchWorker",
    "FetchWorkerSignals",
]
