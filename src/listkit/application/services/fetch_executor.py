"""Executors that run remote fetch functions on behalf of the coordinator.

An executor takes a :class:`FetchJob`, runs ``fetch(job.query)`` somewhere,
and reports back through ``on_success(job, payload)`` or
``on_failure(job, exc)``. The callbacks must be invoked on the thread that
owns the coordinator; the Qt executor guarantees that by routing worker
results through queued signals.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Optional, Protocol

from ...domain.models.query import QueryState

LOGGER = logging.getLogger(__name__)

FetchFunction = Callable[[QueryState], Any]
SuccessCallback = Callable[["FetchJob", Any], None]
FailureCallback = Callable[["FetchJob", BaseException], None]


@dataclass(frozen=True)
class FetchJob:
    """A fetch tagged with the query version current at dispatch time."""

    version: int
    query: QueryState


class FetchExecutor(Protocol):
    def submit(
        self,
        job: FetchJob,
        fetch: FetchFunction,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None: ...


class InlineFetchExecutor:
    """Run the fetch synchronously on the calling thread."""

    def submit(
        self,
        job: FetchJob,
        fetch: FetchFunction,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        try:
            payload = fetch(job.query)
        except Exception as exc:
            on_failure(job, exc)
            return
        on_success(job, payload)


@dataclass
class _PendingFetch:
    job: FetchJob
    fetch: FetchFunction
    on_success: SuccessCallback
    on_failure: FailureCallback


class DeferredFetchExecutor:
    """Queue jobs until the owner decides to run or resolve them.

    Useful for headless batching and for driving responses in any order:
    :meth:`resolve` and :meth:`reject` complete a specific version with a
    given payload without calling the fetch function.
    """

    def __init__(self) -> None:
        self._pending: Deque[_PendingFetch] = deque()

    def submit(
        self,
        job: FetchJob,
        fetch: FetchFunction,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        self._pending.append(_PendingFetch(job, fetch, on_success, on_failure))

    @property
    def pending_versions(self) -> list[int]:
        return [entry.job.version for entry in self._pending]

    def pending_query(self, version: int) -> Optional[QueryState]:
        for entry in self._pending:
            if entry.job.version == version:
                return entry.job.query
        return None

    def run_pending(self) -> int:
        """Run every queued fetch in submission order; return how many ran."""
        count = 0
        while self._pending:
            entry = self._pending.popleft()
            InlineFetchExecutor().submit(entry.job, entry.fetch, entry.on_success, entry.on_failure)
            count += 1
        return count

    def resolve(self, version: int, payload: Any) -> None:
        entry = self._take(version)
        entry.on_success(entry.job, payload)

    def reject(self, version: int, error: BaseException) -> None:
        entry = self._take(version)
        entry.on_failure(entry.job, error)

    def _take(self, version: int) -> _PendingFetch:
        for entry in self._pending:
            if entry.job.version == version:
                self._pending.remove(entry)
                return entry
        raise KeyError(f"no pending fetch for version {version}")
