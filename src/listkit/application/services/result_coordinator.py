"""Produce the result set for the current query, last request wins.

Every submitted query gets a new version number. In remote mode the fetch is
tagged with that version and handed to an executor; when it completes, the
tag is compared with the *current* version and anything older is dropped.
Responses may therefore arrive in any order without an older query's data
ever replacing a newer one.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ...domain.models.query import QueryState
from ...domain.models.result import ResultSet, coerce_fetch_result
from ...gui.viewmodels.signal import Signal
from .fetch_executor import FetchExecutor, FetchFunction, FetchJob, InlineFetchExecutor
from .local_query import LocalQueryEngine
from .record_strategy import RecordStrategy

LOGGER = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return message or exc.__class__.__name__


class ResultCoordinator:
    """Own the :class:`ResultSet` together with its loading and error status.

    Signals
    -------
    submitted(version, query)
        A query was accepted for processing under a new version.
    accepted(result_set)
        A result for the current version replaced the previous one.
    failed(version, message)
        The fetch for the current version failed; records were kept.
    loading_changed(is_loading)
        A remote fetch started; completion is reported by the other two.
    """

    def __init__(
        self,
        *,
        records: Optional[Sequence[Any]] = None,
        fetch: Optional[FetchFunction] = None,
        executor: Optional[FetchExecutor] = None,
        strategy: Optional[RecordStrategy] = None,
        failure_log_level: int = logging.WARNING,
    ) -> None:
        if records is not None and fetch is not None:
            raise ValueError("pass either records (local mode) or fetch (remote mode), not both")
        self._fetch = fetch
        self._records: tuple = tuple(records or ())
        self._engine = LocalQueryEngine(strategy)
        self._executor: FetchExecutor = executor or InlineFetchExecutor()
        self._failure_log_level = failure_log_level

        self._version = 0
        self._query: Optional[QueryState] = None
        self._result = ResultSet(total_count=None if fetch is not None else 0)
        self._loading = False
        self._error: Optional[str] = None
        self._disposed = False

        self.submitted = Signal()
        self.accepted = Signal()
        self.failed = Signal()
        self.loading_changed = Signal()

    # -- properties --------------------------------------------------------

    @property
    def is_remote(self) -> bool:
        return self._fetch is not None

    @property
    def version(self) -> int:
        return self._version

    @property
    def query(self) -> Optional[QueryState]:
        return self._query

    @property
    def result_set(self) -> ResultSet:
        return self._result

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def records(self) -> tuple:
        """The full local collection (empty in remote mode)."""
        return self._records

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # -- public API --------------------------------------------------------

    def submit(self, query: QueryState) -> int:
        """Request results for *query* under a new version; return that version."""
        if self._disposed:
            return self._version
        self._version += 1
        self._query = query
        job = FetchJob(version=self._version, query=query)
        self.submitted.emit(job.version, query)
        if self._fetch is None:
            self._run_local(job)
        else:
            self._loading = True
            self.loading_changed.emit(True)
            self._executor.submit(job, self._fetch, self._on_success, self._on_failure)
        return job.version

    def refresh(self) -> Optional[int]:
        """Re-issue the current query (manual retry after a failure)."""
        if self._query is None:
            return None
        return self.submit(self._query)

    def invalidate(self) -> None:
        """Fence in-flight fetches without issuing a new one."""
        if self._disposed:
            return
        self._version += 1
        self._loading = False
        self._error = None

    def set_records(self, records: Sequence[Any]) -> None:
        """Replace the local collection; callers resubmit the query afterwards."""
        if self._fetch is not None:
            raise ValueError("set_records() is only available in local mode")
        self._records = tuple(records)

    def dispose(self) -> None:
        """Fence every in-flight fetch permanently and ignore later calls."""
        if self._disposed:
            return
        self._disposed = True
        self._version += 1
        self._loading = False
        LOGGER.debug("Result coordinator disposed at version %d", self._version)

    # -- internal ----------------------------------------------------------

    def _run_local(self, job: FetchJob) -> None:
        try:
            page = self._engine.run(self._records, job.query)
        except Exception as exc:
            self._on_failure(job, exc)
            return
        self._on_success(job, page)

    def _is_current(self, job: FetchJob) -> bool:
        if self._disposed or job.version != self._version:
            LOGGER.debug(
                "Discarding stale response for version %d (current %d)",
                job.version,
                self._version,
            )
            return False
        return True

    def _on_success(self, job: FetchJob, payload: Any) -> None:
        if not self._is_current(job):
            return
        try:
            page = coerce_fetch_result(payload)
        except (TypeError, ValueError) as exc:
            self._on_failure(job, exc)
            return
        self._result = ResultSet(
            records=page.records,
            total_count=page.total_count,
            query_version=job.version,
        )
        self._loading = False
        self._error = None
        self.accepted.emit(self._result)

    def _on_failure(self, job: FetchJob, exc: BaseException) -> None:
        if not self._is_current(job):
            return
        message = _describe(exc)
        LOGGER.log(
            self._failure_log_level,
            "Fetch for query version %d failed: %s",
            job.version,
            message,
        )
        self._loading = False
        self._error = message
        self.failed.emit(job.version, message)
