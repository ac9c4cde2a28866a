"""Run remote fetches on a ``QThreadPool`` and report back on the GUI thread."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from ...application.services.fetch_executor import (
    FailureCallback,
    FetchFunction,
    FetchJob,
    SuccessCallback,
)
from ..ui.tasks.fetch_worker import FetchWorker, FetchWorkerSignals

LOGGER = logging.getLogger(__name__)


class QtFetchExecutor(QObject):
    """Fetch executor backed by a thread pool.

    Worker signals are connected to slots of this object, which lives in
    the thread that created it, so completion callbacks always run there.
    """

    jobStarted = Signal(object)
    jobFinished = Signal(object)

    def __init__(
        self,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._inflight: Dict[FetchWorkerSignals, Tuple[SuccessCallback, FailureCallback]] = {}
        self._shut_down = False

    @property
    def pending_count(self) -> int:
        return len(self._inflight)

    def submit(
        self,
        job: FetchJob,
        fetch: FetchFunction,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        if self._shut_down:
            LOGGER.debug("Executor shut down; dropping fetch for version %d", job.version)
            return
        worker = FetchWorker(job, fetch)
        self._inflight[worker.signals] = (on_success, on_failure)
        worker.signals.succeeded.connect(self._handle_succeeded)
        worker.signals.failed.connect(self._handle_failed)
        self.jobStarted.emit(job)
        self._pool.start(worker)

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    def shutdown(self) -> None:
        """Stop delivering results; running workers finish unobserved."""
        self._shut_down = True
        self._inflight.clear()

    @Slot(object, object)
    def _handle_succeeded(self, job: FetchJob, payload: Any) -> None:
        callbacks = self._take(self.sender())
        if callbacks is None:
            return
        self.jobFinished.emit(job)
        callbacks[0](job, payload)

    @Slot(object, object)
    def _handle_failed(self, job: FetchJob, exc: BaseException) -> None:
        callbacks = self._take(self.sender())
        if callbacks is None:
            return
        self.jobFinished.emit(job)
        callbacks[1](job, exc)

    def _take(self, signals: Any) -> Optional[Tuple[SuccessCallback, FailureCallback]]:
        if signals is None:
            return None
        return self._inflight.pop(signals, None)
