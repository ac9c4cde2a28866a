from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, Signal

from ....application.services.fetch_executor import FetchFunction, FetchJob


class FetchWorkerSignals(QObject):
    succeeded = Signal(object, object)
    failed = Signal(object, object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class FetchWorker(QRunnable):
    """Background worker that runs one versioned fetch."""

    def __init__(self, job: FetchJob, fetch: FetchFunction) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._job = job
        self._fetch = fetch
        self.signals = FetchWorkerSignals()

    @property
    def job(self) -> FetchJob:
        return self._job

    def run(self) -> None:  # pragma: no cover - runs in background thread
        try:
            payload: Any = self._fetch(self._job.query)
        except Exception as exc:
            self.signals.failed.emit(self._job, exc)
            return
        self.signals.succeeded.emit(self._job, payload)
