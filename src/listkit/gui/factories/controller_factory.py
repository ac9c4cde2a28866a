"""ControllerFactory: centralised list controller creation.

Reads list preferences from the settings store and wires controllers to the
shared ``EventBus`` and ``ErrorHandler`` resolved from the DI ``Container``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PySide6.QtCore import QObject

from listkit.application.services.fetch_executor import FetchExecutor, FetchFunction
from listkit.application.services.record_strategy import RecordStrategy
from listkit.config import DEFAULT_DEBOUNCE_MS, DEFAULT_MIN_CHARS, DEFAULT_PAGE_SIZE, TYPEAHEAD_MIN_CHARS
from listkit.di.container import Container
from listkit.errors.handler import ErrorHandler
from listkit.events.bus import EventBus
from listkit.gui.services.qt_debounce_timer import QtDebounceTimer
from listkit.gui.services.qt_fetch_executor import QtFetchExecutor
from listkit.gui.viewmodels.list_controller import ListController
from listkit.gui.viewmodels.typeahead_viewmodel import SuggestFunction, TypeAheadViewModel
from listkit.settings.manager import SettingsManager


class ControllerFactory:
    """Centrally creates list controllers and type-ahead view models.

    With ``use_qt=True`` (the default) controllers get ``QTimer`` debouncing
    and remote fetches run on the thread pool; with ``use_qt=False`` they are
    fully headless and the caller drives them with ``on_search_flush``.
    """

    def __init__(self, container: Container, *, use_qt: bool = True) -> None:
        self._container = container
        self._use_qt = use_qt
        self._executor: Optional[QtFetchExecutor] = None

    def create_local_controller(
        self,
        records: Sequence[Any],
        *,
        strategy: Optional[RecordStrategy] = None,
        list_id: str = "list",
        parent: QObject | None = None,
        **options: Any,
    ) -> ListController:
        return ListController(
            records=records,
            strategy=strategy,
            list_id=list_id,
            **self._common_options(parent),
            **options,
        )

    def create_remote_controller(
        self,
        fetch: FetchFunction,
        *,
        strategy: Optional[RecordStrategy] = None,
        executor: Optional[FetchExecutor] = None,
        list_id: str = "list",
        parent: QObject | None = None,
        **options: Any,
    ) -> ListController:
        return ListController(
            fetch=fetch,
            executor=executor or self._default_executor(),
            strategy=strategy,
            list_id=list_id,
            **self._common_options(parent),
            **options,
        )

    def create_typeahead(
        self,
        suggest: SuggestFunction,
        *,
        executor: Optional[FetchExecutor] = None,
        parent: QObject | None = None,
        **options: Any,
    ) -> TypeAheadViewModel:
        options.setdefault("debounce_ms", self._setting("list.debounce_ms", DEFAULT_DEBOUNCE_MS))
        options.setdefault("min_chars", TYPEAHEAD_MIN_CHARS)
        return TypeAheadViewModel(
            suggest,
            executor=executor or self._default_executor(),
            timer=self._make_timer(parent),
            **options,
        )

    # ------------------------------------------------------------------

    def _common_options(self, parent: QObject | None) -> dict:
        return {
            "page_size": self._setting("list.page_size", DEFAULT_PAGE_SIZE),
            "debounce_ms": self._setting("list.debounce_ms", DEFAULT_DEBOUNCE_MS),
            "min_chars": self._setting("list.min_chars", DEFAULT_MIN_CHARS),
            "timer": self._make_timer(parent),
            "filter_timer": self._make_timer(parent),
            "event_bus": self._resolve(EventBus),
            "error_handler": self._resolve(ErrorHandler),
        }

    def _setting(self, key: str, default: int) -> int:
        settings = self._resolve(SettingsManager)
        if settings is None:
            return default
        value = settings.get(key, default)
        return value if isinstance(value, int) else default

    def _make_timer(self, parent: QObject | None) -> Optional[QtDebounceTimer]:
        if not self._use_qt:
            return None
        return QtDebounceTimer(parent)

    def _default_executor(self) -> Optional[QtFetchExecutor]:
        if not self._use_qt:
            return None
        if self._executor is None:
            self._executor = QtFetchExecutor()
        return self._executor

    def _resolve(self, interface: type) -> Any:
        if not self._container.is_registered(interface):
            return None
        return self._container.resolve(interface)
