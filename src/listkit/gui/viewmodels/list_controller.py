"""Pure Python list controller (MVVM): no Qt dependency.

Ties the query state, the debounced search governor, the result coordinator
and the selection tracker together and exposes a single immutable
:class:`ListViewModel` snapshot to the render layer. Rendering code calls the
``on_*`` handlers and listens to :attr:`ListController.changed`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Sequence

from listkit.application.services.fetch_executor import FetchExecutor, FetchFunction
from listkit.application.services.record_strategy import RecordId, RecordStrategy
from listkit.application.services.result_coordinator import ResultCoordinator
from listkit.application.services.selection_tracker import SelectionTracker
from listkit.config import DEFAULT_DEBOUNCE_MS, DEFAULT_MIN_CHARS, DEFAULT_PAGE_SIZE
from listkit.domain.models.query import Pagination, QueryState
from listkit.domain.models.result import PageSelection, ResultSet
from listkit.errors import FetchError
from listkit.errors.handler import ErrorHandler, ErrorSeverity
from listkit.events.bus import Event, EventBus
from listkit.events.list_events import (
    FetchFailedEvent,
    QueryChangedEvent,
    ResultsAcceptedEvent,
    SelectionChangedEvent,
)
from listkit.gui.viewmodels.base import BaseViewModel
from listkit.gui.viewmodels.search_governor import DebouncedInputGovernor, DebounceTimer
from listkit.gui.viewmodels.signal import Signal


@dataclass(frozen=True)
class ListViewModel:
    """Everything a renderer needs to draw one list."""

    query_state: QueryState
    result_set: ResultSet
    selection: frozenset
    selected_records: tuple
    is_loading: bool
    error: Optional[str]
    search_input: str
    query_version: int
    total_pages: Optional[int]
    page_selection: PageSelection

    @property
    def records(self) -> tuple:
        return self.result_set.records

    @property
    def total_count(self) -> Optional[int]:
        return self.result_set.total_count

    @property
    def selected_count(self) -> int:
        return len(self.selection)


class ListController(BaseViewModel):
    """Search, filter, sort, page and select over a local or remote source.

    Pass ``records`` for local mode or ``fetch`` for remote mode. Every
    mutating handler results in at most one ``changed(view_model)``
    emission; results that arrive later from a remote fetch produce their
    own single emission.
    """

    def __init__(
        self,
        *,
        records: Optional[Sequence[Any]] = None,
        fetch: Optional[FetchFunction] = None,
        executor: Optional[FetchExecutor] = None,
        strategy: Optional[RecordStrategy] = None,
        timer: Optional[DebounceTimer] = None,
        filter_timer: Optional[DebounceTimer] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_chars: int = DEFAULT_MIN_CHARS,
        coalesce_filters: bool = False,
        page_size: int = DEFAULT_PAGE_SIZE,
        initial_query: Optional[QueryState] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        list_id: str = "list",
        autoload: bool = True,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._strategy = strategy or RecordStrategy()
        self._event_bus = event_bus
        self._error_handler = error_handler
        self._list_id = list_id

        self._coordinator = ResultCoordinator(
            records=records,
            fetch=fetch,
            executor=executor,
            strategy=self._strategy,
            failure_log_level=logging.DEBUG if error_handler is not None else logging.WARNING,
        )
        self._selection = SelectionTracker(self._strategy)
        self._governor = DebouncedInputGovernor(
            self._commit_search,
            timer=timer,
            filter_timer=filter_timer,
            delay_ms=debounce_ms,
            min_chars=min_chars,
            on_filters_commit=self._commit_filters,
            coalesce_filters=coalesce_filters,
        )

        if initial_query is None:
            initial_query = QueryState(pagination=Pagination(page_size=page_size))
        self._query = initial_query
        self._search_input = initial_query.search_text
        self._pending_hard_reset = False

        self._batch_depth = 0
        self._dirty = False

        self.changed = Signal()

        self.bind(self._coordinator.submitted, self._on_query_submitted)
        self.bind(self._coordinator.accepted, self._on_results_accepted)
        self.bind(self._coordinator.failed, self._on_fetch_failed)
        self.bind(self._coordinator.loading_changed, self._on_loading_changed)
        self.bind(self._selection.changed, self._on_selection_changed)

        if records is not None:
            self._selection.reconcile(records, hard_reset=True, complete=True)
        if autoload:
            self._coordinator.submit(self._query)
        self._dirty = False

    # -- read side ---------------------------------------------------------

    @property
    def list_id(self) -> str:
        return self._list_id

    @property
    def query_state(self) -> QueryState:
        return self._query

    @property
    def is_remote(self) -> bool:
        return self._coordinator.is_remote

    @property
    def governor(self) -> DebouncedInputGovernor:
        return self._governor

    @property
    def selected_records(self) -> tuple:
        return self._selection.selected_records

    def page_record_ids(self) -> list[RecordId]:
        return [self._strategy.record_id(r) for r in self._coordinator.result_set.records]

    def get_view_model(self) -> ListViewModel:
        result = self._coordinator.result_set
        return ListViewModel(
            query_state=self._query,
            result_set=result,
            selection=self._selection.selection,
            selected_records=self._selection.selected_records,
            is_loading=self._coordinator.is_loading,
            error=self._coordinator.error,
            search_input=self._search_input,
            query_version=self._coordinator.version,
            total_pages=result.total_pages(self._query.page_size),
            page_selection=self._selection.page_selection(self.page_record_ids()),
        )

    # -- query handlers ----------------------------------------------------

    def on_sort_change(self, key: str) -> None:
        self._apply(self._query.set_sort(key))

    def on_filter_change(self, filter_id: str, value: str) -> None:
        if self._disposed:
            return
        self._governor.on_filter_change(filter_id, value)

    def on_search_input(self, raw: str) -> None:
        """Record raw keystrokes; the query only changes once input settles."""
        if self._disposed:
            return
        with self._batch():
            if raw != self._search_input:
                self._search_input = raw
                self._dirty = True
            self._governor.on_input_change(raw)

    def on_search_flush(self) -> None:
        if self._disposed:
            return
        with self._batch():
            self._governor.flush()

    def on_page_change(self, page: int) -> None:
        total_pages = self._coordinator.result_set.total_pages(self._query.page_size)
        self._apply(self._query.set_page(page, upper_bound=total_pages))

    def on_page_size_change(self, page_size: int) -> None:
        self._apply(self._query.set_page_size(page_size))

    def on_clear_filters(self) -> None:
        """Drop filters, search text (pending or committed) and sort."""
        if self._disposed:
            return
        with self._batch():
            self._governor.cancel()
            if self._search_input:
                self._search_input = ""
                self._dirty = True
            self._apply(self._query.clear())

    def on_refresh(self) -> None:
        if self._disposed:
            return
        with self._batch():
            self._dirty = True
            self._coordinator.refresh()

    # -- selection handlers ------------------------------------------------

    def on_toggle_row(self, record_id: RecordId) -> None:
        if self._disposed:
            return
        with self._batch():
            self._selection.toggle(record_id)

    def on_toggle_all_on_page(self) -> None:
        if self._disposed:
            return
        with self._batch():
            self._selection.toggle_all(self.page_record_ids())

    def on_clear_selection(self) -> None:
        if self._disposed:
            return
        with self._batch():
            self._selection.clear()

    # -- source changes ----------------------------------------------------

    def set_records(self, records: Sequence[Any], *, hard_reset: bool = False) -> None:
        """Replace the local collection and rerun the current query.

        With ``hard_reset`` the new collection is a different dataset and
        selected ids it does not contain are dropped.
        """
        if self._disposed:
            return
        with self._batch():
            self._coordinator.set_records(records)
            self._selection.reconcile(records, hard_reset=hard_reset, complete=True)
            self._dirty = True
            self._submit()

    def reload(self, *, hard_reset: bool = False) -> None:
        """Fetch the current query again, optionally as a dataset swap."""
        if self._disposed:
            return
        with self._batch():
            if hard_reset:
                if not self._coordinator.is_remote:
                    self._selection.reconcile(
                        self._coordinator.records, hard_reset=True, complete=True
                    )
                else:
                    self._pending_hard_reset = True
            self._dirty = True
            self._submit()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._governor.dispose()
        self._coordinator.dispose()
        super().dispose()
        self.changed.disconnect_all()
        self._dirty = False

    # -- internal ----------------------------------------------------------

    @contextmanager
    def _batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                if not self._disposed:
                    self.changed.emit(self.get_view_model())

    def _apply(self, query: QueryState) -> None:
        if self._disposed:
            return
        with self._batch():
            if query == self._query:
                return
            self._query = query
            self._dirty = True
            self._submit()

    def _submit(self) -> None:
        self._coordinator.submit(self._query)

    def _commit_search(self, text: str) -> None:
        with self._batch():
            self._apply(self._query.set_search_text(text).set_page(1))

    def _commit_filters(self, changes: Mapping[str, str]) -> None:
        self._apply(self._query.set_filters(changes))

    def _on_query_submitted(self, version: int, query: QueryState) -> None:
        self._publish(QueryChangedEvent(list_id=self._list_id, query=query, query_version=version))

    def _on_results_accepted(self, result: ResultSet) -> None:
        with self._batch():
            self._dirty = True
            self._publish(
                ResultsAcceptedEvent(
                    list_id=self._list_id,
                    query_version=result.query_version,
                    record_count=len(result),
                    total_count=result.total_count,
                )
            )
            total_pages = result.total_pages(self._query.page_size)
            if total_pages is not None and self._query.page > max(total_pages, 1):
                self._logger.debug(
                    "Page %d is out of range (%d pages); returning to page 1",
                    self._query.page,
                    total_pages,
                )
                # a pending hard reset waits for the first in-range page
                self._apply(self._query.set_page(1))
                return
            if self._coordinator.is_remote:
                hard_reset, self._pending_hard_reset = self._pending_hard_reset, False
                self._selection.reconcile(result.records, hard_reset=hard_reset)

    def _on_fetch_failed(self, version: int, message: str) -> None:
        with self._batch():
            self._dirty = True
            self._publish(
                FetchFailedEvent(list_id=self._list_id, query_version=version, message=message)
            )
            if self._error_handler is not None:
                self._error_handler.handle(
                    FetchError(message),
                    ErrorSeverity.WARNING,
                    context={"list_id": self._list_id, "query_version": version},
                )

    def _on_loading_changed(self, _loading: bool) -> None:
        with self._batch():
            self._dirty = True

    def _on_selection_changed(self, selection: frozenset, _records: tuple) -> None:
        with self._batch():
            self._dirty = True
            self._publish(
                SelectionChangedEvent(
                    list_id=self._list_id,
                    selected_ids=selection,
                    selected_count=len(selection),
                )
            )

    def _publish(self, event: Event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
