"""Search box with a suggestion dropdown: pure Python, no Qt dependency."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from listkit.application.services.fetch_executor import FetchExecutor
from listkit.application.services.result_coordinator import ResultCoordinator
from listkit.config import DEFAULT_DEBOUNCE_MS, TYPEAHEAD_MIN_CHARS
from listkit.domain.models.query import Pagination, QueryState
from listkit.domain.models.result import ResultSet
from listkit.gui.viewmodels.base import BaseViewModel
from listkit.gui.viewmodels.search_governor import DebouncedInputGovernor, DebounceTimer
from listkit.gui.viewmodels.signal import ObservableProperty, Signal

LOGGER = logging.getLogger(__name__)

SuggestFunction = Callable[[str], Sequence[Any]]


class TypeAheadViewModel(BaseViewModel):
    """Debounced suggestion lookup with keyboard navigation.

    ``suggest(text)`` is called once typing settles and only for text of at
    least ``min_chars`` characters; it may run on a worker thread when a
    Qt executor is supplied. Late answers for older text are dropped.
    """

    def __init__(
        self,
        suggest: SuggestFunction,
        *,
        executor: Optional[FetchExecutor] = None,
        timer: Optional[DebounceTimer] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_chars: int = TYPEAHEAD_MIN_CHARS,
        max_suggestions: int = 10,
    ) -> None:
        super().__init__()
        self._suggest = suggest
        self._max_suggestions = max(1, int(max_suggestions))
        self._coordinator = ResultCoordinator(fetch=self._fetch, executor=executor)
        self._governor = DebouncedInputGovernor(
            self._on_commit,
            timer=timer,
            delay_ms=debounce_ms,
            min_chars=min_chars,
        )

        self.input_text = ObservableProperty("")
        self.suggestions = ObservableProperty(())
        self.highlighted_index = ObservableProperty(-1)
        self.is_open = ObservableProperty(False)
        self.is_loading = ObservableProperty(False)
        self.error = ObservableProperty(None)

        self.suggestion_selected = Signal()

        self.bind(self._coordinator.accepted, self._on_accepted)
        self.bind(self._coordinator.failed, self._on_failed)
        self.bind(self._coordinator.loading_changed, self._on_loading_changed)

    @property
    def governor(self) -> DebouncedInputGovernor:
        return self._governor

    # -- input -------------------------------------------------------------

    def on_input(self, raw: str) -> None:
        if self._disposed:
            return
        self.input_text.value = raw
        self._governor.on_input_change(raw)

    def flush(self) -> None:
        if self._disposed:
            return
        self._governor.flush()

    # -- keyboard navigation -----------------------------------------------

    def move_highlight(self, step: int) -> None:
        """Move the highlight by *step* rows, wrapping at both ends."""
        if self._disposed:
            return
        count = len(self.suggestions.value)
        if count == 0 or step == 0:
            return
        current = self.highlighted_index.value
        if current < 0:
            target = 0 if step > 0 else count - 1
        else:
            target = (current + step) % count
        self.highlighted_index.value = target
        self.is_open.value = True

    def accept_highlighted(self) -> Optional[Any]:
        if self._disposed:
            return None
        index = self.highlighted_index.value
        items = self.suggestions.value
        if not 0 <= index < len(items):
            return None
        record = items[index]
        self.suggestion_selected.emit(record)
        self.close()
        return record

    def close(self) -> None:
        self.highlighted_index.value = -1
        self.is_open.value = False

    def clear(self) -> None:
        """Forget the typed text, pending lookups and current suggestions."""
        if self._disposed:
            return
        self._governor.cancel()
        self._coordinator.invalidate()
        self.input_text.value = ""
        self._reset_suggestions()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._governor.dispose()
        self._coordinator.dispose()
        self.suggestion_selected.disconnect_all()
        super().dispose()

    # -- internal ----------------------------------------------------------

    def _fetch(self, query: QueryState) -> list:
        return list(self._suggest(query.search_text))[: query.page_size]

    def _on_commit(self, text: str) -> None:
        if not text:
            self._coordinator.invalidate()
            self._reset_suggestions()
            return
        query = QueryState(
            search_text=text,
            pagination=Pagination(page=1, page_size=self._max_suggestions),
        )
        self._coordinator.submit(query)

    def _reset_suggestions(self) -> None:
        self.suggestions.value = ()
        self.is_loading.value = False
        self.error.value = None
        self.close()

    def _on_loading_changed(self, loading: bool) -> None:
        self.is_loading.value = loading

    def _on_accepted(self, result: ResultSet) -> None:
        self.suggestions.value = tuple(result.records)
        self.highlighted_index.value = -1
        self.is_loading.value = False
        self.error.value = None
        self.is_open.value = bool(result.records)

    def _on_failed(self, _version: int, message: str) -> None:
        LOGGER.debug("Suggestion lookup failed: %s", message)
        self.is_loading.value = False
        self.error.value = message
