"""Turn bursts of keystrokes into single committed search changes.

The governor is a trailing-edge debounce: every input restarts the timer and
only the last value is committed once input has been quiet for the
configured interval. Timers are injected so the governor runs under the Qt
event loop (:class:`~listkit.gui.services.qt_debounce_timer.QtDebounceTimer`)
or headless (:class:`ManualDebounceTimer`).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Protocol

from ...config import DEFAULT_DEBOUNCE_MS, DEFAULT_MIN_CHARS

LOGGER = logging.getLogger(__name__)


class DebounceTimer(Protocol):
    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    def is_active(self) -> bool: ...


class ManualDebounceTimer:
    """Timer that only fires when :meth:`fire` is called."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None
        self.interval_ms: Optional[int] = None
        self.start_count = 0

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self._callback = callback
        self.start_count += 1

    def stop(self) -> None:
        self._callback = None

    def is_active(self) -> bool:
        return self._callback is not None

    def fire(self) -> bool:
        """Run the pending callback; return ``False`` when nothing was pending."""
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        callback()
        return True


_NOTHING = object()


class DebouncedInputGovernor:
    """Debounce search text and, optionally, coalesce filter changes.

    ``on_commit(text)`` receives the committed search text; text shorter
    than ``min_chars`` (after trimming) is committed as ``""`` so a stale
    search never stays active while suggestions are suppressed.
    ``on_filters_commit(changes)`` receives coalesced filter changes.
    """

    def __init__(
        self,
        on_commit: Callable[[str], None],
        *,
        timer: Optional[DebounceTimer] = None,
        filter_timer: Optional[DebounceTimer] = None,
        delay_ms: int = DEFAULT_DEBOUNCE_MS,
        min_chars: int = DEFAULT_MIN_CHARS,
        on_filters_commit: Optional[Callable[[Mapping[str, str]], None]] = None,
        coalesce_filters: bool = False,
    ) -> None:
        if coalesce_filters and on_filters_commit is None:
            raise ValueError("coalesce_filters requires on_filters_commit")
        self._on_commit = on_commit
        self._on_filters_commit = on_filters_commit
        self._timer: DebounceTimer = timer if timer is not None else ManualDebounceTimer()
        self._filter_timer: DebounceTimer = (
            filter_timer if filter_timer is not None else ManualDebounceTimer()
        )
        self._delay_ms = max(0, int(delay_ms))
        self._min_chars = max(0, int(min_chars))
        self._coalesce_filters = coalesce_filters

        self._pending_text = _NOTHING
        self._pending_filters: Dict[str, str] = {}
        self._disposed = False

    # -- properties --------------------------------------------------------

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def min_chars(self) -> int:
        return self._min_chars

    @property
    def coalesces_filters(self) -> bool:
        return self._coalesce_filters

    @property
    def has_pending(self) -> bool:
        return self._pending_text is not _NOTHING or bool(self._pending_filters)

    @property
    def pending_text(self) -> Optional[str]:
        if self._pending_text is _NOTHING:
            return None
        return self._pending_text

    # -- input -------------------------------------------------------------

    def on_input_change(self, raw: str) -> None:
        if self._disposed:
            return
        self._pending_text = raw
        self._timer.start(self._delay_ms, self._commit_text)

    def on_filter_change(self, filter_id: str, value: str) -> None:
        if self._disposed:
            return
        if not self._coalesce_filters:
            self._on_filters_commit({filter_id: value})
            return
        self._pending_filters[filter_id] = value
        self._filter_timer.start(self._delay_ms, self._commit_filters)

    def effective_text(self, raw: str) -> str:
        """Return what committing *raw* would store as the search text."""
        text = raw.strip()
        if len(text) < self._min_chars:
            return ""
        return text

    # -- control -----------------------------------------------------------

    def flush(self) -> None:
        """Commit pending input now (Enter key, form submit)."""
        if self._disposed:
            return
        self._filter_timer.stop()
        self._timer.stop()
        if self._pending_filters:
            self._commit_filters()
        if self._pending_text is not _NOTHING:
            self._commit_text()

    def cancel(self) -> None:
        """Drop pending input without committing it."""
        self._timer.stop()
        self._filter_timer.stop()
        self._pending_text = _NOTHING
        self._pending_filters.clear()

    def dispose(self) -> None:
        self.cancel()
        self._disposed = True

    # -- internal ----------------------------------------------------------

    def _commit_text(self) -> None:
        if self._pending_text is _NOTHING or self._disposed:
            return
        raw, self._pending_text = self._pending_text, _NOTHING
        text = self.effective_text(raw)
        LOGGER.debug("Committing search text %r", text)
        self._on_commit(text)

    def _commit_filters(self) -> None:
        if not self._pending_filters or self._disposed:
            return
        changes, self._pending_filters = self._pending_filters, {}
        self._on_filters_commit(changes)
