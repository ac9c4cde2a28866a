"""Track checked record ids independently of the visible page."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from ...domain.models.result import PageSelection
from ...gui.viewmodels.signal import Signal
from .record_strategy import RecordId, RecordStrategy

LOGGER = logging.getLogger(__name__)


class SelectionTracker:
    """Selected ids plus an index of the records that are currently loaded.

    Selection survives paging, sorting and filtering of the same dataset.
    Only :meth:`reconcile` with ``hard_reset=True`` (a different dataset was
    swapped in) drops ids that are not part of the new records.

    The index holds the loaded records (the whole collection, or the current
    page plus the records of selected ids seen on earlier pages). Selected
    ids without a loaded record stay selected but are left out of
    :attr:`selected_records`.

    ``changed(selection, selected_records)`` fires after every mutation that
    actually altered the id set.
    """

    def __init__(self, strategy: Optional[RecordStrategy] = None) -> None:
        self._strategy = strategy or RecordStrategy()
        # dict preserves selection order
        self._selected: Dict[RecordId, None] = {}
        self._known: Dict[RecordId, Any] = {}
        self._loaded: frozenset = frozenset()
        self.changed = Signal()

    # -- read side ---------------------------------------------------------

    @property
    def selection(self) -> frozenset:
        return frozenset(self._selected)

    @property
    def selected_ids(self) -> tuple:
        """Selected ids in the order they were selected."""
        return tuple(self._selected)

    @property
    def selected_records(self) -> tuple:
        """Selected records that are currently known; unknown ids are skipped."""
        return tuple(self._known[rid] for rid in self._selected if rid in self._known)

    @property
    def known_count(self) -> int:
        return len(self._known)

    def is_selected(self, record_id: RecordId) -> bool:
        return record_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def page_selection(self, page_ids: Iterable[RecordId]) -> PageSelection:
        ids = list(page_ids)
        if not ids:
            return PageSelection.NONE
        hits = sum(1 for rid in ids if rid in self._selected)
        if hits == 0:
            return PageSelection.NONE
        if hits == len(ids):
            return PageSelection.ALL
        return PageSelection.PARTIAL

    # -- mutations ---------------------------------------------------------

    def toggle(self, record_id: RecordId) -> None:
        if record_id in self._selected:
            self._deselect(record_id)
        else:
            self._selected[record_id] = None
        self._emit()

    def toggle_all(self, page_ids: Iterable[RecordId]) -> None:
        """Deselect the page when all of it is selected, otherwise select all of it."""
        ids = list(dict.fromkeys(page_ids))
        if not ids:
            return
        if all(rid in self._selected for rid in ids):
            for rid in ids:
                self._deselect(rid)
        else:
            for rid in ids:
                self._selected.setdefault(rid, None)
        self._emit()

    def clear(self) -> None:
        if not self._selected:
            return
        for rid in list(self._selected):
            self._deselect(rid)
        self._emit()

    def reconcile(
        self, records: Iterable[Any], *, hard_reset: bool, complete: bool = False
    ) -> None:
        """Index the loaded *records* and, on a dataset swap, drop ids they lack.

        ``complete`` marks *records* as the whole collection rather than one
        page; the index then becomes exactly that collection. For a page the
        index keeps the records of selected ids from earlier pages.
        """
        incoming = {self._strategy.record_id(record): record for record in records}
        previous = self._known
        self._loaded = frozenset(incoming)
        self._known = incoming
        if not hard_reset:
            if not complete:
                for rid in self._selected:
                    if rid not in incoming and rid in previous:
                        self._known[rid] = previous[rid]
            return
        stale = [rid for rid in self._selected if rid not in incoming]
        if not stale:
            return
        for rid in stale:
            del self._selected[rid]
        LOGGER.debug("Dataset swap dropped %d selected ids", len(stale))
        self._emit()

    def _deselect(self, record_id: RecordId) -> None:
        del self._selected[record_id]
        if record_id not in self._loaded:
            self._known.pop(record_id, None)

    def _emit(self) -> None:
        self.changed.emit(self.selection, self.selected_records)
