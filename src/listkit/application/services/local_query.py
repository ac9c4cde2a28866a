"""In-memory query pipeline: filter, search, sort, slice."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from ...domain.models.query import QueryState
from ...domain.models.result import FetchPage
from ...domain.services.ordering import stable_sort
from .record_strategy import RecordStrategy

LOGGER = logging.getLogger(__name__)


class LocalQueryEngine:
    """Apply a :class:`QueryState` to a complete record collection.

    The pipeline mirrors what a server would do so that local and remote
    lists behave the same: filter predicates first, then the free-text
    predicate, then a stable sort, then the page slice. ``total_count`` is
    the number of records that survived filtering.
    """

    def __init__(self, strategy: Optional[RecordStrategy] = None) -> None:
        self._strategy = strategy or RecordStrategy()

    @property
    def strategy(self) -> RecordStrategy:
        return self._strategy

    def matching(self, records: Sequence[Any], query: QueryState) -> List[Any]:
        """Return every record that passes the filters and search, sorted."""
        rows = list(records)
        for filter_id, value in query.active_filters().items():
            rows = [row for row in rows if self._strategy.matches_filter(row, filter_id, value)]
        if query.search_text:
            text = query.search_text
            rows = [row for row in rows if self._strategy.matches_search(row, text)]
        sort = query.sort
        if sort.key is not None and sort.direction is not None:
            rows = stable_sort(rows, self._strategy.comparator_for(sort.key), sort.direction)
        return rows

    def run(self, records: Sequence[Any], query: QueryState) -> FetchPage:
        rows = self.matching(records, query)
        offset = query.pagination.offset
        page = rows[offset:offset + query.page_size]
        LOGGER.debug(
            "Local query matched %d of %d records; page %d holds %d",
            len(rows),
            len(records),
            query.page,
            len(page),
        )
        return FetchPage(records=tuple(page), total_count=len(rows))
