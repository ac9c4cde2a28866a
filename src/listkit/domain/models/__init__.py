from .query import Pagination, QueryState, SortDirection, SortSpec
from .result import FetchPage, PageSelection, ResultSet, coerce_fetch_result

__all__ = [
    "FetchPage",
    "PageSelection",
    "Pagination",
    "QueryState",
    "ResultSet",
    "SortDirection",
    "SortSpec",
    "coerce_fetch_result",
]
