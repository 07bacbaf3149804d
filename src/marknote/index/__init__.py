"""Derived, read-only indices rebuilt from the stores."""

from marknote.index.calendar import CalendarIndex, month_grid, shift_month
from marknote.index.search import SearchIndex, SearchResult, all_tags, parse_query

__all__ = [
    "CalendarIndex",
    "SearchIndex",
    "SearchResult",
    "all_tags",
    "month_grid",
    "parse_query",
    "shift_month",
]
