"""Interactive list controller: search, filter, sort, page and select."""

__version__ = "0.1.0"
