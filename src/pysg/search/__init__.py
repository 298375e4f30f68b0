"""Multi-file search."""

from pysg.search.driver import (
    STDIN_NAME,
    FileReport,
    SearchDriver,
    SearchOptions,
    SearchSummary,
    parse_source,
    search_file,
    search_source,
    search_stream,
)

__all__ = [
    "STDIN_NAME",
    "FileReport",
    "SearchDriver",
    "SearchOptions",
    "SearchSummary",
    "parse_source",
    "search_file",
    "search_source",
    "search_stream",
]
