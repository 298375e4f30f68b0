"""Query evaluation and result rendering."""

from pysg.query.evaluator import Query, QueryResult, compile_query, xpath_string
from pysg.query.renderer import render, source_text

__all__ = [
    "Query",
    "QueryResult",
    "compile_query",
    "render",
    "source_text",
    "xpath_string",
]
