"""XPath evaluation over projection trees.

The expression is compiled once per process and reused for every file.
A result is either a node-set (a list of elements, attribute values and
text values, in document order) or a single scalar.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import Any

from lxml import etree

from pysg.core.errors import QueryError


@dataclass(frozen=True, slots=True)
class QueryResult:
    value: list[Any] | float | bool | str

    @property
    def is_nodeset(self) -> bool:
        return isinstance(self.value, list)

    @property
    def nodes(self) -> list[Any]:
        return self.value if isinstance(self.value, list) else []


class Query:
    """A compiled XPath expression."""

    __slots__ = ("expression", "_xpath")

    def __init__(self, expression: str) -> None:
        self.expression = expression
        try:
            self._xpath = etree.XPath(expression)
        except etree.XPathSyntaxError as e:
            raise QueryError.invalid_syntax(expression, str(e)) from e

    def evaluate(self, tree: etree._ElementTree) -> QueryResult:
        try:
            value = self._xpath(tree)
        except etree.XPathError as e:
            raise QueryError.evaluation_failed(self.expression, str(e)) from e
        return QueryResult(value=value)


@functools.lru_cache(maxsize=8)
def compile_query(expression: str) -> Query:
    """Compile an expression, caching the result for this process."""
    return Query(expression)


def xpath_string(value: float | bool | str) -> str:
    """Convert a scalar result the way XPath's ``string()`` does."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
