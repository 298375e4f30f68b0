"""Rendering of query results as output lines.

One line per matched item, ``<name>: <text>``:

- element with a backreference: the originating node re-printed with
  ``ast.unparse`` (identifiers print as themselves). Compound statements
  are folded onto one line, statements joined by ``; ``;
- element without a backreference (contexts, operators): skipped;
- attribute: its value;
- text node: its text;
- scalar result: a single line with its XPath string value.
"""

from __future__ import annotations

import ast
import io
import tokenize
from typing import Any

from lxml import etree

from pysg.core.logging import get_logger
from pysg.query.evaluator import QueryResult, xpath_string
from pysg.syntax.projector import Projection
from pysg.syntax.registry import backref
from pysg.syntax.taxonomy import Identifier, SyntaxNode

logger = get_logger("renderer")

_LAYOUT = frozenset({tokenize.NL, tokenize.DEDENT, tokenize.ENDMARKER})


def source_text(node: SyntaxNode) -> str:
    """Canonical source text of a node, on a single line."""
    if isinstance(node, Identifier):
        return node.value
    return fold_lines(ast.unparse(node).strip())


def fold_lines(text: str) -> str:
    """Fold unparsed source onto one line.

    A block body follows its header after a space and later statements
    follow a ``; ``, so an if/else block prints as ``if a: x; else: y``.
    String literals spanning lines (docstrings) are re-quoted with escapes,
    keeping their value.
    """
    if "\n" not in text:
        return text

    offsets = [0]
    for line in text.splitlines(keepends=True):
        offsets.append(offsets[-1] + len(line))

    def at(pos: tuple[int, int]) -> int:
        row, col = pos
        return offsets[row - 1] + col

    parts: list[str] = []
    cursor = 0
    separator: str | None = None
    for token in tokenize.generate_tokens(io.StringIO(text).readline):
        if token.type == tokenize.NEWLINE:
            parts.append(text[cursor : at(token.start)])
            cursor = at(token.end)
            separator = "; "
        elif token.type == tokenize.INDENT:
            separator = " "
        elif token.type in _LAYOUT:
            continue
        else:
            if separator is not None:
                parts.append(separator)
                cursor = at(token.start)
                separator = None
            if token.type == tokenize.STRING and "\n" in token.string:
                parts.append(text[cursor : at(token.start)])
                parts.append(repr(ast.literal_eval(token.string)))
                cursor = at(token.end)
    parts.append(text[cursor:])
    return "".join(parts)


def render(
    result: QueryResult,
    projection: Projection,
    name: str,
    *,
    line_numbers: bool = False,
) -> list[str]:
    """Render a query result against the projection it was evaluated on."""
    if not result.is_nodeset:
        return [f"{name}: {xpath_string(result.value)}"]  # type: ignore[arg-type]

    lines: list[str] = []
    for item in result.nodes:
        text = _render_item(item, projection)
        if text is None:
            continue
        prefix = name
        if line_numbers:
            line = _line_of(item, projection)
            if line is not None:
                prefix = f"{name}:{line}"
        lines.append(f"{prefix}: {text}")
    return lines


def _render_item(item: Any, projection: Projection) -> str | None:
    if etree.iselement(item):
        ref = backref(item)
        if ref is None:
            logger.debug("element_without_backref", tag=item.tag)
            return None
        return source_text(projection.registry.get(ref))
    if isinstance(item, str):
        # Attribute and text results are lxml "smart" strings.
        return str(item)
    # Namespace nodes
    return None


def _line_of(item: Any, projection: Projection) -> int | None:
    """Line of the match, or of its closest ancestor that has one."""
    element = item if etree.iselement(item) else _parent_of(item)
    while element is not None:
        ref = backref(element)
        if ref is not None:
            node = projection.registry.get(ref)
            if isinstance(node, Identifier):
                node = node.owner
            line = getattr(node, "lineno", None)
            if line is not None:
                return line
        element = element.getparent()
    return None


def _parent_of(item: Any) -> etree._Element | None:
    getparent = getattr(item, "getparent", None)
    return getparent() if getparent is not None else None
