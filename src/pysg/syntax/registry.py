"""Backreference registry.

Projection elements never hold syntax nodes. An element that stands for a
concrete node stores an integer id in its ``__id__`` attribute, and the id
indexes into the registry built by the same projection pass. Ids are handed
out in creation order, so for one pass they are exactly ``0..N-1``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pysg.core.errors import InternalError

if TYPE_CHECKING:
    from lxml import etree

    from pysg.syntax.taxonomy import SyntaxNode

BACKREF_ATTR = "__id__"


class Registry:
    """Append-only, index-addressed table of syntax nodes."""

    __slots__ = ("_nodes",)

    def __init__(self) -> None:
        self._nodes: list[SyntaxNode] = []

    def append(self, node: SyntaxNode) -> int:
        ref = len(self._nodes)
        self._nodes.append(node)
        return ref

    def get(self, ref: int) -> SyntaxNode:
        """Resolve an id. An unknown id means the projection is inconsistent."""
        if not 0 <= ref < len(self._nodes):
            raise InternalError.backref_out_of_range(ref, len(self._nodes))
        return self._nodes[ref]

    def __len__(self) -> int:
        return len(self._nodes)


def backref(element: etree._Element) -> int | None:
    """Return the element's backreference id, or None for discriminator kinds."""
    value = element.get(BACKREF_ATTR)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise InternalError.unexpected(
            "malformed backreference", tag=element.tag, value=value
        ) from None
