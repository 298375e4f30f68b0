"""Projection of an ``ast`` tree into a queryable lxml element tree.

Each syntax node becomes one element tagged with its kind name. Child
elements follow the node's fields in declared order, one per list item,
nothing for absent fields. Every element that stands for a concrete node
gets a backreference id into the registry built alongside it; identifier
strings become ``Identifier`` elements holding the identifier as text.

Example::

    >>> projection = project(ast.parse("def f():\\n    x = 1\\n"))
    >>> etree.tostring(projection.root)  # doctest: +SKIP
    <Module __id__="0">
      <FunctionDef __id__="1" field="body">
        <Identifier __id__="2" field="name">f</Identifier>
        <arguments __id__="3" field="args"/>
        <Assign __id__="4" field="body">
          <Name __id__="5" field="targets">
            <Identifier __id__="6" field="id">x</Identifier>
            <Store field="ctx"/>
          </Name>
          <Constant __id__="7" field="value" value="1"/>
        </Assign>
      </FunctionDef>
    </Module>
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass

from lxml import etree

from pysg.core.errors import InternalError
from pysg.syntax.registry import BACKREF_ATTR, Registry
from pysg.syntax.taxonomy import IDENTIFIER, Identifier, KindRule, SyntaxNode, rule_for

FIELD_ATTR = "field"

# Characters XML 1.0 cannot carry in text or attribute values.
_XML_INVALID = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_MISSING = object()

# (parent element, field name, node still to project)
_Pending = tuple["etree._Element | None", "str | None", SyntaxNode]


@dataclass(frozen=True, slots=True)
class Projection:
    """An element tree and the registry its backreferences point into.

    Both are built by one ``project`` call and are dropped together.
    """

    tree: etree._ElementTree
    registry: Registry

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()


def _escape(match: re.Match[str]) -> str:
    return match.group().encode("unicode_escape").decode("ascii")


def xml_text(value: object) -> str:
    """Render a field value as XML-safe text."""
    if isinstance(value, str):
        text = value
    elif value is Ellipsis:
        text = "..."
    else:
        text = repr(value)
    return _XML_INVALID.sub(_escape, text)


def project(node: ast.AST) -> Projection:
    """Project a syntax tree. Ids are assigned in pre-order."""
    registry = Registry()
    root: etree._Element | None = None
    stack: list[_Pending] = [(None, None, node)]

    while stack:
        parent, field, item = stack.pop()

        rule = None if isinstance(item, Identifier) else rule_for(item)
        tag = IDENTIFIER if rule is None else rule.kind
        element = etree.Element(tag) if parent is None else etree.SubElement(parent, tag)
        if root is None:
            root = element

        if rule is None or rule.concrete:
            element.set(BACKREF_ATTR, str(registry.append(item)))
        if field is not None:
            element.set(FIELD_ATTR, field)

        if rule is None:
            element.text = xml_text(item.value)  # type: ignore[union-attr]
        else:
            children = _expand(item, rule, element)  # type: ignore[arg-type]
            stack.extend(reversed(children))

    return Projection(tree=etree.ElementTree(root), registry=registry)


def _expand(node: ast.AST, rule: KindRule, element: etree._Element) -> list[_Pending]:
    """Set scalar attributes on ``element`` and return its children in order."""
    children: list[_Pending] = []
    for name in node._fields:
        value = getattr(node, name, _MISSING)
        if value is _MISSING:
            continue
        if name in rule.literals:
            element.set(name, xml_text(value))
            continue
        if value is None:
            continue

        if name in rule.scalars:
            element.set(name, xml_text(value))
        elif name in rule.idents:
            children.append((element, name, _identifier(rule, node, name, value)))
        elif name in rule.ident_lists:
            children.extend((element, name, _identifier(rule, node, name, v)) for v in value)
        elif isinstance(value, ast.AST):
            children.append((element, name, value))
        elif isinstance(value, list):
            for child in value:
                if child is None:
                    continue
                if not isinstance(child, ast.AST):
                    raise InternalError.unmapped_field(rule.kind, name, type(child).__name__)
                children.append((element, name, child))
        else:
            raise InternalError.unmapped_field(rule.kind, name, type(value).__name__)
    return children


def _identifier(rule: KindRule, owner: ast.AST, field: str, value: object) -> Identifier:
    if not isinstance(value, str):
        raise InternalError.unmapped_field(rule.kind, field, type(value).__name__)
    return Identifier(value=value, owner=owner, field=field)
