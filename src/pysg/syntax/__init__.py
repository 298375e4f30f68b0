"""Syntax projection: ast trees to queryable element trees with backreferences."""

from pysg.syntax.projector import FIELD_ATTR, Projection, project, xml_text
from pysg.syntax.registry import BACKREF_ATTR, Registry, backref
from pysg.syntax.taxonomy import IDENTIFIER, RULES, Identifier, KindRule, SyntaxNode

__all__ = [
    "BACKREF_ATTR",
    "FIELD_ATTR",
    "IDENTIFIER",
    "RULES",
    "Identifier",
    "KindRule",
    "Projection",
    "Registry",
    "SyntaxNode",
    "backref",
    "project",
    "xml_text",
]
