"""Closed taxonomy of projected syntax kinds.

Every concrete ``ast`` node class of the running interpreter has exactly one
``KindRule`` here. A rule says whether the kind is concrete (its elements
carry a backreference) or a discriminator (contexts and operators, which
CPython shares as one instance per kind and which have no source span of
their own), and how the node's non-node fields are projected:

- ``idents``: fields holding one identifier string (``Name.id``), projected
  as ``Identifier`` elements;
- ``ident_lists``: fields holding a list of identifiers (``Global.names``);
- ``scalars``: fields holding plain values (``ImportFrom.level``), projected
  as attributes of the node's element and omitted when ``None``;
- ``literals``: like scalars, but ``None`` is data (``Constant.value``).

All other fields must hold nodes, lists of nodes, or ``None``.

Coverage is checked when this module is imported: a kind without a rule
raises ``InternalError`` before any file is searched.
"""

from __future__ import annotations

import ast
import sys
from dataclasses import dataclass

from pysg.core.errors import InternalError

IDENTIFIER = "Identifier"
"""Tag of the synthetic kind standing for one identifier string."""

# Category bases. Never instantiated by the parser.
_ABSTRACT_KINDS = frozenset(
    {
        "mod",
        "stmt",
        "expr",
        "expr_context",
        "boolop",
        "operator",
        "unaryop",
        "cmpop",
        "excepthandler",
        "pattern",
        "type_ignore",
        "type_param",
        "slice",
    }
)

# Compatibility aliases kept by the ast module; the parser never emits them.
_DEPRECATED_KINDS = frozenset(
    {
        "Suite",
        "AugLoad",
        "AugStore",
        "Param",
        "Index",
        "ExtSlice",
        "Num",
        "Str",
        "Bytes",
        "NameConstant",
        "Ellipsis",
    }
)


@dataclass(frozen=True, slots=True)
class Identifier:
    """One identifier string inside an ``ast`` node."""

    value: str
    owner: ast.AST
    field: str


SyntaxNode = ast.AST | Identifier


@dataclass(frozen=True, slots=True)
class KindRule:
    kind: str
    concrete: bool = True
    idents: frozenset[str] = frozenset()
    ident_lists: frozenset[str] = frozenset()
    scalars: frozenset[str] = frozenset()
    literals: frozenset[str] = frozenset()
    since: tuple[int, int] = (3, 12)


def _rule(
    kind: str,
    *,
    idents: tuple[str, ...] = (),
    ident_lists: tuple[str, ...] = (),
    scalars: tuple[str, ...] = (),
    literals: tuple[str, ...] = (),
    since: tuple[int, int] = (3, 12),
) -> KindRule:
    return KindRule(
        kind=kind,
        idents=frozenset(idents),
        ident_lists=frozenset(ident_lists),
        scalars=frozenset(scalars),
        literals=frozenset(literals),
        since=since,
    )


def _marker(kind: str) -> KindRule:
    return KindRule(kind=kind, concrete=False)


_TABLE: tuple[KindRule, ...] = (
    # Modules
    _rule("Module"),
    _rule("Interactive"),
    _rule("Expression"),
    _rule("FunctionType"),
    # Statements
    _rule("FunctionDef", idents=("name",), scalars=("type_comment",)),
    _rule("AsyncFunctionDef", idents=("name",), scalars=("type_comment",)),
    _rule("ClassDef", idents=("name",)),
    _rule("Return"),
    _rule("Delete"),
    _rule("Assign", scalars=("type_comment",)),
    _rule("TypeAlias"),
    _rule("AugAssign"),
    _rule("AnnAssign", scalars=("simple",)),
    _rule("For", scalars=("type_comment",)),
    _rule("AsyncFor", scalars=("type_comment",)),
    _rule("While"),
    _rule("If"),
    _rule("With", scalars=("type_comment",)),
    _rule("AsyncWith", scalars=("type_comment",)),
    _rule("Match"),
    _rule("Raise"),
    _rule("Try"),
    _rule("TryStar"),
    _rule("Assert"),
    _rule("Import"),
    _rule("ImportFrom", idents=("module",), scalars=("level",)),
    _rule("Global", ident_lists=("names",)),
    _rule("Nonlocal", ident_lists=("names",)),
    _rule("Expr"),
    _rule("Pass"),
    _rule("Break"),
    _rule("Continue"),
    # Expressions
    _rule("BoolOp"),
    _rule("NamedExpr"),
    _rule("BinOp"),
    _rule("UnaryOp"),
    _rule("Lambda"),
    _rule("IfExp"),
    _rule("Dict"),
    _rule("Set"),
    _rule("ListComp"),
    _rule("SetComp"),
    _rule("DictComp"),
    _rule("GeneratorExp"),
    _rule("Await"),
    _rule("Yield"),
    _rule("YieldFrom"),
    _rule("Compare"),
    _rule("Call"),
    _rule("FormattedValue", scalars=("conversion",)),
    _rule("Interpolation", scalars=("str", "conversion"), since=(3, 14)),
    _rule("JoinedStr"),
    _rule("TemplateStr", since=(3, 14)),
    _rule("Constant", scalars=("kind",), literals=("value",)),
    _rule("Attribute", idents=("attr",)),
    _rule("Subscript"),
    _rule("Starred"),
    _rule("Name", idents=("id",)),
    _rule("List"),
    _rule("Tuple"),
    _rule("Slice"),
    # Expression contexts
    _marker("Load"),
    _marker("Store"),
    _marker("Del"),
    # Boolean operators
    _marker("And"),
    _marker("Or"),
    # Binary operators
    _marker("Add"),
    _marker("Sub"),
    _marker("Mult"),
    _marker("MatMult"),
    _marker("Div"),
    _marker("Mod"),
    _marker("Pow"),
    _marker("LShift"),
    _marker("RShift"),
    _marker("BitOr"),
    _marker("BitXor"),
    _marker("BitAnd"),
    _marker("FloorDiv"),
    # Unary operators
    _marker("Invert"),
    _marker("Not"),
    _marker("UAdd"),
    _marker("USub"),
    # Comparison operators
    _marker("Eq"),
    _marker("NotEq"),
    _marker("Lt"),
    _marker("LtE"),
    _marker("Gt"),
    _marker("GtE"),
    _marker("Is"),
    _marker("IsNot"),
    _marker("In"),
    _marker("NotIn"),
    # Auxiliary nodes
    _rule("comprehension", scalars=("is_async",)),
    _rule("ExceptHandler", idents=("name",)),
    _rule("arguments"),
    _rule("arg", idents=("arg",), scalars=("type_comment",)),
    _rule("keyword", idents=("arg",)),
    _rule("alias", idents=("name", "asname")),
    _rule("withitem"),
    _rule("match_case"),
    # Patterns
    _rule("MatchValue"),
    _rule("MatchSingleton", literals=("value",)),
    _rule("MatchSequence"),
    _rule("MatchMapping", idents=("rest",)),
    _rule("MatchClass", ident_lists=("kwd_attrs",)),
    _rule("MatchStar", idents=("name",)),
    _rule("MatchAs", idents=("name",)),
    _rule("MatchOr"),
    # Type ignores and type parameters
    _rule("TypeIgnore", scalars=("lineno", "tag")),
    _rule("TypeVar", idents=("name",)),
    _rule("ParamSpec", idents=("name",)),
    _rule("TypeVarTuple", idents=("name",)),
)


def concrete_kinds() -> frozenset[type[ast.AST]]:
    """Node classes the running interpreter's parser can produce."""
    kinds: set[type[ast.AST]] = set()
    for name, value in vars(ast).items():
        if name.startswith("_") or not isinstance(value, type):
            continue
        if not issubclass(value, ast.AST) or value is ast.AST:
            continue
        if name in _ABSTRACT_KINDS or name in _DEPRECATED_KINDS:
            continue
        kinds.add(value)
    return frozenset(kinds)


def _build_rules() -> dict[type[ast.AST], KindRule]:
    rules: dict[type[ast.AST], KindRule] = {}
    for rule in _TABLE:
        if sys.version_info[:2] < rule.since:
            continue
        cls = getattr(ast, rule.kind, None)
        if isinstance(cls, type):
            rules[cls] = rule
    return rules


RULES: dict[type[ast.AST], KindRule] = _build_rules()


def _verify_totality() -> None:
    missing = sorted(cls.__name__ for cls in concrete_kinds() if cls not in RULES)
    if missing:
        raise InternalError.uncovered_kinds(missing)


_verify_totality()


def rule_for(node: ast.AST) -> KindRule:
    """Return the rule for a node. Unknown classes are a coverage bug."""
    try:
        return RULES[type(node)]
    except KeyError:
        raise InternalError.uncovered_kinds([type(node).__name__]) from None
