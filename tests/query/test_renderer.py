"""Tests for query/renderer.py module."""

from __future__ import annotations

import ast

import pytest
from lxml import etree

from pysg.core.errors import ErrorCode, InternalError
from pysg.query.evaluator import Query
from pysg.query.renderer import fold_lines, render, source_text
from pysg.syntax.projector import project
from pysg.syntax.registry import BACKREF_ATTR
from pysg.syntax.taxonomy import Identifier

SOURCE = """\
class Shape:
    def area(self):
        return self.w * (self.h + 1)
"""


def _search(source: str, expression: str, *, line_numbers: bool = False) -> list[str]:
    projection = project(ast.parse(source))
    result = Query(expression).evaluate(projection.tree)
    return render(result, projection, "shape.py", line_numbers=line_numbers)


def _reparse(text: str, like: ast.AST) -> ast.AST:
    if isinstance(like, ast.stmt):
        return ast.parse(text).body[0]
    return ast.parse(text, mode="eval").body


class TestSourceText:
    def test_node(self) -> None:
        node = ast.parse("x  =  [1,2]").body[0]
        assert source_text(node) == "x = [1, 2]"

    def test_identifier(self) -> None:
        owner = ast.parse("foo").body[0]
        assert source_text(Identifier(value="foo", owner=owner, field="id")) == "foo"


class TestFoldLines:
    def test_single_line_unchanged(self) -> None:
        assert fold_lines("x = [1, 2]") == "x = [1, 2]"

    def test_statements_joined(self) -> None:
        assert fold_lines("x = 1\ny = 2") == "x = 1; y = 2"

    def test_blocks_follow_their_header(self) -> None:
        assert fold_lines("if a:\n    x\nelse:\n    y") == "if a: x; else: y"

    def test_nested_blocks(self) -> None:
        text = "for i in r:\n    if i:\n        break\n    f(i)"
        assert fold_lines(text) == "for i in r: if i: break; f(i)"

    def test_docstring_value_kept(self) -> None:
        node = ast.parse('def f():\n    """Doc.\n\n    More."""\n    return 1\n').body[0]

        text = source_text(node)

        assert "\n" not in text
        reparsed = ast.parse(text).body[0]
        assert ast.get_docstring(reparsed, clean=False) == "Doc.\n\n    More."
        assert ast.dump(reparsed) == ast.dump(node)


class TestRender:
    def test_identifiers(self) -> None:
        lines = _search("def f():\n    x = 1\n", "//Identifier")
        assert lines == ["shape.py: f", "shape.py: x"]

    def test_nested_fragment_only(self) -> None:
        """A match deep inside a class renders just the matched node."""
        lines = _search(SOURCE, "//BinOp")
        assert lines == ["shape.py: self.w * (self.h + 1)", "shape.py: self.h + 1"]

    def test_compound_statement_on_one_line(self) -> None:
        assert _search(SOURCE, "//FunctionDef") == [
            "shape.py: def area(self): return self.w * (self.h + 1)"
        ]
        assert _search(SOURCE, "//ClassDef") == [
            "shape.py: class Shape: def area(self): return self.w * (self.h + 1)"
        ]

    def test_whole_module_is_one_line(self) -> None:
        lines = _search("import os\n\ndef f():\n    pass\n", "/Module")
        assert lines == ["shape.py: import os; def f(): pass"]

    def test_rendering_reparses_to_equivalent_tree(self) -> None:
        projection = project(ast.parse(SOURCE))
        result = Query("//Return | //Attribute | //Constant").evaluate(projection.tree)
        for element in result.nodes:
            node = projection.registry.get(int(element.get(BACKREF_ATTR)))
            assert ast.dump(_reparse(source_text(node), node)) == ast.dump(node)

    def test_discriminators_skipped(self) -> None:
        assert _search(SOURCE, "//Load | //Mult") == []

    def test_attribute_values(self) -> None:
        assert _search(SOURCE, "//Attribute/Identifier/@field") == [
            "shape.py: attr",
            "shape.py: attr",
        ]

    def test_text_nodes(self) -> None:
        assert _search(SOURCE, "//ClassDef/Identifier/text()") == ["shape.py: Shape"]

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("count(//Attribute)", "shape.py: 2"),
            ("boolean(//Lambda)", "shape.py: false"),
            ("string(//Constant/@value)", "shape.py: 1"),
        ],
    )
    def test_scalar_single_line(self, expression: str, expected: str) -> None:
        assert _search(SOURCE, expression) == [expected]

    def test_empty_nodeset(self) -> None:
        assert _search(SOURCE, "//While") == []

    def test_empty_module(self) -> None:
        assert _search("", "//Identifier") == []


class TestLineNumbers:
    def test_node_line(self) -> None:
        lines = _search(SOURCE, "//BinOp", line_numbers=True)
        assert lines == ["shape.py:3: self.w * (self.h + 1)", "shape.py:3: self.h + 1"]

    def test_identifier_uses_owner_line(self) -> None:
        lines = _search(SOURCE, "//Identifier[.='area']", line_numbers=True)
        assert lines == ["shape.py:2: area"]

    def test_attribute_uses_element_line(self) -> None:
        lines = _search(SOURCE, "//Constant/@value", line_numbers=True)
        assert lines == ["shape.py:3: 1"]

    def test_module_has_no_line(self) -> None:
        lines = _search("x = 1\n", "/Module", line_numbers=True)
        assert lines == ["shape.py: x = 1"]


class TestInconsistentProjection:
    def test_unknown_backref_is_internal_error(self) -> None:
        projection = project(ast.parse("x = 1\n"))
        stray = etree.SubElement(projection.root, "Name")
        stray.set(BACKREF_ATTR, "999")
        result = Query("//Name").evaluate(projection.tree)

        with pytest.raises(InternalError) as exc_info:
            render(result, projection, "x.py")
        assert exc_info.value.code == ErrorCode.BACKREF_OUT_OF_RANGE
