"""
Tests for the script language parser.
"""

import pytest

from scripthost.frontend.nodes import (
    Annotation,
    BinaryOp,
    ExpressionStatement,
    Literal,
    Member,
    Name,
    Negate,
    PrintStatement,
    ValDeclaration,
)
from scripthost.frontend.parser import Parser, parse_source
from scripthost.shared.errors import ParseError


@pytest.fixture(scope="module")
def parser():
    return Parser()


class TestStatements:

    def test_val_print_and_expression(self, parser):
        program = parser.parse('val x = 1\nprintln(x)\nx', "main.custom.kts")
        assert [type(s) for s in program.statements] == [ValDeclaration, PrintStatement, ExpressionStatement]
        assert program.statements[0].name == "x"
        assert program.source_file == "main.custom.kts"

    def test_semicolons_comments_and_blank_lines(self, parser):
        source = "# header comment\n\nval a = 1; val b = 2\n\n   # indented comment\nprintln(a)  # trailing\n"
        program = parser.parse(source, "s")
        assert [type(s) for s in program.statements] == [ValDeclaration, ValDeclaration, PrintStatement]

    def test_empty_source(self, parser):
        program = parser.parse("", "empty")
        assert program.statements == ()
        assert program.annotations == ()

    def test_keyword_prefix_is_a_name(self, parser):
        program = parser.parse("val value = 1\nval printlnCount = value", "s")
        assert program.statements[0].name == "value"
        assert program.statements[1].value == Name(name="value", location=program.statements[1].value.location)


class TestExpressions:

    def _expr(self, parser, text):
        return parser.parse(text, "e").statements[0].value

    def test_precedence(self, parser):
        expr = self._expr(parser, "1 + 2 * 3")
        assert isinstance(expr, BinaryOp) and expr.op == "+"
        assert expr.left.value == 1
        assert isinstance(expr.right, BinaryOp) and expr.right.op == "*"

    def test_parentheses(self, parser):
        expr = self._expr(parser, "(1 + 2) * 3")
        assert expr.op == "*"
        assert expr.left.op == "+"

    def test_left_associative(self, parser):
        expr = self._expr(parser, "8 - 4 - 2")
        assert expr.op == "-"
        assert expr.left.op == "-"
        assert expr.right.value == 2

    def test_comparison(self, parser):
        expr = self._expr(parser, "a + 1 <= 3")
        assert expr.op == "<="
        assert expr.left.op == "+"

    def test_literals(self, parser):
        program = parser.parse('1\n2.5\n"a\\nb"\ntrue\nfalse\n1e3', "l")
        values = [s.value.value for s in program.statements]
        assert values == [1, 2.5, "a\nb", True, False, 1000.0]
        assert isinstance(values[0], int)
        assert all(isinstance(s.value, Literal) for s in program.statements)

    def test_negation(self, parser):
        expr = self._expr(parser, "-x")
        assert isinstance(expr, Negate)
        assert expr.operand.name == "x"

    def test_member(self, parser):
        expr = self._expr(parser, "SubFolderFoo.value")
        assert isinstance(expr, Member)
        assert (expr.owner, expr.member) == ("SubFolderFoo", "value")

    def test_locations(self, parser):
        program = parser.parse("val a = 1\n  println(a)", "loc.custom.kts")
        location = program.statements[1].location
        assert location.file == "loc.custom.kts"
        assert (location.line, location.column) == (2, 3)


class TestAnnotations:

    def test_header_annotations(self, parser):
        program = parser.parse('@file:Import("a.custom.kts")\n@file:Import("b.custom.kts")\nval x = 1', "h")
        assert [a.argument for a in program.annotations] == ["a.custom.kts", "b.custom.kts"]
        assert all(a.in_header for a in program.annotations)
        assert program.annotations[0] == Annotation(
            target="file",
            name="Import",
            argument="a.custom.kts",
            location=program.annotations[0].location,
        )

    def test_annotation_after_statement(self, parser):
        program = parser.parse('val x = 1\n@file:Import("late.custom.kts")\n', "h")
        assert program.annotations[0].in_header is False
        assert program.header_annotations() == ()


class TestParseErrors:

    def test_error_location(self, parser):
        with pytest.raises(ParseError) as exc_info:
            parser.parse("val x = 1\nval = 2\n", "bad.custom.kts")
        error = exc_info.value
        assert error.location.line == 2
        assert error.source_file == "bad.custom.kts"
        assert "Parse error" in error.message

    def test_unexpected_character(self, parser):
        with pytest.raises(ParseError) as exc_info:
            parser.parse("val x = 1 $ 2", "bad")
        assert "unexpected character '$'" in exc_info.value.message

    def test_unterminated_call(self, parser):
        with pytest.raises(ParseError):
            parser.parse("println(", "bad")


class TestParseCache:

    def test_cached_result_shared(self):
        first = parse_source("val x = 1", "cached.custom.kts")
        assert parse_source("val x = 1", "cached.custom.kts") is first
