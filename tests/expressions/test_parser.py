"""
Tests for the expression parser.
"""

import pytest

from hte.errors import ExpressionSyntaxError
from hte.expressions.model import (
    BinaryExpr,
    ExprType,
    GroupExpr,
    LiteralExpr,
    NameExpr,
    UnaryExpr,
)
from hte.expressions.parser import ExpressionParser


class TestExpressionParser:

    def setup_method(self):
        self.parser = ExpressionParser()

    def test_empty_expression_error(self):
        with pytest.raises(ExpressionSyntaxError, match="Empty expression"):
            self.parser.parse("")
        with pytest.raises(ExpressionSyntaxError, match="Empty expression"):
            self.parser.parse("   ")

    def test_literals(self):
        assert self.parser.parse("42") == LiteralExpr(42)
        assert self.parser.parse("2.5") == LiteralExpr(2.5)
        assert self.parser.parse('"text"') == LiteralExpr("text")
        assert self.parser.parse("'x'") == LiteralExpr("x")
        assert self.parser.parse("TRUE") == LiteralExpr(True)
        assert self.parser.parse("false") == LiteralExpr(False)
        assert self.parser.parse("null") == LiteralExpr(None)

    def test_leading_zero_number_stays_string(self):
        assert self.parser.parse("00123") == LiteralExpr("00123")
        assert self.parser.parse("0") == LiteralExpr(0)

    def test_name(self):
        result = self.parser.parse("order.id")
        assert isinstance(result, NameExpr)
        assert result.name == "order.id"
        assert result.get_type() == ExprType.NAME

    def test_precedence_and_over_or(self):
        result = self.parser.parse("a || b && c")
        assert isinstance(result, BinaryExpr)
        assert result.operator == "||"
        assert isinstance(result.right, BinaryExpr)
        assert result.right.operator == "&&"

    def test_precedence_arithmetic_over_comparison(self):
        result = self.parser.parse("1 + 2 * 3 > 6")
        assert result.operator == ">"
        assert result.left.operator == "+"
        assert result.left.right.operator == "*"

    def test_left_associativity(self):
        result = self.parser.parse("10 - 4 - 3")
        assert result.operator == "-"
        assert isinstance(result.left, BinaryExpr)
        assert result.left.left == LiteralExpr(10)
        assert result.right == LiteralExpr(3)

    def test_unary_operators(self):
        result = self.parser.parse("!!a")
        assert isinstance(result, UnaryExpr)
        assert isinstance(result.operand, UnaryExpr)

        result = self.parser.parse("-5 + 1")
        assert result.operator == "+"
        assert result.left == UnaryExpr("-", LiteralExpr(5))

    def test_grouping(self):
        result = self.parser.parse("(a || b) && c")
        assert result.operator == "&&"
        assert isinstance(result.left, GroupExpr)
        assert str(result) == "(a || b) && c"

    def test_missing_closing_paren(self):
        with pytest.raises(ExpressionSyntaxError, match="Expected '\\)'"):
            self.parser.parse("(a && b")

    def test_trailing_tokens(self):
        with pytest.raises(ExpressionSyntaxError, match="Unexpected token 'b'"):
            self.parser.parse("a b")

    def test_dangling_operator(self):
        with pytest.raises(ExpressionSyntaxError, match="Unexpected end of expression"):
            self.parser.parse("a &&")

    def test_string_rendering(self):
        assert str(self.parser.parse('x == "y"')) == 'x == "y"'
        assert str(self.parser.parse("5.0")) == "5"
