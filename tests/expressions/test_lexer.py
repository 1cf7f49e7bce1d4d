"""
Tests for the expression lexer.
"""

import pytest

from hte.errors import ExpressionSyntaxError
from hte.expressions.lexer import ExpressionLexer


class TestExpressionLexer:

    def setup_method(self):
        self.lexer = ExpressionLexer()

    def types(self, text):
        return [t.type for t in self.lexer.tokenize(text)]

    def test_empty_string(self):
        tokens = self.lexer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == 'EOF'

    def test_whitespace_ignored(self):
        assert self.types("  \t ") == ['EOF']

    def test_numbers(self):
        for number in ["0", "10", "2.5", ".5", "1e3", "0012345678"]:
            tokens = self.lexer.tokenize(number)
            assert tokens[0].type == 'NUMBER'
            assert tokens[0].value == number

    def test_strings_both_quotes(self):
        tokens = self.lexer.tokenize('"abc" \'d e\'')
        assert [t.type for t in tokens] == ['STRING', 'STRING', 'EOF']
        assert tokens[0].value == '"abc"'
        assert tokens[1].value == "'d e'"

    def test_keywords_case_insensitive(self):
        for keyword in ["true", "FALSE", "Null"]:
            tokens = self.lexer.tokenize(keyword)
            assert tokens[0].type == 'KEYWORD'
            assert tokens[0].value == keyword

    def test_identifiers_and_paths(self):
        for identifier in ["x", "total", "_hidden", "order.id", "items.0.name", "loop.first"]:
            tokens = self.lexer.tokenize(identifier)
            assert len(tokens) == 2
            assert tokens[0].type == 'IDENTIFIER'
            assert tokens[0].value == identifier

    def test_two_char_operators_win(self):
        tokens = self.lexer.tokenize("a<=b&&c!=d||e>=f==g")
        operators = [t.value for t in tokens if t.type == 'OPERATOR']
        assert operators == ["<=", "&&", "!=", "||", ">=", "=="]

    def test_arithmetic_and_symbols(self):
        assert self.types("(a + 1) * -b / 2") == [
            'SYMBOL', 'IDENTIFIER', 'OPERATOR', 'NUMBER', 'SYMBOL',
            'OPERATOR', 'OPERATOR', 'IDENTIFIER', 'OPERATOR', 'NUMBER', 'EOF',
        ]

    def test_positions(self):
        tokens = self.lexer.tokenize("ab == 12")
        assert [t.position for t in tokens] == [0, 3, 6, 8]

    def test_unknown_character(self):
        with pytest.raises(ExpressionSyntaxError) as exc:
            self.lexer.tokenize("a = b")
        assert exc.value.position == 2
        assert "Unexpected character '='" in str(exc.value)

    def test_tokenize_stream(self):
        assert [t.type for t in self.lexer.tokenize_stream("x")] == ['IDENTIFIER', 'EOF']
