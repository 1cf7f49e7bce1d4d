"""
Парсер выражений шаблона с рекурсивным спуском.

Строит абстрактное синтаксическое дерево (AST) из последовательности токенов.
Поддерживает приоритеты операторов и группировку в скобках.

Грамматика:
expression  → or_expr
or_expr     → and_expr ("||" and_expr)*
and_expr    → comparison ("&&" comparison)*
comparison  → additive (("==" | "!=" | "<" | ">" | "<=" | ">=") additive)*
additive    → term (("+" | "-") term)*
term        → unary (("*" | "/") unary)*
unary       → ("!" | "-") unary | primary
primary     → NUMBER | STRING | LITERAL | "true" | "false" | "null"
            | IDENTIFIER | "(" expression ")"
"""

from __future__ import annotations

from typing import List

from ..errors import ExpressionSyntaxError
from ..values import as_number
from .lexer import ExpressionLexer, Token
from .model import (
    COMPARISON_OPERATORS,
    BinaryExpr,
    Expression,
    GroupExpr,
    LiteralExpr,
    NameExpr,
    UnaryExpr,
)

_KEYWORD_VALUES = {"true": True, "false": False, "null": None}


class ExpressionParser:
    """
    Парсер выражений с рекурсивным спуском.

    Преобразует список токенов в абстрактное синтаксическое дерево,
    соблюдая приоритеты операторов и правила группировки.
    """

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, expression_str: str) -> Expression:
        """
        Парсит строку выражения в AST.

        Args:
            expression_str: Строка выражения

        Returns:
            Корневой узел AST

        Raises:
            ExpressionSyntaxError: При синтаксической ошибке или ошибке токенизации
        """
        return self.parse_tokens(self.lexer.tokenize(expression_str))

    def parse_tokens(self, tokens: List[Token]) -> Expression:
        """
        Парсит готовую последовательность токенов (например, после подстановки значений).
        """
        self._tokens = tokens
        self._position = 0

        if not self._tokens or self._tokens[0].type == 'EOF':
            raise ExpressionSyntaxError("Empty expression", 0)

        result = self._parse_expression()

        if not self._is_at_end():
            current = self._current_token()
            raise ExpressionSyntaxError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_expression(self) -> Expression:
        return self._parse_or()

    def _parse_or(self) -> Expression:
        """Логическое ИЛИ (низший приоритет)."""
        left = self._parse_and()
        while self._match_operator("||"):
            right = self._parse_and()
            left = BinaryExpr(left=left, operator="||", right=right)
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_comparison()
        while self._match_operator("&&"):
            right = self._parse_comparison()
            left = BinaryExpr(left=left, operator="&&", right=right)
        return left

    def _parse_comparison(self) -> Expression:
        left = self._parse_additive()
        while True:
            operator = self._match_any_operator(COMPARISON_OPERATORS)
            if operator is None:
                return left
            right = self._parse_additive()
            left = BinaryExpr(left=left, operator=operator, right=right)

    def _parse_additive(self) -> Expression:
        left = self._parse_term()
        while True:
            operator = self._match_any_operator(("+", "-"))
            if operator is None:
                return left
            right = self._parse_term()
            left = BinaryExpr(left=left, operator=operator, right=right)

    def _parse_term(self) -> Expression:
        left = self._parse_unary()
        while True:
            operator = self._match_any_operator(("*", "/"))
            if operator is None:
                return left
            right = self._parse_unary()
            left = BinaryExpr(left=left, operator=operator, right=right)

    def _parse_unary(self) -> Expression:
        """Унарные ! и - (высший приоритет, правая ассоциативность)."""
        operator = self._match_any_operator(("!", "-"))
        if operator is not None:
            return UnaryExpr(operator=operator, operand=self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Парсит первичное выражение (литералы, имена и группы в скобках)."""
        if self._match_symbol("("):
            expr = self._parse_expression()
            if not self._match_symbol(")"):
                raise ExpressionSyntaxError("Expected ')' after grouped expression", self._current_position())
            return GroupExpr(expression=expr)

        current = self._current_token()

        if current.type == 'LITERAL':
            self._advance()
            return LiteralExpr(value=current.literal)

        if current.type == 'NUMBER':
            self._advance()
            number = as_number(current.value)
            # "0123" остаётся строкой
            return LiteralExpr(value=current.value if number is None else number)

        if current.type == 'STRING':
            self._advance()
            return LiteralExpr(value=current.value[1:-1])

        if current.type == 'KEYWORD':
            self._advance()
            return LiteralExpr(value=_KEYWORD_VALUES[current.value.lower()])

        if current.type == 'IDENTIFIER':
            self._advance()
            return NameExpr(name=current.value)

        if current.type == 'EOF':
            raise ExpressionSyntaxError("Unexpected end of expression", current.position)
        raise ExpressionSyntaxError(f"Unexpected token '{current.value}'", current.position)

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            last = self._tokens[-1].position if self._tokens else 0
            return Token(type='EOF', value='', position=last)
        return self._tokens[self._position]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает предыдущий токен."""
        if not self._is_at_end():
            self._position += 1
        return self._tokens[self._position - 1] if self._position > 0 else self._current_token()

    def _match_operator(self, operator: str) -> bool:
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value == operator:
            self._advance()
            return True
        return False

    def _match_any_operator(self, operators: tuple) -> str | None:
        """Потребляет один из операторов и возвращает его, иначе None."""
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value in operators:
            self._advance()
            return current.value
        return None

    def _match_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        if current.type == 'SYMBOL' and current.value == symbol:
            self._advance()
            return True
        return False


__all__ = ["ExpressionParser"]
