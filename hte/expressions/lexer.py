"""
Лексер для разбора выражений шаблона.

Выполняет токенизацию выражения из директив IF и SET:
- Числовые и строковые литералы
- Ключевые слова (true, false, null)
- Идентификаторы и точечные пути (order.id, items.0.name)
- Операторы (&&, ||, ==, !=, <=, >=, <, >, !, +, -, *, /)
- Скобки
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, List

from ..errors import ExpressionSyntaxError


@dataclass
class Token:
    """
    Токен выражения.

    Attributes:
        type: Тип токена (NUMBER, STRING, KEYWORD, IDENTIFIER, OPERATOR, SYMBOL, LITERAL, EOF)
        value: Исходный текст токена
        position: Позиция в исходной строке
        literal: Подставленное значение для токенов LITERAL
    """
    type: str
    value: str
    position: int
    literal: Any = None

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ExpressionLexer:
    """
    Лексер для разбиения выражения на токены.

    Поддерживаемые токены:
    - NUMBER: 10, 2.5, .5, 1e3
    - STRING: "text" или 'text' (без экранирования)
    - KEYWORD: true, false, null (без учёта регистра)
    - IDENTIFIER: имена и точечные пути
    - OPERATOR: логические, сравнения, арифметические
    - SYMBOL: (, )
    - EOF: конец строки
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы и табуляция (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Строки в двойных или одинарных кавычках
        (r'"[^"]*"', 'STRING', False),
        (r"'[^']*'", 'STRING', False),

        # Числа (до идентификаторов)
        (r'(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?', 'NUMBER', False),

        # Двухсимвольные операторы проверяем перед односимвольными
        (r'&&|\|\||==|!=|<=|>=', 'OPERATOR', False),
        (r'[<>!+\-*/]', 'OPERATOR', False),

        (r'\(', 'SYMBOL', False),
        (r'\)', 'SYMBOL', False),

        # Идентификатор с необязательными сегментами пути; сегменты могут быть индексами
        (r'[^\W\d]\w*(?:\.\w+)*', 'IDENTIFIER', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    # Ключевые слова для постпроцессинга (сравнение без учёта регистра)
    KEYWORDS = {'true', 'false', 'null'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка выражения

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ExpressionSyntaxError: При обнаружении неизвестного символа
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    if token_type == 'UNKNOWN':
                        raise ExpressionSyntaxError(f"Unexpected character '{value}'", position)

                    final_type = token_type
                    if token_type == 'IDENTIFIER' and value.lower() in self.KEYWORDS:
                        final_type = 'KEYWORD'

                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens

    def tokenize_stream(self, text: str) -> Iterator[Token]:
        """Генератор для ленивой токенизации."""
        for token in self.tokenize(text):
            yield token


__all__ = ["Token", "ExpressionLexer"]
