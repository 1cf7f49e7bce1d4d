"""
Фаза подстановки для выражений IF и SET.

Идентификаторы выражения заменяются литералами со значениями из области
видимости, после чего выражение разбирается и вычисляется без доступа
к переменным. Точечные пути разрешаются через PathResolver, голые имена
ищутся в области видимости точно.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from ..context import MISSING, Scope
from ..errors import EvaluationError
from ..paths import PathResolver, is_path
from ..values import Number, ValueKind, as_number, format_number, is_truthy, kind_of, to_text
from .evaluator import ExpressionEvaluator
from .lexer import ExpressionLexer, Token
from .parser import ExpressionParser

logger = logging.getLogger(__name__)

# Наличие арифметического оператора где угодно в тексте выражения
# (включая строковые литералы) переключает пустые значения на 0
_ARITHMETIC_HINT = re.compile(r'[+\-*/]')

# Одиночный идентификатор без операторов
_ATOMIC_RE = re.compile(r'^[^\W\d]\w*$')
_ATOMIC_MAX_LENGTH = 64


def has_arithmetic(expression: str) -> bool:
    return bool(_ARITHMETIC_HINT.search(expression))


def literal_for(value: Any, arithmetic: bool) -> Any:
    """
    Преобразует значение из области видимости в литерал выражения.

    Args:
        value: Разрешённое значение (None при промахе)
        arithmetic: True, если выражение похоже на формулу

    Returns:
        Число, bool или строку
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return 0 if arithmetic else ""

    kind = kind_of(value)
    if kind is ValueKind.BOOL:
        return value
    if kind is ValueKind.NUMBER:
        return as_number(value)
    if kind is ValueKind.STRING:
        number: Optional[Number] = as_number(value)
        return value if number is None else number
    if kind is ValueKind.DATE:
        return to_text(value)
    # Последовательности, записи и модели сводятся к истинности
    return is_truthy(value)


def translate_tokens(
    tokens: List[Token],
    expression: str,
    scope: Scope,
    resolver: Optional[PathResolver] = None,
) -> List[Token]:
    """
    Заменяет идентификаторы токенами LITERAL.

    Голое имя, которого нет в области видимости, остаётся идентификатором
    и приведёт к ошибке вычисления "Undefined name".
    """
    resolver = resolver or PathResolver()
    arithmetic = has_arithmetic(expression)
    translated: List[Token] = []

    for token in tokens:
        if token.type != 'IDENTIFIER':
            translated.append(token)
            continue

        if is_path(token.value):
            value = resolver.resolve(token.value, scope)
        else:
            value = scope.lookup(token.value)
            if value is MISSING:
                logger.debug(f"Unresolved name '{token.value}' in expression [{expression}]")
                translated.append(token)
                continue

        translated.append(Token(
            type='LITERAL',
            value=token.value,
            position=token.position,
            literal=literal_for(value, arithmetic),
        ))

    return translated


def render_literal(value: Any) -> str:
    """Текстовое представление подставленного литерала для диагностики."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if value is None:
        return "null"
    return f'"{value}"'


def translate_expression(expression: str, scope: Scope, resolver: Optional[PathResolver] = None) -> str:
    """
    Возвращает текст выражения с подставленными значениями.

    Используется в сообщениях диагностики. При ошибке токенизации
    или разрешения значений возвращает исходный текст.
    """
    expression = expression.strip()
    try:
        tokens = ExpressionLexer().tokenize(expression)
        translated = translate_tokens(tokens, expression, scope, resolver)
    except EvaluationError:
        return expression

    result = expression
    # Замена с конца сохраняет позиции предыдущих токенов
    for token in reversed(translated):
        if token.type == 'LITERAL':
            end = token.position + len(token.value)
            result = result[:token.position] + render_literal(token.literal) + result[end:]
    return result


def is_atomic(expression: str) -> bool:
    """True для выражения из одного голого идентификатора (не true/false/null)."""
    text = expression.strip()
    return (
        len(text) <= _ATOMIC_MAX_LENGTH
        and bool(_ATOMIC_RE.match(text))
        and text.lower() not in ExpressionLexer.KEYWORDS
    )


def evaluate_expression(expression: str, scope: Scope, resolver: Optional[PathResolver] = None) -> Any:
    """
    Вычисляет выражение в области видимости.

    Args:
        expression: Текст выражения, например "order.total > 100 && !paid"
        scope: Область видимости
        resolver: Разрешитель путей

    Returns:
        Значение выражения

    Raises:
        ExpressionSyntaxError: При синтаксической ошибке
        EvaluationError: При ошибке вычисления
    """
    expression = expression.strip()
    tokens = ExpressionLexer().tokenize(expression)
    tokens = translate_tokens(tokens, expression, scope, resolver)
    ast = ExpressionParser().parse_tokens(tokens)
    return ExpressionEvaluator().evaluate(ast)


def evaluate_condition(expression: str, scope: Scope, resolver: Optional[PathResolver] = None) -> bool:
    """
    Вычисляет условие IF/ELSEIF.

    Одиночное голое имя даёт истинность своего значения без разбора;
    отсутствующее имя даёт False, а не ошибку.
    """
    if is_atomic(expression):
        value = scope.lookup(expression.strip())
        return False if value is MISSING else is_truthy(value)
    return is_truthy(evaluate_expression(expression, scope, resolver))


__all__ = [
    "has_arithmetic",
    "literal_for",
    "translate_tokens",
    "translate_expression",
    "is_atomic",
    "evaluate_expression",
    "evaluate_condition",
]
