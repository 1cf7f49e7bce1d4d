"""
Выражения директив IF и SET.

Основные компоненты:
- ExpressionLexer: токенизация
- ExpressionParser: рекурсивный спуск в AST
- ExpressionEvaluator: вычисление AST
- evaluate_expression / evaluate_condition: подстановка значений и вычисление

Пример использования:
    from hte.expressions import evaluate_condition

    evaluate_condition("order.total > 100 && !paid", scope)
"""

from __future__ import annotations

from .evaluator import ExpressionEvaluator, compare, evaluate_expression_string
from .lexer import ExpressionLexer, Token
from .model import (
    BinaryExpr,
    Expression,
    ExprType,
    GroupExpr,
    LiteralExpr,
    NameExpr,
    UnaryExpr,
)
from .parser import ExpressionParser
from .translator import (
    evaluate_condition,
    evaluate_expression,
    is_atomic,
    translate_expression,
)

__all__ = [
    "Token",
    "ExpressionLexer",
    "ExpressionParser",
    "ExpressionEvaluator",
    "ExprType",
    "Expression",
    "LiteralExpr",
    "NameExpr",
    "UnaryExpr",
    "BinaryExpr",
    "GroupExpr",
    "compare",
    "evaluate_expression_string",
    "evaluate_expression",
    "evaluate_condition",
    "is_atomic",
    "translate_expression",
]
