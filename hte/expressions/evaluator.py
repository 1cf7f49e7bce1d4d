"""
Вычислитель выражений шаблона.

Проходит по AST и вычисляет значение над скалярами:
логические операции с коротким замыканием, сравнения
(числовые, если обе стороны - числа, иначе строковые) и арифметика.
"""

from __future__ import annotations

from typing import Any, cast

from ..errors import EvaluationError
from ..values import Number, as_number, is_truthy, to_text
from .model import (
    ARITHMETIC_OPERATORS,
    COMPARISON_OPERATORS,
    BinaryExpr,
    Expression,
    ExprType,
    GroupExpr,
    LiteralExpr,
    NameExpr,
    UnaryExpr,
)
from .parser import ExpressionParser


class ExpressionEvaluator:
    """
    Вычислитель выражений.

    Принимает AST, в котором значения переменных уже подставлены
    литералами, и возвращает итоговое значение.
    """

    def evaluate(self, expression: Expression) -> Any:
        """
        Вычисляет значение выражения.

        Args:
            expression: Корневой узел AST

        Returns:
            bool, число, строку или None

        Raises:
            EvaluationError: Неизвестное имя, нечисловой операнд, деление на ноль
        """
        expr_type = expression.get_type()

        if expr_type == ExprType.LITERAL:
            return cast(LiteralExpr, expression).value
        elif expr_type == ExprType.NAME:
            name = cast(NameExpr, expression).name
            raise EvaluationError(f"Undefined name '{name}'")
        elif expr_type == ExprType.GROUP:
            return self.evaluate(cast(GroupExpr, expression).expression)
        elif expr_type == ExprType.UNARY:
            return self._evaluate_unary(cast(UnaryExpr, expression))
        elif expr_type == ExprType.BINARY:
            return self._evaluate_binary(cast(BinaryExpr, expression))
        else:
            raise EvaluationError(f"Unknown expression type: {expr_type}")

    def _evaluate_unary(self, expression: UnaryExpr) -> Any:
        operand = self.evaluate(expression.operand)
        if expression.operator == "!":
            return not is_truthy(operand)
        return -self._require_number(operand, "-")

    def _evaluate_binary(self, expression: BinaryExpr) -> Any:
        operator = expression.operator

        # Короткое вычисление (short-circuit evaluation)
        if operator == "&&":
            if not is_truthy(self.evaluate(expression.left)):
                return False
            return is_truthy(self.evaluate(expression.right))
        if operator == "||":
            if is_truthy(self.evaluate(expression.left)):
                return True
            return is_truthy(self.evaluate(expression.right))

        left = self.evaluate(expression.left)
        right = self.evaluate(expression.right)

        if operator in COMPARISON_OPERATORS:
            return compare(left, operator, right)
        if operator in ARITHMETIC_OPERATORS:
            return self._arithmetic(left, operator, right)
        raise EvaluationError(f"Unknown operator '{operator}'")

    def _arithmetic(self, left: Any, operator: str, right: Any) -> Number:
        a = self._require_number(left, operator)
        b = self._require_number(right, operator)
        if operator == "+":
            return a + b
        if operator == "-":
            return a - b
        if operator == "*":
            return a * b
        if b == 0:
            raise EvaluationError("Division by zero")
        return a / b

    @staticmethod
    def _require_number(value: Any, operator: str) -> Number:
        number = as_number(value)
        if number is None:
            raise EvaluationError(f"Unsupported operand for '{operator}': {value!r}")
        return number


def compare(left: Any, operator: str, right: Any) -> bool:
    """
    Сравнение двух значений.

    Правила:
    - обе стороны числовые: числовое сравнение;
    - одна из сторон bool или null: сравнение истинности;
    - иначе: порядковое сравнение строк.
    """
    a_num, b_num = as_number(left), as_number(right)
    if a_num is not None and b_num is not None and not (
        isinstance(left, bool) or isinstance(right, bool)
    ):
        a, b = a_num, b_num
    elif left is None or right is None or isinstance(left, bool) or isinstance(right, bool):
        a, b = is_truthy(left), is_truthy(right)
    else:
        a, b = to_text(left), to_text(right)

    if operator == "==":
        return a == b
    if operator == "!=":
        return a != b
    if operator == "<":
        return a < b
    if operator == ">":
        return a > b
    if operator == "<=":
        return a <= b
    if operator == ">=":
        return a >= b
    raise EvaluationError(f"Unknown comparison operator '{operator}'")


def evaluate_expression_string(expression_str: str) -> Any:
    """
    Удобная функция для вычисления выражения из строки без переменных.

    Raises:
        ExpressionSyntaxError: При ошибке парсинга
        EvaluationError: При ошибке вычисления
    """
    parser = ExpressionParser()
    ast = parser.parse(expression_str)
    return ExpressionEvaluator().evaluate(ast)


__all__ = ["ExpressionEvaluator", "compare", "evaluate_expression_string"]
