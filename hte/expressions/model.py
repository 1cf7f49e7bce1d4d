"""
Модели AST для выражений шаблона.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..values import format_number


class ExprType(Enum):
    """Типы узлов выражения."""
    LITERAL = "literal"
    NAME = "name"
    UNARY = "unary"
    BINARY = "binary"
    GROUP = "group"  # для явной группировки в скобках


# Операторы по группам
COMPARISON_OPERATORS = ("==", "!=", "<", ">", "<=", ">=")
ARITHMETIC_OPERATORS = ("+", "-", "*", "/")


@dataclass
class Expression(ABC):
    """Базовый абстрактный класс для всех узлов выражения."""

    @abstractmethod
    def get_type(self) -> ExprType:
        """Возвращает тип узла."""
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class LiteralExpr(Expression):
    """
    Литерал: строка, число, true/false/null
    или значение, подставленное из области видимости.
    """
    value: Any

    def get_type(self) -> ExprType:
        return ExprType.LITERAL

    def _to_string(self) -> str:
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, (int, float)):
            return format_number(self.value)
        return f'"{self.value}"'


@dataclass
class NameExpr(Expression):
    """Имя, не найденное в области видимости при подстановке."""
    name: str

    def get_type(self) -> ExprType:
        return ExprType.NAME

    def _to_string(self) -> str:
        return self.name


@dataclass
class UnaryExpr(Expression):
    """Унарная операция: !operand или -operand"""
    operator: str
    operand: Expression

    def get_type(self) -> ExprType:
        return ExprType.UNARY

    def _to_string(self) -> str:
        return f"{self.operator}{self.operand}"


@dataclass
class BinaryExpr(Expression):
    """
    Бинарная операция: left op right

    Операторы: && || == != < > <= >= + - * /
    """
    left: Expression
    operator: str
    right: Expression

    def get_type(self) -> ExprType:
        return ExprType.BINARY

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class GroupExpr(Expression):
    """Группа в скобках: (expression)"""
    expression: Expression

    def get_type(self) -> ExprType:
        return ExprType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


__all__ = [
    "ExprType",
    "Expression",
    "LiteralExpr",
    "NameExpr",
    "UnaryExpr",
    "BinaryExpr",
    "GroupExpr",
    "COMPARISON_OPERATORS",
    "ARITHMETIC_OPERATORS",
]
