"""
Модель значений шаблонизатора.

Значения представлены нативными объектами Python; модуль классифицирует их
по видам (null, bool, число, строка, последовательность, запись, дата,
непрозрачная модель) и реализует единые правила преобразования в текст,
в число и в логическое значение.
"""

from __future__ import annotations

import datetime as _dt
import numbers
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

Number = Union[int, float]

# Десятичный литерал: целое, дробное, экспонента
_NUMERIC_RE = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')

# Ведущий ноль, за которым идут ещё цифры: "00123", "012" остаются строками
_LEADING_ZERO_RE = re.compile(r'^[+-]?0\d')


class ValueKind(Enum):
    """Виды значений в области видимости и результатах выражений."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    DATE = "date"
    SEQUENCE = "sequence"
    RECORD = "record"
    MODEL = "model"


def kind_of(value: Any) -> ValueKind:
    """Определяет вид значения."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if is_number(value):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (_dt.date, _dt.datetime)):
        return ValueKind.DATE
    if isinstance(value, Mapping):
        return ValueKind.RECORD
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return ValueKind.SEQUENCE
    return ValueKind.MODEL


def is_number(value: Any) -> bool:
    """True для чисел, кроме bool, включая Decimal и Fraction."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def is_model(value: Any) -> bool:
    return kind_of(value) is ValueKind.MODEL


def is_numeric_string(text: str) -> bool:
    """
    Проверяет, является ли строка числом.

    Строки с ведущим нулём и последующими цифрами ("00123") числами
    не считаются, чтобы сохранить коды вроде переменного символа платежа.
    """
    text = text.strip()
    if not text or not _NUMERIC_RE.match(text):
        return False
    return not _LEADING_ZERO_RE.match(text)


def parse_number(text: str) -> Number:
    """Преобразует числовую строку в int или float."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def as_number(value: Any) -> Optional[Number]:
    """
    Возвращает числовое представление значения или None.

    Args:
        value: Произвольное значение

    Returns:
        int/float для чисел, bool и числовых строк, иначе None
    """
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return value
    if is_number(value):
        return plain_number(value)
    if isinstance(value, str) and is_numeric_string(value):
        return parse_number(value)
    return None


def plain_number(value: Any) -> Number:
    """Приводит Decimal, Fraction и прочие Real к int или float."""
    if isinstance(value, Decimal) and not value.is_finite():
        return float(value)
    if value == int(value):
        return int(value)
    return float(value)


def format_number(value: Number) -> str:
    """Целые float выводятся без дробной части: 5.0 -> "5"."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return str(value)


def to_text(value: Any) -> str:
    """
    Преобразует значение в текст для подстановки в документ.

    None -> "", True -> "1", False -> "", числа без лишней дробной части.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (int, float)):
        return format_number(value)
    if is_number(value):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(item) for item in value)
    return str(value)


def is_truthy(value: Any) -> bool:
    """
    Истинность значения.

    Ложны: None, False, 0, 0.0, "", "0" и пустые контейнеры.
    Непрозрачные модели всегда истинны.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value not in ("", "0")
    if isinstance(value, (Mapping, Sequence)):
        return len(value) > 0
    return True


__all__ = [
    "Number",
    "ValueKind",
    "kind_of",
    "is_number",
    "is_model",
    "is_numeric_string",
    "parse_number",
    "plain_number",
    "as_number",
    "format_number",
    "to_text",
    "is_truthy",
]
