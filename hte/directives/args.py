"""
Разбор стадий конвейера и их аргументов.

Стадия: name или name(arg1<sep>arg2<sep>arg3). Всё после первой "("
обрезается по краям от пробелов, скобок, "," и ";" и делится
настроенным разделителем.
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple

# Символы, срезаемые с краёв строки аргументов
ARG_TRIM_CHARS = "() \r\n\t,;"

MAX_ARGS = 3

DEFAULT_ARG_SEPARATOR = ";"

_QUOTED_RE = re.compile(r'^(?:"([^"]*)"|\'([^\']*)\')$', re.DOTALL)

# /pattern/flags, @pattern@flags, #pattern#flags
_REGEX_RE = re.compile(r'^([/@#])(.*)\1([imsxu]*)$', re.DOTALL)

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,  # строки Python всегда юникодные
}


def split_stage(stage: str) -> Tuple[str, Optional[str]]:
    """
    Делит стадию на имя и сырую строку аргументов.

    Returns:
        (name, raw_args); raw_args равно None, если скобок нет
    """
    name, paren, rest = stage.strip().partition("(")
    if not paren:
        return name.strip(), None
    return name.strip(), rest.strip(ARG_TRIM_CHARS)


def split_args(raw: Optional[str], separator: str = DEFAULT_ARG_SEPARATOR) -> List[str]:
    """
    Делит строку аргументов разделителем; не более MAX_ARGS обрезанных аргументов.

    Разделитель внутри литерала в кавычках аргументы не делит: "a;b"; "-".
    """
    if raw is None:
        return []
    quoted = re.compile(
        r'\s*(?:"[^"]*"|\'[^\']*\')\s*(?=' + re.escape(separator) + r'|$)', re.DOTALL
    )
    args: List[str] = []
    pos = 0
    while True:
        match = quoted.match(raw, pos)
        if match:
            end = match.end()
        else:
            end = raw.find(separator, pos)
            if end < 0:
                end = len(raw)
        args.append(raw[pos:end].strip())
        if end >= len(raw):
            break
        pos = end + len(separator)
    return args[:MAX_ARGS]


def unquote(arg: str) -> Optional[str]:
    """Содержимое литерала в кавычках или None, если аргумент не является литералом."""
    match = _QUOTED_RE.match(arg.strip())
    if not match:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


def literal_or_raw(arg: str) -> str:
    """Литерал в кавычках без кавычек, иначе аргумент как есть."""
    text = unquote(arg)
    return arg if text is None else text


def compile_pattern(text: str) -> Optional[Pattern[str]]:
    """
    Компилирует регулярное выражение вида /pattern/flags.

    Returns:
        Скомпилированный шаблон или None, если текст не похож на регулярное выражение

    Raises:
        re.error: Некорректный шаблон
    """
    match = _REGEX_RE.match(text)
    if not match or not match.group(2):
        return None
    flags = 0
    for flag in match.group(3):
        flags |= _REGEX_FLAGS[flag]
    return re.compile(match.group(2), flags)


def int_arg(value: Optional[str], default: int) -> int:
    """Целочисленный аргумент; пустой или отсутствующий даёт значение по умолчанию."""
    if value is None or value.strip() == "":
        return default
    return int(float(value.strip()))


def str_arg(value: Optional[str], default: str) -> str:
    if value is None or value == "":
        return default
    return literal_or_raw(value)


__all__ = [
    "ARG_TRIM_CHARS",
    "MAX_ARGS",
    "DEFAULT_ARG_SEPARATOR",
    "split_stage",
    "split_args",
    "unquote",
    "literal_or_raw",
    "compile_pattern",
    "int_arg",
    "str_arg",
]
