"""
Диспетчер конвейера директив.

Конвейер "name | upper | truncate(3)" применяется слева направо
к текущему значению. Порядок разрешения стадии (первое совпадение):
1. имя с точкой - путь, значение дописывается через пробел;
2. имя из области видимости - значение заменяется;
3. встроенная директива;
4. пользовательская директива (value, raw_args);
5. иначе - диагностика "Unsupported directive", значение не меняется.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..errors import DirectiveError, EvaluationError
from ..paths import is_path
from ..values import to_text
from .args import DEFAULT_ARG_SEPARATOR, split_args, split_stage
from .builtins import BUILTINS, DirectiveContext
from .registry import DirectiveRegistry

logger = logging.getLogger(__name__)

PIPE = "|"


class DirectiveDispatcher:
    """Применяет конвейер директив к текущему значению."""

    def __init__(
        self,
        registry: Optional[DirectiveRegistry] = None,
        arg_separator: str = DEFAULT_ARG_SEPARATOR,
    ):
        self.registry = registry or DirectiveRegistry()
        self.arg_separator = arg_separator

    def apply(self, pipeline: str, ctx: DirectiveContext, value: Any = None) -> Any:
        """
        Применяет весь конвейер.

        Args:
            pipeline: Текст директивы, например "order.created | date(short)"
            ctx: Контекст директив (область видимости, форматтер, диагностика)
            value: Начальное значение

        Returns:
            Итоговое значение; None означает отсутствие значения

        Raises:
            DirectiveError: Директива завершилась исключением
        """
        for stage in pipeline.split(PIPE):
            value = self.apply_stage(stage, ctx, value)
        return value

    def apply_stage(self, stage: str, ctx: DirectiveContext, value: Any) -> Any:
        name, raw_args = split_stage(stage)

        if is_path(name):
            resolved = ctx.resolver.resolve(name, ctx.scope)
            logger.debug(f"Stage '{name}': path -> {resolved!r}")
            return append_value(value, resolved)

        if name in ctx.scope:
            logger.debug(f"Stage '{name}': scope value")
            return ctx.scope.get(name)

        builtin = BUILTINS.get(name)
        if builtin is not None:
            args = split_args(raw_args, self.arg_separator)
            return self._invoke(name, lambda: builtin(ctx, value, *args))

        custom = self.registry.get(name)
        if custom is not None:
            return self._invoke(name, lambda: custom(value, raw_args))

        if name:
            ctx.diagnostics.add(f"Unsupported directive [{name}]")
        return value

    @staticmethod
    def _invoke(name: str, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except EvaluationError:
            raise
        except Exception as e:
            raise DirectiveError(name, e) from e


def append_value(current: Any, resolved: Any) -> Any:
    """
    Дописывает значение пути к текущему значению через пробел.

    Пустое текущее значение заменяется разрешённым значением без
    приведения к строке, чтобы последующие стадии (date, round) получили
    исходный тип.
    """
    if resolved is None:
        return current
    if current is None or current == "":
        return resolved
    return (to_text(current) + " " + to_text(resolved)).strip()


__all__ = ["PIPE", "DirectiveDispatcher", "append_value"]
