"""
Реестр пользовательских директив конвейера.

Пользовательская директива - вызываемый объект (value, raw_args) -> value,
где raw_args - сырая строка аргументов из скобок (или None).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, Optional

from .builtins import BUILTINS

logger = logging.getLogger(__name__)

CustomDirective = Callable[[Any, Optional[str]], Any]


class DirectiveRegistry:
    """
    Реестр пользовательских директив.

    Встроенные директивы имеют приоритет при диспетчеризации, поэтому
    регистрация под встроенным именем допускается, но не даёт эффекта.
    """

    def __init__(self):
        self._directives: Dict[str, CustomDirective] = {}

    def register(self, name: str, func: CustomDirective) -> None:
        """
        Регистрирует директиву.

        Args:
            name: Имя директивы в конвейере
            func: Вызываемый объект (value, raw_args) -> value

        Raises:
            ValueError: Пустое имя или невызываемый объект
        """
        name = name.strip()
        if not name:
            raise ValueError("Directive name must not be empty")
        if not callable(func):
            raise ValueError(f"Directive '{name}' is not callable")

        if name in BUILTINS:
            logger.warning(f"Directive '{name}' is shadowed by the built-in directive")
        if name in self._directives:
            logger.warning(f"Directive '{name}' overwrites existing directive")
        self._directives[name] = func

    def get(self, name: str) -> Optional[CustomDirective]:
        return self._directives.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._directives

    def __iter__(self) -> Iterator[str]:
        return iter(self._directives)

    def names(self) -> list[str]:
        return sorted(self._directives)


__all__ = ["CustomDirective", "DirectiveRegistry"]
