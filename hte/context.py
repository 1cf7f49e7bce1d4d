"""
Область видимости рендеринга.

Объединяет значения, переданные в render(), глобальные переменные,
записанные директивой SET, и локальные привязки цикла FOR.
Глобальные переменные перекрывают привязки, более поздние слои
привязок перекрывают более ранние.
"""

from __future__ import annotations

import logging
from collections import ChainMap
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

from .values import is_model

logger = logging.getLogger(__name__)


class _Missing:
    """Маркер отсутствующего значения (в отличие от None)."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class GlobalVariables:
    """
    Таблица глобальных переменных одного верхнеуровневого вызова render().

    Сбрасывается на входе в render() (если не запрошено обратное)
    и сохраняется во всех вложенных рендерингах этого вызова.
    """

    def __init__(self) -> None:
        self._vars: Dict[str, Any] = {}

    def reset(self) -> None:
        self._vars.clear()

    def define(self, name: str) -> None:
        """Объявляет переменную со значением None, если её ещё нет."""
        self._vars.setdefault(name, None)

    def assign(self, name: str, value: Any) -> None:
        self._vars[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __getitem__(self, name: str) -> Any:
        return self._vars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._vars)


@dataclass(frozen=True)
class LoopInfo:
    """
    Метаданные итерации цикла FOR (по аналогии с twig: loop.index и т.д.).

    index - счётчик с единицы; 0 означает, что тело цикла не выполнялось.
    """
    index: int
    length: int

    def as_record(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "index0": self.index - 1,
            "length": self.length,
            "first": self.length > 0 and self.index == 1,
            "last": self.length > 0 and self.index == self.length,
        }


class Scope:
    """
    Слоистая область видимости.

    Поиск голых имён регистрозависим; первый сегмент пути
    (имя модели или массива) ищется сначала точно, затем без учёта регистра.
    """

    def __init__(
        self,
        bindings: Optional[Mapping[str, Any]] = None,
        global_vars: Optional[GlobalVariables] = None,
        *,
        _layers: Optional[ChainMap] = None,
    ):
        self.global_vars = global_vars if global_vars is not None else GlobalVariables()
        if _layers is not None:
            self._layers = _layers
        else:
            self._layers = ChainMap(dict(bindings or {}))

    def child(self, overlay: Mapping[str, Any]) -> Scope:
        """Создаёт дочернюю область с дополнительным слоем привязок."""
        return Scope(global_vars=self.global_vars, _layers=self._layers.new_child(dict(overlay)))

    def lookup(self, name: str) -> Any:
        """Точный поиск имени; MISSING, если имени нет."""
        if name in self.global_vars:
            return self.global_vars[name]
        if name in self._layers:
            return self._layers[name]
        return MISSING

    def lookup_head(self, name: str) -> Any:
        """Поиск первого сегмента пути: точный, затем без учёта регистра."""
        value = self.lookup(name)
        if value is not MISSING:
            return value

        folded = name.casefold()
        for key in self.names():
            if key.casefold() == folded:
                return self.lookup(key)
        return MISSING

    def get(self, name: str, default: Any = None) -> Any:
        value = self.lookup(name)
        return default if value is MISSING else value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not MISSING

    def names(self) -> Iterator[str]:
        """Все видимые имена без повторов: сначала глобальные."""
        seen = set()
        for key in list(self.global_vars) + list(self._layers.keys()):
            if key not in seen:
                seen.add(key)
                yield key

    def as_dict(self) -> Dict[str, Any]:
        """Плоский снимок области видимости."""
        merged: Dict[str, Any] = dict(self._layers)
        merged.update(self.global_vars.as_dict())
        return merged


def short_class_name(obj: Any) -> str:
    """Короткое имя класса в нижнем регистре: Customer -> customer."""
    return type(obj).__name__.lower()


def collect_values(params: Optional[Mapping[Any, Any]]) -> Dict[str, Any]:
    """
    Собирает значения для подстановки из параметров render().

    Правила:
    - модели под строковым ключом регистрируются под ключом в нижнем регистре;
    - модели под нестроковым ключом (например, 0) - под коротким именем класса;
    - скаляры, последовательности, записи и None - под исходным строковым ключом;
    - прочие значения с нестроковыми ключами отбрасываются.

    Args:
        params: Параметры рендеринга

    Returns:
        Словарь привязок, модели идут первыми
    """
    models: Dict[str, Any] = {}
    plain: Dict[str, Any] = {}

    for key, value in (params or {}).items():
        if is_model(value):
            name = key.lower() if isinstance(key, str) else short_class_name(value)
            if name in models:
                logger.debug(f"Model binding '{name}' overwrites previous model")
            models[name] = value
        elif isinstance(key, str):
            plain[key] = value
        else:
            logger.debug(f"Dropping value with non-string key {key!r}")

    collected: MutableMapping[str, Any] = dict(models)
    for key, value in plain.items():
        collected.setdefault(key, value)
    return dict(collected)


__all__ = [
    "MISSING",
    "GlobalVariables",
    "LoopInfo",
    "Scope",
    "short_class_name",
    "collect_values",
]
