from __future__ import annotations

import dataclasses
import types
import typing as t
from dataclasses import fields, is_dataclass

from ..errors import ConfigLoadError

_T = t.TypeVar("_T")

_UNION_ORIGINS = (t.Union, types.UnionType)


def build_typed(cls: type[_T], data: t.Any) -> _T:
    """
    Построить типизированный dataclass-объект,
    рекурсивно приводя вложенные структуры согласно type hints.

    Raises:
        ConfigLoadError: С указанием пути к полю, на котором произошла ошибка
    """
    try:
        return t.cast(_T, _coerce_to_class(cls, data, path=()))
    except ConfigLoadError:
        raise
    except Exception as e:
        raise ConfigLoadError(f"failed to build {getattr(cls, '__name__', str(cls))}: {e}") from e


def _coerce_to_class(cls: type, data: t.Any, path: tuple[str, ...]):
    if is_dataclass(cls):
        if not isinstance(data, dict):
            raise ConfigLoadError(f"expected mapping for {cls.__name__}, got {type(data).__name__}", path)
        # строгая проверка лишних ключей
        allowed = {f.name for f in fields(cls)}
        extras = set(data.keys()) - allowed
        if extras:
            raise ConfigLoadError(f"unexpected keys: {sorted(extras)!r}", path)

        # аннотации модулей с `from __future__ import annotations` - строки
        hints = t.get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            f_path = (*path, f.name)
            if f.name in data:
                kwargs[f.name] = coerce(data[f.name], hints.get(f.name, t.Any), f_path)
            elif f.default is not dataclasses.MISSING:
                kwargs[f.name] = f.default
            elif f.default_factory is not dataclasses.MISSING:
                kwargs[f.name] = f.default_factory()
            else:
                raise ConfigLoadError("required field missing", f_path)
        return cls(**kwargs)

    raise ConfigLoadError(f"unsupported config type {getattr(cls, '__name__', str(cls))}", path)


def coerce(value: t.Any, hint: t.Any, path: tuple[str, ...]) -> t.Any:
    """Рекурсивная нормализация согласно типу-подсказке."""
    origin = t.get_origin(hint)
    args = t.get_args(hint)

    if hint is t.Any or hint is None:
        return value

    # Optional[T] / Union[…] / T | None
    if origin in _UNION_ORIGINS:
        if value is None and type(None) in args:
            return None
        last_err: Exception | None = None
        for option in args:
            if option is type(None):
                continue
            try:
                return coerce(value, option, path)
            except Exception as e:
                last_err = e
        raise last_err if last_err else ConfigLoadError("union alternatives exhausted", path)

    # bool строгий: "yes" или "---" не становятся True
    if hint is bool:
        if isinstance(value, bool):
            return value
        raise ConfigLoadError(f"expected bool, got {type(value).__name__}", path)

    # Числа из YAML допустимы там, где ждут строку: arg_separator: 1
    if hint is str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ConfigLoadError(f"expected str, got {type(value).__name__}", path)

    if origin is dict:
        k_t, v_t = args or (t.Any, t.Any)
        if not isinstance(value, dict):
            raise ConfigLoadError(f"expected dict, got {type(value).__name__}", path)
        out = {}
        for k, v in value.items():
            kk = coerce(k, k_t, (*path, "<key>"))
            out[kk] = coerce(v, v_t, (*path, str(kk)))
        return out

    # Вложенные dataclass
    if isinstance(hint, type):
        return _coerce_to_class(hint, value, path)

    return value


__all__ = ["build_typed", "coerce"]
