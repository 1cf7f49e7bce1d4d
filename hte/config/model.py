from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from ..directives.args import DEFAULT_ARG_SEPARATOR
from ..formatting import DEFAULT_DATE_FORMATS, DEFAULT_TIME_FORMATS


@dataclass
class FormattingConfig:
    """Форматы дат/времени по уровням (short, medium, long) и разделители чисел."""
    date_formats: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DATE_FORMATS))
    time_formats: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TIME_FORMATS))
    decimal_separator: str = "."
    thousands_separator: str = ","


@dataclass
class EngineConfig:
    """
    Конфигурация шаблонизатора (hte.yaml).

    force_replace: False - оставлять неразрешённые плейсхолдеры,
                   True - заменять пустой строкой, строка - заменять этой строкой.
    template_root и aliases после загрузки содержат абсолютные пути.
    """
    force_replace: Union[bool, str] = False
    arg_separator: str = DEFAULT_ARG_SEPARATOR
    log_errors: bool = True
    template_root: Optional[str] = None
    aliases: Dict[str, str] = field(default_factory=dict)
    formatting: FormattingConfig = field(default_factory=FormattingConfig)


__all__ = ["EngineConfig", "FormattingConfig"]
