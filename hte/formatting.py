"""
Formatting capability: dates, times and decimal numbers.

Format tiers (short, medium, long) map to strftime patterns; a tier name
that is not configured but contains "%" is used as a pattern directly.
"""

from __future__ import annotations

import datetime as _dt
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from .values import Number, as_number, is_number, is_numeric_string

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMATS: Dict[str, str] = {
    "short": "%d.%m.%Y",
    "medium": "%b %d, %Y",
    "long": "%B %d, %Y",
}

DEFAULT_TIME_FORMATS: Dict[str, str] = {
    "short": "%H:%M",
    "medium": "%H:%M:%S",
    "long": "%H:%M:%S %z",
}

# Formats tried after ISO 8601
_DATE_PATTERNS = (
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
)

_DIGIT_RE = re.compile(r"\d")


class Formatter(Protocol):
    """Formatting capability used by date, time and round directives."""

    def to_datetime(self, value: Any) -> Optional[_dt.datetime]:
        ...

    def as_date(self, value: Any, tier: str = "medium") -> str:
        ...

    def as_time(self, value: Any, tier: str = "short") -> str:
        ...

    def as_decimal(self, value: Any, decimals: int = 2) -> Optional[str]:
        ...


def is_datetime_like(value: Any) -> bool:
    """
    Recognises timestamps, date objects and date strings.

    A date string must contain at least one digit, so placeholders such as
    "......" or a bare month name are never treated as dates.
    """
    if not value or isinstance(value, bool):
        return False
    if isinstance(value, (_dt.date, _dt.datetime)) or is_number(value):
        return True
    if not isinstance(value, str) or not _DIGIT_RE.search(value):
        return False
    return is_numeric_string(value) or parse_date_string(value) is not None


def parse_date_string(text: str) -> Optional[_dt.datetime]:
    """Parses ISO 8601 and a few common day-first formats; None if nothing matches."""
    text = text.strip()
    try:
        return _dt.datetime.fromisoformat(text)
    except ValueError:
        pass
    for pattern in _DATE_PATTERNS:
        try:
            return _dt.datetime.strptime(text, pattern)
        except ValueError:
            continue
    return None


@dataclass
class DefaultFormatter:
    """strftime-based formatter with configurable tiers and number separators."""
    date_formats: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DATE_FORMATS))
    time_formats: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TIME_FORMATS))
    decimal_separator: str = "."
    thousands_separator: str = ","

    def to_datetime(self, value: Any) -> Optional[_dt.datetime]:
        if isinstance(value, _dt.datetime):
            return value
        if isinstance(value, _dt.date):
            return _dt.datetime(value.year, value.month, value.day)
        if isinstance(value, bool):
            return None
        number = as_number(value)
        if number is not None:
            return _dt.datetime.fromtimestamp(number)
        if isinstance(value, str):
            return parse_date_string(value)
        return None

    def as_date(self, value: Any, tier: str = "medium") -> str:
        return self._format(value, self.date_formats, tier)

    def as_time(self, value: Any, tier: str = "short") -> str:
        return self._format(value, self.time_formats, tier)

    def as_decimal(self, value: Any, decimals: int = 2) -> Optional[str]:
        """
        Formats a number with fixed decimals and the configured separators.

        Returns None when the value cannot be read as a number.
        """
        number = self.normalize_number(value)
        if number is None:
            return None
        text = f"{number:,.{decimals}f}"
        return (
            text.replace(",", "\x00")
            .replace(".", self.decimal_separator)
            .replace("\x00", self.thousands_separator)
        )

    def normalize_number(self, value: Any) -> Optional[Number]:
        """Reads numbers written with the configured (or a comma) decimal separator."""
        if value is None or isinstance(value, bool):
            return None
        if is_number(value):
            return as_number(value)
        text = str(value).strip().replace(" ", "").replace("\u00a0", "")
        if self.thousands_separator and self.thousands_separator != self.decimal_separator:
            text = text.replace(self.thousands_separator, "")
        text = text.replace(self.decimal_separator, ".")
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            return float(text)
        except ValueError:
            return None

    def _format(self, value: Any, formats: Dict[str, str], tier: str) -> str:
        moment = self.to_datetime(value)
        if moment is None:
            raise ValueError(f"Not a date or time value: {value!r}")
        pattern = formats.get(tier)
        if pattern is None:
            if "%" not in tier:
                raise ValueError(f"Unknown format tier '{tier}'")
            pattern = tier
        return moment.strftime(pattern)


__all__ = [
    "Formatter",
    "DefaultFormatter",
    "DEFAULT_DATE_FORMATS",
    "DEFAULT_TIME_FORMATS",
    "is_datetime_like",
    "parse_date_string",
]
