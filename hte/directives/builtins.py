"""
Built-in pipeline directives.

Each directive receives the directive context, the running value and up to
three positional string arguments, and returns the new running value.
"""

from __future__ import annotations

import html
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..context import Scope
from ..diagnostics import Diagnostics
from ..formatting import DefaultFormatter, Formatter, is_datetime_like
from ..paths import PathResolver, is_path
from ..values import to_text
from .args import compile_pattern, int_arg, literal_or_raw, str_arg, unquote

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

_NEWLINE_RE = re.compile(r"\r\n|\n\r|\n|\r")


@dataclass
class DirectiveContext:
    """Services available to directives while a pipeline runs."""
    scope: Scope
    resolver: PathResolver = field(default_factory=PathResolver)
    formatter: Formatter = field(default_factory=DefaultFormatter)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    clock: Callable[[], float] = time.time


BuiltinDirective = Callable[..., Any]


def _now(ctx: DirectiveContext, value: Any, offset: Optional[str] = None, *_: str) -> int:
    """Current unix timestamp, optionally shifted by offset seconds: now(+7200)."""
    return int(ctx.clock()) + int_arg(offset, 0)


def _today(ctx: DirectiveContext, value: Any, offset_days: Optional[str] = None,
           tier: Optional[str] = None, *_: str) -> str:
    """Formatted current date, optionally shifted by days: today(+14; long)."""
    moment = ctx.clock()
    if offset_days is not None and offset_days.strip():
        moment += SECONDS_PER_DAY * float(offset_days)
    return ctx.formatter.as_date(moment, str_arg(tier, "medium"))


def _date(ctx: DirectiveContext, value: Any, tier: Optional[str] = None, *_: str) -> Any:
    if not is_datetime_like(value):
        return value
    return ctx.formatter.as_date(value, str_arg(tier, "medium"))


def _time(ctx: DirectiveContext, value: Any, tier: Optional[str] = None, *_: str) -> Any:
    if not is_datetime_like(value):
        return value
    return ctx.formatter.as_time(value, str_arg(tier, "short"))


def _datetime(ctx: DirectiveContext, value: Any, date_tier: Optional[str] = None,
              time_tier: Optional[str] = None, separator: Optional[str] = None) -> Any:
    """Date and time joined by separator: now | datetime(short; short)."""
    if not is_datetime_like(value):
        return value
    date_part = ctx.formatter.as_date(value, str_arg(date_tier, "medium"))
    time_part = ctx.formatter.as_time(value, str_arg(time_tier, "short"))
    return date_part + str_arg(separator, " ") + time_part


def _upper(ctx: DirectiveContext, value: Any, *_: str) -> str:
    return to_text(value).upper()


def _lower(ctx: DirectiveContext, value: Any, *_: str) -> str:
    return to_text(value).lower()


def _title(ctx: DirectiveContext, value: Any, *_: str) -> str:
    return to_text(value).title()


def _round(ctx: DirectiveContext, value: Any, decimals: Optional[str] = None, *_: str) -> Any:
    formatted = ctx.formatter.as_decimal(value, int_arg(decimals, 2))
    if formatted is None:
        ctx.diagnostics.add(f"[round] Not a number: {to_text(value)!r}")
        return value
    return formatted


def _escape(ctx: DirectiveContext, value: Any, *_: str) -> str:
    """HTML escaping of < > & " and '."""
    return html.escape(to_text(value), quote=True)


def _nl2br(ctx: DirectiveContext, value: Any, *_: str) -> str:
    return _NEWLINE_RE.sub(lambda match: "<br />" + match.group(0), to_text(value).strip())


def _truncate(ctx: DirectiveContext, value: Any, length: Optional[str] = None,
              suffix: Optional[str] = None, *_: str) -> str:
    text = to_text(value).strip()
    limit = int_arg(length, 20)
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + str_arg(suffix, "...")


def _trim(ctx: DirectiveContext, value: Any, chars: Optional[str] = None, *_: str) -> str:
    text = to_text(value)
    if chars is None or chars == "":
        return text.strip()
    return text.strip(literal_or_raw(chars))


def _concat(ctx: DirectiveContext, value: Any, fragment: Optional[str] = None,
            glue: Optional[str] = None, *_: str) -> Any:
    """
    Appends a quoted literal or a resolved path to the running value.

    Fragments that are neither a literal nor a resolvable name are ignored.
    """
    if fragment is None:
        return value

    text = unquote(fragment)
    if text is None:
        text = _resolve_fragment(ctx, fragment)
    if text is None:
        logger.debug(f"concat: ignoring invalid fragment {fragment!r}")
        return value

    current = to_text(value)
    if not current:
        return text
    return current + str_arg(glue, " ") + text


def _resolve_fragment(ctx: DirectiveContext, fragment: str) -> Optional[str]:
    name = fragment.strip()
    if is_path(name):
        resolved = ctx.resolver.resolve(name, ctx.scope)
    elif name in ctx.scope:
        resolved = ctx.scope.get(name)
    else:
        return None
    return None if resolved is None else to_text(resolved)


def _replace(ctx: DirectiveContext, value: Any, search: Optional[str] = None,
             replacement: Optional[str] = None, *_: str) -> Any:
    """Literal replacement, or regex replacement for /pattern/flags."""
    if search is None or search == "":
        return value
    needle = literal_or_raw(search)
    substitute = "" if replacement is None else literal_or_raw(replacement)
    text = to_text(value)

    pattern = compile_pattern(needle)
    if pattern is not None:
        return pattern.sub(lambda _match: substitute, text)
    return text.replace(needle, substitute)


BUILTINS: Dict[str, BuiltinDirective] = {
    "now": _now,
    "today": _today,
    "date": _date,
    "time": _time,
    "datetime": _datetime,
    "upper": _upper,
    "lower": _lower,
    "title": _title,
    "round": _round,
    "escape": _escape,
    "e": _escape,
    "nl2br": _nl2br,
    "truncate": _truncate,
    "trim": _trim,
    "concat": _concat,
    "replace": _replace,
}


__all__ = ["DirectiveContext", "BuiltinDirective", "BUILTINS", "SECONDS_PER_DAY"]
