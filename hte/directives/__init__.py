from __future__ import annotations

from .args import DEFAULT_ARG_SEPARATOR, compile_pattern, split_args, split_stage, unquote
from .builtins import BUILTINS, DirectiveContext
from .dispatcher import DirectiveDispatcher, append_value
from .registry import CustomDirective, DirectiveRegistry

__all__ = [
    "DEFAULT_ARG_SEPARATOR",
    "BUILTINS",
    "CustomDirective",
    "DirectiveContext",
    "DirectiveDispatcher",
    "DirectiveRegistry",
    "append_value",
    "compile_pattern",
    "split_args",
    "split_stage",
    "unquote",
]
