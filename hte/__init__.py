from __future__ import annotations

from .config import EngineConfig, load_config
from .engine import RenderResources, TemplateEngine
from .errors import (
    ConfigLoadError,
    DirectiveError,
    EvaluationError,
    ExpressionSyntaxError,
    HTEUserError,
    ImportFault,
    TemplateNotFoundError,
    TemplatePathError,
    TemplateRootError,
)
from .formatting import DefaultFormatter
from .sources import FileTemplateSource

__all__ = [
    "TemplateEngine",
    "RenderResources",
    "EngineConfig",
    "load_config",
    "DefaultFormatter",
    "FileTemplateSource",
    "HTEUserError",
    "EvaluationError",
    "ExpressionSyntaxError",
    "DirectiveError",
    "ImportFault",
    "TemplateRootError",
    "TemplatePathError",
    "TemplateNotFoundError",
    "ConfigLoadError",
]
