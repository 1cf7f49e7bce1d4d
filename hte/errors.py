"""
Exception taxonomy for the templating engine.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from HTEUserError.

Recoverable faults (EvaluationError and its subclasses) are caught by the
renderer per placeholder and turned into diagnostics. ImportFault and
ConfigLoadError indicate misconfiguration and propagate to the caller.

Programming errors and bugs should NOT inherit from HTEUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations


class HTEUserError(Exception):
    """
    Base class for all user-facing errors of the templating engine.

    These errors indicate problems that the user can fix:
    broken expressions, missing templates, invalid configuration, etc.
    """
    pass


class EvaluationError(HTEUserError):
    """Ошибка при вычислении выражения или директивы внутри плейсхолдера."""
    pass


class ExpressionSyntaxError(EvaluationError):
    """Синтаксическая ошибка выражения (лексер или парсер)."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Syntax error at position {position}: {message}")


class DirectiveError(EvaluationError):
    """Директива конвейера завершилась исключением."""

    def __init__(self, directive: str, cause: Exception):
        self.directive = directive
        self.cause = cause
        super().__init__(f"Directive [{directive}] failed: {cause}")


class ImportFault(HTEUserError):
    """Base class for template loading faults (aliases, imports)."""
    pass


class TemplateRootError(ImportFault):
    """Raised when no template root (or alias) is configured for a reference."""
    pass


class TemplatePathError(ImportFault):
    """Raised when a template reference escapes its configured root."""

    def __init__(self, path: str, root: str):
        self.path = path
        self.root = root
        super().__init__(f"Resolved path escapes template root: {path} not under {root}")


class TemplateNotFoundError(ImportFault):
    """Raised when a referenced template file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Template not found: {path}")


class ConfigLoadError(HTEUserError, ValueError):
    """Ошибка типизированной загрузки конфигурации с указанием пути поля."""

    def __init__(self, message: str, path: tuple[str, ...] = ()):
        self.path = path
        prefix = f"{'.'.join(path)}: " if path else ""
        super().__init__(prefix + message)


__all__ = [
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
