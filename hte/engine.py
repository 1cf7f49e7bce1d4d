"""
Template engine: scanning, evaluation and substitution in one pass.

Usage:
    engine = TemplateEngine(force_replace="---")
    engine.render("Hi {{ name | upper }}", {"name": "Bob"})  # "Hi BOB"
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .blocks import BlockEvaluator
from .config.model import EngineConfig
from .context import GlobalVariables, Scope, collect_values
from .diagnostics import Diagnostics, register_exit_flush
from .directives import DEFAULT_ARG_SEPARATOR, CustomDirective, DirectiveContext, DirectiveDispatcher, DirectiveRegistry
from .errors import EvaluationError, TemplateRootError
from .formatting import DefaultFormatter, Formatter
from .paths import AttributeAccess, PathResolver
from .scanner import BLOCK_CLOSERS, DirectiveKind, Placeholder, PlaceholderScanner
from .sources import FileTemplateSource, TemplateSource, is_reference
from .values import to_text

logger = logging.getLogger(__name__)

ForceReplace = Union[bool, str]


@dataclass
class RenderResources:
    """
    Resources accumulated while rendering.

    Attributes:
        map: Placeholder text -> substituted text
        placeholders: Placeholder text -> directive text
        values: Collected bindings
        source: First top-level template text
    """
    map: Dict[str, str] = field(default_factory=dict)
    placeholders: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None


def force_replacement(policy: ForceReplace) -> Optional[str]:
    """Text for unresolved placeholders: None (keep), "" or a literal."""
    if policy is False:
        return None
    if policy is True:
        return ""
    return str(policy)


class TemplateEngine:
    """
    Renderer.

    An instance is mutable, single-owner state: global variables,
    diagnostics and accumulated resources belong to the current render.
    """

    def __init__(
        self,
        *,
        force_replace: ForceReplace = False,
        arg_separator: str = DEFAULT_ARG_SEPARATOR,
        log_errors: bool = True,
        source: Optional[TemplateSource] = None,
        formatter: Optional[Formatter] = None,
        attributes: Optional[AttributeAccess] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.scanner = PlaceholderScanner()
        self.resolver = PathResolver(attributes)
        self.formatter: Formatter = formatter or DefaultFormatter()
        self.source = source
        self.registry = DirectiveRegistry()
        self.dispatcher = DirectiveDispatcher(self.registry)
        self.diagnostics = Diagnostics(enabled=log_errors)
        self.global_vars = GlobalVariables()
        self.blocks = BlockEvaluator(self)
        self.clock = clock
        self.force_replace: ForceReplace = False
        self._resources = RenderResources()

        self.set_force_replace(force_replace)
        self.set_arg_separator(arg_separator)
        register_exit_flush(self)

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> TemplateEngine:
        """Builds an engine with a file template source and default formatter from config."""
        fmt = cfg.formatting
        formatter = DefaultFormatter(
            date_formats=dict(fmt.date_formats),
            time_formats=dict(fmt.time_formats),
            decimal_separator=fmt.decimal_separator,
            thousands_separator=fmt.thousands_separator,
        )
        source = FileTemplateSource(
            root=Path(cfg.template_root) if cfg.template_root else None,
            aliases={name: Path(path) for name, path in cfg.aliases.items()},
        )
        return cls(
            force_replace=cfg.force_replace,
            arg_separator=cfg.arg_separator,
            log_errors=cfg.log_errors,
            source=source,
            formatter=formatter,
        )

    # -------- configuration (fluent) --------

    @property
    def log_errors(self) -> bool:
        return self.diagnostics.enabled

    @property
    def arg_separator(self) -> str:
        return self.dispatcher.arg_separator

    def set_force_replace(self, replace: ForceReplace) -> TemplateEngine:
        if not isinstance(replace, (bool, str)):
            raise TypeError(f"force_replace must be bool or str, got {type(replace).__name__}")
        self.force_replace = replace
        return self

    def set_arg_separator(self, separator: str) -> TemplateEngine:
        if not isinstance(separator, str) or len(separator) != 1:
            raise ValueError(f"Argument separator must be a single character, got {separator!r}")
        self.dispatcher.arg_separator = separator
        return self

    def set_log_errors(self, log: bool) -> TemplateEngine:
        self.diagnostics.enabled = bool(log)
        return self

    def set_directive(self, name: str, func: CustomDirective) -> TemplateEngine:
        """Registers a custom pipeline directive (value, raw_args) -> value."""
        self.registry.register(name, func)
        return self

    # -------- diagnostics --------

    def get_errors(self) -> List[str]:
        return self.diagnostics.errors

    def clear_errors(self) -> TemplateEngine:
        self.diagnostics.clear()
        return self

    def flush_errors(self) -> int:
        """Logs collected errors to the "hte.template" logger and clears them."""
        return self.diagnostics.flush(self._resources.source)

    def get_resources(self, reset: bool = True) -> RenderResources:
        """
        Returns resources accumulated since the last reset.

        Args:
            reset: Clear resources after returning them
        """
        resources = self._resources
        if reset:
            self._resources = RenderResources()
        return resources

    # -------- rendering --------

    def render(
        self,
        text: str,
        values: Optional[Mapping[Any, Any]] = None,
        reset_globals: bool = True,
    ) -> str:
        """
        Renders a template.

        Args:
            text: Template text or an "@alias/path" reference
            values: Bindings: scalars, sequences, records and model objects
            reset_globals: Clear SET variables before rendering

        Returns:
            Rendered text

        Raises:
            ImportFault: Reference or import cannot be loaded
        """
        if is_reference(text):
            text = self._load_reference(text)

        if self._resources.source is None:
            self._resources.source = text

        if not text:
            return text

        if reset_globals:
            self.global_vars.reset()

        bindings = collect_values(values)
        for key, value in bindings.items():
            self._resources.values.setdefault(key, value)

        return self.render_nested(text, Scope(bindings, self.global_vars))

    def render_nested(self, text: str, scope: Scope) -> str:
        """Renders text in an existing scope without resetting global variables."""
        placeholders = self.scanner.scan(text)
        if not placeholders:
            return text

        parts: List[str] = []
        cursor = 0
        for placeholder in placeholders:
            self._resources.placeholders.setdefault(placeholder.text, placeholder.directive)
            replacement = self._substitute(placeholder, scope)

            parts.append(text[cursor:placeholder.start])
            parts.append(placeholder.text if replacement is None else replacement)
            cursor = placeholder.end

        parts.append(text[cursor:])
        return "".join(parts)

    def _substitute(self, placeholder: Placeholder, scope: Scope) -> Optional[str]:
        """Replacement text for one placeholder or None to keep it verbatim."""
        if not placeholder.closed:
            closer = BLOCK_CLOSERS[placeholder.kind]
            self.diagnostics.add(f"Unclosed block [{placeholder.text}]: missing '{closer}'")
            return None

        value = self._evaluate(placeholder, scope)
        if value is None:
            replacement = force_replacement(self.force_replace)
        else:
            replacement = to_text(value)

        if replacement is not None:
            self._resources.map[placeholder.text] = replacement
        return replacement

    def _evaluate(self, placeholder: Placeholder, scope: Scope) -> Any:
        directive = placeholder.directive
        try:
            if placeholder.kind is DirectiveKind.CONDITIONAL:
                return self.blocks.evaluate_if(directive, scope)
            if placeholder.kind is DirectiveKind.LOOP:
                return self.blocks.evaluate_for(directive, scope)
            if placeholder.kind is DirectiveKind.ASSIGNMENT:
                return self.blocks.evaluate_set(directive, scope)
            if placeholder.kind is DirectiveKind.IMPORT:
                return self.blocks.evaluate_import(directive, scope)

            ctx = DirectiveContext(
                scope=scope,
                resolver=self.resolver,
                formatter=self.formatter,
                diagnostics=self.diagnostics,
                clock=self.clock,
            )
            return self.dispatcher.apply(directive, ctx)
        except EvaluationError as e:
            self.diagnostics.add(f"{e} in directive [{directive}]")
            return None

    def _load_reference(self, reference: str) -> str:
        if self.source is None:
            raise TemplateRootError(f"No template source configured for reference '{reference}'")
        return self.source.load(reference)


__all__ = ["TemplateEngine", "RenderResources", "ForceReplace", "force_replacement"]
