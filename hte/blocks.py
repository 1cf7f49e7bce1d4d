"""
Block evaluators: IF/ELSEIF/ELSE, FOR/ELSEFOR, SET and IMPORT.

Block bodies are rendered recursively through the host renderer without
resetting global variables. A None result means "no value": the renderer
keeps the placeholder or applies the force-replace policy.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from .context import LoopInfo, Scope
from .diagnostics import Diagnostics
from .directives.args import literal_or_raw
from .errors import EvaluationError, TemplateRootError
from .expressions import evaluate_condition, evaluate_expression, translate_expression
from .paths import PathResolver
from .scanner import DirectiveKind, Tag, classify, iter_tags
from .sources import TemplateSource

logger = logging.getLogger(__name__)

_FOR_HEADER_RE = re.compile(r'^for\s+([^\W\d]\w*)\s+in\s+(\S+)$', re.IGNORECASE)


class RenderHost(Protocol):
    """Renderer services used by block evaluators."""
    resolver: PathResolver
    diagnostics: Diagnostics
    source: Optional[TemplateSource]

    def render_nested(self, text: str, scope: Scope) -> str:
        ...


@dataclass(frozen=True)
class Branch:
    """
    One branch of a block.

    Attributes:
        keyword: Keyword that opened the branch (if, elseif, else, for, elsefor)
        condition: Branch condition or header; None for else/elsefor
        body: Raw body text between the branch tag and the next boundary
    """
    keyword: str
    condition: Optional[str]
    body: str


def strip_keyword(inner: str, keyword: str) -> str:
    """Removes a leading keyword (case-insensitive) from tag content."""
    if inner[:len(keyword)].lower() == keyword:
        return inner[len(keyword):].strip()
    return inner.strip()


def split_branches(directive: str, kind: DirectiveKind, separators: tuple, closer: str) -> List[Branch]:
    """
    Splits block text into branches at depth zero.

    Nested blocks of the same kind are skipped as a whole, so their
    own separators and closers do not split the outer block.

    Args:
        directive: Full block text, delimiters included
        kind: Kind of the block
        separators: Branch keywords of the block (elseif, else / elsefor)
        closer: Closing keyword (endif / endfor)

    Returns:
        Branches in order of appearance
    """
    tags = list(iter_tags(directive))
    if not tags:
        return []

    opener: Tag = tags[0]
    branches: List[Branch] = []
    keyword = opener.keyword
    condition: Optional[str] = strip_keyword(opener.inner, keyword)
    body_start = opener.end
    depth = 0

    for tag in tags[1:]:
        if classify(tag.inner) is kind:
            depth += 1
            continue
        if depth > 0:
            if tag.keyword == closer:
                depth -= 1
            continue
        if tag.keyword not in separators and tag.keyword != closer:
            continue

        branches.append(Branch(keyword, condition, directive[body_start:tag.start]))
        if tag.keyword == closer:
            return branches

        keyword = tag.keyword
        condition = strip_keyword(tag.inner, keyword) or None
        body_start = tag.end

    branches.append(Branch(keyword, condition, directive[body_start:]))
    return branches


def loop_items(value: Any) -> List[Any]:
    """Items of a FOR collection; absent values, strings and non-iterables give no items."""
    if value is None or isinstance(value, (str, bytes)):
        return []
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, Iterable):
        return list(value)
    return []


class BlockEvaluator:
    """Evaluates block and assignment directives against a scope."""

    def __init__(self, host: RenderHost):
        self.host = host

    def evaluate_if(self, directive: str, scope: Scope) -> Optional[str]:
        """
        Renders the first branch whose condition holds.

        Returns:
            Rendered branch, "" when nothing holds, None on an evaluation fault
        """
        branches = split_branches(directive, DirectiveKind.CONDITIONAL, ("elseif", "else"), "endif")

        for branch in branches:
            if branch.condition is not None:
                try:
                    holds = evaluate_condition(branch.condition, scope, self.host.resolver)
                except EvaluationError as e:
                    translated = translate_expression(branch.condition, scope, self.host.resolver)
                    self.host.diagnostics.add(
                        f"[if] {e} in expression [{translated}].\nFull directive:\n{directive}\n"
                    )
                    return None
                if not holds:
                    continue
            logger.debug(f"IF: branch '{branch.keyword}' selected")
            return self.host.render_nested(branch.body.strip(), scope)

        return ""

    def evaluate_for(self, directive: str, scope: Scope) -> Optional[str]:
        """
        Renders the loop body once per item with loop metadata bound.

        Returns:
            Rendered iterations joined by newlines and trimmed, the ELSEFOR body
            for an empty collection, None for an invalid header
        """
        branches = split_branches(directive, DirectiveKind.LOOP, ("elsefor",), "endfor")
        header = "for " + (branches[0].condition or "") if branches else directive
        match = _FOR_HEADER_RE.match(header.strip())
        if not match:
            self.host.diagnostics.add(f"[for] Invalid loop header [{header.strip()}]")
            return None

        var_name, collection = match.group(1), match.group(2)
        body = branches[0].body.strip()
        else_body = next((b.body.strip() for b in branches[1:] if b.keyword == "elsefor"), "")

        items = loop_items(self.host.resolver.resolve(collection, scope))
        count = len(items)
        logger.debug(f"FOR {var_name} in {collection}: {count} items")

        if not items:
            if not else_body:
                return ""
            child = scope.child({"loop": LoopInfo(index=0, length=0).as_record()})
            return self.host.render_nested(else_body, child)

        rendered: List[str] = []
        for index, item in enumerate(items, start=1):
            child = scope.child({
                var_name: item,
                "loop": LoopInfo(index=index, length=count).as_record(),
            })
            rendered.append(self.host.render_nested(body, child))
        return "\n".join(rendered).strip()

    def evaluate_set(self, directive: str, scope: Scope) -> Optional[str]:
        """
        Assigns an expression result to a global variable.

        Returns:
            "" on success, None on an invalid name or evaluation fault
        """
        name, eq, expression = strip_keyword(directive.strip(), "set").partition("=")
        name = name.strip()

        if not eq or not expression.strip():
            self.host.diagnostics.add(f"[set] Missing expression in [{directive}]")
            return ""
        if not name.isidentifier():
            self.host.diagnostics.add(f"[set] Invalid variable name [{name}] in [{directive}]")
            return None

        # Self-reference on first definition resolves to None
        scope.global_vars.define(name)
        try:
            value = evaluate_expression(expression, scope, self.host.resolver)
        except EvaluationError as e:
            translated = translate_expression(expression, scope, self.host.resolver)
            self.host.diagnostics.add(
                f"[set] {e} in expression [{translated}].\nFull directive:\n{directive}\n"
            )
            return None

        scope.global_vars.assign(name, value)
        logger.debug(f"SET {name} = {value!r}")
        return ""

    def evaluate_import(self, directive: str, scope: Scope) -> str:
        """
        Loads a template through the template source and renders it in the current scope.

        Raises:
            ImportFault: No source configured, path escapes root, file not found
        """
        path = literal_or_raw(strip_keyword(directive.strip(), "import"))
        if self.host.source is None:
            raise TemplateRootError("Template root is not configured")
        text = self.host.source.load_import(path)
        return self.host.render_nested(text, scope)


__all__ = [
    "Branch",
    "BlockEvaluator",
    "RenderHost",
    "loop_items",
    "split_branches",
    "strip_keyword",
]
