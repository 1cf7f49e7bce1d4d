"""
Path resolver for dotted references (order.customer.name, items.0.price).

The leading segment is looked up in the scope (exact, then case-insensitive);
every following segment walks into a record key, a sequence index or a model
attribute. Model attributes are read only through the AttributeAccess
capability. Any miss degrades to None; an exception raised while reading a
segment becomes EvaluationError.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .context import MISSING, Scope
from .errors import EvaluationError
from .values import ValueKind, kind_of

logger = logging.getLogger(__name__)


class AttributeAccess(Protocol):
    """Reads an attribute of an opaque model handle."""

    def get(self, model: Any, name: str) -> Any:
        """Returns the attribute value or MISSING when the model has no such attribute."""
        ...


class ObjectAttributeAccess:
    """
    Default attribute access for plain objects, dataclasses and pydantic models.

    Private names and bound methods are reported as missing, so template text
    can never reach interpreter internals or call code.
    """

    def get(self, model: Any, name: str) -> Any:
        if not name or name.startswith("_"):
            return MISSING
        value = getattr(model, name, MISSING)
        if value is not MISSING and callable(value) and not isinstance(value, type):
            return MISSING
        return value


class PathResolver:
    """Resolves dotted paths against a Scope."""

    def __init__(self, attributes: AttributeAccess | None = None):
        self.attributes: AttributeAccess = attributes or ObjectAttributeAccess()

    def resolve(self, path: str, scope: Scope) -> Any:
        """
        Resolves a dotted path.

        Args:
            path: Dotted reference, e.g. "order.items.0.name"
            scope: Current scope

        Returns:
            Resolved value or None when any step is missing

        Raises:
            EvaluationError: Reading a segment raised an exception
        """
        path = path.strip()
        if not path:
            return None

        # Flat dotted keys ("supplier.name": ...) win over walking the chain
        exact = scope.lookup(path)
        if exact is not MISSING:
            return exact

        head, *rest = path.split(".")
        current = scope.lookup_head(head)
        if current is MISSING:
            logger.debug(f"Path '{path}': head '{head}' not in scope")
            return None

        for segment in rest:
            try:
                current = self.step(current, segment)
            except EvaluationError:
                raise
            except Exception as e:
                raise EvaluationError(f"Cannot read '{segment}' of {type(current).__name__}: {e}") from e
            if current is MISSING:
                logger.debug(f"Path '{path}': segment '{segment}' not found")
                return None
        return current

    def step(self, current: Any, segment: str) -> Any:
        """One step of the walk; MISSING when the segment cannot be followed."""
        kind = kind_of(current)

        if kind is ValueKind.RECORD:
            if segment in current:
                return current[segment]
            if segment.isdigit() and int(segment) in current:
                return current[int(segment)]
            return MISSING

        if kind is ValueKind.SEQUENCE:
            if segment.isdigit() and int(segment) < len(current):
                return current[int(segment)]
            return MISSING

        if kind in (ValueKind.MODEL, ValueKind.DATE):
            return self.attributes.get(current, segment)

        return MISSING


def is_path(name: str) -> bool:
    """True for dotted references like "order.id"."""
    return "." in name.strip(".") if name else False


__all__ = ["AttributeAccess", "ObjectAttributeAccess", "PathResolver", "is_path"]
