"""
Diagnostics sink.

Recoverable faults (expression errors, unsupported directives, unclosed
blocks) are collected in memory and flushed to the "hte.template" logger
on request or once at interpreter exit.
"""

from __future__ import annotations

import atexit
import logging
import weakref
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

TEMPLATE_LOGGER = "hte.template"
_PREVIEW_LENGTH = 70


class Diagnostics:
    """In-memory list of recoverable faults."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._errors: List[str] = []

    def add(self, message: str) -> None:
        logger.debug(f"Diagnostic: {message}")
        if self.enabled:
            self._errors.append(message)

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    @property
    def count(self) -> int:
        return len(self._errors)

    def clear(self) -> None:
        self._errors.clear()

    def flush(self, source: Optional[str] = None) -> int:
        """
        Logs collected errors as one ERROR record and clears the list.

        Args:
            source: Retained template text, previewed in the message

        Returns:
            Number of flushed errors
        """
        if not self._errors:
            return 0
        count = len(self._errors)
        logging.getLogger(TEMPLATE_LOGGER).error(
            f"Found {count} errors while processing template [{preview(source or '')}]:\n"
            + "\n".join(self._errors)
        )
        self._errors.clear()
        return count


def preview(text: str, length: int = _PREVIEW_LENGTH) -> str:
    return text if len(text) <= length else text[:length] + "..."


# Engines flushed at interpreter exit (weak references)
_EXIT_FLUSH: weakref.WeakSet = weakref.WeakSet()


def register_exit_flush(engine: Any) -> None:
    """Flushes the engine's diagnostics at interpreter exit."""
    _EXIT_FLUSH.add(engine)


@atexit.register
def flush_at_exit() -> int:
    """Flushes every live registered engine; returns the number of flushed errors."""
    total = 0
    for engine in list(_EXIT_FLUSH):
        if engine.log_errors:
            total += engine.flush_errors()
    return total


__all__ = ["Diagnostics", "TEMPLATE_LOGGER", "preview", "register_exit_flush", "flush_at_exit"]
