"""
Template-source capability.

Loads template text for "@alias/relative/path" references passed to render()
and for {{ import path }} directives. Every resolved path must stay inside
its root (the alias directory or the configured template root).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Tuple

from .errors import TemplateNotFoundError, TemplatePathError, TemplateRootError

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "@"


class TemplateSource(Protocol):
    """Returns raw template text or raises an ImportFault."""

    def load(self, reference: str) -> str:
        """Loads an "@alias/path" reference."""
        ...

    def load_import(self, path: str) -> str:
        """Loads a path relative to the template root."""
        ...


def is_reference(text: str) -> bool:
    return text.startswith(REFERENCE_PREFIX)


def split_reference(reference: str) -> Tuple[str, str]:
    """
    Splits "@alias/rel/path" into ("@alias", "rel/path").

    Raises:
        TemplateRootError: Reference without a path part
    """
    alias, sep, resource = reference.strip().partition("/")
    if not sep or not resource.strip():
        raise TemplateRootError(f"Invalid template reference (expected '@alias/path'): {reference}")
    return alias, resource.strip()


def _ensure_inside_root(path: Path, root: Path) -> None:
    """Security: path must be inside the template root."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        raise TemplatePathError(str(path), str(root))


@dataclass
class FileTemplateSource:
    """
    File-system template source.

    Attributes:
        root: Directory for {{ import }} paths; None disables imports
        aliases: "@name" -> directory for render("@name/...") references
        encoding: Text encoding of template files
    """
    root: Optional[Path] = None
    aliases: Optional[Dict[str, Path]] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.aliases = {
            _normalize_alias(name): Path(path) for name, path in (self.aliases or {}).items()
        }
        if self.root is not None:
            self.root = Path(self.root)

    @classmethod
    def from_mapping(cls, root: Optional[str | Path], aliases: Mapping[str, str | Path]) -> FileTemplateSource:
        return cls(
            root=Path(root) if root is not None else None,
            aliases={name: Path(path) for name, path in aliases.items()},
        )

    def load(self, reference: str) -> str:
        alias, resource = split_reference(reference)
        base = (self.aliases or {}).get(alias)
        if base is None:
            raise TemplateRootError(f"Unknown template alias '{alias}'")
        return self._read(base, resource)

    def load_import(self, path: str) -> str:
        path = path.strip()
        if is_reference(path):
            return self.load(path)
        if self.root is None:
            raise TemplateRootError("Template root is not configured")
        return self._read(self.root, path)

    def _read(self, base: Path, resource: str) -> str:
        if not base.is_dir():
            raise TemplateRootError(f"Template root not found: {base}")
        path = (base / resource).resolve()
        _ensure_inside_root(path, base)
        if not path.is_file():
            raise TemplateNotFoundError(str(path))
        logger.debug(f"Loading template {path}")
        return path.read_text(encoding=self.encoding)


def _normalize_alias(name: str) -> str:
    name = name.strip().rstrip("/")
    return name if name.startswith(REFERENCE_PREFIX) else REFERENCE_PREFIX + name


__all__ = [
    "REFERENCE_PREFIX",
    "TemplateSource",
    "FileTemplateSource",
    "is_reference",
    "split_reference",
]
