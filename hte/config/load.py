from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigLoadError
from .model import EngineConfig
from .typed import build_typed

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "hte.yaml"

_yaml = YAML(typ="safe")


def read_yaml_map(path: Path) -> dict:
    """Читает YAML (или JSON) файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {path}")
    return raw


def parse_yaml_map(text: str, origin: str = "<stdin>") -> dict:
    try:
        raw = _yaml.load(text) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {origin}: {e}")
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {origin}")
    return raw


def find_config(start: Path) -> Optional[Path]:
    """Ищет hte.yaml в каталоге start."""
    candidate = start / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def load_config(path: Path) -> EngineConfig:
    """
    Загружает конфигурацию шаблонизатора.

    Пути template_root и aliases разрешаются относительно каталога файла.

    Args:
        path: Путь к hte.yaml

    Returns:
        Проверенная конфигурация

    Raises:
        ConfigLoadError: Файл не найден, некорректный YAML или значения
    """
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")

    cfg = build_typed(EngineConfig, read_yaml_map(path))
    validate_config(cfg)
    logger.debug(f"Loaded config from {path}")
    return resolve_paths(cfg, path.parent)


def config_from_dict(data: Dict[str, Any], base_dir: Optional[Path] = None) -> EngineConfig:
    """Строит конфигурацию из словаря (например, из уже прочитанного YAML)."""
    cfg = build_typed(EngineConfig, data)
    validate_config(cfg)
    return resolve_paths(cfg, base_dir or Path.cwd())


def validate_config(cfg: EngineConfig) -> None:
    if len(cfg.arg_separator) != 1:
        raise ConfigLoadError("must be exactly one character", ("arg_separator",))
    fmt = cfg.formatting
    if len(fmt.decimal_separator) != 1:
        raise ConfigLoadError("must be exactly one character", ("formatting", "decimal_separator"))
    if fmt.thousands_separator == fmt.decimal_separator:
        raise ConfigLoadError(
            "must differ from decimal_separator", ("formatting", "thousands_separator")
        )


def resolve_paths(cfg: EngineConfig, base_dir: Path) -> EngineConfig:
    root = str((base_dir / cfg.template_root).resolve()) if cfg.template_root else None
    aliases = {name: str((base_dir / target).resolve()) for name, target in cfg.aliases.items()}
    return replace(cfg, template_root=root, aliases=aliases)


__all__ = [
    "CONFIG_FILE_NAME",
    "read_yaml_map",
    "parse_yaml_map",
    "find_config",
    "load_config",
    "config_from_dict",
    "validate_config",
    "resolve_paths",
]
