from __future__ import annotations

from .load import CONFIG_FILE_NAME, config_from_dict, find_config, load_config, parse_yaml_map, read_yaml_map
from .model import EngineConfig, FormattingConfig
from .typed import build_typed

__all__ = [
    "CONFIG_FILE_NAME",
    "EngineConfig",
    "FormattingConfig",
    "build_typed",
    "config_from_dict",
    "find_config",
    "load_config",
    "parse_yaml_map",
    "read_yaml_map",
]
