import textwrap
from pathlib import Path

import pytest

from hte.config import (
    CONFIG_FILE_NAME,
    EngineConfig,
    FormattingConfig,
    build_typed,
    config_from_dict,
    find_config,
    load_config,
    parse_yaml_map,
    read_yaml_map,
)
from hte.errors import ConfigLoadError


def write_cfg(root: Path, text: str) -> Path:
    p = root / CONFIG_FILE_NAME
    p.write_text(textwrap.dedent(text).strip() + "\n", encoding="utf-8")
    return p


def test_build_engine_config_with_nested_formatting():
    raw = {
        "force_replace": "---",
        "arg_separator": ",",
        "log_errors": False,
        "aliases": {"@templates": "tpl"},
        "formatting": {
            "date_formats": {"short": "%Y-%m-%d"},
            "decimal_separator": ",",
            "thousands_separator": " ",
        },
    }
    cfg = build_typed(EngineConfig, raw)
    assert isinstance(cfg, EngineConfig)
    assert cfg.force_replace == "---"
    assert cfg.arg_separator == ","
    assert cfg.log_errors is False
    assert cfg.aliases == {"@templates": "tpl"}
    assert isinstance(cfg.formatting, FormattingConfig)
    assert cfg.formatting.date_formats == {"short": "%Y-%m-%d"}
    assert cfg.formatting.time_formats["short"] == "%H:%M"


def test_defaults():
    cfg = build_typed(EngineConfig, {})
    assert cfg == EngineConfig()
    assert cfg.force_replace is False
    assert cfg.template_root is None


def test_force_replace_accepts_bool_or_string():
    assert build_typed(EngineConfig, {"force_replace": True}).force_replace is True
    assert build_typed(EngineConfig, {"force_replace": "n/a"}).force_replace == "n/a"


def test_unknown_key_in_nested_model_raises():
    with pytest.raises(ConfigLoadError) as ei:
        build_typed(EngineConfig, {"formatting": {"decimal_sep": ","}})
    assert ei.value.path == ("formatting",)
    assert "unexpected keys" in str(ei.value)


def test_bool_is_strict():
    with pytest.raises(ConfigLoadError) as ei:
        build_typed(EngineConfig, {"log_errors": "yes"})
    assert str(ei.value) == "log_errors: expected bool, got str"


def test_wrong_container_type():
    with pytest.raises(ConfigLoadError, match="aliases: expected dict"):
        build_typed(EngineConfig, {"aliases": ["a", "b"]})


class TestValidation:

    def test_arg_separator_must_be_single_char(self):
        with pytest.raises(ConfigLoadError, match="arg_separator: must be exactly one character"):
            config_from_dict({"arg_separator": ";;"})

    def test_separators_must_differ(self):
        with pytest.raises(ConfigLoadError, match="thousands_separator: must differ"):
            config_from_dict({"formatting": {"decimal_separator": ",", "thousands_separator": ","}})

    def test_decimal_separator_single_char(self):
        with pytest.raises(ConfigLoadError, match="decimal_separator"):
            config_from_dict({"formatting": {"decimal_separator": ""}})


class TestLoading:

    def test_load_config_resolves_paths(self, tmp_path: Path):
        path = write_cfg(tmp_path, """
            force_replace: "---"
            template_root: templates
            aliases:
              "@templates": templates/shared
        """)
        cfg = load_config(path)
        assert cfg.force_replace == "---"
        assert cfg.template_root == str((tmp_path / "templates").resolve())
        assert cfg.aliases == {"@templates": str((tmp_path / "templates" / "shared").resolve())}

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("", encoding="utf-8")
        assert load_config(path) == EngineConfig()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigLoadError, match="Config file not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = write_cfg(tmp_path, "force_replace: [")
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_yaml(self, tmp_path: Path):
        path = write_cfg(tmp_path, "- a\n- b")
        with pytest.raises(ConfigLoadError, match="YAML must be a mapping"):
            read_yaml_map(path)

    def test_find_config(self, tmp_path: Path):
        assert find_config(tmp_path) is None
        path = write_cfg(tmp_path, "log_errors: true")
        assert find_config(tmp_path) == path

    def test_parse_yaml_map_reads_json(self):
        assert parse_yaml_map('{"items": [1, 2], "name": "Bob"}') == {"items": [1, 2], "name": "Bob"}


def test_numbers_accepted_where_strings_expected():
    assert build_typed(EngineConfig, {"template_root": 2024}).template_root == "2024"


def test_str_rejects_containers():
    with pytest.raises(ConfigLoadError, match="arg_separator: expected str, got list"):
        build_typed(EngineConfig, {"arg_separator": [";"]})
