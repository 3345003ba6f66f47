"""Tests for generator configuration loading and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_typegen.codegen.core.config import (
    EXAMPLE_TYPESCRIPT_CONFIG,
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
    normalize_keys,
)
from openapi_typegen.codegen.languages.typescript import SchemaTypeOptions, coerce_options


def _write_config(tmp_path: Path, data: object, name: str = "typegen.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults() -> None:
    config = load_config()

    assert config == GeneratorConfig()
    assert config.indent_size == 2
    assert config.add_comments is True
    assert config.schema_type_options() == SchemaTypeOptions()


def test_custom_overrides_accept_camel_case() -> None:
    config = load_config(custom_config={"indentSize": 4, "preferUnknownOverAny": True})

    assert config.indent_size == 4
    assert config.prefer_unknown_over_any is True
    assert config.schema_type_options().prefer_unknown_over_any is True


def test_config_file_is_merged_under_overrides(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {
            "headerComment": "Generated",
            "preferInterfaceOverType": True,
            "indentSize": 4,
            "emitEnums": True,
        },
    )

    config = load_config(custom_config={"indent_size": 3}, config_file=path)

    assert config.header_comment == "Generated"
    assert config.prefer_interface_over_type is True
    assert config.indent_size == 3
    assert config.custom == {"emitEnums": True}


def test_loading_does_not_change_defaults() -> None:
    load_config(custom_config={"add_comments": False})

    assert load_config().add_comments is True


@pytest.mark.parametrize(
    ("name", "content", "message"),
    [
        ("settings.yaml", "{}", "must be JSON"),
        ("broken.json", "{not json", "Invalid JSON in configuration file"),
        ("list.json", "[1, 2]", "must contain a JSON object"),
    ],
)
def test_bad_config_files(tmp_path: Path, name: str, content: str, message: str) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(config_file=path)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Configuration file not found"):
        load_config(config_file=tmp_path / "absent.json")


@pytest.mark.parametrize(
    "overrides",
    [
        {"add_comments": "yes"},
        {"preferUnknownOverAny": 1},
        {"indent_size": -1},
        {"indent_size": True},
        {"indent_size": "2"},
        {"header_comment": 5},
        {"custom": []},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        load_config(custom_config=overrides)


def test_save_and_reload(tmp_path: Path) -> None:
    manager = ConfigManager()
    config = manager.get_config(
        custom_config={"header_comment": "Header", "indent_size": 4, "emitEnums": False}
    )
    path = tmp_path / "saved.json"

    manager.save_config(config, path)
    saved = json.loads(path.read_text(encoding="utf-8"))

    assert saved["header_comment"] == "Header"
    assert saved["emitEnums"] is False
    assert "custom" not in saved
    assert manager.get_config(config_file=path) == config


def test_validate_config_warnings() -> None:
    manager = ConfigManager()

    assert manager.validate_config(GeneratorConfig()) == []
    assert manager.validate_config(GeneratorConfig(indent_size=0)) == [
        "indent_size is 0, nested objects will not be indented"
    ]
    assert manager.validate_config(GeneratorConfig(indent_size=12)) == [
        "Unusually large indent_size: 12"
    ]
    assert manager.validate_config(GeneratorConfig(custom={"b": 1, "a": 2})) == [
        "Unknown configuration keys ignored: a, b"
    ]


def test_list_languages() -> None:
    assert ConfigManager().list_languages() == ["typescript"]


def test_normalize_keys() -> None:
    assert normalize_keys({"outputFile": "x.ts", "indent_size": 2}) == {
        "output_file": "x.ts",
        "indent_size": 2,
    }


def test_schema_type_options_mapping() -> None:
    options = SchemaTypeOptions.from_dict(
        {"preferUnknownOverAny": True, "prefer_interface_over_type": False}
    )

    assert options == SchemaTypeOptions(prefer_unknown_over_any=True)
    assert options.to_dict() == {
        "preferUnknownOverAny": True,
        "preferInterfaceOverType": False,
    }


def test_schema_type_options_reject_bad_values() -> None:
    with pytest.raises(ConfigError, match="must be a boolean"):
        SchemaTypeOptions.from_dict({"preferUnknownOverAny": "true"})
    with pytest.raises(ConfigError, match="must be a mapping"):
        coerce_options(["preferUnknownOverAny"])


def test_coerce_options_passes_instances_through() -> None:
    options = SchemaTypeOptions(prefer_interface_over_type=True)

    assert coerce_options(options) is options
    assert coerce_options(None) == SchemaTypeOptions()


def test_example_settings_file_loads(tmp_path: Path) -> None:
    path = _write_config(tmp_path, EXAMPLE_TYPESCRIPT_CONFIG)

    config = load_config(config_file=path)

    assert config.header_comment == EXAMPLE_TYPESCRIPT_CONFIG["headerComment"]
    assert config.prefer_unknown_over_any is True
    assert config.custom == {}
