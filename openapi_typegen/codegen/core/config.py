"""
Generator settings.

Settings are merged in three layers: built-in language defaults, an
optional JSON settings file, then explicit overrides (usually the command
line). Keys may be written in snake_case or in the camelCase used by
JavaScript tooling.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Settings could not be loaded or hold an invalid value."""

    pass


# camelCase keys accepted in settings files and option mappings
CONFIG_ALIASES = {
    "outputFile": "output_file",
    "headerComment": "header_comment",
    "indentSize": "indent_size",
    "addComments": "add_comments",
    "preferUnknownOverAny": "prefer_unknown_over_any",
    "preferInterfaceOverType": "prefer_interface_over_type",
}


@dataclass
class GeneratorConfig:
    """Settings shared by every generator."""

    output_file: Optional[str] = None
    header_comment: Optional[str] = None

    # Layout
    indent_size: int = 2
    add_comments: bool = True

    # Declaration rendering
    prefer_unknown_over_any: bool = False
    prefer_interface_over_type: bool = False

    # Keys no generator understands, kept for reporting
    custom: Dict[str, Any] = field(default_factory=dict)

    def schema_type_options(self):
        """Return the per-declaration rendering options for this config."""
        from ..languages.typescript.config import SchemaTypeOptions

        return SchemaTypeOptions(
            prefer_unknown_over_any=self.prefer_unknown_over_any,
            prefer_interface_over_type=self.prefer_interface_over_type,
        )


LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "typescript": {
        "indent_size": 2,
        "add_comments": True,
        "prefer_unknown_over_any": False,
        "prefer_interface_over_type": False,
    },
}

_BOOL_FIELDS = {"add_comments", "prefer_unknown_over_any", "prefer_interface_over_type"}
_OPTIONAL_STR_FIELDS = {"output_file", "header_comment"}


class ConfigManager:
    """Builds GeneratorConfig objects from defaults, files and overrides."""

    def __init__(self):
        self._defaults = {
            language: dict(values) for language, values in LANGUAGE_DEFAULTS.items()
        }

    def get_config(
        self,
        language: str = "typescript",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Merge defaults, settings file and overrides for ``language``.

        Args:
            language: Target language name
            custom_config: Overrides applied last
            config_file: JSON settings file applied over the defaults

        Returns:
            Merged configuration

        Raises:
            ConfigError: If the file cannot be loaded or a value is invalid
        """
        merged = dict(self._defaults.get(language, {}))

        if config_file:
            merged.update(normalize_keys(self._read_settings_file(config_file)))
            logger.debug("Applied settings file %s", config_file)

        if custom_config:
            merged.update(normalize_keys(custom_config))

        return self._build_config(merged)

    def _read_settings_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            settings = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(settings, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")
        return settings

    def _build_config(self, values: Dict[str, Any]) -> GeneratorConfig:
        """Check known keys and park unknown ones under ``custom``."""
        known = {f.name for f in fields(GeneratorConfig)}
        custom = {key: value for key, value in values.items() if key not in known}
        arguments = {key: value for key, value in values.items() if key in known}

        for key, value in arguments.items():
            _check_value(key, value)

        if custom:
            arguments["custom"] = {**arguments.get("custom", {}), **custom}
        return GeneratorConfig(**arguments)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write ``config`` as a flat JSON settings file."""
        settings = asdict(config)
        settings.update(settings.pop("custom"))

        try:
            Path(output_path).write_text(
                json.dumps(settings, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {output_path}: {e}") from e

    def list_languages(self) -> List[str]:
        return list(self._defaults)

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Check a merged configuration for suspicious values.

        Returns:
            Warning messages, empty when the configuration looks fine
        """
        warnings = []

        if config.indent_size == 0:
            warnings.append("indent_size is 0, nested objects will not be indented")
        elif config.indent_size > 8:
            warnings.append(f"Unusually large indent_size: {config.indent_size}")

        if config.custom:
            names = ", ".join(sorted(config.custom))
            warnings.append(f"Unknown configuration keys ignored: {names}")

        return warnings


def normalize_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase aliases onto their snake_case field names."""
    return {CONFIG_ALIASES.get(key, key): value for key, value in config.items()}


def _check_value(key: str, value: Any):
    if key in _BOOL_FIELDS and not isinstance(value, bool):
        raise ConfigError(f"{key} must be a boolean, got {value!r}")
    if key in _OPTIONAL_STR_FIELDS and value is not None and not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    if key == "indent_size" and (
        isinstance(value, bool) or not isinstance(value, int) or value < 0
    ):
        raise ConfigError(f"indent_size must be a non-negative integer, got {value!r}")
    if key == "custom" and not isinstance(value, dict):
        raise ConfigError(f"custom must be an object, got {value!r}")


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Return the shared ConfigManager, creating it on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "typescript",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """Shortcut for ``get_config_manager().get_config(...)``."""
    return get_config_manager().get_config(language, custom_config, config_file)


# Settings file accepted by ``--config``
EXAMPLE_TYPESCRIPT_CONFIG = {
    "headerComment": "Generated by openapi-typegen. Do not edit.",
    "indentSize": 2,
    "addComments": True,
    "preferUnknownOverAny": True,
    "preferInterfaceOverType": False,
}
