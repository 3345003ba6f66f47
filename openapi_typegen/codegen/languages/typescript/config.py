"""
TypeScript-specific configuration.

Holds the per-call rendering options and the primitive spellings they
select between.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ...core.config import CONFIG_ALIASES, ConfigError
from ...core.expressions import PrimitiveType

PRIMITIVE_SPELLINGS = {
    PrimitiveType.STRING: "string",
    PrimitiveType.NUMBER: "number",
    PrimitiveType.BOOLEAN: "boolean",
    PrimitiveType.NULL: "null",
    PrimitiveType.ANY: "any",
}

UNKNOWN_SPELLING = "unknown"


@dataclass
class SchemaTypeOptions:
    """Rendering options for a single declaration."""

    prefer_unknown_over_any: bool = False
    prefer_interface_over_type: bool = False

    @classmethod
    def from_dict(cls, data: Mapping) -> "SchemaTypeOptions":
        """
        Build options from a mapping.

        Accepts both snake_case keys and the camelCase aliases.

        Raises:
            ConfigError: On unknown keys or non-boolean values
        """
        values: Dict[str, bool] = {}
        for key, value in data.items():
            name = CONFIG_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ConfigError(f"Unknown schema type option: {key}")
            if not isinstance(value, bool):
                raise ConfigError(f"Schema type option {key} must be a boolean")
            values[name] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, bool]:
        """Return the options keyed by their camelCase names."""
        return {
            "preferUnknownOverAny": self.prefer_unknown_over_any,
            "preferInterfaceOverType": self.prefer_interface_over_type,
        }

    def spelling(self, primitive_type: PrimitiveType) -> str:
        if primitive_type == PrimitiveType.ANY and self.prefer_unknown_over_any:
            return UNKNOWN_SPELLING
        return PRIMITIVE_SPELLINGS[primitive_type]


OptionsLike = Optional[Union[SchemaTypeOptions, Mapping]]


def coerce_options(options: Any) -> SchemaTypeOptions:
    """Normalize ``None``, a mapping or an options instance."""
    if options is None:
        return SchemaTypeOptions()
    if isinstance(options, SchemaTypeOptions):
        return options
    if isinstance(options, Mapping):
        return SchemaTypeOptions.from_dict(options)
    raise ConfigError(
        f"Schema type options must be a mapping, got {type(options).__name__}"
    )
