"""
TypeScript code generator module.

Generates TypeScript type aliases and interfaces from schema nodes.
"""

from .config import SchemaTypeOptions, coerce_options
from .generator import TypeScriptGenerator
from .naming import format_property_name, is_valid_identifier, is_valid_type_name
from .renderer import TypeScriptRenderer, render_declaration

__all__ = [
    "TypeScriptGenerator",
    "TypeScriptRenderer",
    "SchemaTypeOptions",
    "coerce_options",
    "render_declaration",
    "format_property_name",
    "is_valid_identifier",
    "is_valid_type_name",
    # Factory functions
    "create_generator",
    "create_strict_generator",
    "create_interface_generator",
]


def create_generator(on_diagnostic=None, **kwargs):
    """
    Create a TypeScript generator.

    Args:
        on_diagnostic: Optional diagnostic callback
        **kwargs: Configuration overrides (indent_size, add_comments, ...)

    Returns:
        Configured TypeScriptGenerator instance
    """
    return TypeScriptGenerator(kwargs, on_diagnostic=on_diagnostic)


def create_strict_generator(on_diagnostic=None):
    """
    Create generator for strict TypeScript code bases.

    Features:
    - Spells unconstrained values as ``unknown``
    - Keeps ``type`` aliases for every declaration
    """
    return TypeScriptGenerator(
        {"prefer_unknown_over_any": True}, on_diagnostic=on_diagnostic
    )


def create_interface_generator(on_diagnostic=None):
    """
    Create generator preferring interfaces.

    Features:
    - Plain object schemas become ``export interface``
    - Spells unconstrained values as ``unknown``
    """
    return TypeScriptGenerator(
        {"prefer_unknown_over_any": True, "prefer_interface_over_type": True},
        on_diagnostic=on_diagnostic,
    )
