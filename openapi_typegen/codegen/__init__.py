"""
openapi-typegen code generation module.

Generates TypeScript declarations from JSON Schema / OpenAPI schema objects.
"""

from typing import Any, Dict, Optional

from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.schema import SchemaNode, SchemaParseError, parse_schema
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .core.expressions import ExpressionBuilder, SchemaDiagnostic, TypeDeclaration
from .languages.typescript import SchemaTypeOptions, TypeScriptGenerator

__version__ = "0.1.0"


def generate_from_schemas(
    raw_schemas: Dict[str, Any],
    config: Optional[Dict[str, Any]] = None,
    root_name: Optional[str] = None,
) -> GenerationResult:
    """
    Generate a TypeScript module from decoded schema objects.

    Args:
        raw_schemas: Declaration name to decoded schema object
        config: Generator configuration overrides
        root_name: Name of the main schema, recorded in the metadata

    Returns:
        GenerationResult with generated code; diagnostics become warnings

    Raises:
        SchemaParseError: If a schema is structurally malformed
    """
    schemas = {
        name: parse_schema(schema, f"#/{name}") for name, schema in raw_schemas.items()
    }
    generator = TypeScriptGenerator(config)
    return generate_code(generator, schemas, root_name)


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "generate_code",
    "SchemaNode",
    "SchemaParseError",
    "parse_schema",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "ExpressionBuilder",
    "SchemaDiagnostic",
    "TypeDeclaration",
    "SchemaTypeOptions",
    "TypeScriptGenerator",
    "generate_from_schemas",
]
