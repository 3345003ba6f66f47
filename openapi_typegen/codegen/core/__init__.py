"""
Core code generation components.

Provides the schema model, the expression builder and the base classes
used by language generators.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .schema import (
    SchemaKind,
    SchemaNode,
    PrimitiveSchema,
    ObjectSchema,
    ArraySchema,
    CompositeSchema,
    ReferenceSchema,
    UnrecognizedSchema,
    SchemaParseError,
    parse_schema,
    iter_schema_nodes,
)
from .expressions import (
    CompositionOperator,
    PrimitiveType,
    PrimitiveTerm,
    ReferenceTerm,
    ObjectTerm,
    ObjectProperty,
    Expression,
    TypeDeclaration,
    SchemaDiagnostic,
    ExpressionBuilder,
    build_expressions,
    format_literal,
)
from .naming import capitalize_first, operation_type_name, path_segments
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Schema model
    "SchemaKind",
    "SchemaNode",
    "PrimitiveSchema",
    "ObjectSchema",
    "ArraySchema",
    "CompositeSchema",
    "ReferenceSchema",
    "UnrecognizedSchema",
    "SchemaParseError",
    "parse_schema",
    "iter_schema_nodes",
    # Expression model and builder
    "CompositionOperator",
    "PrimitiveType",
    "PrimitiveTerm",
    "ReferenceTerm",
    "ObjectTerm",
    "ObjectProperty",
    "Expression",
    "TypeDeclaration",
    "SchemaDiagnostic",
    "ExpressionBuilder",
    "build_expressions",
    "format_literal",
    # Naming utilities
    "capitalize_first",
    "operation_type_name",
    "path_segments",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
