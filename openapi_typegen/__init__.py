"""
openapi-typegen

Converts JSON Schema / OpenAPI schema objects into TypeScript type
declarations, and walks whole OpenAPI documents to produce the request,
response and component types of an API.
"""

import json
from typing import Any, Optional

from .codegen import __version__
from .codegen.core.expressions import (
    DiagnosticHook,
    ExpressionBuilder,
    SchemaDiagnostic,
    TypeDeclaration,
)
from .codegen.core.schema import SchemaNode, SchemaParseError, parse_schema
from .codegen.languages.typescript import (
    SchemaTypeOptions,
    TypeScriptGenerator,
    coerce_options,
    render_declaration,
)
from .codegen.languages.typescript.config import OptionsLike
from .openapi import (
    InvalidDocumentError,
    OpenApiComponent,
    OpenApiOutput,
    OpenApiPath,
    OpenApiResponse,
    UnsupportedReferenceError,
    openapi_to_types,
)

# Alias
InvalidSchemaError = SchemaParseError


def schema_to_type(
    name: str,
    schema: Any,
    options: OptionsLike = None,
    on_diagnostic: Optional[DiagnosticHook] = None,
) -> str:
    """
    Convert one schema to a TypeScript declaration.

    Args:
        name: Name of the declared type
        schema: Decoded schema object, JSON text, or a parsed SchemaNode
        options: SchemaTypeOptions or a mapping such as
            ``{"preferUnknownOverAny": True}``
        on_diagnostic: Receives a SchemaDiagnostic for every schema shape
            that falls back to the any type

    Returns:
        ``export type`` or ``export interface`` declaration text

    Raises:
        InvalidSchemaError: If the schema is structurally malformed
    """
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError as e:
            raise InvalidSchemaError(f"invalid JSON: {e}") from e

    node = schema if isinstance(schema, SchemaNode) else parse_schema(schema)
    declaration = TypeDeclaration(
        name=name,
        expressions=ExpressionBuilder(on_diagnostic).build(node),
        options=coerce_options(options),
    )
    return render_declaration(declaration)


__all__ = [
    "__version__",
    "schema_to_type",
    "openapi_to_types",
    "parse_schema",
    "SchemaNode",
    "SchemaTypeOptions",
    "SchemaDiagnostic",
    "TypeDeclaration",
    "TypeScriptGenerator",
    "InvalidSchemaError",
    "SchemaParseError",
    "InvalidDocumentError",
    "UnsupportedReferenceError",
    "OpenApiOutput",
    "OpenApiPath",
    "OpenApiResponse",
    "OpenApiComponent",
]
