"""
OpenAPI document processing.

Converts the operations and named components of an OpenAPI description
into TypeScript declarations.
"""

from .aggregation import (
    HTTP_METHODS,
    InvalidDocumentError,
    OpenApiComponent,
    OpenApiConverter,
    OpenApiError,
    OpenApiOutput,
    OpenApiPath,
    OpenApiResponse,
    PathError,
    UnsupportedReferenceError,
    openapi_to_types,
)

__all__ = [
    "HTTP_METHODS",
    "InvalidDocumentError",
    "OpenApiComponent",
    "OpenApiConverter",
    "OpenApiError",
    "OpenApiOutput",
    "OpenApiPath",
    "OpenApiResponse",
    "PathError",
    "UnsupportedReferenceError",
    "openapi_to_types",
]
