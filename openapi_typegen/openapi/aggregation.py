"""Walk an OpenAPI document and convert every schema it carries.

For each operation, query and path parameters are gathered into synthetic
object schemas, and the JSON request body and JSON response bodies are
taken as they are. Every entry under ``components.schemas`` (or the
Swagger 2 ``definitions`` section) is converted under its own name.

A reference where an inline path item, request body or response was
expected aborts that one path item only; the error is recorded on the
output and the remaining paths are still converted.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from ..codegen.core.expressions import DiagnosticHook, TypeDeclaration
from ..codegen.core.naming import operation_type_name, pascal_join
from ..codegen.core.schema import SchemaParseError, escape_pointer, parse_schema
from ..codegen.languages.typescript.config import OptionsLike, coerce_options
from ..codegen.languages.typescript.generator import TypeScriptGenerator
from ..logging_config import get_logger

logger = get_logger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "options", "head", "trace")

JSON_MEDIA_TYPE = "application/json"


class OpenApiError(Exception):
    """Base exception for OpenAPI document processing."""

    pass


class InvalidDocumentError(OpenApiError):
    """The document does not have the shape of an OpenAPI description."""

    pass


class UnsupportedReferenceError(OpenApiError):
    """A ``$ref`` appeared where an inline object was required."""

    def __init__(self, location: str, reference: str):
        self.location = location
        self.reference = reference
        super().__init__(f"Reference not supported at {location}: {reference}")


@dataclass
class OpenApiResponse:
    description: Optional[str]
    ts_type: str
    declaration: Optional[TypeDeclaration] = field(
        default=None, repr=False, compare=False
    )

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "tsType": self.ts_type}


@dataclass
class OpenApiPath:
    """Rendered types for one operation (method + path)."""

    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    query_ts_type: Optional[str] = None
    path_ts_type: Optional[str] = None
    request_body: Optional[str] = None
    responses: Dict[str, OpenApiResponse] = field(default_factory=dict)
    type_name: str = field(default="", repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "method": self.method,
            "summary": self.summary,
            "description": self.description,
            "queryTsType": self.query_ts_type,
            "pathTsType": self.path_ts_type,
            "requestBody": self.request_body,
            "responses": {
                status: response.to_dict()
                for status, response in self.responses.items()
            },
        }


@dataclass
class OpenApiComponent:
    name: str
    ts_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "tsType": self.ts_type}


@dataclass
class PathError:
    """A path item skipped because of an unsupported construct."""

    path: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message}


@dataclass
class OpenApiOutput:
    paths: List[OpenApiPath] = field(default_factory=list)
    components: List[OpenApiComponent] = field(default_factory=list)
    errors: List[PathError] = field(default_factory=list)
    generator: Optional[TypeScriptGenerator] = field(
        default=None, repr=False, compare=False
    )

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase record layout used by JavaScript callers."""
        return {
            "paths": [path.to_dict() for path in self.paths],
            "components": [component.to_dict() for component in self.components],
            "errors": [error.to_dict() for error in self.errors],
        }

    def render_module(self, generator: Optional[TypeScriptGenerator] = None) -> str:
        """
        Assemble every converted type into one TypeScript module.

        Operations with more than one JSON response get the status code
        appended to each response type name so the module declares every
        name once. Operations without any JSON types are left out.

        Args:
            generator: Generator providing the module template and
                formatting (defaults to the one used for conversion)

        Returns:
            Module source text
        """
        generator = generator or self.generator or TypeScriptGenerator()

        sections: List[Tuple[Optional[str], List[str]]] = []
        if self.components:
            sections.append(
                ("Components", [component.ts_type for component in self.components])
            )

        for operation in self.paths:
            title = f"{operation.method.upper()} {operation.path}"
            if operation.summary:
                title = f"{title}: {operation.summary}"

            declarations = [
                text
                for text in (
                    operation.query_ts_type,
                    operation.path_ts_type,
                    operation.request_body,
                )
                if text
            ]
            if len(operation.responses) > 1:
                for status, response in operation.responses.items():
                    renamed = replace(
                        response.declaration,
                        name=f"{operation.type_name}Response{pascal_join([status])}",
                    )
                    declarations.append(generator.renderer.render(renamed))
            else:
                declarations.extend(
                    response.ts_type for response in operation.responses.values()
                )
            if declarations:
                sections.append((title, declarations))

        return generator.generate_module(sections)


class OpenApiConverter:
    """Converts the schemas of an OpenAPI document to TypeScript."""

    def __init__(self, generator: Optional[TypeScriptGenerator] = None):
        self.generator = generator or TypeScriptGenerator()

    def convert(self, document: Any) -> OpenApiOutput:
        """
        Convert all operations and named components of ``document``.

        Raises:
            InvalidDocumentError: If the document or one of its schemas is
                structurally malformed
        """
        _validate_document(document)

        output = OpenApiOutput(generator=self.generator)
        output.components = self._convert_components(document)

        for path, item in document["paths"].items():
            try:
                output.paths.extend(self._convert_path_item(path, item))
            except UnsupportedReferenceError as e:
                logger.error("Skipping path %s: %s", path, e)
                output.errors.append(PathError(path, str(e)))

        logger.info(
            "Converted %d operation(s) and %d component(s)",
            len(output.paths),
            len(output.components),
        )
        return output

    def _convert_components(self, document: Mapping) -> List[OpenApiComponent]:
        components = []
        for pointer, schemas in _component_sections(document):
            for name, schema in schemas.items():
                _, ts_type = self._render(
                    name, schema, f"{pointer}/{escape_pointer(name)}"
                )
                components.append(OpenApiComponent(name, ts_type))
        return components

    def _convert_path_item(self, path: str, item: Any) -> List[OpenApiPath]:
        pointer = f"#/paths/{escape_pointer(path)}"
        if not isinstance(item, Mapping):
            raise InvalidDocumentError(f"Path item at {pointer} must be an object")
        if "$ref" in item:
            raise UnsupportedReferenceError(pointer, str(item["$ref"]))

        shared_parameters = item.get("parameters") or []
        operations = []
        for method in HTTP_METHODS:
            operation = item.get(method)
            if operation is None:
                continue
            if not isinstance(operation, Mapping):
                raise InvalidDocumentError(
                    f"Operation at {pointer}/{method} must be an object"
                )
            operations.append(
                self._convert_operation(
                    path, method, operation, shared_parameters, f"{pointer}/{method}"
                )
            )
        return operations

    def _convert_operation(
        self,
        path: str,
        method: str,
        operation: Mapping,
        shared_parameters: Any,
        pointer: str,
    ) -> OpenApiPath:
        type_name = operation_type_name(method, path)
        parameters = _collect_parameters(
            shared_parameters, operation.get("parameters") or [], pointer
        )

        result = OpenApiPath(
            path=path,
            method=method,
            summary=_optional_str(operation, "summary", pointer),
            description=_optional_str(operation, "description", pointer),
            type_name=type_name,
        )
        result.query_ts_type = self._parameter_group(
            f"{type_name}Query", parameters, "query", pointer
        )
        result.path_ts_type = self._parameter_group(
            f"{type_name}Path", parameters, "path", pointer
        )

        request_body = operation.get("requestBody")
        if request_body is not None:
            location = f"{pointer}/requestBody"
            if not isinstance(request_body, Mapping):
                raise InvalidDocumentError(f"Request body at {location} must be an object")
            if "$ref" in request_body:
                raise UnsupportedReferenceError(location, str(request_body["$ref"]))
            found = _json_schema(request_body.get("content"), f"{location}/content")
            if found is not None:
                schema, schema_pointer = found
                _, result.request_body = self._render(
                    f"{type_name}Body", schema, schema_pointer
                )

        responses = operation.get("responses") or {}
        if not isinstance(responses, Mapping):
            raise InvalidDocumentError(f"Responses at {pointer} must be an object")
        for status, response in responses.items():
            status = str(status)
            location = f"{pointer}/responses/{escape_pointer(status)}"
            if not isinstance(response, Mapping):
                raise InvalidDocumentError(f"Response at {location} must be an object")
            if "$ref" in response:
                raise UnsupportedReferenceError(location, str(response["$ref"]))
            found = _json_schema(response.get("content"), f"{location}/content")
            if found is None:
                continue
            schema, schema_pointer = found
            declaration, ts_type = self._render(
                f"{type_name}Response", schema, schema_pointer
            )
            result.responses[status] = OpenApiResponse(
                description=_optional_str(response, "description", location),
                ts_type=ts_type,
                declaration=declaration,
            )

        logger.debug("Converted %s %s as %s", method.upper(), path, type_name)
        return result

    def _parameter_group(
        self, name: str, parameters: List[Mapping], location: str, pointer: str
    ) -> Optional[str]:
        group = [param for param in parameters if param["in"] == location]
        if not group:
            return None

        # parameters described through "content" contribute no property
        synthetic = {
            "type": "object",
            "properties": {
                param["name"]: param["schema"] for param in group if "schema" in param
            },
            "required": [param["name"] for param in group if param.get("required") is True],
        }
        _, ts_type = self._render(name, synthetic, f"{pointer}/parameters")
        return ts_type

    def _render(
        self, name: str, schema: Any, pointer: str
    ) -> Tuple[TypeDeclaration, str]:
        try:
            node = parse_schema(schema, pointer)
        except SchemaParseError as e:
            raise InvalidDocumentError(str(e)) from e
        declaration = self.generator.schema_to_declaration(name, node)
        return declaration, self.generator.renderer.render(declaration)


def _validate_document(document: Any):
    if not isinstance(document, Mapping):
        raise InvalidDocumentError("OpenAPI document must be a JSON object")
    if "openapi" not in document and "swagger" not in document:
        raise InvalidDocumentError(
            "Missing 'openapi' version field; not an OpenAPI document"
        )
    if not isinstance(document.get("paths"), Mapping):
        raise InvalidDocumentError("OpenAPI document must have a 'paths' object")

    components = document.get("components")
    if components is not None and not isinstance(components, Mapping):
        raise InvalidDocumentError("'components' must be an object")
    for pointer, schemas in _component_sections(document):
        if not isinstance(schemas, Mapping):
            raise InvalidDocumentError(f"'{pointer}' must be an object")


def _component_sections(document: Mapping):
    """Yield (pointer, schemas mapping) for every named schema section."""
    components = document.get("components") or {}
    if "schemas" in components and components["schemas"] is not None:
        yield "#/components/schemas", components["schemas"]
    if document.get("definitions") is not None:
        yield "#/definitions", document["definitions"]


def _collect_parameters(shared: Any, own: Any, pointer: str) -> List[Mapping]:
    """Merge path item and operation parameters; the operation wins on clashes."""
    merged: Dict[Tuple[str, str], Mapping] = {}
    for parameters in (shared, own):
        if not isinstance(parameters, list):
            raise InvalidDocumentError(f"Parameters at {pointer} must be a list")
        for index, param in enumerate(parameters):
            if not isinstance(param, Mapping):
                raise InvalidDocumentError(
                    f"Parameter {index} at {pointer} must be an object"
                )
            if "$ref" in param:
                logger.warning(
                    "Parameter references are not supported, skipping %s at %s",
                    param["$ref"],
                    pointer,
                )
                continue
            name, location = param.get("name"), param.get("in")
            if not isinstance(name, str) or not isinstance(location, str):
                raise InvalidDocumentError(
                    f"Parameter {index} at {pointer} needs string 'name' and 'in'"
                )
            merged[(name, location)] = param
    return list(merged.values())


def _json_schema(content: Any, pointer: str) -> Optional[Tuple[Any, str]]:
    """Return (schema, pointer) of the first JSON media type carrying a schema."""
    if not content:
        return None
    if not isinstance(content, Mapping):
        raise InvalidDocumentError(f"Content at {pointer} must be an object")

    candidates = []
    if JSON_MEDIA_TYPE in content:
        candidates.append(JSON_MEDIA_TYPE)
    for media_type in content:
        base = media_type.split(";", 1)[0].strip().lower()
        if media_type != JSON_MEDIA_TYPE and (
            base.endswith("+json") or base.endswith("/json")
        ):
            candidates.append(media_type)

    for media_type in candidates:
        media = content[media_type]
        if isinstance(media, Mapping) and "schema" in media:
            return media["schema"], f"{pointer}/{escape_pointer(media_type)}/schema"
    return None


def _optional_str(value: Mapping, key: str, pointer: str) -> Optional[str]:
    item = value.get(key)
    if item is not None and not isinstance(item, str):
        raise InvalidDocumentError(f"'{key}' at {pointer} must be a string")
    return item


def openapi_to_types(
    document: Any,
    options: OptionsLike = None,
    on_diagnostic: Optional[DiagnosticHook] = None,
) -> OpenApiOutput:
    """
    Convert every operation and component schema of an OpenAPI document.

    Args:
        document: Decoded OpenAPI document or its JSON text
        options: SchemaTypeOptions or a mapping of option values
        on_diagnostic: Receives diagnostics for unsupported schema shapes

    Returns:
        OpenApiOutput with per-operation and per-component types

    Raises:
        InvalidDocumentError: If the document is structurally malformed
    """
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise InvalidDocumentError(f"Invalid JSON: {e}") from e

    resolved = coerce_options(options)
    generator = TypeScriptGenerator(
        {
            "prefer_unknown_over_any": resolved.prefer_unknown_over_any,
            "prefer_interface_over_type": resolved.prefer_interface_over_type,
        },
        on_diagnostic=on_diagnostic,
    )
    return OpenApiConverter(generator).convert(document)
