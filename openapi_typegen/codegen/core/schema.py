"""
Core schema representation for code generation.

Converts decoded JSON Schema / OpenAPI schema objects into a normalized
tree of schema nodes that the expression builder works with consistently.
Only shape-relevant keywords are modelled; validation keywords such as
``minimum`` or ``pattern`` are ignored.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ...logging_config import get_logger

logger = get_logger(__name__)


class SchemaKind(Enum):
    """Shapes a schema node can take."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    UNION = "union"  # anyOf / oneOf
    INTERSECTION = "intersection"  # allOf
    REFERENCE = "reference"
    UNRECOGNIZED = "unrecognized"


PRIMITIVE_KINDS = frozenset(
    {SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.INTEGER, SchemaKind.BOOLEAN}
)

COMPOSITION_KEYWORDS = ("oneOf", "anyOf", "allOf", "not")

# Keywords that describe a concrete shape and cannot be mixed with composition
SHAPE_KEYWORDS = ("properties", "required", "items", "additionalProperties", "enum")


class SchemaParseError(ValueError):
    """Raised when a schema document is structurally malformed."""

    def __init__(self, message: str, pointer: str = "#"):
        self.message = message
        self.pointer = pointer
        super().__init__(f"Invalid schema at {pointer}: {message}")


@dataclass
class SchemaNode:
    """Attributes shared by every schema node."""

    kind: SchemaKind
    nullable: bool = False
    description: Optional[str] = None
    deprecated: bool = False
    pointer: str = "#"

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS


@dataclass
class PrimitiveSchema(SchemaNode):
    """String, number, integer or boolean schema with optional literal values."""

    kind: SchemaKind = SchemaKind.STRING
    enum: List[Any] = field(default_factory=list)


@dataclass
class ObjectSchema(SchemaNode):
    """Object schema; property order follows the source document."""

    kind: SchemaKind = SchemaKind.OBJECT
    properties: Dict[str, SchemaNode] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)


@dataclass
class ArraySchema(SchemaNode):
    """Array schema; ``items`` is None for arrays of anything."""

    kind: SchemaKind = SchemaKind.ARRAY
    items: Optional[SchemaNode] = None


@dataclass
class CompositeSchema(SchemaNode):
    """anyOf / oneOf (union) or allOf (intersection) composition."""

    kind: SchemaKind = SchemaKind.UNION
    members: List[SchemaNode] = field(default_factory=list)
    keyword: str = "anyOf"


@dataclass
class ReferenceSchema(SchemaNode):
    """A ``$ref`` to a named schema. Never resolved."""

    kind: SchemaKind = SchemaKind.REFERENCE
    reference: str = ""

    @property
    def target_name(self) -> str:
        """Final path segment of the reference."""
        return self.reference.rsplit("/", 1)[-1]


@dataclass
class UnrecognizedSchema(SchemaNode):
    """Any shape the builder does not model. Rendered as the any type."""

    kind: SchemaKind = SchemaKind.UNRECOGNIZED
    reason: str = ""


def parse_schema(value: Any, pointer: str = "#") -> SchemaNode:
    """
    Parse a decoded schema object into a schema node tree.

    Args:
        value: Decoded JSON value describing the schema
        pointer: Location of ``value`` inside the enclosing document

    Returns:
        Root schema node

    Raises:
        SchemaParseError: If the value is not a schema object or a keyword
            holds a value of the wrong JSON type
    """
    if not isinstance(value, Mapping):
        raise SchemaParseError(
            f"expected a schema object, got {_json_type_name(value)}", pointer
        )

    if "$ref" in value:
        reference = value["$ref"]
        if not isinstance(reference, str):
            raise SchemaParseError("'$ref' must be a string", pointer)
        return ReferenceSchema(reference=reference, pointer=pointer)

    common = {
        "nullable": _get_typed(value, "nullable", bool, pointer, False),
        "description": _get_typed(value, "description", str, pointer),
        "deprecated": _get_typed(value, "deprecated", bool, pointer, False),
        "pointer": pointer,
    }

    type_name = value.get("type")
    if isinstance(type_name, list):
        if not all(isinstance(name, str) for name in type_name):
            raise SchemaParseError("'type' list must contain only strings", pointer)
        non_null = [name for name in type_name if name != "null"]
        if len(non_null) != len(type_name):
            common["nullable"] = True
        if len(non_null) != 1:
            return UnrecognizedSchema(
                reason=f"unsupported type list {type_name}", **common
            )
        type_name = non_null[0]
    elif type_name is not None and not isinstance(type_name, str):
        raise SchemaParseError("'type' must be a string or a list of strings", pointer)

    compositions = [keyword for keyword in COMPOSITION_KEYWORDS if keyword in value]
    if compositions:
        return _parse_composition(value, type_name, compositions, common)

    if type_name is None:
        if "properties" in value:
            type_name = "object"
        elif "items" in value:
            type_name = "array"
        else:
            return UnrecognizedSchema(reason="schema declares no type", **common)

    if type_name == "object":
        return _parse_object(value, common)
    if type_name == "array":
        items = value.get("items")
        if items is None:
            return ArraySchema(**common)
        return ArraySchema(items=parse_schema(items, f"{pointer}/items"), **common)

    try:
        kind = SchemaKind(type_name)
    except ValueError:
        kind = None
    if kind not in PRIMITIVE_KINDS:
        return UnrecognizedSchema(reason=f"unsupported type '{type_name}'", **common)

    return PrimitiveSchema(kind=kind, enum=_parse_enum(value, kind, pointer), **common)


def _parse_composition(
    value: Mapping, type_name: Optional[str], compositions: List[str], common: dict
) -> SchemaNode:
    """Parse anyOf/oneOf/allOf, rejecting combinations the builder cannot model."""
    pointer = common["pointer"]

    if type_name is not None:
        return UnrecognizedSchema(
            reason=f"'type' combined with '{compositions[0]}'", **common
        )
    if len(compositions) > 1:
        return UnrecognizedSchema(
            reason=f"multiple composition keywords: {', '.join(compositions)}",
            **common,
        )
    keyword = compositions[0]
    if keyword == "not":
        return UnrecognizedSchema(reason="'not' is not supported", **common)

    mixed = [name for name in SHAPE_KEYWORDS if name in value]
    if mixed:
        return UnrecognizedSchema(
            reason=f"'{keyword}' combined with {', '.join(mixed)}", **common
        )

    raw_members = value[keyword]
    if not isinstance(raw_members, list):
        raise SchemaParseError(f"'{keyword}' must be a list of schemas", pointer)

    members = [
        parse_schema(member, f"{pointer}/{keyword}/{index}")
        for index, member in enumerate(raw_members)
    ]
    kind = SchemaKind.INTERSECTION if keyword == "allOf" else SchemaKind.UNION
    return CompositeSchema(kind=kind, members=members, keyword=keyword, **common)


def _parse_object(value: Mapping, common: dict) -> ObjectSchema:
    pointer = common["pointer"]

    raw_properties = value.get("properties", {})
    if not isinstance(raw_properties, Mapping):
        raise SchemaParseError("'properties' must be an object", pointer)

    required = value.get("required", [])
    if not isinstance(required, list) or not all(
        isinstance(name, str) for name in required
    ):
        raise SchemaParseError("'required' must be a list of strings", pointer)

    properties = {
        name: parse_schema(schema, f"{pointer}/properties/{escape_pointer(name)}")
        for name, schema in raw_properties.items()
    }
    return ObjectSchema(properties=properties, required=list(required), **common)


def _parse_enum(value: Mapping, kind: SchemaKind, pointer: str) -> List[Any]:
    if "enum" in value:
        raw = value["enum"]
        if not isinstance(raw, list):
            raise SchemaParseError("'enum' must be a list", pointer)
        location = f"{pointer}/enum"
    elif "const" in value:
        raw = [value["const"]]
        location = f"{pointer}/const"
    else:
        return []

    for index, item in enumerate(raw):
        if item is not None and not _matches_kind(item, kind):
            raise SchemaParseError(
                f"enum value {item!r} does not match type '{kind.value}'",
                f"{location}/{index}" if "enum" in value else location,
            )
    return list(raw)


def _matches_kind(item: Any, kind: SchemaKind) -> bool:
    if kind == SchemaKind.STRING:
        return isinstance(item, str)
    if kind == SchemaKind.BOOLEAN:
        return isinstance(item, bool)
    if isinstance(item, bool):
        return False
    if kind == SchemaKind.INTEGER:
        return isinstance(item, int) or (
            isinstance(item, float) and item.is_integer()
        )
    return isinstance(item, (int, float))


def _get_typed(
    value: Mapping, key: str, expected: type, pointer: str, default: Any = None
) -> Any:
    if key not in value or value[key] is None:
        return default
    item = value[key]
    if not isinstance(item, expected):
        raise SchemaParseError(
            f"'{key}' must be a {_PY_TYPE_NAMES[expected]}, got {_json_type_name(item)}",
            pointer,
        )
    return item


_PY_TYPE_NAMES = {bool: "boolean", str: "string"}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def escape_pointer(segment: str) -> str:
    """Escape a JSON pointer segment (RFC 6901)."""
    return segment.replace("~", "~0").replace("/", "~1")


def iter_schema_nodes(node: SchemaNode) -> Iterator[SchemaNode]:
    """Yield ``node`` and every schema node nested below it, depth first."""
    yield node
    if isinstance(node, ObjectSchema):
        for child in node.properties.values():
            yield from iter_schema_nodes(child)
    elif isinstance(node, ArraySchema) and node.items is not None:
        yield from iter_schema_nodes(node.items)
    elif isinstance(node, CompositeSchema):
        for member in node.members:
            yield from iter_schema_nodes(member)
