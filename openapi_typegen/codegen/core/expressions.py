"""
Intermediate type expression model and the builder that produces it.

A schema node is translated into a list of expressions. Each expression is
an ordered list of type terms (object, primitive or reference) joined by an
optional composition operator. Array-ness lives on the terms, nullability is
an appended ``null`` term. Expression trees are rebuilt for every call and
never shared.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from .schema import (
    ArraySchema,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaKind,
    SchemaNode,
    UnrecognizedSchema,
)
from ...logging_config import get_logger

logger = get_logger(__name__)


class CompositionOperator(Enum):
    """How the terms of an expression are joined. ``None`` means plain."""

    UNION = "union"
    INTERSECTION = "intersection"


class PrimitiveType(Enum):
    """Primitive term kinds. Integers map to NUMBER."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ANY = "any"


@dataclass
class PrimitiveTerm:
    primitive_type: PrimitiveType
    enumeration: List[str] = field(default_factory=list)
    is_array: bool = False


@dataclass
class ReferenceTerm:
    reference: str
    is_array: bool = False


@dataclass
class ObjectTerm:
    properties: List["ObjectProperty"] = field(default_factory=list)
    is_array: bool = False


TypeTerm = Union[ObjectTerm, PrimitiveTerm, ReferenceTerm]


@dataclass
class ObjectProperty:
    """A single property of an object term."""

    name: str
    expressions: List["Expression"] = field(default_factory=list)
    required: bool = False
    description: Optional[str] = None
    deprecated: bool = False


@dataclass
class Expression:
    """Ordered type terms joined by an optional composition operator."""

    terms: List[TypeTerm] = field(default_factory=list)
    operator: Optional[CompositionOperator] = None

    @property
    def is_array(self) -> bool:
        """True when two or more terms are all individually array-flagged."""
        return len(self.terms) > 1 and all(term.is_array for term in self.terms)


@dataclass
class TypeDeclaration:
    """
    A named top-level declaration, the unit handed to a renderer.

    ``options`` holds the renderer-specific options the declaration was
    built with (``SchemaTypeOptions`` for TypeScript).
    """

    name: str
    expressions: List[Expression] = field(default_factory=list)
    options: Any = None


@dataclass(frozen=True)
class SchemaDiagnostic:
    """Non-fatal notice about a schema shape that fell back to any."""

    pointer: str
    message: str

    def __str__(self) -> str:
        return f"{self.pointer}: {self.message}"


DiagnosticHook = Callable[[SchemaDiagnostic], None]

_PRIMITIVE_TYPES = {
    SchemaKind.STRING: PrimitiveType.STRING,
    SchemaKind.NUMBER: PrimitiveType.NUMBER,
    SchemaKind.INTEGER: PrimitiveType.NUMBER,
    SchemaKind.BOOLEAN: PrimitiveType.BOOLEAN,
}


def format_literal(value: Any) -> str:
    """
    Format an enumeration value as its display string.

    Strings are returned raw (quoting happens at render time), booleans as
    ``true``/``false`` and numbers in their shortest round-trip decimal
    form without exponent, so ``1.0`` becomes ``1`` and ``0.5`` stays ``0.5``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        text = repr(value)
        if "e" in text or "E" in text:
            text = format(Decimal(text), "f")
        return text
    return str(value)


class ExpressionBuilder:
    """
    Translates schema nodes into expression lists.

    The builder holds no per-call state, so one instance can be reused for
    any number of schemas.
    """

    def __init__(self, on_diagnostic: Optional[DiagnosticHook] = None):
        """
        Initialize builder.

        Args:
            on_diagnostic: Called with a SchemaDiagnostic whenever a schema
                shape is not modelled and falls back to the any type
        """
        self.on_diagnostic = on_diagnostic

    def build(
        self,
        schema: SchemaNode,
        is_array: bool = False,
        inherited_operator: Optional[CompositionOperator] = None,
    ) -> List[Expression]:
        """
        Build the expressions describing ``schema``.

        Args:
            schema: Schema node to translate
            is_array: Whether the node is reached through an array
            inherited_operator: Operator given to a reference term, so a
                reference inside a composition keeps its joiner

        Returns:
            List of expressions (one for every supported shape)
        """
        expressions = self._build_base(schema, is_array, inherited_operator)

        if schema.nullable:
            for expression in expressions:
                expression.terms.append(
                    PrimitiveTerm(PrimitiveType.NULL, is_array=is_array)
                )

        return expressions

    def _build_base(
        self,
        schema: SchemaNode,
        is_array: bool,
        inherited_operator: Optional[CompositionOperator],
    ) -> List[Expression]:
        if isinstance(schema, ReferenceSchema):
            return [
                Expression(
                    [ReferenceTerm(schema.target_name, is_array=is_array)],
                    inherited_operator,
                )
            ]

        if isinstance(schema, PrimitiveSchema):
            enumeration = [format_literal(v) for v in schema.enum if v is not None]
            term = PrimitiveTerm(
                _PRIMITIVE_TYPES[schema.kind], enumeration, is_array=is_array
            )
            return [Expression([term])]

        if isinstance(schema, ArraySchema):
            if schema.items is None:
                return [Expression([PrimitiveTerm(PrimitiveType.ANY, is_array=True)])]
            return self.build(schema.items, True, inherited_operator)

        if isinstance(schema, ObjectSchema):
            properties = [
                self._build_property(name, value, name in schema.required)
                for name, value in schema.properties.items()
            ]
            return [Expression([ObjectTerm(properties, is_array=is_array)])]

        if isinstance(schema, CompositeSchema):
            operator = (
                CompositionOperator.INTERSECTION
                if schema.kind == SchemaKind.INTERSECTION
                else CompositionOperator.UNION
            )
            terms: List[TypeTerm] = []
            for member in schema.members:
                for expression in self.build(member, is_array, None):
                    terms.extend(expression.terms)
            return [Expression(terms, operator)]

        reason = (
            schema.reason
            if isinstance(schema, UnrecognizedSchema) and schema.reason
            else f"unsupported schema kind '{schema.kind.value}'"
        )
        self._report(schema.pointer, f"{reason}, defaulting to any")
        return [Expression([PrimitiveTerm(PrimitiveType.ANY, is_array=is_array)])]

    def _build_property(
        self, name: str, schema: SchemaNode, required: bool
    ) -> ObjectProperty:
        # references carry no annotations of their own
        if isinstance(schema, ReferenceSchema):
            description, deprecated = None, False
        else:
            description, deprecated = schema.description, schema.deprecated

        return ObjectProperty(
            name=name,
            expressions=self.build(schema, False, None),
            required=required,
            description=description,
            deprecated=deprecated,
        )

    def _report(self, pointer: str, message: str):
        diagnostic = SchemaDiagnostic(pointer, message)
        logger.debug("Schema diagnostic: %s", diagnostic)
        if self.on_diagnostic is not None:
            self.on_diagnostic(diagnostic)


def build_expressions(
    schema: SchemaNode,
    is_array: bool = False,
    inherited_operator: Optional[CompositionOperator] = None,
    on_diagnostic: Optional[DiagnosticHook] = None,
) -> List[Expression]:
    """Convenience wrapper around ExpressionBuilder.build."""
    builder = ExpressionBuilder(on_diagnostic)
    return builder.build(schema, is_array, inherited_operator)
