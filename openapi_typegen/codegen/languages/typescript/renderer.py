"""
TypeScript rendering of type expressions.

Turns a TypeDeclaration into ``export type`` / ``export interface`` text.
Array suffixes are placed either on every term or once around a whole
expression, depending on whether the expression is an expression-array.
"""

import json
from typing import List, Optional

from ...core.expressions import (
    CompositionOperator,
    Expression,
    ObjectProperty,
    ObjectTerm,
    PrimitiveTerm,
    PrimitiveType,
    ReferenceTerm,
    TypeDeclaration,
    TypeTerm,
)
from .config import OptionsLike, SchemaTypeOptions, coerce_options
from .naming import format_property_name

UNION_JOINER = " | "
INTERSECTION_JOINER = " & "


def joiner_for(operator: Optional[CompositionOperator]) -> str:
    """Plain expressions join like unions."""
    if operator == CompositionOperator.INTERSECTION:
        return INTERSECTION_JOINER
    return UNION_JOINER


def format_array_expression(text: str, is_array: bool) -> str:
    return f"({text})[]" if is_array else text


def is_interface_candidate(declaration: TypeDeclaration) -> bool:
    """Exactly one expression holding a single non-array object term."""
    if len(declaration.expressions) != 1:
        return False
    terms = declaration.expressions[0].terms
    return (
        len(terms) == 1
        and isinstance(terms[0], ObjectTerm)
        and not terms[0].is_array
    )


class TypeScriptRenderer:
    """Renders expression trees as TypeScript source text."""

    def __init__(
        self,
        options: OptionsLike = None,
        indent_size: int = 2,
        add_comments: bool = True,
    ):
        """
        Initialize renderer.

        Args:
            options: Default options, used for declarations without their own
            indent_size: Spaces per nesting level
            add_comments: Emit documentation blocks for described properties
        """
        self.options = coerce_options(options)
        self.indent = " " * indent_size
        self.add_comments = add_comments

    def render(self, declaration: TypeDeclaration) -> str:
        """Render a named declaration; an empty declaration renders as ''."""
        if not declaration.expressions:
            return ""

        options = (
            coerce_options(declaration.options)
            if declaration.options is not None
            else self.options
        )
        body = UNION_JOINER.join(
            self._render_expression(expression, 1, options)
            for expression in declaration.expressions
        )

        if options.prefer_interface_over_type and is_interface_candidate(declaration):
            return f"export interface {declaration.name} {body};"
        return f"export type {declaration.name} = {body};"

    def render_expressions(
        self, expressions: List[Expression], options: OptionsLike = None
    ) -> str:
        """Render an expression list without a declaration around it."""
        resolved = self.options if options is None else coerce_options(options)
        return UNION_JOINER.join(
            self._render_expression(expression, 1, resolved)
            for expression in expressions
        )

    def _render_expression(
        self, expression: Expression, depth: int, options: SchemaTypeOptions
    ) -> str:
        in_array = expression.is_array
        text = joiner_for(expression.operator).join(
            self._render_term(term, depth, in_array, options)
            for term in expression.terms
        )
        return format_array_expression(text, in_array)

    def _render_term(
        self,
        term: TypeTerm,
        depth: int,
        in_array: bool,
        options: SchemaTypeOptions,
    ) -> str:
        if isinstance(term, ObjectTerm):
            return self._render_object(term, depth, in_array, options)
        if isinstance(term, PrimitiveTerm):
            return self._render_primitive(term, in_array, options)
        return self._render_reference(term, in_array)

    def _render_reference(self, term: ReferenceTerm, in_array: bool) -> str:
        if term.is_array and not in_array:
            return f"{term.reference}[]"
        return term.reference

    def _render_primitive(
        self, term: PrimitiveTerm, in_array: bool, options: SchemaTypeOptions
    ) -> str:
        if not term.enumeration:
            spelling = options.spelling(term.primitive_type)
            if term.is_array and not in_array:
                return f"{spelling}[]"
            return spelling

        literals = UNION_JOINER.join(
            self._format_literal(term.primitive_type, value)
            for value in term.enumeration
        )
        if in_array or not term.is_array:
            return literals
        if len(term.enumeration) > 1:
            return f"({literals})[]"
        return f"{literals}[]"

    @staticmethod
    def _format_literal(primitive_type: PrimitiveType, value: str) -> str:
        if primitive_type == PrimitiveType.STRING:
            return json.dumps(value, ensure_ascii=False)
        return value

    def _render_object(
        self,
        term: ObjectTerm,
        depth: int,
        in_array: bool,
        options: SchemaTypeOptions,
    ) -> str:
        suffix = "[]" if term.is_array and not in_array else ""
        if not term.properties:
            return "{}" + suffix

        whitespace = self.indent * depth
        lines = []
        for prop in term.properties:
            if self.add_comments:
                lines.extend(self._doc_comment(prop, whitespace))
            types = UNION_JOINER.join(
                self._render_expression(expression, depth + 1, options)
                for expression in prop.expressions
            )
            optional = "" if prop.required else "?"
            lines.append(
                f"{whitespace}{format_property_name(prop.name)}{optional}: {types};"
            )

        closing = self.indent * (depth - 1)
        return "{\n" + "\n".join(lines) + "\n" + closing + "}" + suffix

    @staticmethod
    def _doc_comment(prop: ObjectProperty, whitespace: str) -> List[str]:
        if prop.description is None and not prop.deprecated:
            return []

        text = (prop.description or "").replace("*/", "*\\/")
        text_lines = text.splitlines() or [""]
        if prop.deprecated:
            text_lines[0] = f"@deprecated {text_lines[0]}".rstrip()

        lines = [f"{whitespace}/**"]
        lines.extend(
            f"{whitespace} * {line}" if line else f"{whitespace} *"
            for line in text_lines
        )
        lines.append(f"{whitespace} */")
        return lines


def render_declaration(
    declaration: TypeDeclaration, indent_size: int = 2, add_comments: bool = True
) -> str:
    """Render ``declaration`` with its own options."""
    renderer = TypeScriptRenderer(declaration.options, indent_size, add_comments)
    return renderer.render(declaration)
