"""
TypeScript code generator implementation.

Generates ``export type`` / ``export interface`` declarations from schema
nodes and assembles them into a module.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from ...core.config import GeneratorConfig
from ...core.expressions import DiagnosticHook, ExpressionBuilder, TypeDeclaration
from ...core.generator import CodeGenerator, GeneratorError
from ...core.schema import SchemaNode
from ...core.templates import TYPESCRIPT_MODULE_TEMPLATE, TemplateError
from ....logging_config import get_logger
from .naming import is_valid_type_name
from .renderer import TypeScriptRenderer

logger = get_logger(__name__)

MODULE_TEMPLATE_NAME = "module.ts"


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript type declarations."""

    def __init__(
        self,
        config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None,
        on_diagnostic: Optional[DiagnosticHook] = None,
    ):
        """
        Initialize TypeScript generator with configuration.

        Args:
            config: GeneratorConfig or a mapping of overrides
            on_diagnostic: Receives a diagnostic for every schema shape that
                falls back to the any type
        """
        super().__init__(config)

        self.options = self.config.schema_type_options()
        self.builder = ExpressionBuilder(on_diagnostic)
        self.renderer = TypeScriptRenderer(
            self.options,
            indent_size=self.config.indent_size,
            add_comments=self.config.add_comments,
        )

        if not self.template_exists(MODULE_TEMPLATE_NAME):
            self.template_engine.add_template(
                MODULE_TEMPLATE_NAME, TYPESCRIPT_MODULE_TEMPLATE
            )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "typescript"

    @property
    def file_extension(self) -> str:
        """Return TypeScript file extension."""
        return ".ts"

    def schema_to_declaration(self, name: str, schema: SchemaNode) -> TypeDeclaration:
        """Build the named declaration for ``schema``."""
        return TypeDeclaration(
            name=name,
            expressions=self.builder.build(schema, False, None),
            options=self.options,
        )

    def generate_single_schema(self, name: str, schema: SchemaNode) -> str:
        """Render one schema as a declaration."""
        return self.renderer.render(self.schema_to_declaration(name, schema))

    def generate(
        self, schemas: Dict[str, SchemaNode], root_schema_name: Optional[str] = None
    ) -> str:
        """Render all schemas, in the order given, as one module."""
        declarations = [
            self.generate_single_schema(name, schema) for name, schema in schemas.items()
        ]
        return self.generate_module([(None, declarations)])

    def generate_module(
        self, sections: Sequence[tuple[Optional[str], List[str]]]
    ) -> str:
        """
        Assemble rendered declarations into a module.

        Args:
            sections: (title, declarations) pairs; titles become line
                comments when comments are enabled

        Returns:
            Module source text

        Raises:
            GeneratorError: If the module template fails to render
        """
        context = {
            "header_comment": self.config.header_comment,
            "add_comments": self.config.add_comments,
            "sections": [
                {"title": title, "declarations": [d for d in declarations if d]}
                for title, declarations in sections
            ],
        }
        try:
            code = self.render_template(MODULE_TEMPLATE_NAME, context)
        except TemplateError as e:
            raise GeneratorError(str(e)) from e
        return self.format_code(code)

    def validate_schemas(self, schemas: Dict[str, SchemaNode]) -> List[str]:
        """Add TypeScript declaration name checks to the base validation."""
        warnings = super().validate_schemas(schemas)

        for name in schemas:
            if not is_valid_type_name(name):
                warnings.append(f"'{name}' is not a valid TypeScript type name")

        return warnings
