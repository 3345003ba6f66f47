"""
Generator seam between parsed schemas and emitted source text.

A generator turns named schema nodes into one module of a target language.
Concrete generators live under ``codegen.languages``.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import GeneratorConfig, load_config
from .schema import ObjectSchema, SchemaNode, UnrecognizedSchema, iter_schema_nodes
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Raised when a module cannot be produced."""

    pass


class CodeGenerator(ABC):
    """Turns named schema nodes into source text for one language."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """
        Args:
            config: Ready GeneratorConfig, or overrides merged onto the
                language defaults
        """
        if isinstance(config, GeneratorConfig):
            self.config = config
        else:
            self.config = load_config(self.language_name, custom_config=config)
        self._template_engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Configuration key of the target language, e.g. ``typescript``."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Suffix of emitted files, e.g. ``.ts``."""

    def get_template_directory(self) -> Optional[Path]:
        """Directory of on-disk templates; None keeps templates in memory."""
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Template engine, created on first use."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(
                self.get_template_directory()
            )
        return self._template_engine

    @abstractmethod
    def generate(
        self, schemas: Dict[str, SchemaNode], root_schema_name: Optional[str] = None
    ) -> str:
        """
        Emit one module declaring every schema.

        Args:
            schemas: Declaration name to schema node, in output order
            root_schema_name: Name of the main declaration, if there is one

        Returns:
            Module source text
        """

    @abstractmethod
    def generate_single_schema(self, name: str, schema: SchemaNode) -> str:
        """Emit the declaration of one schema, without module framing."""

    def validate_schemas(self, schemas: Dict[str, SchemaNode]) -> List[str]:
        """
        Collect non-fatal findings about the input schemas.

        Reports every node that will fall back to the any type and every
        required name an object does not declare. Subclasses extend the
        list with language rules.

        Returns:
            Warning messages, empty when nothing was found
        """
        warnings = []

        for name, schema in schemas.items():
            for node in iter_schema_nodes(schema):
                if isinstance(node, UnrecognizedSchema):
                    warnings.append(
                        f"Unrecognized schema in {name} at {node.pointer}: "
                        f"{node.reason or 'unknown shape'}"
                    )
                elif isinstance(node, ObjectSchema):
                    missing = [
                        prop for prop in node.required if prop not in node.properties
                    ]
                    if missing:
                        warnings.append(
                            f"Required properties not declared in {name} at "
                            f"{node.pointer}: {', '.join(missing)}"
                        )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Normalize whitespace of emitted code.

        Trailing spaces are removed, runs of blank lines shrink to one and
        the text ends with exactly one newline.
        """
        lines = []
        previous_blank = True
        for line in code.split("\n"):
            line = line.rstrip()
            if not line and previous_blank:
                continue
            lines.append(line)
            previous_blank = not line

        return "\n".join(lines).rstrip("\n") + "\n"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Emitted code plus the warnings and metadata gathered on the way."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(
        cls, message: str, exception: Optional[Exception] = None
    ) -> "GenerationResult":
        """Build a failed result carrying ``message``."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator,
    schemas: Dict[str, SchemaNode],
    root_schema_name: Optional[str] = None,
) -> GenerationResult:
    """
    Run ``generator`` over ``schemas`` and capture generation failures.

    Args:
        generator: Generator for the target language
        schemas: Declaration name to schema node
        root_schema_name: Name of the main declaration, recorded in metadata

    Returns:
        GenerationResult; ``success`` is False when a GeneratorError occurred
    """
    try:
        warnings = generator.validate_schemas(schemas)
        code = generator.format_code(generator.generate(schemas, root_schema_name))
    except GeneratorError as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    unrecognized = sum(
        isinstance(node, UnrecognizedSchema)
        for schema in schemas.values()
        for node in iter_schema_nodes(schema)
    )
    logger.info(
        "Generated %d %s declaration(s), %d any fallback(s)",
        len(schemas),
        generator.language_name,
        unrecognized,
    )

    return GenerationResult(
        code,
        warnings,
        {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "schema_count": len(schemas),
            "root_schema": root_schema_name,
            "unrecognized_count": unrecognized,
        },
    )
