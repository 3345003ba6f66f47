"""
Jinja2 templates used to frame generated declarations.

Declarations themselves are rendered in Python; templates only lay out a
module around them (header comment, section titles, spacing).
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as Jinja2Error


class TemplateError(Exception):
    """A template is missing or failed to render."""

    pass


class TemplateEngine:
    """Jinja2 environment configured for emitting source code."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Args:
            template_dir: Directory of template files; templates are kept in
                memory when it is None or does not exist
        """
        self.template_dir = template_dir

        if template_dir is not None and template_dir.exists():
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = DictLoader({})

        # Output is source code, never HTML
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._env.filters["indent_code"] = indent_code
        self._env.filters["comment"] = line_comment

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render the named template.

        Raises:
            TemplateError: If the template is missing, references an
                undefined variable or fails to render
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except Jinja2Error as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        """Render template ``source`` given inline."""
        try:
            return self._env.from_string(source).render(**context)
        except Jinja2Error as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template under ``name``."""
        if not isinstance(self._env.loader, DictLoader):
            self._env.loader = DictLoader({})
        self._env.loader.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.list_templates()


def indent_code(value: str, spaces: int = 2) -> str:
    """Indent every non-blank line by ``spaces``."""
    prefix = " " * spaces
    return "\n".join(
        prefix + line if line.strip() else line for line in str(value).split("\n")
    )


def line_comment(value: str, marker: str = "//") -> str:
    """Turn every line into a line comment; blank lines keep a bare marker."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else marker
        for line in str(value).split("\n")
    )


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    return TemplateEngine(template_dir)


# Module layout: header, then per section an optional title and its declarations
TYPESCRIPT_MODULE_TEMPLATE = """\
{% if header_comment %}
{{ header_comment | comment }}

{% endif %}
{% for section in sections %}
{% if section.title and add_comments %}
{{ section.title | comment }}

{% endif %}
{% for declaration in section.declarations %}
{{ declaration }}

{% endfor %}
{% endfor %}
"""
