"""
Command line interface for openapi-typegen.

Provides the ``schema`` and ``openapi`` subcommands with rich formatted
output.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from .codegen import __version__
from .codegen.core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from .codegen.core.generator import GenerationResult, GeneratorError, generate_code
from .codegen.core.schema import SchemaParseError, parse_schema
from .codegen.languages.typescript import TypeScriptGenerator
from .logging_config import configure_logging, get_logger
from .openapi import OpenApiConverter, OpenApiError
from .utils import DocumentLoadError, document_kind, load_document, read_document_stream

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="openapi-typegen",
        description="Generate TypeScript types from JSON Schema and OpenAPI documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  openapi-typegen schema user.schema.json --name User
  openapi-typegen schema --stdin --name Payload --prefer-unknown < payload.json
  openapi-typegen openapi petstore.json -o petstore.ts
  openapi-typegen openapi --url https://example.com/openapi.json --format json
        """.strip(),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    schema_parser = subparsers.add_parser(
        "schema",
        help="Convert a single schema to a TypeScript declaration",
        description="Convert a single JSON Schema object to a TypeScript declaration",
    )
    _add_input_args(schema_parser)
    schema_parser.add_argument(
        "--name",
        "-n",
        default="Root",
        help="Name of the generated type (default: Root)",
    )
    _add_common_args(schema_parser)
    schema_parser.set_defaults(func=_handle_schema_command)

    openapi_parser = subparsers.add_parser(
        "openapi",
        help="Convert every operation and component of an OpenAPI document",
        description="Convert the operations and component schemas of an OpenAPI document",
    )
    _add_input_args(openapi_parser)
    openapi_parser.add_argument(
        "--format",
        choices=["ts", "json"],
        default="ts",
        help="ts: one TypeScript module (default); json: per-operation records",
    )
    _add_common_args(openapi_parser)
    openapi_parser.set_defaults(func=_handle_openapi_command)

    return parser


def _add_input_args(parser: argparse.ArgumentParser):
    """Add mutually exclusive input source arguments."""
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("file", nargs="?", help="JSON file to convert")
    input_group.add_argument("--url", help="URL to fetch JSON from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read JSON from standard input"
    )


def _add_common_args(parser: argparse.ArgumentParser):
    """Add output and generation options shared by all subcommands."""
    parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print generated code without highlighting",
    )

    gen_group = parser.add_argument_group("generation options")
    gen_group.add_argument(
        "--prefer-unknown",
        action="store_true",
        help="Spell unconstrained values as 'unknown' instead of 'any'",
    )
    gen_group.add_argument(
        "--prefer-interface",
        action="store_true",
        help="Declare plain object types as interfaces",
    )
    gen_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't emit documentation comments",
    )
    gen_group.add_argument(
        "--indent-size", type=int, metavar="N", help="Spaces per nesting level"
    )
    gen_group.add_argument("--header", help="Comment placed at the top of the output")
    gen_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show generation metadata and debug logging",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the ``openapi-typegen`` command.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        logger.debug("CLI error", exc_info=True)
        return 1


def _handle_schema_command(args: argparse.Namespace) -> int:
    """Handle the schema subcommand."""
    config = _build_config(args)
    source, data = _load_input(args)

    try:
        node = parse_schema(data)
    except SchemaParseError as e:
        raise CLIError(str(e)) from e

    generator = TypeScriptGenerator(config)
    result = generate_code(generator, {args.name: node}, args.name)
    if not result.success:
        raise CLIError(result.error_message)

    result.metadata["source"] = source
    result.metadata["document"] = document_kind(data)
    return _output_result(result, "typescript", config, args)


def _handle_openapi_command(args: argparse.Namespace) -> int:
    """Handle the openapi subcommand."""
    config = _build_config(args)
    source, data = _load_input(args)

    generator = TypeScriptGenerator(config)
    try:
        output = OpenApiConverter(generator).convert(data)
        if args.format == "json":
            code = json.dumps(output.to_dict(), indent=2, ensure_ascii=False) + "\n"
        else:
            code = output.render_module()
    except (OpenApiError, GeneratorError) as e:
        raise CLIError(str(e)) from e

    warnings = [f"Skipped path {error.path}: {error.message}" for error in output.errors]
    metadata = {
        "language": "json" if args.format == "json" else generator.language_name,
        "source": source,
        "document": document_kind(data),
        "operation_count": len(output.paths),
        "component_count": len(output.components),
        "skipped_paths": len(output.errors),
    }
    result = GenerationResult(code, warnings, metadata)
    return _output_result(
        result, "json" if args.format == "json" else "typescript", config, args
    )


def _load_input(args: argparse.Namespace) -> tuple[str, Any]:
    """Get input data from the file, URL or stdin."""
    try:
        if args.stdin:
            return read_document_stream(sys.stdin)
        if args.url:
            return load_document(url=args.url)
        return load_document(path=args.file)
    except (DocumentLoadError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load input: {e}") from e


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    config_dict = {}

    if args.prefer_unknown:
        config_dict["prefer_unknown_over_any"] = True

    if args.prefer_interface:
        config_dict["prefer_interface_over_type"] = True

    if args.no_comments:
        config_dict["add_comments"] = False

    if args.indent_size is not None:
        config_dict["indent_size"] = args.indent_size

    if args.header is not None:
        config_dict["header_comment"] = args.header

    try:
        config = load_config(custom_config=config_dict, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config):
        logger.warning("%s", warning)

    return config


def _output_result(
    result: GenerationResult,
    syntax_language: str,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> int:
    """Write generated code and report metadata and warnings."""
    output_file = args.output or config.output_file
    if output_file:
        output_path = Path(output_file)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Failed to write to {output_path}: {e}") from e
        console.print(
            f"[green]✓[/green] Generated code saved to [cyan]{output_path}[/cyan]"
        )
    elif args.raw:
        sys.stdout.write(result.code)
    else:
        console.print(Syntax(result.code, syntax_language, theme="monokai"))

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )

        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        console.print()
        console.print(metadata_table)

    # Warnings go to stderr
    if result.warnings:
        err_console = Console(stderr=True)
        err_console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            err_console.print(f"  [yellow]•[/yellow] {escape(warning)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
