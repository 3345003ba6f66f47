"""
TypeScript-specific naming rules.

Property keys that are not plain identifiers are written as quoted
string keys. Reserved words are legal property keys, so only declaration
names need checking against them.
"""

import json
import re

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Names that cannot be used as a type alias or interface name
TYPESCRIPT_RESERVED_TYPE_NAMES = {
    "any",
    "bigint",
    "boolean",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "never",
    "new",
    "null",
    "number",
    "object",
    "return",
    "string",
    "super",
    "switch",
    "symbol",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "undefined",
    "unknown",
    "var",
    "void",
    "while",
    "with",
}


def is_valid_identifier(name: str) -> bool:
    """Check whether ``name`` is a plain (ASCII) TypeScript identifier."""
    return bool(_IDENTIFIER.match(name))


def format_property_name(name: str) -> str:
    """Return ``name`` as a property key, quoting it when required."""
    if is_valid_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def is_valid_type_name(name: str) -> bool:
    """Check whether ``name`` can be declared as a type or interface."""
    return is_valid_identifier(name) and name not in TYPESCRIPT_RESERVED_TYPE_NAMES
