"""
Naming utilities for safe code generation.

Builds declaration names from API paths and HTTP methods. Names taken from
the document itself (component names, reference targets) are passed
through untouched.
"""

import re
from typing import Iterable, List

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def capitalize_first(value: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return value[:1].upper() + value[1:]


def split_words(value: str) -> List[str]:
    """Split on every non-alphanumeric character."""
    return [word for word in _WORD_SPLIT.split(value) if word]


def path_segments(path: str) -> List[str]:
    """
    Split an API path into its literal segments.

    Template braces are dropped, so ``/users/{id}`` yields
    ``["users", "id"]``.
    """
    segments = []
    for segment in path.split("/"):
        segment = segment.replace("{", "").replace("}", "")
        if segment:
            segments.append(segment)
    return segments


def pascal_join(parts: Iterable[str]) -> str:
    """Join parts after capitalizing the first letter of every word."""
    return "".join(
        capitalize_first(word) for part in parts for word in split_words(part)
    )


def operation_type_name(method: str, path: str) -> str:
    """
    Build the declaration name prefix for an API operation.

    Args:
        method: HTTP method, any case
        path: Templated path such as ``/users/{user-id}/posts``

    Returns:
        Name such as ``GetUsersUserIdPosts``
    """
    return pascal_join([method.lower()] + path_segments(path))
