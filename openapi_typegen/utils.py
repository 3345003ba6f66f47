"""Loading of schema and OpenAPI documents.

Documents are JSON only. They can come from a local path, an http(s) URL
or an already open text stream; every loader returns a short label for
the source together with the decoded document.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30

ACCEPT_HEADER = "application/json, application/*+json;q=0.9, */*;q=0.1"


class DocumentLoadError(Exception):
    """A document could not be read or is not valid JSON."""

    pass


def read_document(path: str | Path) -> tuple[str, Any]:
    """Read and decode a JSON document from disk.

    Args:
        path: Location of the document.

    Returns:
        Tuple of (source label, decoded document).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        DocumentLoadError: If the file cannot be read or decoded.
    """
    path = Path(path)
    logger.debug("Reading document %s", path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() != ".json":
        # YAML is not supported; anything else may still hold JSON
        logger.warning("Expected a .json document, got %s", path.name)

    try:
        with path.open("r", encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"{path} is not valid JSON: {e}") from e
    except OSError as e:
        raise DocumentLoadError(f"Cannot read {path}: {e}") from e

    logger.info("Loaded %s document from %s", document_kind(document), path)
    return f"📄 {path}", document


def fetch_document(url: str, timeout: int = DEFAULT_TIMEOUT) -> tuple[str, Any]:
    """Download and decode a JSON document.

    Args:
        url: http(s) address of the document.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source label, decoded document).

    Raises:
        DocumentLoadError: On a malformed URL, a failed request or a body
            that is not JSON.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise DocumentLoadError(f"Not an http(s) URL: {url}")

    logger.debug("Fetching document %s", url)
    try:
        response = requests.get(url, timeout=timeout, headers={"Accept": ACCEPT_HEADER})
        response.raise_for_status()
        document = response.json()
    except requests.exceptions.Timeout as e:
        raise DocumentLoadError(f"Timed out after {timeout}s fetching {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        raise DocumentLoadError(f"HTTP {status} fetching {url}") from e
    except requests.exceptions.RequestException as e:
        # includes connection failures and undecodable bodies
        raise DocumentLoadError(f"Cannot fetch {url}: {e}") from e

    logger.info("Loaded %s document from %s", document_kind(document), url)
    return f"🌐 {url}", document


def read_document_stream(stream: TextIO, name: str = "<stdin>") -> tuple[str, Any]:
    """Decode a JSON document from an open text stream."""
    try:
        document = json.load(stream)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"{name} is not valid JSON: {e}") from e
    logger.info("Loaded %s document from %s", document_kind(document), name)
    return f"📥 {name}", document


def load_document(
    path: str | Path | None = None,
    url: str | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> tuple[str, Any]:
    """Load a document from exactly one of ``path`` or ``url``.

    Raises:
        DocumentLoadError: If neither or both sources are given, or loading
            fails.
        FileNotFoundError: If ``path`` does not exist.
    """
    if bool(path) == bool(url):
        raise DocumentLoadError("Give exactly one of a file path or a URL")
    if path:
        return read_document(path)
    return fetch_document(url, timeout)


def document_kind(document: Any) -> str:
    """Describe a decoded document, e.g. ``OpenAPI 3.0.3`` or ``JSON Schema``."""
    if not isinstance(document, Mapping):
        return "non-object"
    if "openapi" in document:
        return f"OpenAPI {document['openapi']}"
    if "swagger" in document:
        return f"Swagger {document['swagger']}"
    return "JSON Schema"
