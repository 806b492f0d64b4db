"""OpenRPC Document Parser.

Parses OpenRPC documents (JSON, or YAML for hand-written contracts) into
the typed document model.
"""

from typing import Any

import yaml
from pydantic import ValidationError

from rpcdiff.errors import DocumentLoadError, DocumentParseError
from rpcdiff.types import Document


def parse_document(content: str | bytes | dict[str, Any]) -> Document:
    """Parse an OpenRPC document.

    Args:
        content: Document as JSON/YAML text or an already-decoded mapping.

    Returns:
        The typed Document.

    Raises:
        DocumentParseError: If the text is malformed or is not an
            OpenRPC document.
    """
    # JSON is a subset of YAML, so one loader covers both.
    if isinstance(content, (str, bytes)):
        try:
            raw = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentParseError(f"Malformed document: {e}") from e
    else:
        raw = content

    if not isinstance(raw, dict):
        raise DocumentParseError(f"Expected a JSON object, got {type(raw).__name__}")

    if "openrpc" not in raw:
        raise DocumentParseError("Missing 'openrpc' version field. Is this an OpenRPC document?")

    try:
        return Document.model_validate(raw)
    except ValidationError as e:
        raise DocumentParseError(f"Invalid OpenRPC document: {e}") from e


def load_document_from_file(file_path: str) -> Document:
    """Load and parse an OpenRPC document from a file.

    Args:
        file_path: Path to a JSON or YAML document.

    Returns:
        Parsed OpenRPC document.

    Raises:
        DocumentLoadError: If the file cannot be read.
        DocumentParseError: If the content is not a valid document.
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise DocumentLoadError(file_path, e.strerror or str(e)) from e
    return parse_document(content)
