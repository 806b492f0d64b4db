"""Document Loader Module.

Fetches OpenRPC documents from a local path or an HTTP(S) URL.
No retry logic: a failed read aborts the run before any comparison.
"""

import logging
import time
from urllib.parse import urlparse

import httpx

from rpcdiff.errors import DocumentLoadError
from rpcdiff.types import Document

from .openrpc_parser import load_document_from_file, parse_document

logger = logging.getLogger("rpcdiff.loader")


def is_url(source: str) -> bool:
    """True if the source looks like an HTTP(S) URL rather than a path."""
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def fetch_text(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> str:
    """Download a document body.

    Args:
        url: Document URL.
        client: Optional client to reuse; a short-lived one is created
            otherwise.
        timeout: Request timeout in seconds.

    Returns:
        The response text.

    Raises:
        DocumentLoadError: On network errors or non-2xx responses.
    """
    start_time = time.perf_counter()
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise DocumentLoadError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise DocumentLoadError(url, str(e) or type(e).__name__) from e

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(f"Fetched {url} in {elapsed_ms:.0f}ms ({len(response.content)} bytes)")
    return response.text


async def load_document(
    source: str,
    client: httpx.AsyncClient | None = None,
) -> Document:
    """Load and parse a document from a file path or URL.

    Args:
        source: Local file path or HTTP(S) URL.
        client: Optional HTTP client used for URL sources.

    Returns:
        The parsed Document.

    Raises:
        DocumentLoadError: If the source cannot be read.
        DocumentParseError: If the content is not a valid document.
    """
    if is_url(source):
        text = await fetch_text(source, client=client)
        return parse_document(text)
    return load_document_from_file(source)
