"""Main Pipeline Orchestrator.

Coordinates loading both documents and running the comparison.
"""

import asyncio
import logging

import httpx

from rpcdiff.types import Diff, DiffOptions, Document

from .diff_engine import diff_documents
from .document_loader import load_document
from .report import group_by_criticality


# Set up logging
logger = logging.getLogger("rpcdiff.pipeline")


async def diff_sources(
    old_source: str,
    new_source: str,
    options: DiffOptions | None = None,
    client: httpx.AsyncClient | None = None,
) -> Diff:
    """Load two document versions and compare them.

    This is the main entry point for the analysis pipeline.

    Args:
        old_source: Path or URL of the published document.
        new_source: Path or URL of the candidate document.
        options: Comparison options.
        client: Optional HTTP client for URL sources.

    Returns:
        Diff with all classified changes.

    Raises:
        DocumentLoadError: If either source cannot be read.
        DocumentParseError: If either document is invalid.
    """
    options = options or DiffOptions()

    logger.info("=" * 60)
    logger.info("🔍 RPCDIFF ANALYSIS")
    logger.info("=" * 60)

    # Step 1: Load both documents; either failure aborts the run
    logger.info("📄 Step 1: Loading OpenRPC documents...")
    logger.info(f"   Old: {old_source}")
    logger.info(f"   New: {new_source}")
    old, new = await asyncio.gather(
        load_document(old_source, client=client),
        load_document(new_source, client=client),
    )
    _log_document("Old", old)
    _log_document("New", new)

    # Step 2: Deterministic comparison
    logger.info("🔬 Step 2: Comparing documents...")
    if options.compare_meta:
        logger.info("   (including info and servers)")
    diff = diff_documents(old, new, options)
    logger.info(f"   ✓ Detected {len(diff.changes)} change(s)")

    for level, changes in group_by_criticality(diff).items():
        logger.info(f"   {level.label}: {len(changes)}")
        for change in changes:
            logger.debug(f"       {change.object.value} {'.'.join(change.path)}")

    logger.info(f"📊 Overall: {diff.criticality.label}")
    logger.info("=" * 60)

    return diff


def _log_document(label: str, document: Document) -> None:
    logger.info(f"   ✓ {label}: {document.info.title} v{document.info.version} (OpenRPC {document.openrpc})")
    logger.info(f"   ✓ {len(document.methods)} methods, {len(document.schemas)} schemas")
