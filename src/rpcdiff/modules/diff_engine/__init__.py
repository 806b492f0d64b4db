"""Diff Engine Package - Deterministic contract comparison.

This module compares two OpenRPC documents and classifies every
difference by how it affects existing clients. It performs no I/O: the
documents are handed in already parsed.
"""

import logging

from rpcdiff.types import Change, Criticality, Diff, DiffOptions, Document

from .classifiers import DiffContext
from .nodes import Record, to_node
from .reachability import is_required_input
from .rules import classify, match_path
from .tree_differ import TreeDiffer

logger = logging.getLogger("rpcdiff.diff_engine")

# Top-level sections in comparison order.
SECTIONS = ("openrpc", "info", "servers", "methods", "components")

# Sections only compared when metadata comparison is enabled.
META_SECTIONS = frozenset({"info", "servers"})


def diff_documents(
    old: Document,
    new: Document,
    options: DiffOptions | None = None,
) -> Diff:
    """Compare two versions of an API contract.

    This is the main entry point for the diff engine.

    Args:
        old: The currently published document.
        new: The candidate document.
        options: Comparison options; defaults skip metadata sections.

    Returns:
        Diff with every classified change and the overall criticality.
    """
    options = options or DiffOptions()
    context = DiffContext(old=old, new=new, options=options)
    differ = TreeDiffer(context)

    old_root = to_node(old)
    new_root = to_node(new)
    old_fields = old_root.fields if isinstance(old_root, Record) else {}
    new_fields = new_root.fields if isinstance(new_root, Record) else {}

    changes: list[Change] = []
    for section in SECTIONS:
        if section in META_SECTIONS and not options.compare_meta:
            logger.debug(f"Skipping {section} section")
            continue
        section_changes = differ.compare(
            old_fields.get(section),
            new_fields.get(section),
            [section],
        )
        logger.debug(f"Section {section}: {len(section_changes)} change(s)")
        changes.extend(section_changes)

    # Anything outside the known sections (e.g. externalDocs).
    changes.extend(differ.compare(old_root, new_root, [], exclude=SECTIONS))

    return Diff(criticality=overall_criticality(changes), changes=changes)


def overall_criticality(changes: list[Change]) -> Criticality:
    """Highest criticality among the changes; non breaking when empty."""
    level = Criticality.NON_BREAKING
    for change in changes:
        if change.criticality.rank > level.rank:
            level = change.criticality
    return level


__all__ = [
    "DiffContext",
    "TreeDiffer",
    "classify",
    "diff_documents",
    "is_required_input",
    "match_path",
    "overall_criticality",
]
