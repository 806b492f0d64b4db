"""rpcdiff - classify changes between two OpenRPC schema versions."""

from rpcdiff.modules.diff_engine import diff_documents
from rpcdiff.modules.openrpc_parser import parse_document
from rpcdiff.types import Change, ChangeObject, ChangeType, Criticality, Diff, DiffOptions, Document

__version__ = "0.1.0"

__all__ = [
    "Change",
    "ChangeObject",
    "ChangeType",
    "Criticality",
    "Diff",
    "DiffOptions",
    "Document",
    "diff_documents",
    "parse_document",
]
