"""Exceptions raised before any comparison starts.

The diff engine itself never raises on odd document shapes; these cover
getting a document in hand.
"""


class RpcDiffError(Exception):
    """Base class for rpcdiff errors."""


class DocumentLoadError(RpcDiffError):
    """A document source could not be read (missing file, HTTP failure)."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read {source}: {reason}")


class DocumentParseError(RpcDiffError, ValueError):
    """A document is not a valid OpenRPC contract."""
