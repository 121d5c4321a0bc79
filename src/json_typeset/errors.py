"""Exception types raised by json-typeset."""

from __future__ import annotations

__all__ = ["CheckpointError", "SnapshotDecodeError", "SourceError", "TypesetError"]


class TypesetError(Exception):
    """Base class for all json-typeset errors."""


class SnapshotDecodeError(TypesetError, ValueError):
    """A snapshot document does not describe a valid TypeSet tree."""


class CheckpointError(TypesetError, OSError):
    """Rewriting the checkpoint target failed; the run cannot continue safely."""


class SourceError(TypesetError, ConnectionError):
    """The record stream could not be opened or broke irrecoverably."""
