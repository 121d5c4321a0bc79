"""IngestStats dataclass summarising one census run.

This module provides the result type returned by ``SchemaCensus.finish()``
and ``run_census()``.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["IngestStats"]


@dataclass(frozen=True, slots=True)
class IngestStats:
    """Summary of a finished census run.

    Attributes:
        records: Number of values merged into the schema.
        changed: Number of those values that grew the schema.
        checkpoints: Number of snapshots written, including the final one.
        dropped: Number of undecodable records discarded by the source.
        elapsed_ms: Wall-clock duration of the run in milliseconds.
    """

    records: int
    changed: int
    checkpoints: int
    dropped: int
    elapsed_ms: float
