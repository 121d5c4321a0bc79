"""SchemaCensus: change-driven persistence around the TypeSet merge.

Every observed value is merged into the root unconditionally.  A checkpoint is
written only when the merge reports growth, so a mature schema fed a steady
stream of familiar records costs no I/O.  ``finish()`` writes one final
checkpoint regardless, so the file never lags the in-memory tree.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from json_typeset.result import IngestStats
from json_typeset.typeset.merge import JsonValue, TypeSetMerger
from json_typeset.typeset.nodes import TypeSet

if TYPE_CHECKING:
    from json_typeset.checkpoint import CheckpointWriter

__all__ = ["SchemaCensus"]

logger = logging.getLogger(__name__)


class SchemaCensus:
    """Owns the root TypeSet and decides when to checkpoint it.

    Args:
        writer: Checkpoint writer for the output target.
        root:   Seed tree, typically decoded from a previous snapshot.
                Defaults to a fresh empty TypeSet.
    """

    def __init__(self, writer: CheckpointWriter, root: TypeSet | None = None) -> None:
        self._writer = writer
        self._root = root if root is not None else TypeSet()
        self._merger = TypeSetMerger()
        self._records = 0
        self._changed = 0
        self._started = time.perf_counter()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def root(self) -> TypeSet:
        """The live schema tree."""
        return self._root

    @property
    def records(self) -> int:
        """Number of values observed so far."""
        return self._records

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def observe(self, value: JsonValue) -> bool:
        """Merge ``value`` and checkpoint if the schema grew.

        Returns:
            The merge's changed flag.

        Raises:
            CheckpointError: If the checkpoint write fails.
        """
        self._records += 1
        changed = self._merger.merge(self._root, value)
        if changed:
            self._changed += 1
            logger.debug("record %d grew the schema", self._records)
            self._writer.write(self._root)
        return changed

    def finish(self, dropped: int = 0) -> IngestStats:
        """Write the final unconditional checkpoint and summarise the run.

        Args:
            dropped: Undecodable records reported by the source.

        Raises:
            CheckpointError: If the final checkpoint write fails.
        """
        self._writer.write(self._root)
        elapsed_ms = (time.perf_counter() - self._started) * 1000.0
        return IngestStats(
            records=self._records,
            changed=self._changed,
            checkpoints=self._writer.writes,
            dropped=dropped,
            elapsed_ms=elapsed_ms,
        )
