"""CheckpointWriter: rewrites one long-lived handle with the latest snapshot.

The writer never closes or reopens its target.  Each ``write()`` seeks to the
start, truncates, writes the whole snapshot, flushes and (for real files)
fsyncs, so after a completed call the target holds exactly one complete
snapshot.

A call interrupted part-way through (process killed between truncate and
flush) can leave the target empty or partially written.  Nothing here tries to
hide that: the next completed checkpoint repairs it.

Example::

    from json_typeset.checkpoint import CheckpointWriter, load_snapshot, open_target

    root = load_snapshot("types.json")
    with open_target("types.json") as handle:
        writer = CheckpointWriter(handle)
        writer.write(root)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from json_typeset.errors import CheckpointError, SnapshotDecodeError
from json_typeset.snapshot import dumps, loads
from json_typeset.typeset.nodes import TypeSet

if TYPE_CHECKING:
    from json_typeset.protocols import CheckpointTarget

__all__ = ["CheckpointWriter", "load_snapshot", "open_target"]

logger = logging.getLogger(__name__)


class CheckpointWriter:
    """Durably overwrites a single open target with encoded snapshots.

    Args:
        target: Any object satisfying the ``CheckpointTarget`` Protocol
            (seek/truncate/write/flush).  Ownership stays with the caller.
        indent: JSON indentation for the snapshot text.  None writes one line.
    """

    def __init__(self, target: CheckpointTarget, indent: int | None = 2) -> None:
        # Any object with the CheckpointTarget methods is accepted.
        self._target: Any = target
        self._indent = indent
        self._writes = 0

    @property
    def writes(self) -> int:
        """Number of checkpoints completed by this writer."""
        return self._writes

    def write(self, node: TypeSet) -> None:
        """Replace the target's contents with the snapshot of ``node``.

        Raises:
            CheckpointError: If any of seek, truncate, write, flush or fsync
                fails.  The target's contents are then unspecified.
        """
        text = dumps(node, indent=self._indent)
        try:
            self._target.seek(0)
            self._target.truncate(0)
            self._target.write(text)
            self._target.flush()
            self._sync()
        except (OSError, ValueError) as exc:
            raise CheckpointError(f"checkpoint write failed: {exc}") from exc
        self._writes += 1
        logger.debug("checkpoint %d written (%d chars)", self._writes, len(text))

    def _sync(self) -> None:
        """fsync the underlying descriptor when the target is a real file."""
        fileno = getattr(self._target, "fileno", None)
        if fileno is None:
            return
        try:
            fd = fileno()
        except OSError:
            # In-memory streams raise io.UnsupportedOperation (an OSError).
            return
        os.fsync(fd)


def open_target(path: str | os.PathLike[str]) -> TextIO:
    """Open ``path`` for repeated in-place rewriting.

    Parent directories and the file itself are created when missing; existing
    content is left untouched until the first checkpoint.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(target, os.O_RDWR | os.O_CREAT, 0o644)
    return os.fdopen(fd, "r+", encoding="utf-8")


def load_snapshot(path: str | os.PathLike[str] | None) -> TypeSet:
    """Decode a previously written snapshot to seed a run.

    A missing path, an unreadable file or an invalid snapshot is not fatal:
    a warning is logged and a fresh empty TypeSet is returned.
    """
    if path is None:
        return TypeSet()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("no snapshot at %s, starting from an empty schema", path)
        return TypeSet()
    except OSError as exc:
        logger.warning("cannot read snapshot %s (%s), starting from an empty schema", path, exc)
        return TypeSet()
    try:
        root = loads(text)
    except SnapshotDecodeError as exc:
        logger.warning("ignoring invalid snapshot %s: %s", path, exc)
        return TypeSet()
    logger.info("resumed schema from %s", path)
    return root
