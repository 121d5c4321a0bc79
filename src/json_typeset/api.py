"""Public convenience functions for json-typeset.

``infer_schema`` folds a finite batch of values into a fresh TypeSet and
returns its encoded form; ``run`` wires a CensusConfig to the long-running
census loop.  Each call builds its own root, so calls never share state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from json_typeset.census import SchemaCensus
from json_typeset.checkpoint import CheckpointWriter, load_snapshot, open_target
from json_typeset.config import CensusConfig, SourceKind
from json_typeset.runner import install_shutdown_handlers, run_census
from json_typeset.snapshot import encode
from json_typeset.sources.http import HttpStreamSource, load_credential
from json_typeset.sources.lines import FileSource
from json_typeset.typeset.merge import TypeSetMerger
from json_typeset.typeset.nodes import TypeSet

if TYPE_CHECKING:
    from collections.abc import Iterable

    from json_typeset.protocols import RecordSource
    from json_typeset.result import IngestStats

__all__ = ["build_source", "infer_schema", "run"]

logger = logging.getLogger(__name__)


def infer_schema(values: Iterable[Any], root: TypeSet | None = None) -> dict[str, Any]:
    """Return the encoded schema observed across ``values``.

    Args:
        values: Decoded JSON values, folded in order.
        root:   Optional tree to extend in place; a fresh TypeSet by default.

    Returns:
        The snapshot mapping (see ``json_typeset.snapshot.encode``).
    """
    node = root if root is not None else TypeSet()
    merger = TypeSetMerger()
    for value in values:
        merger.merge(node, value)
    return encode(node)


def build_source(config: CensusConfig) -> RecordSource:
    """Instantiate the record source selected by ``config``.

    Raises:
        ValueError: If the configuration names no source.
        SourceError: If the HTTP credential cannot be loaded.
    """
    kind = config.source_kind
    if kind is SourceKind.HTTP and config.url is not None:
        return HttpStreamSource(
            config.url,
            load_credential(config.credential_path),
            connect_attempts=config.connect_attempts,
            timeout=config.timeout,
        )
    if kind is SourceKind.FILE and config.input_path is not None:
        return FileSource(config.input_path)
    msg = f"unsupported source kind: {kind}"
    raise ValueError(msg)


async def _run(config: CensusConfig, source: RecordSource) -> IngestStats:
    root = load_snapshot(config.resume_path)
    output = config.resolved_output
    shutdown = asyncio.Event()
    install_shutdown_handlers(shutdown)
    with open_target(output) as handle:
        logger.info("reading %r, writing snapshots to %s", source, output)
        census = SchemaCensus(CheckpointWriter(handle, indent=config.indent), root)
        return await run_census(source, census, shutdown)


def run(config: CensusConfig, source: RecordSource | None = None) -> IngestStats:
    """Run a census until the stream ends or SIGINT/SIGTERM arrives.

    Args:
        config: Run configuration.
        source: Record source; built from ``config`` when None.

    Returns:
        Stats for the run, after the final checkpoint.
    """
    if source is None:
        source = build_source(config)
    return asyncio.run(_run(config, source))
