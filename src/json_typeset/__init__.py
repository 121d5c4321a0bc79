"""json-typeset - incremental type-set schema inference for JSON record streams."""

from __future__ import annotations

from json_typeset.api import infer_schema, run
from json_typeset.census import SchemaCensus
from json_typeset.checkpoint import CheckpointWriter, load_snapshot, open_target
from json_typeset.config import CensusConfig, SourceKind
from json_typeset.errors import (
    CheckpointError,
    SnapshotDecodeError,
    SourceError,
    TypesetError,
)
from json_typeset.result import IngestStats
from json_typeset.snapshot import decode, dumps, encode, loads
from json_typeset.typeset import ObservedType, TypeSet, TypeSetMerger, merge

__version__: str = "0.1.0"
__all__: list[str] = [
    "CensusConfig",
    "CheckpointError",
    "CheckpointWriter",
    "IngestStats",
    "ObservedType",
    "SchemaCensus",
    "SnapshotDecodeError",
    "SourceError",
    "SourceKind",
    "TypeSet",
    "TypeSetMerger",
    "TypesetError",
    "decode",
    "dumps",
    "encode",
    "infer_schema",
    "load_snapshot",
    "loads",
    "merge",
    "open_target",
    "run",
]
