"""Package import and public API surface checks."""

from __future__ import annotations


def test_import() -> None:
    """Verify top-level package is importable."""
    import json_typeset

    assert json_typeset.__version__ == "0.1.0"


def test_all_exports() -> None:
    """__all__ must match the documented public API."""
    import json_typeset

    expected = {
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
    }
    assert set(json_typeset.__all__) == expected
    for name in expected:
        assert hasattr(json_typeset, name), name


def test_error_hierarchy() -> None:
    from json_typeset import CheckpointError, SnapshotDecodeError, SourceError, TypesetError

    assert issubclass(SnapshotDecodeError, TypesetError)
    assert issubclass(SnapshotDecodeError, ValueError)
    assert issubclass(CheckpointError, TypesetError)
    assert issubclass(CheckpointError, OSError)
    assert issubclass(SourceError, TypesetError)
    assert issubclass(SourceError, ConnectionError)
