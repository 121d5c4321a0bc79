"""CensusConfig: immutable run configuration for the census command.

CensusConfig is a frozen dataclass holding where records come from, where the
snapshot is resumed from and written to, and how the HTTP source connects.
SourceKind names which collaborator supplies records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path

DEFAULT_OUTPUT = Path("types.json")
DEFAULT_CREDENTIAL = Path("credential.json")


class SourceKind(StrEnum):
    """Where records are read from.

    - HTTP:  Newline-delimited JSON streamed from ``url``.
    - FILE:  Newline-delimited JSON read from ``input_path`` ("-" is stdin).
    """

    HTTP = auto()
    FILE = auto()


@dataclass(frozen=True, slots=True)
class CensusConfig:
    """Immutable configuration for one census run.

    Attributes:
        url: Streaming endpoint producing one JSON record per line.
        input_path: NDJSON file to read instead of ``url``; ``-`` means stdin.
        credential_path: JSON credential file used with ``url``.
        resume_path: Snapshot to seed the schema from.  Missing or invalid
            files fall back to an empty schema.
        output_path: Snapshot target.  Defaults to ``resume_path``, then
            ``types.json`` (see ``resolved_output``).
        indent: JSON indentation of the snapshot; None writes a single line.
        connect_attempts: Connection attempts for the HTTP source (>= 1).
        timeout: HTTP read timeout in seconds (> 0).
    """

    url: str | None = None
    input_path: Path | None = None
    credential_path: Path = DEFAULT_CREDENTIAL
    resume_path: Path | None = None
    output_path: Path | None = None
    indent: int | None = 2
    connect_attempts: int = 5
    timeout: float = 90.0

    def __post_init__(self) -> None:
        if self.url is not None and self.input_path is not None:
            msg = "url and input_path are mutually exclusive"
            raise ValueError(msg)
        if self.indent is not None and self.indent < 0:
            msg = f"indent must be >= 0, got {self.indent}"
            raise ValueError(msg)
        if self.connect_attempts < 1:
            msg = f"connect_attempts must be >= 1, got {self.connect_attempts}"
            raise ValueError(msg)
        if self.timeout <= 0.0:
            msg = f"timeout must be > 0, got {self.timeout}"
            raise ValueError(msg)

    @property
    def resolved_output(self) -> Path:
        """Snapshot target: output, else resume, else ``types.json``."""
        return self.output_path or self.resume_path or DEFAULT_OUTPUT

    @property
    def source_kind(self) -> SourceKind:
        """Which record source this configuration selects.

        Raises:
            ValueError: If neither ``url`` nor ``input_path`` is set.
        """
        if self.url is not None:
            return SourceKind.HTTP
        if self.input_path is not None:
            return SourceKind.FILE
        msg = "either url or input_path is required"
        raise ValueError(msg)
