"""Structural protocols for the collaborators the census loop depends on.

Any object with the right methods satisfies these protocols at runtime, no
inheritance required.  A plain text file opened for reading and writing is a
``CheckpointTarget``; ``io.StringIO`` is one too, which keeps tests simple.

Example::

    import io
    from json_typeset.protocols import CheckpointTarget

    assert isinstance(io.StringIO(), CheckpointTarget)  # True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@runtime_checkable
class CheckpointTarget(Protocol):
    """Seekable, truncatable, writable text handle holding the latest snapshot.

    The handle stays open for the whole run; every checkpoint rewrites it from
    offset zero.
    """

    def seek(self, offset: int, whence: int = 0, /) -> int: ...

    def truncate(self, size: int | None = None, /) -> int: ...

    def write(self, text: str, /) -> int: ...

    def flush(self) -> None: ...


@runtime_checkable
class RecordSource(Protocol):
    """Async iterable of decoded JSON values, one per stream record.

    Sources drop undecodable input themselves; everything they yield is a
    valid JSON value.  ``dropped`` counts the records discarded so far.
    """

    dropped: int

    def __aiter__(self) -> AsyncIterator[Any]: ...
