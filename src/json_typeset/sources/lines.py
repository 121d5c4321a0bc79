"""Newline-delimited JSON decoding and the file/stdin record source.

``LineDecoder`` is shared by every source: it turns raw lines into decoded
JSON values, skips blank keep-alive lines and drops (with a warning) anything
that is not UTF-8, does not parse, or nests deeper than ``MAX_DEPTH``, so the
census never sees input it cannot merge and checkpoint.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import logging
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from json_typeset.errors import SourceError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

__all__ = ["MAX_DEPTH", "FileSource", "LineDecoder"]

logger = logging.getLogger(__name__)

# Deepest container nesting accepted in a record.  The merge engine and the
# snapshot codec recurse once or twice per level.
MAX_DEPTH = 200

# Longest slice of a rejected line quoted in the warning.
_PREVIEW = 80
# Lines buffered between the reader thread and the event loop.
_QUEUE_SIZE = 1024


def _too_deep(value: Any, limit: int = MAX_DEPTH) -> bool:
    """True when ``value`` nests containers more than ``limit`` levels deep."""
    stack = [(value, 1)]
    while stack:
        item, level = stack.pop()
        if isinstance(item, dict):
            children = item.values()
        elif isinstance(item, list):
            children = item
        else:
            continue
        if level > limit:
            return True
        stack.extend((child, level + 1) for child in children)
    return False


class LineDecoder:
    """Decodes NDJSON lines and counts the ones it had to drop."""

    def __init__(self) -> None:
        self.dropped = 0

    def decode(self, line: str | bytes) -> tuple[bool, Any]:
        """Decode one line.

        ``bytes`` lines are decoded as UTF-8 first.

        Returns:
            ``(True, value)`` for a JSON record, ``(False, None)`` for a blank
            or rejected line.
        """
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                preview = line.decode("utf-8", "replace")
                return self._drop(f"invalid UTF-8: {exc.reason}", preview)
        text = line.strip()
        if not text:
            return False, None
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            return self._drop(exc.msg, text)
        except (ValueError, RecursionError) as exc:
            return self._drop(str(exc), text)
        if _too_deep(value):
            return self._drop(f"nested deeper than {MAX_DEPTH} levels", text)
        return True, value

    def _drop(self, reason: str, text: str) -> tuple[bool, Any]:
        self.dropped += 1
        logger.warning("dropping malformed record (%s): %.*s", reason, _PREVIEW, text.strip())
        return False, None

    async def decode_lines(self, lines: AsyncIterable[str | bytes]) -> AsyncIterator[Any]:
        """Yield the decoded value of every well-formed line in ``lines``.

        ``lines`` is closed (when it supports ``aclose``) as soon as this
        generator finishes, is closed, or is cancelled.
        """
        try:
            async for line in lines:
                ok, value = self.decode(line)
                if ok:
                    yield value
        finally:
            aclose = getattr(lines, "aclose", None)
            if aclose is not None:
                await aclose()


class FileSource:
    """Reads NDJSON records from a file, or from stdin when ``path`` is ``-``.

    Blocking reads run in a worker thread so the event loop stays free to
    notice a shutdown request while waiting for the next line.

    Args:
        path: File to read, or ``-`` for stdin.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._decoder = LineDecoder()

    def __repr__(self) -> str:
        return f"FileSource(path={self._path!r})"

    @property
    def dropped(self) -> int:
        """Malformed records discarded so far."""
        return self._decoder.dropped

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._decoder.decode_lines(self._lines())

    async def _lines(self) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[bytes | SourceError | None] = asyncio.Queue(maxsize=_QUEUE_SIZE)
        reader = threading.Thread(
            target=self._pump, args=(loop, queue), name="json-typeset-reader", daemon=True
        )
        reader.start()
        while (item := await queue.get()) is not None:
            if isinstance(item, SourceError):
                raise item
            yield item

    def _pump(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[bytes | SourceError | None],
    ) -> None:
        """Reader thread: push every line, then None, onto ``queue``.

        Runs as a daemon so a blocked stdin read never holds up interpreter
        exit after shutdown.  Read errors are handed to the loop as a
        SourceError in place of the end marker.
        """

        def put(item: bytes | SourceError | None) -> None:
            asyncio.run_coroutine_threadsafe(queue.put(item), loop).result()

        end: SourceError | None = None
        try:
            try:
                if self._path == "-":
                    for line in sys.stdin.buffer:
                        put(line)
                else:
                    with open(self._path, "rb") as stream:
                        for line in stream:
                            put(line)
            except (OSError, ValueError) as exc:
                end = SourceError(f"cannot read {self._path}: {exc}")
            put(end)
        except (RuntimeError, concurrent.futures.CancelledError):
            # Event loop closed or the put was cancelled; nobody is listening any more.
            return
