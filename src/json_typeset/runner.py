"""Async ingestion loop racing the record stream against a shutdown event.

``run_census`` consumes one record per iteration.  Each iteration waits on two
things at once, the next record and the shutdown event, and shutdown wins
whenever both are ready, even when the source failed instead of yielding.
The merge and any checkpoint it triggers run inline before the next record
is requested, so the tree is never mutated concurrently.

When shutdown is requested or the stream ends, the final checkpoint is written
and the run's ``IngestStats`` is returned.  A failing checkpoint propagates
immediately; a failing source still gets its final checkpoint before the
error propagates.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING, Any

from json_typeset.errors import CheckpointError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

    from json_typeset.census import SchemaCensus
    from json_typeset.result import IngestStats

__all__ = ["install_shutdown_handlers", "run_census"]

logger = logging.getLogger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_shutdown_handlers(event: asyncio.Event) -> None:
    """Set ``event`` on SIGINT/SIGTERM for the running event loop.

    Platforms without ``loop.add_signal_handler`` (Windows) keep the default
    KeyboardInterrupt behaviour.
    """
    loop = asyncio.get_running_loop()

    def _request_shutdown(signame: str) -> None:
        logger.info("received %s, stopping after the current record", signame)
        event.set()

    for sig in _SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, _request_shutdown, sig.name)
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("signal handlers unsupported for %s", sig.name)


# Returned by _next() when the stream is exhausted.
_END = object()


async def _next(records: AsyncIterator[Any]) -> Any:
    try:
        return await anext(records)
    except StopAsyncIteration:
        return _END


async def _cancel(task: asyncio.Future[Any]) -> None:
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def _discard(task: asyncio.Future[Any]) -> None:
    """Drop a record request overtaken by shutdown without raising its error."""
    if not task.done():
        await _cancel(task)
        return
    if not task.cancelled() and (exc := task.exception()) is not None:
        logger.warning("ignoring source error raised during shutdown: %s", exc)


async def _close(records: AsyncIterator[Any]) -> None:
    aclose = getattr(records, "aclose", None)
    if aclose is not None:
        await aclose()


async def run_census(
    source: AsyncIterable[Any],
    census: SchemaCensus,
    shutdown: asyncio.Event,
) -> IngestStats:
    """Feed ``source`` into ``census`` until shutdown or end of stream.

    Args:
        source:   Async iterable of decoded JSON values.  If it exposes a
                  ``dropped`` counter it is copied into the returned stats.
        census:   The persistence policy owning the root TypeSet.
        shutdown: Event whose setting stops consumption.

    Returns:
        Stats for the run, taken after the final checkpoint.

    Raises:
        CheckpointError: A checkpoint failed; no final checkpoint is attempted.
        Exception: Any error raised by ``source``, after the final checkpoint.
    """
    records = aiter(source)
    stop = asyncio.ensure_future(shutdown.wait())
    try:
        while not shutdown.is_set():
            pending = asyncio.ensure_future(_next(records))
            done, _ = await asyncio.wait({pending, stop}, return_when=asyncio.FIRST_COMPLETED)
            if stop in done or shutdown.is_set():
                await _discard(pending)
                logger.info("shutdown requested after %d records", census.records)
                break
            value = pending.result()
            if value is _END:
                logger.info("record stream ended after %d records", census.records)
                break
            census.observe(value)
    except CheckpointError:
        raise
    except Exception:
        logger.exception("record stream failed, writing final checkpoint")
        census.finish(dropped=getattr(source, "dropped", 0))
        raise
    finally:
        await _cancel(stop)
        await _close(records)

    stats = census.finish(dropped=getattr(source, "dropped", 0))
    logger.info(
        "final checkpoint written: %d records, %d changed, %d checkpoints, %d dropped",
        stats.records,
        stats.changed,
        stats.checkpoints,
        stats.dropped,
    )
    return stats
