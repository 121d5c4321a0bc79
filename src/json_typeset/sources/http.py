"""HttpStreamSource: newline-delimited JSON streamed over a long-lived HTTP GET.

Connection setup is retried with jittered exponential backoff via
``tenacity`` when the transport fails or the server answers 429 or 5xx.
Once the stream is open, lines are decoded by ``LineDecoder``; malformed
records are logged and dropped, blank keep-alive lines are skipped.

Credentials come from a JSON file, read once at startup.  Header values never
appear in ``repr()`` or log output.

Example::

    from json_typeset.sources.http import HttpStreamSource, load_credential

    headers = load_credential("credential.json")
    source = HttpStreamSource("https://stream.example.com/sample", headers)
    async for record in source:
        ...
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from json_typeset.errors import SourceError
from json_typeset.sources.lines import LineDecoder

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

__all__ = ["HttpStreamSource", "load_credential"]

logger = logging.getLogger(__name__)

_CONNECT_TIMEOUT = 10.0


class _RetryableStatus(Exception):
    """Server answered with a status worth reconnecting for (429, 5xx)."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


def load_credential(path: str | Path) -> dict[str, str]:
    """Read request headers from a JSON credential file.

    Accepted shapes::

        {"bearer_token": "..."}                     # Authorization: Bearer ...
        {"headers": {"X-Api-Key": "..."}}           # sent verbatim
        {"bearer_token": "...", "headers": {...}}   # both

    Raises:
        SourceError: If the file is unreadable, not JSON, or has neither key.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SourceError(f"cannot load credential {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SourceError(f"credential {path} must be a JSON object")

    headers: dict[str, str] = {}
    extra = data.get("headers")
    if extra is not None:
        if not isinstance(extra, dict):
            raise SourceError(f"credential {path}: 'headers' must be an object")
        headers.update({str(k): str(v) for k, v in extra.items()})
    token = data.get("bearer_token")
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    if not headers:
        raise SourceError(f"credential {path} has neither 'bearer_token' nor 'headers'")
    return headers


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome is not None else None
    logger.warning("connection attempt %d failed (%s), retrying", state.attempt_number, exc)


class HttpStreamSource:
    """Streams NDJSON records from ``url``.

    Args:
        url: Endpoint returning one JSON record per line for as long as the
            connection stays open.
        headers: Request headers, typically from ``load_credential``.
        connect_attempts: Connection attempts before giving up (>= 1).
        timeout: Read timeout in seconds; a silent stream longer than this is
            treated as broken.
        backoff_max: Upper bound in seconds for the jittered backoff.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        connect_attempts: int = 5,
        timeout: float = 90.0,
        backoff_max: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._headers = dict(headers or {})
        self._connect_attempts = connect_attempts
        self._timeout = httpx.Timeout(_CONNECT_TIMEOUT, read=timeout)
        self._backoff_max = backoff_max
        self._transport = transport
        self._decoder = LineDecoder()

    def __repr__(self) -> str:
        """Return a safe repr that never exposes header values."""
        return f"HttpStreamSource(url={self._url!r})"

    @property
    def dropped(self) -> int:
        """Malformed records discarded so far."""
        return self._decoder.dropped

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._decoder.decode_lines(self._lines())

    async def _lines(self) -> AsyncIterator[str]:
        async with httpx.AsyncClient(
            headers=self._headers, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await self._open(client)
            try:
                async for line in response.aiter_lines():
                    yield line
            except httpx.HTTPError as exc:
                raise SourceError(f"stream from {self._url} broke: {exc}") from exc
            finally:
                await response.aclose()

    async def _open(self, client: httpx.AsyncClient) -> httpx.Response:
        """Open the stream, retrying transport failures and 429/5xx answers.

        Raises:
            SourceError: If every attempt failed or the server refused the
                request with a non-retryable status.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, _RetryableStatus)),
            wait=wait_random_exponential(min=0, max=self._backoff_max),
            stop=stop_after_attempt(self._connect_attempts),
            before_sleep=_log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._connect(client)
        except (httpx.TransportError, _RetryableStatus) as exc:
            raise SourceError(
                f"cannot open {self._url} after {self._connect_attempts} attempts: {exc}"
            ) from exc
        raise AssertionError("unreachable")  # pragma: no cover

    async def _connect(self, client: httpx.AsyncClient) -> httpx.Response:
        request = client.build_request("GET", self._url)
        response = await client.send(request, stream=True)
        status = response.status_code
        if status == 429 or status >= 500:
            await response.aclose()
            raise _RetryableStatus(status)
        if response.is_error:
            await response.aclose()
            raise SourceError(f"{self._url} refused the stream: HTTP {status}")
        logger.info("connected to %s", self._url)
        return response
