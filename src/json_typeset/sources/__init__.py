"""Record sources feeding the census loop.

Every source is an async iterable of decoded JSON values with a ``dropped``
counter, satisfying the ``RecordSource`` Protocol structurally:

- FileSource: NDJSON from a file or stdin
- HttpStreamSource: NDJSON streamed over HTTP (httpx + tenacity reconnects)
"""

from json_typeset.sources.http import HttpStreamSource, load_credential
from json_typeset.sources.lines import FileSource, LineDecoder

__all__ = ["FileSource", "HttpStreamSource", "LineDecoder", "load_credential"]
