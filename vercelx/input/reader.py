"""Low-level terminal input reading.

Waits on stdin with ``select``, reads whatever chunk is available, and runs
it through a ``KeyParser``. A pending escape prefix is resolved after
``ESC_SEQUENCE_TIMEOUT_MS`` of silence.
"""

from __future__ import annotations

import os
import select

from .parser import KeyParser

ESC_SEQUENCE_TIMEOUT_MS = 25
READ_CHUNK_SIZE = 1024


def _wait_readable(fd: int, timeout_ms: int | None) -> bool:
    timeout = None if timeout_ms is None else max(0.0, timeout_ms / 1000.0)
    ready, _, _ = select.select([fd], [], [], timeout)
    return bool(ready)


def read_keys(fd: int, parser: KeyParser, timeout_ms: int | None = None) -> list[str]:
    """Return tokens decoded from the next available input chunk.

    Returns an empty list when nothing arrives within ``timeout_ms``.
    Raises ``EOFError`` when the input stream is closed; ``OSError`` from
    the underlying read propagates unchanged.
    """
    if not _wait_readable(fd, timeout_ms):
        return []
    data = os.read(fd, READ_CHUNK_SIZE)
    if not data:
        raise EOFError("input stream closed")
    tokens = parser.feed(data)

    while parser.pending:
        if not _wait_readable(fd, ESC_SEQUENCE_TIMEOUT_MS):
            tokens.extend(parser.flush())
            break
        data = os.read(fd, READ_CHUNK_SIZE)
        if not data:
            tokens.extend(parser.flush())
            break
        tokens.extend(parser.feed(data))
    return tokens
