from __future__ import annotations

import logging
import typing as tp
from typing import AsyncIterator

import anyio

from etagserve._utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger("etagserve.streams")


async def aiter_file_range(
    path: str,
    offset: int,
    length: int,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> AsyncIterator[bytes]:
    """
    Stream ``length`` bytes of the file at ``path`` starting at ``offset``.

    The file is opened lazily on first iteration and closed when the stream is
    exhausted, closed early, or fails.
    """
    async with await anyio.open_file(path, "rb") as f:
        await f.seek(offset)
        remaining = length
        while remaining > 0:
            chunk = tp.cast(bytes, await f.read(min(buffer_size, remaining)))
            if not chunk:
                logger.debug("File ended early: path=%s missing_bytes=%d", path, remaining)
                break
            remaining -= len(chunk)
            yield chunk
