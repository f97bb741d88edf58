from __future__ import annotations

import logging
import typing as tp
from typing import Iterator

import io

from etagserve._utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger("etagserve.streams")


def iter_file_range(
    path: str,
    offset: int,
    length: int,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> Iterator[bytes]:
    """
    Stream ``length`` bytes of the file at ``path`` starting at ``offset``.

    The file is opened lazily on first iteration and closed when the stream is
    exhausted, closed early, or fails.
    """
    with io.open(path, "rb") as f:
        f.seek(offset)
        remaining = length
        while remaining > 0:
            chunk = tp.cast(bytes, f.read(min(buffer_size, remaining)))
            if not chunk:
                logger.debug("File ended early: path=%s missing_bytes=%d", path, remaining)
                break
            remaining -= len(chunk)
            yield chunk
