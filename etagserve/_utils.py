from __future__ import annotations

import typing as tp
from email.utils import formatdate
from typing import AsyncIterator, Iterable, Iterator

HEADERS_ENCODING = "iso-8859-1"

DEFAULT_BUFFER_SIZE = 8192


def iter_chunks(content: bytes, offset: int, length: int, chunk_size: int = DEFAULT_BUFFER_SIZE) -> Iterator[bytes]:
    """
    Yield ``length`` bytes of ``content`` starting at ``offset`` in slices of at most ``chunk_size``.

    Example:
        ```
        list(iter_chunks(b"abcdef", 1, 4, chunk_size=3))
        # [b"bcd", b"e"]
        ```
    """
    end = min(offset + length, len(content))
    view = memoryview(content)
    while offset < end:
        stop = min(offset + chunk_size, end)
        yield bytes(view[offset:stop])
        offset = stop


async def make_async_iterator(
    iterable: Iterable[bytes],
) -> AsyncIterator[bytes]:
    for item in iterable:
        yield item


def make_sync_iterator(iterable: Iterable[bytes]) -> Iterator[bytes]:
    for item in iterable:
        yield item


def format_http_date(timestamp: tp.Union[int, float]) -> str:
    """
    Format a unix timestamp (seconds) for Last-Modified style headers.

    Example output: 'Sun, 26 Oct 2025 12:34:56 GMT'
    """
    return formatdate(timeval=timestamp, localtime=False, usegmt=True)


def header_pairs(headers: tp.Mapping[str, str]) -> list[tuple[bytes, bytes]]:
    return [(key.encode(HEADERS_ENCODING), value.encode(HEADERS_ENCODING)) for key, value in headers.items()]
