from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from typing import (
    AsyncIterator,
    ClassVar,
    Iterator,
    Literal,
    Optional,
    Tuple,
    Union,
    cast,
)

from etagserve._core._etag import EntityTag, tag_for_content, tag_for_file
from etagserve._core._headers import Headers
from etagserve._exceptions import ValidationError
from etagserve._utils import format_http_date, make_async_iterator, make_sync_iterator

ResourceKind = Literal["file", "content"]
ResourceKey = Tuple[str, int, int]


@dataclass(frozen=True)
class FileResource:
    """
    Identity snapshot of a file on disk.

    ``modified_at`` is in milliseconds since the epoch. Take the snapshot once
    per request with ``from_path`` so the tag never mixes a new size with an
    old modification time.
    """

    kind: ClassVar[ResourceKind] = "file"

    path: str
    modified_at: int
    size: int

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"]) -> Optional["FileResource"]:
        try:
            st = os.stat(path)
        except (OSError, ValueError):
            return None
        if not stat.S_ISREG(st.st_mode) or not os.access(path, os.R_OK):
            return None
        return cls(path=os.fspath(path), modified_at=st.st_mtime_ns // 1_000_000, size=st.st_size)

    @property
    def key(self) -> ResourceKey:
        return (self.path, self.modified_at, self.size)

    @property
    def last_modified(self) -> str:
        return format_http_date(self.modified_at / 1000)

    def etag(self) -> EntityTag:
        return tag_for_file(self.modified_at, self.size)


@dataclass(frozen=True)
class ContentResource:
    """Bytes produced upstream (a rendered page, a JSON document, ...)."""

    kind: ClassVar[ResourceKind] = "content"

    content: bytes

    @classmethod
    def from_text(cls, text: str, encoding: str = "utf-8") -> "ContentResource":
        return cls(content=text.encode(encoding))

    @property
    def size(self) -> int:
        return len(self.content)

    def etag(self) -> EntityTag:
        return tag_for_content(self.content)


Resource = Union[FileResource, ContentResource]


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte interval ``[start, end]`` of a representation ``total_length`` bytes long."""

    start: int
    end: int
    total_length: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end < self.total_length:
            raise ValidationError(
                f"Invalid byte range {self.start}-{self.end} for a representation of {self.total_length} bytes."
            )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_length}"


@dataclass
class Request:
    method: str
    url: str
    headers: Headers = field(default_factory=lambda: Headers({}))


@dataclass
class Response:
    status_code: int
    headers: Headers = field(default_factory=lambda: Headers({}))
    stream: Union[Iterator[bytes], AsyncIterator[bytes]] = field(default_factory=lambda: make_sync_iterator([]))

    def read(self) -> bytes:
        """
        Synchronously reads the entire response body without consuming the stream.
        """
        if not isinstance(self.stream, Iterator):
            raise TypeError("Response stream is not an Iterator")

        if hasattr(self, "collected_body"):
            return cast(bytes, getattr(self, "collected_body"))

        collected = b"".join([chunk for chunk in self.stream])
        setattr(self, "collected_body", collected)
        self.stream = make_sync_iterator([collected])
        return collected

    async def aread(self) -> bytes:
        """
        Asynchronously reads the entire response body without consuming the stream.
        """
        if not isinstance(self.stream, AsyncIterator):
            raise TypeError("Response stream is not an AsyncIterator")

        if hasattr(self, "collected_body"):
            return cast(bytes, getattr(self, "collected_body"))

        collected = b"".join([chunk async for chunk in self.stream])
        setattr(self, "collected_body", collected)
        self.stream = make_async_iterator([collected])
        return collected
