from __future__ import annotations

import hashlib
import logging
import zlib
from dataclasses import dataclass

from etagserve._exceptions import ParseError

logger = logging.getLogger("etagserve.core.etag")

WEAK_PREFIX = "W/"


@dataclass(frozen=True)
class EntityTag:
    """
    An HTTP entity tag.

    ``value`` is the opaque part without quotes, ``weak`` tells whether the
    ``W/`` prefix is present on the wire.

    Examples:
        >>> str(EntityTag("5f-4b0", weak=True))
        'W/"5f-4b0"'
        >>> EntityTag.parse('"abc"')
        EntityTag(value='abc', weak=False)
    """

    value: str
    weak: bool = False

    def __str__(self) -> str:
        return f'{WEAK_PREFIX if self.weak else ""}"{self.value}"'

    @classmethod
    def parse(cls, text: str) -> "EntityTag":
        text = text.strip()
        weak = text.startswith(WEAK_PREFIX)
        if weak:
            text = text[len(WEAK_PREFIX) :]
        if len(text) < 2 or text[0] != '"' or text[-1] != '"' or '"' in text[1:-1]:
            raise ParseError(f"Invalid entity tag: {text!r}")
        return cls(value=text[1:-1], weak=weak)

    def matches(self, candidate: str) -> bool:
        """
        Weak comparison against a tag exactly as the client sent it.

        The ``W/`` prefix is ignored on both sides, so a weak tag validates
        against a client that remembers it as strong and vice versa.
        """
        return strip_weak_prefix(candidate) == f'"{self.value}"'


def strip_weak_prefix(tag: str) -> str:
    return tag[len(WEAK_PREFIX) :] if tag.startswith(WEAK_PREFIX) else tag


def tag_for_file(modified_at: int, size: int) -> EntityTag:
    """
    Build a weak tag from a file's modification time and size.

    Nothing is read from the file. Two files with the same modification time
    and size get the same tag.

    Examples:
        >>> str(tag_for_file(1700000000000, 1200))
        'W/"18bcfe56800-4b0"'
    """
    return EntityTag(value=f"{modified_at:x}-{size:x}", weak=True)


def _md5_hexdigest(content: bytes) -> str:
    return hashlib.md5(content, usedforsecurity=False).hexdigest()


def tag_for_content(content: bytes) -> EntityTag:
    """
    Build a strong tag from an MD5 digest of the exact bytes being served.

    When MD5 is unavailable (for example on FIPS-restricted builds) a CRC-32
    checksum is used instead. Both are deterministic for identical bytes.
    """
    try:
        digest = _md5_hexdigest(content)
    except (ValueError, AttributeError, TypeError):
        logger.warning("MD5 is unavailable, falling back to a CRC-32 entity tag")
        digest = f"{zlib.crc32(content):x}"
    return EntityTag(value=digest, weak=False)
