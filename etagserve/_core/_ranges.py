from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal, Optional, cast

from etagserve._core.models import ByteRange

logger = logging.getLogger("etagserve.core.ranges")

RANGE_UNIT_PREFIX = "bytes="
_BYTE_RANGE_PATTERN = re.compile(r"([0-9]*)-([0-9]*)")


@dataclass(frozen=True)
class Range:
    """
    A single ``bytes=first-last`` specifier, before it is checked against a length.

    Either side may be missing: ``-N`` is a suffix range (the last N bytes) and
    ``first-`` runs to the end of the representation.
    """

    unit: Literal["bytes"]
    first: Optional[int]
    last: Optional[int]

    @classmethod
    def try_from_str(cls, range_header: str) -> Optional["Range"]:
        # Example: "bytes=0-99", "bytes=-500", "bytes=100-"
        if not range_header.startswith(RANGE_UNIT_PREFIX):
            return None

        ranges = range_header[len(RANGE_UNIT_PREFIX) :]
        if "," in ranges:
            # we don't support multiple ranges
            return None

        match = _BYTE_RANGE_PATTERN.fullmatch(ranges.strip())
        if match is None:
            return None

        first_str, last_str = match.groups()
        if not first_str and not last_str:
            return None

        return cls(
            unit=cast(Literal["bytes"], RANGE_UNIT_PREFIX[:-1]),
            first=int(first_str) if first_str else None,
            last=int(last_str) if last_str else None,
        )

    def _bounds(self, total_length: int) -> tuple[int, int]:
        if self.first is not None:
            end = total_length - 1 if self.last is None else min(self.last, total_length - 1)
            return self.first, end
        # suffix range, the last `last` bytes
        return max(0, total_length - (self.last or 0)), total_length - 1

    def resolve(self, total_length: int) -> Optional[ByteRange]:
        start, end = self._bounds(total_length)
        if start < 0 or start >= total_length or start > end:
            return None
        return ByteRange(start=start, end=end, total_length=total_length)

    def is_unsatisfiable(self, total_length: int) -> bool:
        """True when the first requested byte lies at or past the end of the representation."""
        start, _ = self._bounds(total_length)
        return start >= total_length


def parse_range(range_header: Optional[str], total_length: int) -> Optional[ByteRange]:
    """
    Turn a Range header into a byte interval of a ``total_length`` byte representation.

    Anything that is absent, malformed, multi-range or out of bounds gives ``None``
    and the caller serves the full representation.

    Examples:
        >>> parse_range("bytes=-100", 1000)
        ByteRange(start=900, end=999, total_length=1000)
        >>> parse_range("bytes=0-10,20-30", 1000) is None
        True
    """
    if range_header is None:
        return None

    parsed = Range.try_from_str(range_header)
    if parsed is None:
        logger.debug("Ignoring unsupported Range header: %r", range_header)
        return None

    byte_range = parsed.resolve(total_length)
    if byte_range is None:
        logger.debug("Range %r does not fit a representation of %d bytes", range_header, total_length)
    return byte_range
