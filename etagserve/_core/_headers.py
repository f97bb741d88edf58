from __future__ import annotations

import enum
from typing import (
    Any,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Union,
)

from etagserve._core._etag import EntityTag


class Headers(MutableMapping[str, str]):
    def __init__(self, headers: Mapping[str, Union[str, List[str]]]) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in headers.items()}

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return repr(self._headers)

    def __str__(self) -> str:
        return str(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers  # type: ignore


class CacheCheckResult(enum.Enum):
    NOT_MODIFIED = "not_modified"
    """The client's copy is still valid, answer with 304."""

    NEEDS_CONTENT = "needs_content"
    """The client has to receive the representation."""


def parse_if_none_match(value: str) -> List[str]:
    """
    Split an If-None-Match value into its candidates, exactly as the client sent them.

    Examples:
        >>> parse_if_none_match('"a", W/"b" ,*')
        ['"a"', 'W/"b"', '*']
    """
    return [candidate.strip() for candidate in value.split(",") if candidate.strip()]


def check_if_none_match(value: Optional[str], current: EntityTag) -> CacheCheckResult:
    """
    Decide whether the client's cached copy still matches ``current``.

    Rules, first match wins:
    - no header at all: the client has nothing cached
    - ``*`` matches any current tag
    - a candidate equal to the current tag's wire form matches
    - a candidate equal to it once the ``W/`` prefix is dropped on either side matches

    Examples:
        >>> tag = EntityTag("abc", weak=True)
        >>> check_if_none_match(None, tag)
        <CacheCheckResult.NEEDS_CONTENT: 'needs_content'>
        >>> check_if_none_match('"xyz", "abc"', tag)
        <CacheCheckResult.NOT_MODIFIED: 'not_modified'>
    """
    if value is None:
        return CacheCheckResult.NEEDS_CONTENT

    serialized = str(current)
    for candidate in parse_if_none_match(value):
        if candidate == "*" or candidate == serialized or current.matches(candidate):
            return CacheCheckResult.NOT_MODIFIED
    return CacheCheckResult.NEEDS_CONTENT
