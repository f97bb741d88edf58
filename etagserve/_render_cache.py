from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, DefaultDict, Dict, Iterator, Optional, Tuple

from etagserve._core.models import ResourceKey

__all__ = ["RenderCache"]

logger = logging.getLogger("etagserve.render_cache")


class RenderCache:
    """
    Bounded store for content generated from a source file.

    Entries are keyed by the source file identity ``(path, modified_at, size)``,
    so editing the source makes the old render unreachable instead of stale.
    When full, the least frequently used entry is evicted, oldest first among
    equally used ones. All operations hold an internal lock, so a single
    instance can be shared by every request thread of a server.

    Example:
        ```python
        cache = RenderCache(capacity=128)
        composer = ResponseComposer(render_cache=cache)
        ```
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("Capacity must be positive")

        self.capacity = capacity
        self._lock = threading.Lock()
        self._entries: Dict[ResourceKey, Tuple[bytes, int]] = {}
        self._buckets: DefaultDict[int, OrderedDict[ResourceKey, None]] = DefaultDict(OrderedDict)

    def _touch(self, key: ResourceKey) -> None:
        value, uses = self._entries[key]
        self._unlink(key, uses)
        self._buckets[uses + 1][key] = None
        self._entries[key] = (value, uses + 1)

    def _unlink(self, key: ResourceKey, uses: int) -> None:
        bucket = self._buckets[uses]
        bucket.pop(key)
        if not bucket:
            del self._buckets[uses]

    def get(self, key: ResourceKey) -> Optional[bytes]:
        with self._lock:
            if key not in self._entries:
                return None
            self._touch(key)
            return self._entries[key][0]

    def put(self, key: ResourceKey, value: bytes) -> None:
        with self._lock:
            if key in self._entries:
                _, uses = self._entries[key]
                self._entries[key] = (value, uses)
                self._touch(key)
                return

            if len(self._entries) >= self.capacity:
                least_used = min(self._buckets)
                evicted, _ = self._buckets[least_used].popitem(last=False)
                if not self._buckets[least_used]:
                    del self._buckets[least_used]
                del self._entries[evicted]
                logger.debug("Evicted rendered content: key=%s", evicted)

            self._entries[key] = (value, 1)
            self._buckets[1][key] = None

    def remove(self, key: ResourceKey) -> None:
        with self._lock:
            if key in self._entries:
                _, uses = self._entries.pop(key)
                self._unlink(key, uses)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._buckets.clear()

    def get_or_render(self, key: ResourceKey, render: Callable[[], bytes]) -> bytes:
        """
        Return the cached render for ``key``, calling ``render`` on a miss.

        ``render`` runs outside the lock; two threads missing the same key at
        the same time may both render it, and the last one to finish wins.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Rendered content cache hit: key=%s", key)
            return cached

        logger.debug("Rendered content cache miss: key=%s", key)
        value = render()
        self.put(key, value)
        return value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ResourceKey]:
        with self._lock:
            return iter(list(self._entries))
