from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

import pytest

from etagserve import FileResource

# 2023-11-14 22:13:20 UTC
MODIFIED_AT_MS = 1_700_000_000_000

FileFactory = Callable[..., FileResource]


def make_payload(size: int) -> bytes:
    """Deterministic, non-repeating-ish bytes so misplaced slices are caught."""
    return bytes((i * 7 + i // 256) % 256 for i in range(size))


@pytest.fixture()
def make_file(tmp_path: Path) -> FileFactory:
    def factory(
        content: bytes,
        name: str = "resource.bin",
        modified_at_ms: Optional[int] = MODIFIED_AT_MS,
    ) -> FileResource:
        path = tmp_path / name
        path.write_bytes(content)
        if modified_at_ms is not None:
            ns = modified_at_ms * 1_000_000
            os.utime(path, ns=(ns, ns))
        resource = FileResource.from_path(path)
        assert resource is not None
        return resource

    return factory
