import threading

import pytest

from etagserve import RenderCache

KEY_A = ("/srv/a.xml", 1_700_000_000_000, 10)
KEY_B = ("/srv/b.xml", 1_700_000_000_000, 20)
KEY_C = ("/srv/c.xml", 1_700_000_000_000, 30)


def test_put_and_get():
    cache = RenderCache(2)

    cache.put(KEY_A, b"<a/>")

    assert cache.get(KEY_A) == b"<a/>"
    assert KEY_A in cache
    assert len(cache) == 1


def test_missing_key():
    assert RenderCache(2).get(KEY_A) is None


def test_invalid_capacity():
    with pytest.raises(ValueError, match="Capacity must be positive"):
        RenderCache(0)


def test_evicts_least_frequently_used():
    cache = RenderCache(2)

    cache.put(KEY_A, b"a")
    cache.put(KEY_B, b"b")
    cache.get(KEY_A)
    cache.put(KEY_C, b"c")

    assert cache.get(KEY_B) is None
    assert cache.get(KEY_A) == b"a"
    assert cache.get(KEY_C) == b"c"


def test_evicts_oldest_among_equally_used():
    cache = RenderCache(2)

    cache.put(KEY_A, b"a")
    cache.put(KEY_B, b"b")
    cache.put(KEY_C, b"c")

    assert list(cache) == [KEY_B, KEY_C]


def test_put_existing_replaces_value():
    cache = RenderCache(2)

    cache.put(KEY_A, b"old")
    cache.put(KEY_A, b"new")

    assert cache.get(KEY_A) == b"new"
    assert len(cache) == 1


def test_remove_then_evict():
    cache = RenderCache(2)

    cache.put(KEY_A, b"a")
    cache.get(KEY_A)
    cache.get(KEY_A)
    cache.put(KEY_B, b"b")
    cache.remove(KEY_B)
    cache.remove(KEY_B)
    cache.put(KEY_B, b"b")
    cache.put(KEY_C, b"c")

    assert list(cache) == [KEY_A, KEY_C]


def test_clear():
    cache = RenderCache(2)
    cache.put(KEY_A, b"a")

    cache.clear()

    assert len(cache) == 0
    assert cache.get(KEY_A) is None


def test_get_or_render_renders_once():
    cache = RenderCache(4)
    calls = []

    def render() -> bytes:
        calls.append(1)
        return b"<html/>"

    assert cache.get_or_render(KEY_A, render) == b"<html/>"
    assert cache.get_or_render(KEY_A, render) == b"<html/>"
    assert len(calls) == 1


def test_new_identity_renders_again():
    cache = RenderCache(4)
    edited = (KEY_A[0], KEY_A[1] + 1, KEY_A[2])

    cache.get_or_render(KEY_A, lambda: b"v1")

    assert cache.get_or_render(edited, lambda: b"v2") == b"v2"
    assert cache.get(KEY_A) == b"v1"


def test_shared_between_threads():
    cache = RenderCache(8)
    keys = [(f"/srv/{i}.xml", 0, i) for i in range(16)]
    errors = []

    def worker(offset: int) -> None:
        try:
            for i in range(200):
                key = keys[(i + offset) % len(keys)]
                assert cache.get_or_render(key, lambda: key[0].encode()) == key[0].encode()
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(cache) <= 8
