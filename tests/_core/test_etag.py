import hashlib

import pytest

from etagserve import EntityTag, ParseError, tag_for_content, tag_for_file
from etagserve._core import _etag


class TestFileTags:
    def test_format(self):
        tag = tag_for_file(1_700_000_000_000, 1200)

        assert tag == EntityTag("18bcfe56800-4b0", weak=True)
        assert str(tag) == 'W/"18bcfe56800-4b0"'

    def test_deterministic(self):
        assert tag_for_file(12345, 678) == tag_for_file(12345, 678)

    def test_zero_sized_file(self):
        assert str(tag_for_file(0, 0)) == 'W/"0-0"'

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ((1000, 10), (1001, 10)),
            ((1000, 10), (1000, 11)),
        ],
    )
    def test_changes_with_mtime_or_size(self, first, second):
        assert tag_for_file(*first) != tag_for_file(*second)

    def test_same_metadata_collides(self, make_file):
        """Files with equal mtime and size share a tag, whatever their content."""
        a = make_file(b"aaaa", name="a.txt")
        b = make_file(b"bbbb", name="b.txt")

        assert a.etag() == b.etag()


class TestContentTags:
    def test_md5_of_exact_bytes(self):
        content = b'{"corpus": "demo"}'

        tag = tag_for_content(content)

        assert tag.weak is False
        assert str(tag) == f'"{hashlib.md5(content).hexdigest()}"'

    def test_idempotent(self):
        content = "Ünïcödé text".encode("utf-8")

        assert tag_for_content(content) == tag_for_content(content)

    def test_single_byte_change(self):
        corpus = [b"", b"a", b"b", b"ab", b"ba", b"abc", b"abd", bytes(range(256))]
        tags = {str(tag_for_content(item)) for item in corpus}

        assert len(tags) == len(corpus)

    def test_fallback_when_md5_is_unavailable(self, monkeypatch, caplog):
        def unavailable(content: bytes) -> str:
            raise ValueError("[digital envelope routines] unsupported")

        monkeypatch.setattr(_etag, "_md5_hexdigest", unavailable)

        first = tag_for_content(b"hello")
        second = tag_for_content(b"hello")

        assert first == second == EntityTag("3610a686", weak=False)
        assert tag_for_content(b"hellp") != first
        assert "falling back" in caplog.text


class TestEntityTag:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('"abc"', EntityTag("abc")),
            ('W/"abc"', EntityTag("abc", weak=True)),
            ('  "" ', EntityTag("")),
        ],
    )
    def test_parse(self, text, expected):
        assert EntityTag.parse(text) == expected

    @pytest.mark.parametrize("text", ["abc", '"abc', 'W/abc', '"a"b"', "", 'w/"abc"'])
    def test_parse_invalid(self, text):
        with pytest.raises(ParseError, match="Invalid entity tag"):
            EntityTag.parse(text)

    def test_parse_roundtrip(self):
        tag = EntityTag("5f-4b0", weak=True)

        assert EntityTag.parse(str(tag)) == tag

    @pytest.mark.parametrize(
        ("tag", "candidate", "expected"),
        [
            (EntityTag("x", weak=True), 'W/"x"', True),
            (EntityTag("x", weak=True), '"x"', True),
            (EntityTag("x"), 'W/"x"', True),
            (EntityTag("x"), '"x"', True),
            (EntityTag("x"), '"y"', False),
            (EntityTag("x"), "x", False),
        ],
    )
    def test_matches(self, tag, candidate, expected):
        assert tag.matches(candidate) is expected
