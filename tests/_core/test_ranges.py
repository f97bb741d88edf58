import pytest

from etagserve import ByteRange, Range, ValidationError, parse_range
from etagserve._utils import iter_chunks
from tests.conftest import make_payload

TOTAL = 1000


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("bytes=0-499", ByteRange(0, 499, TOTAL)),
        ("bytes=500-", ByteRange(500, 999, TOTAL)),
        ("bytes=-100", ByteRange(900, 999, TOTAL)),
        ("bytes=0-1999", ByteRange(0, 999, TOTAL)),
        ("bytes=500-100", None),
        ("bytes=1000-1100", None),
        ("bytes=0-10,20-30", None),
        (None, None),
    ],
)
def test_range_table(header, expected):
    assert parse_range(header, TOTAL) == expected


@pytest.mark.parametrize(
    ("header", "length"),
    [
        ("bytes=0-499", 500),
        ("bytes=500-", 500),
        ("bytes=-100", 100),
        ("bytes=0-1999", 1000),
        ("bytes=999-999", 1),
        ("bytes=0-0", 1),
    ],
)
def test_range_length(header, length):
    byte_range = parse_range(header, TOTAL)

    assert byte_range is not None
    assert byte_range.length == length


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("bytes=-5000", ByteRange(0, 999, TOTAL)),
        ("bytes= 10-20 ", ByteRange(10, 20, TOTAL)),
        ("bytes=999-", ByteRange(999, 999, TOTAL)),
        ("bytes=0-", ByteRange(0, 999, TOTAL)),
        ("bytes=000010-000020", ByteRange(10, 20, TOTAL)),
    ],
)
def test_edge_forms(header, expected):
    assert parse_range(header, TOTAL) == expected


@pytest.mark.parametrize(
    "header",
    [
        "",
        "bytes=",
        "bytes=-",
        "bytes=--5",
        "bytes=a-b",
        "bytes=1-b",
        "bytes=a-5",
        "bytes=1.5-2",
        "bytes=+1-2",
        "bytes=-1-2",
        "bytes=1-2-3",
        "bytes=5",
        "Bytes=0-10",
        "items=0-10",
        " bytes=0-10",
        "bytes=0-10,",
        "bytes=,0-10",
        "bytes=١-٢",
        "bytes=-0",
        "bytes=1000-",
        "bytes=5000-6000",
    ],
)
def test_degrades_to_full_content(header):
    assert parse_range(header, TOTAL) is None


@pytest.mark.parametrize("header", ["bytes=0-0", "bytes=-1", "bytes=0-"])
def test_empty_representation(header):
    assert parse_range(header, 0) is None


def test_try_from_str_is_syntactic_only():
    assert Range.try_from_str("bytes=5000-6000") == Range(unit="bytes", first=5000, last=6000)
    assert Range.try_from_str("bytes=-100") == Range(unit="bytes", first=None, last=100)
    assert Range.try_from_str("bytes=100-") == Range(unit="bytes", first=100, last=None)
    assert Range.try_from_str("bytes=0-1,2-3") is None


@pytest.mark.parametrize(
    ("header", "total", "expected"),
    [
        ("bytes=1000-1100", 1000, True),
        ("bytes=1000-", 1000, True),
        ("bytes=-0", 1000, True),
        ("bytes=0-", 0, True),
        ("bytes=999-1100", 1000, False),
        ("bytes=500-100", 1000, False),
        ("bytes=-5000", 1000, False),
    ],
)
def test_is_unsatisfiable(header, total, expected):
    parsed = Range.try_from_str(header)

    assert parsed is not None
    assert parsed.is_unsatisfiable(total) is expected


class TestByteRange:
    def test_content_range(self):
        assert ByteRange(1000, 1199, 1200).content_range == "bytes 1000-1199/1200"

    @pytest.mark.parametrize(("start", "end", "total"), [(-1, 5, 10), (5, 4, 10), (0, 10, 10), (0, 0, 0)])
    def test_invariant(self, start, end, total):
        with pytest.raises(ValidationError, match="Invalid byte range"):
            ByteRange(start, end, total)


@pytest.mark.parametrize("step", [1, 7, 100, 333, 999, 1000])
def test_disjoint_ranges_cover_full_body(step):
    payload = make_payload(TOTAL)
    full = b"".join(iter_chunks(payload, 0, TOTAL))

    pieces = []
    for start in range(0, TOTAL, step):
        byte_range = parse_range(f"bytes={start}-{start + step - 1}", TOTAL)
        assert byte_range is not None
        pieces.append(b"".join(iter_chunks(payload, byte_range.start, byte_range.length, chunk_size=64)))

    assert b"".join(pieces) == full == payload
