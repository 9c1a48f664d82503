from datetime import datetime, timezone

import pytest

from wpress_core.errors import HeaderFieldError, MalformedHeaderError, TruncatedStreamError
from wpress_core.header import Header, split_prefix
from wpress_core.protocol import EOF_BLOCK, HEADER_LEN, MTIME_OFF, PREFIX_OFF, SIZE_OFF

NEW_YEAR_2023 = datetime(2023, 1, 1, tzinfo=timezone.utc)
EPOCH_2023 = 1672531200


def raw_header(name=b"test.txt", size=b"1024", mtime=b"1672531200", prefix=b"wp-content/uploads"):
    buf = bytearray(HEADER_LEN)
    buf[0:len(name)] = name
    buf[SIZE_OFF:SIZE_OFF + len(size)] = size
    buf[MTIME_OFF:MTIME_OFF + len(mtime)] = mtime
    buf[PREFIX_OFF:PREFIX_OFF + len(prefix)] = prefix
    return bytes(buf)


def test_field_layout():
    assert (SIZE_OFF, MTIME_OFF, PREFIX_OFF, HEADER_LEN) == (255, 269, 281, 4377)


def test_decode_known_block():
    h = Header.from_bytes(raw_header())
    assert h.name == "test.txt"
    assert h.size == 1024
    assert h.mtime == NEW_YEAR_2023
    assert h.prefix == "wp-content/uploads"
    assert h.path == "wp-content/uploads/test.txt"


def test_encode_decode_preserves_fields():
    h = Header(name="test.txt", size=1024, mtime_epoch=EPOCH_2023, prefix="wp-content/uploads")
    raw = h.to_bytes()
    assert len(raw) == HEADER_LEN
    assert raw == raw_header()
    assert Header.from_bytes(raw) == h


def test_far_future_mtime_is_kept():
    h = Header.from_bytes(raw_header(mtime=b"999999999999"))
    assert h.mtime_epoch == 999999999999
    assert h.mtime.year == 9999
    assert Header.from_bytes(h.to_bytes()) == h


def test_top_level_file_has_empty_prefix():
    h = Header.from_bytes(Header(name="a.php", size=3, mtime_epoch=EPOCH_2023).to_bytes())
    assert h.prefix == ""
    assert h.parts == ("a.php",)


def test_terminator():
    assert Header.from_bytes(EOF_BLOCK) is None


def test_short_block_is_truncation():
    with pytest.raises(TruncatedStreamError) as exc:
        Header.from_bytes(raw_header()[:100])
    assert exc.value.missing == HEADER_LEN - 100


@pytest.mark.parametrize("field", ["size", "mtime"])
@pytest.mark.parametrize("value", [b"12a", b"-5", b" 12", b""])
def test_non_numeric_fields_are_malformed(field, value):
    with pytest.raises(MalformedHeaderError):
        Header.from_bytes(raw_header(**{field: value}))


def test_unsafe_names_are_malformed():
    with pytest.raises(MalformedHeaderError):
        Header.from_bytes(raw_header(name=b"", prefix=b"x"))
    with pytest.raises(MalformedHeaderError):
        Header.from_bytes(raw_header(prefix=b"../../etc"))
    with pytest.raises(MalformedHeaderError):
        Header.from_bytes(raw_header(prefix=b"/etc"))
    with pytest.raises(MalformedHeaderError):
        Header.from_bytes(raw_header(name=b"\xff\xfe"))


def test_field_width_limits():
    Header(name="a" * 255, size=10**14 - 1, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="a" * 256, size=0, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="ü" * 128, size=0, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="a", size=10**14, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="a", size=0, mtime_epoch=EPOCH_2023, prefix="d" * 4097).to_bytes()


def test_invalid_values_rejected_on_encode():
    with pytest.raises(HeaderFieldError):
        Header(name="a", size=-1, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="sub/a", size=0, mtime_epoch=EPOCH_2023).to_bytes()
    with pytest.raises(HeaderFieldError):
        Header(name="a", size=0, mtime_epoch=-1).to_bytes()


def test_windows_prefix_separators():
    assert split_prefix("wp-content\\uploads") == ("wp-content", "uploads")
    h = Header.from_bytes(raw_header(prefix=b"wp-content\\uploads"))
    assert h.path == "wp-content/uploads/test.txt"


def test_backslash_in_prefix_rejected_on_encode():
    with pytest.raises(HeaderFieldError, match="backslash"):
        Header(name="f.txt", size=0, mtime_epoch=EPOCH_2023, prefix="a\\b").to_bytes()


def test_undecodable_name_rejected_on_encode():
    # os.fsdecode of a non-UTF-8 name yields a lone surrogate
    with pytest.raises(HeaderFieldError, match="not valid utf-8"):
        Header(name="\udcff.txt", size=0, mtime_epoch=EPOCH_2023).to_bytes()
