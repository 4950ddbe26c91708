import struct

import pytest

from iccarus.common import ICCError
from iccarus.tags_text import (
    DescriptionTag,
    MultiLocalizedTag,
    decode_desc,
    decode_mluc,
    decode_sig,
    decode_text,
    decode_utf16_be,
)

ASCII = b"Test description\x00"
UNICODE_UNITS = [ord("T"), ord("e"), ord("s"), ord("t"), 0xD834, 0xDD1E]
SCRIPT = b"Latn"


def _desc(with_unicode: bool, with_script: bool) -> bytes:
    data = b"desc" + bytes(4) + struct.pack(">I", len(ASCII)) + ASCII
    if with_unicode:
        data += struct.pack(">I", len(UNICODE_UNITS))
        data += b"".join(struct.pack(">H", unit) for unit in UNICODE_UNITS)
    if with_script:
        data += bytes([len(SCRIPT)]) + SCRIPT
    return data


def test_desc_full():
    desc = decode_desc(_desc(True, True))
    assert isinstance(desc, DescriptionTag)
    assert desc.ascii == "Test description"
    assert desc.unicode == "Test\U0001D11E"
    assert desc.script == "Latn"


def test_desc_ascii_only():
    desc = decode_desc(_desc(False, False))
    assert desc.ascii == "Test description"
    assert desc.unicode == ""
    assert desc.script == ""


def test_desc_ascii_and_unicode_only():
    desc = decode_desc(_desc(True, False))
    assert desc.ascii == "Test description"
    assert desc.unicode == "Test\U0001D11E"
    assert desc.script == ""


def test_desc_too_short():
    with pytest.raises(ICCError, match="desc tag too short"):
        decode_desc(b"desc\x00\x00")


def test_desc_invalid_ascii_length():
    with pytest.raises(ICCError, match="invalid ASCII length"):
        decode_desc(b"desc\x00\x00\x00\x00" + b"\xff\xff\xff\xff")


def test_desc_truncated_utf16():
    ascii_part = b"Short\x00"
    raw = (
        b"desc" + bytes(4) + struct.pack(">I", len(ascii_part)) + ascii_part
        + struct.pack(">I", 2) + b"\x00\x41"
    )
    with pytest.raises(ICCError, match="desc tag truncated: missing UTF-16 data"):
        decode_desc(raw)


def test_desc_truncated_script():
    ascii_part = b"Just ASCII\x00"
    raw = (
        b"desc" + bytes(4) + struct.pack(">I", len(ascii_part)) + ascii_part
        + struct.pack(">I", 1) + b"\x00\x61" + bytes([4]) + b"La"
    )
    with pytest.raises(ICCError, match="desc tag truncated: missing ScriptCode data"):
        decode_desc(raw)


@pytest.mark.parametrize(
    "raw",
    [bytes(8) + b"foo", bytes(8) + b"foo\x00\x00\x00"],
)
def test_text(raw):
    assert decode_text(raw) == "foo"


def test_text_too_short():
    with pytest.raises(ICCError):
        decode_text(b"1234567")


@pytest.mark.parametrize(
    "raw",
    [bytes(8) + b"foob", bytes(8) + b"foo \x00\x00"],
)
def test_sig(raw):
    expected = "foob" if raw.endswith(b"b") else "foo"
    assert decode_sig(raw) == expected


def test_sig_too_short():
    with pytest.raises(ICCError):
        decode_sig(b"1234567")


def test_mluc_single_entry():
    raw = bytearray(b"mluc" + bytes(4))
    raw += struct.pack(">II", 1, 12)
    raw += b"enUS" + struct.pack(">II", 12, 28)
    raw += bytes(28 - len(raw))
    raw += "Hello!".encode("utf-16-be")
    tag = decode_mluc(bytes(raw))
    assert isinstance(tag, MultiLocalizedTag)
    assert len(tag.strings) == 1
    assert tag.strings[0].language == "en"
    assert tag.strings[0].country == "US"
    assert tag.strings[0].value == "Hello!"


def test_mluc_too_short():
    with pytest.raises(ICCError, match="mluc tag too short"):
        decode_mluc(b"mluc")


def test_mluc_invalid_record_size():
    raw = b"mluc" + bytes(4) + struct.pack(">II", 1, 16)
    with pytest.raises(ICCError, match="unexpected mluc record size"):
        decode_mluc(raw)


def test_mluc_truncated_records():
    raw = b"mluc" + bytes(4) + struct.pack(">II", 2, 12) + bytes(12)
    with pytest.raises(ICCError, match="mluc tag too small for 2 records"):
        decode_mluc(raw)


def test_mluc_invalid_offset_or_length():
    raw = b"mluc" + bytes(4) + struct.pack(">II", 1, 12) + b"enUS" + struct.pack(">II", 13, 64)
    with pytest.raises(ICCError, match="invalid string offset/length"):
        decode_mluc(raw)


def test_mluc_odd_length():
    raw = bytearray(b"mluc" + bytes(4) + struct.pack(">II", 1, 12) + b"enUS" + struct.pack(">II", 5, 32))
    raw += bytes(32 - len(raw))
    raw += b"\x00B\x00a\x00"
    with pytest.raises(ICCError, match="invalid string offset/length in mluc record"):
        decode_mluc(bytes(raw))


def test_utf16_basic():
    assert decode_utf16_be(b"\x00G\x00o\x00!") == "Go!"


def test_utf16_surrogate_pair():
    data = "Test\U0001D11E".encode("utf-16-be")
    assert decode_utf16_be(data) == "Test\U0001D11E"


def test_utf16_lone_surrogate_replaced():
    assert decode_utf16_be(b"\xd8\x34\x00A") == "\ufffdA"