"""Decoders for textual tag types: desc, text, sig and mluc."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .common import ICCError
from .header import stringed


@dataclass
class DescriptionTag:
    """Contents of a text description ('desc') tag."""

    ascii: str = ""
    unicode: str = ""
    script: str = ""


@dataclass
class LocalizedString:
    """One localized string of a multi-localized unicode tag."""

    language: str
    country: str
    value: str


@dataclass
class MultiLocalizedTag:
    """Contents of a multi-localized unicode ('mluc') tag."""

    strings: list[LocalizedString] = field(default_factory=list)


def decode_utf16_be(data: bytes) -> str:
    """Decode big-endian UTF-16 data; unpaired surrogates become U+FFFD."""
    even = bytes(data[: len(data) - len(data) % 2])
    return even.decode("utf-16-be", errors="replace")


def _bytes_to_str(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def decode_desc(raw: bytes) -> DescriptionTag:
    """Decode a 'desc' tag: ASCII part, optional UTF-16 part and optional script code."""
    if len(raw) < 12:
        raise ICCError("desc tag too short")
    (ascii_len,) = struct.unpack_from(">I", raw, 8)
    if ascii_len < 1 or 12 + ascii_len > len(raw):
        raise ICCError("invalid ASCII length in desc tag")
    ascii_raw = bytes(raw[12:12 + ascii_len]).split(b"\x00", 1)[0]
    ascii_text = _bytes_to_str(ascii_raw)

    offset = 12 + ascii_len
    if len(raw) < offset + 4:
        return DescriptionTag(ascii=ascii_text)

    (unicode_count,) = struct.unpack_from(">I", raw, offset)
    offset += 4
    if len(raw) < offset + unicode_count * 2:
        raise ICCError("desc tag truncated: missing UTF-16 data")
    unicode_text = decode_utf16_be(raw[offset:offset + unicode_count * 2])
    offset += unicode_count * 2

    if len(raw) <= offset:
        return DescriptionTag(ascii=ascii_text, unicode=unicode_text)

    script_count = raw[offset]
    offset += 1
    if len(raw) < offset + script_count:
        raise ICCError("desc tag truncated: missing ScriptCode data")
    script = _bytes_to_str(raw[offset:offset + script_count])
    return DescriptionTag(ascii=ascii_text, unicode=unicode_text, script=script)


def decode_text(raw: bytes) -> str:
    """Decode a 'text' tag, dropping trailing NUL bytes."""
    if len(raw) < 8:
        raise ICCError("text tag too short")
    return _bytes_to_str(bytes(raw[8:]).rstrip(b"\x00"))


def decode_sig(raw: bytes) -> str:
    """Decode a 'sig' tag into its four-character signature."""
    if len(raw) < 8:
        raise ICCError("sig tag too short")
    return stringed(raw[8:12])


def decode_mluc(raw: bytes) -> MultiLocalizedTag:
    """Decode an 'mluc' tag into its localized strings."""
    if len(raw) < 16:
        raise ICCError("mluc tag too short")
    count, record_size = struct.unpack_from(">II", raw, 8)
    if record_size != 12:
        raise ICCError(f"unexpected mluc record size: {record_size}")
    if len(raw) < 16 + count * record_size:
        raise ICCError(f"mluc tag too small for {count} records")
    strings: list[LocalizedString] = []
    for index in range(count):
        base = 16 + index * record_size
        language = bytes(raw[base:base + 2]).decode("latin-1")
        country = bytes(raw[base + 2:base + 4]).decode("latin-1")
        length, offset = struct.unpack_from(">II", raw, base + 4)
        if offset + length > len(raw) or length % 2 != 0:
            raise ICCError(f"invalid string offset/length in mluc record {index}")
        strings.append(
            LocalizedString(
                language=language,
                country=country,
                value=decode_utf16_be(raw[offset:offset + length]),
            )
        )
    return MultiLocalizedTag(strings=strings)