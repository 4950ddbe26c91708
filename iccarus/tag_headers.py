"""The tag table that follows the profile header."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from .common import ICCError, _read_exact
from .header import stringed

MAX_TAG_COUNT = 1024


@dataclass
class TagHeader:
    """One tag table entry: name, offset from start of file, and size in bytes."""

    name: str
    offset: int
    size: int


@dataclass
class TagHeaderTable:
    """All entries of the tag table."""

    entries: list[TagHeader] = field(default_factory=list)


def parse_tag_headers(stream: BinaryIO) -> TagHeaderTable:
    """Read the tag count and the tag table entries from a binary stream."""
    (count,) = struct.unpack(">I", _read_exact(stream, 4))
    if count > MAX_TAG_COUNT:
        raise ICCError(f"tag count {count} exceeds max allowed ({MAX_TAG_COUNT})")
    data = _read_exact(stream, count * 12)
    entries = [
        TagHeader(name=stringed(name), offset=offset, size=size)
        for name, offset, size in struct.iter_unpack(">4sII", data)
    ]
    return TagHeaderTable(entries=entries)