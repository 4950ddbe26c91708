"""The 128-byte ICC profile header."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import BinaryIO

from .common import ICCError, _read_exact, read_s15_fixed16

HEADER_SIZE = 128


@dataclass(frozen=True)
class Version:
    """Profile format version."""

    major: int
    minor: int
    revision: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


@dataclass
class Header:
    """Parsed ICC profile header."""

    profile_size: int
    cmm_type: str
    version_raw: int
    version: Version
    device_class: str
    color_space: str
    pcs: str
    created: datetime | None
    signature: str
    platform: str
    flags: int
    manufacturer: str
    model: str
    attributes: bytes
    rendering_intent: int
    illuminant: tuple[float, float, float]
    creator: str
    profile_id: bytes


def version_from_raw(value: int) -> Version:
    """Split a raw 32-bit version field into its parts."""
    return Version(
        major=(value >> 24) & 0xFF,
        minor=(value >> 20) & 0x0F,
        revision=(value >> 16) & 0x0F,
    )


def stringed(data: bytes) -> str:
    """Render a four-byte signature as text, or as hex when not printable."""
    data = bytes(data)
    if data == b"\x00\x00\x00\x00":
        return ""
    text = data.decode("latin-1").rstrip("\x00 ")
    if any(ord(ch) < 32 or ord(ch) > 126 for ch in text):
        return "0x" + data[:4].hex().upper()
    return text


def _date_time(year: int, month: int, day: int, hour: int, minute: int, second: int) -> datetime | None:
    """Build a UTC timestamp, normalising out-of-range fields; None if unrepresentable."""
    year_shift, month_index = divmod(month - 1, 12)
    year += year_shift
    if not 1 <= year <= 9999:
        return None
    try:
        base = datetime(year, month_index + 1, 1, tzinfo=timezone.utc)
        return base + timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)
    except OverflowError:
        return None


def parse_header(stream: BinaryIO) -> Header:
    """Read and parse the 128-byte profile header from a binary stream."""
    buf = _read_exact(stream, HEADER_SIZE)
    signature = stringed(buf[36:40])
    if signature != "acsp":
        raise ICCError("invalid ICC profile: missing 'acsp' signature")
    (profile_size,) = struct.unpack_from(">I", buf, 0)
    (version_raw,) = struct.unpack_from(">I", buf, 8)
    date_fields = struct.unpack_from(">6H", buf, 24)
    flags, = struct.unpack_from(">I", buf, 44)
    rendering_intent, = struct.unpack_from(">I", buf, 64)
    return Header(
        profile_size=profile_size,
        cmm_type=stringed(buf[4:8]),
        version_raw=version_raw,
        version=version_from_raw(version_raw),
        device_class=stringed(buf[12:16]),
        color_space=stringed(buf[16:20]),
        pcs=stringed(buf[20:24]),
        created=_date_time(*date_fields),
        signature=signature,
        platform=stringed(buf[40:44]),
        flags=flags,
        manufacturer=stringed(buf[48:52]),
        model=stringed(buf[52:56]),
        attributes=bytes(buf[56:64]),
        rendering_intent=rendering_intent,
        illuminant=(
            read_s15_fixed16(buf[68:72]),
            read_s15_fixed16(buf[72:76]),
            read_s15_fixed16(buf[76:80]),
        ),
        creator=stringed(buf[80:84]),
        profile_id=bytes(buf[84:100]),
    )