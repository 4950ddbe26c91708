"""Decoders for XYZ, measurement, viewing-condition, sf32 and opaque tag types."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .common import ICCError, read_s15_fixed16


@dataclass
class XYZNumber:
    """A CIE XYZ triple."""

    x: float
    y: float
    z: float


@dataclass
class MeasurementTag:
    """Contents of a measurement ('meas') tag."""

    observer: int
    backing: XYZNumber
    geometry: int
    flare: float
    illuminant: int


@dataclass
class ViewingConditionsTag:
    """Contents of a viewing conditions ('view') tag."""

    illuminant: XYZNumber
    surround: XYZNumber
    illuminant_type: int


def _xyz_at(raw: bytes, offset: int) -> XYZNumber:
    return XYZNumber(
        x=read_s15_fixed16(raw[offset:offset + 4]),
        y=read_s15_fixed16(raw[offset + 4:offset + 8]),
        z=read_s15_fixed16(raw[offset + 8:offset + 12]),
    )


def decode_xyz(raw: bytes) -> list[XYZNumber]:
    """Decode an 'XYZ' tag into its list of XYZ numbers."""
    if len(raw) < 20:
        raise ICCError("XYZ tag too short")
    body = raw[8:]
    if len(body) % 12 != 0:
        raise ICCError("XYZ tag has invalid length (not a multiple of 12)")
    return [_xyz_at(body, base) for base in range(0, len(body), 12)]


def decode_measurement(raw: bytes) -> MeasurementTag:
    """Decode a 'meas' tag."""
    if len(raw) < 36:
        raise ICCError("meas tag too short")
    (observer,) = struct.unpack_from(">I", raw, 8)
    (geometry,) = struct.unpack_from(">I", raw, 24)
    (illuminant,) = struct.unpack_from(">I", raw, 32)
    return MeasurementTag(
        observer=observer,
        backing=_xyz_at(raw, 12),
        geometry=geometry,
        flare=read_s15_fixed16(raw[28:32]),
        illuminant=illuminant,
    )


def decode_view(raw: bytes) -> ViewingConditionsTag:
    """Decode a 'view' tag."""
    if len(raw) < 36:
        raise ICCError("view tag too short")
    (illuminant_type,) = struct.unpack_from(">I", raw, 32)
    return ViewingConditionsTag(
        illuminant=_xyz_at(raw, 8),
        surround=_xyz_at(raw, 20),
        illuminant_type=illuminant_type,
    )


def decode_sf32(raw: bytes) -> list[float]:
    """Decode an 'sf32' tag body as big-endian 32-bit floats."""
    if len(raw) < 8:
        raise ICCError("sf32 tag too short")
    data = raw[8:]
    if len(data) % 4 != 0:
        raise ICCError("sf32 float32 data not aligned")
    return [value for (value,) in struct.iter_unpack(">f", data)]


def decode_dict(raw: bytes) -> bytes:
    """Return a dictionary tag's raw bytes undecoded."""
    return bytes(raw)


def decode_psid(raw: bytes) -> bytes:
    """Return a profile sequence identifier tag's raw bytes undecoded."""
    return bytes(raw)


def decode_pseq(raw: bytes) -> bytes:
    """Return a profile sequence description tag's raw bytes undecoded."""
    return bytes(raw)


def decode_gbd(raw: bytes) -> bytes:
    """Return a gamut boundary description tag's raw bytes undecoded."""
    return bytes(raw)


def decode_zxml(raw: bytes) -> bytes:
    """Return a vendor 'ZXML' tag's raw bytes undecoded."""
    return bytes(raw)


def decode_msbn(raw: bytes) -> bytes:
    """Return a vendor 'MSBN' tag's raw bytes undecoded."""
    return bytes(raw)