"""Shared pieces: tag signatures, transformer protocols, errors and fixed-point helpers."""

from __future__ import annotations

from typing import BinaryIO, Protocol, Sequence, runtime_checkable

# Tag type signatures (the first four bytes of a tag block).
TAG_COLOR_LOOKUP_TABLE = "clut"
TAG_CURVE = "curv"
TAG_DESCRIPTION = "desc"
TAG_DICTIONARY = "dict"
TAG_GAMUT_BOUNDARY_DESCRIPTION = "gbd"
TAG_MATRIX = "mtx"
TAG_MODULAR_AB = "mAB"
TAG_MODULAR_BA = "mBA"
TAG_MEASUREMENT = "meas"
TAG_MULTI_FUNCTION_TABLE1 = "mft1"
TAG_MULTI_FUNCTION_TABLE2 = "mft2"
TAG_MULTI_LOCALIZED_UNICODE = "mluc"
TAG_PARAMETRIC_CURVE = "para"
TAG_PROFILE_SEQUENCE_DESCRIPTION = "pseq"
TAG_PROFILE_SEQUENCE_IDENTIFIER = "psid"
TAG_S15_FIXED16_ARRAY = "sf32"
TAG_SIGNATURE = "sig"
TAG_TEXT = "text"
TAG_VIEW = "view"
TAG_XYZ = "XYZ"
TAG_ZXML = "ZXML"

# Tag header names (entries of the tag table).
TAG_HEADER_A_TO_B0 = "A2B0"
TAG_HEADER_A_TO_B1 = "A2B1"
TAG_HEADER_A_TO_B2 = "A2B2"
TAG_HEADER_B_TO_A0 = "B2A0"
TAG_HEADER_B_TO_A1 = "B2A1"
TAG_HEADER_B_TO_A2 = "B2A2"
TAG_HEADER_CIE_DISTANCE_MAP = "CIED"
TAG_HEADER_CXF_DATA = "CxF"
TAG_HEADER_DEVICE_SETTINGS = "DEVS"
TAG_HEADER_DEVICE_DESCRIPTION = "DevD"
TAG_HEADER_INFORMATION = "Info"
TAG_HEADER_INFO_LOWER = "info"
TAG_HEADER_BLUE_TRC = "bTRC"
TAG_HEADER_BLUE_MATRIX_COLUMN = "bXYZ"
TAG_HEADER_MEDIA_BLACK_POINT = "bkpt"
TAG_HEADER_CHROMATIC_ADAPTATION_MATRIX = "chad"
TAG_HEADER_COLORIMETRIC_INTENT_IMAGE_STATE = "ciis"
TAG_HEADER_COPYRIGHT = "cprt"
TAG_HEADER_DESCRIPTION = "desc"
TAG_HEADER_DEVICE_MODEL_DESCRIPTION = "dmdd"
TAG_HEADER_GREEN_TRC = "gTRC"
TAG_HEADER_GREEN_MATRIX_COLUMN = "gXYZ"
TAG_HEADER_GAMUT = "gamt"
TAG_HEADER_GAMUT_BOUNDARY_DESC0 = "gbd0"
TAG_HEADER_GAMUT_BOUNDARY_DESC1 = "gbd1"
TAG_HEADER_GAMUT_BOUNDARY_DESC2 = "gbd2"
TAG_HEADER_GAMUT_BOUNDARY_DESC3 = "gbd3"
TAG_HEADER_HDR_STATIC_METADATA = "hd10"
TAG_HEADER_K_TRC = "kTRC"
TAG_HEADER_LUMINANCE = "lumi"
TAG_HEADER_MEASUREMENT = "meas"
TAG_HEADER_METADATA = "meta"
TAG_HEADER_PROFILE_SEQUENCE_DESCRIPTION = "pseq"
TAG_HEADER_PROFILE_SEQUENCE_IDENTIFIER = "psid"
TAG_HEADER_RED_TRC = "rTRC"
TAG_HEADER_RED_MATRIX_COLUMN = "rXYZ"
TAG_HEADER_RIG0 = "rig0"
TAG_HEADER_TARGET = "targ"
TAG_HEADER_TECHNOLOGY = "tech"
TAG_HEADER_VIEWING_CONDITIONS = "view"
TAG_HEADER_VIEWING_ENVIRONMENT_DESCRIPTION = "vued"
TAG_HEADER_MEDIA_WHITE_POINT = "wtpt"


class ICCError(Exception):
    """Raised when ICC data is malformed or an operation on it fails."""


@runtime_checkable
class ChannelTransformer(Protocol):
    """Something that maps a tuple of channel values to another."""

    def transform(self, *args: float) -> list[float]:
        """Transform the input channels into output channels."""
        ...


@runtime_checkable
class ToCIEXYZ(Protocol):
    """Something that converts device channels to the profile connection space."""

    def to_ciexyz(self, *args: float) -> list[float]:
        """Convert the given channels to PCS values."""
        ...


@runtime_checkable
class FromCIEXYZ(Protocol):
    """Something that converts profile connection space values to device channels."""

    def from_ciexyz(self, *args: float) -> list[float]:
        """Convert the given PCS values to device channels."""
        ...


def read_s15_fixed16(raw: Sequence[int] | bytes) -> float:
    """Decode a big-endian s15Fixed16Number from the first four bytes of raw."""
    data = bytes(raw[:4])
    if len(data) < 4:
        raise ValueError("read_s15_fixed16: not enough bytes")
    whole = int.from_bytes(data[0:2], "big", signed=True)
    fraction = int.from_bytes(data[2:4], "big")
    return whole + fraction / 65536.0


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly size bytes, raising ICCError on a short read."""
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    data = b"".join(chunks)
    if len(data) < size:
        raise ICCError("EOF" if not data else "unexpected EOF")
    return data