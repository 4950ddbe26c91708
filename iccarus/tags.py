"""Tag blocks, the modular (mAB/mBA) tag, and parsing of the tag data area."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, BinaryIO, Callable, Mapping

from .common import (
    TAG_COLOR_LOOKUP_TABLE,
    TAG_CURVE,
    TAG_DESCRIPTION,
    TAG_DICTIONARY,
    TAG_GAMUT_BOUNDARY_DESCRIPTION,
    TAG_MATRIX,
    TAG_MEASUREMENT,
    TAG_MODULAR_AB,
    TAG_MODULAR_BA,
    TAG_MULTI_FUNCTION_TABLE1,
    TAG_MULTI_FUNCTION_TABLE2,
    TAG_MULTI_LOCALIZED_UNICODE,
    TAG_PARAMETRIC_CURVE,
    TAG_PROFILE_SEQUENCE_DESCRIPTION,
    TAG_PROFILE_SEQUENCE_IDENTIFIER,
    TAG_S15_FIXED16_ARRAY,
    TAG_SIGNATURE,
    TAG_TEXT,
    TAG_VIEW,
    TAG_XYZ,
    TAG_ZXML,
    ChannelTransformer,
    ICCError,
    _read_exact,
)
from .header import HEADER_SIZE, stringed
from .tag_headers import TagHeader, TagHeaderTable
from .tags_clut import decode_clut
from .tags_curve import decode_curve, decode_parametric_curve
from .tags_matrix import decode_matrix
from .tags_mft import decode_mft1, decode_mft2
from .tags_misc import (
    decode_dict,
    decode_gbd,
    decode_measurement,
    decode_msbn,
    decode_pseq,
    decode_psid,
    decode_sf32,
    decode_view,
    decode_xyz,
    decode_zxml,
)
from .tags_text import decode_desc, decode_mluc, decode_sig, decode_text

Decoder = Callable[[bytes], Any]

_SKIP_CHUNK = 64 * 1024


class ParseMode(IntEnum):
    """How much of a profile to parse."""

    FULL = 0
    HEADER_AND_TAG_HEADER_TABLE = 1
    HEADER_ONLY = 2


@dataclass
class ParseOptions:
    """Options controlling profile parsing.

    ``mode`` limits how much is parsed; ``lazy_tag_decode`` defers tag decoding
    until ``Tag.value`` is called; ``error_on_unknown_tags`` and
    ``error_on_tag_decode`` turn recorded tag problems into parse errors
    (the latter only applies to eager decoding); ``tag_decoders`` adds or
    overrides decoders by tag type signature (``None`` removes one).
    """

    mode: ParseMode = ParseMode.FULL
    lazy_tag_decode: bool = False
    error_on_unknown_tags: bool = False
    error_on_tag_decode: bool = False
    tag_decoders: Mapping[str, Decoder | None] = field(default_factory=dict)


def _run_decoder(decoder: Decoder, raw: bytes) -> tuple[Any, ICCError | None]:
    """Run a decoder, returning its value or the error it raised."""
    try:
        return decoder(raw), None
    except ICCError as exc:
        return None, exc
    except (ValueError, IndexError, struct.error) as exc:
        return None, ICCError(str(exc))


class Tag:
    """One tag block: its type signature, raw bytes and (possibly deferred) decoded value."""

    def __init__(
        self,
        name: str = "",
        raw: bytes = b"",
        headers: list[TagHeader] | None = None,
        *,
        value: Any = None,
        error: ICCError | None = None,
        decoder: Decoder | None = None,
        lazy: bool = False,
    ) -> None:
        self.name = name
        self.raw = raw
        self.headers: list[TagHeader] = list(headers) if headers else []
        self.error = error
        self._value = value
        self._decoder = decoder
        self._lazy = lazy

    def value(self) -> Any:
        """Return the decoded value, decoding it once if deferred; raise the tag's error."""
        if self.error is not None:
            raise self.error
        if self._lazy:
            self._lazy = False
            if self._decoder is None:
                self.error = ICCError(f'no decoder for tag "{self.name}"')
            else:
                self._value, self.error = _run_decoder(self._decoder, self.raw)
            if self.error is not None:
                raise self.error
        return self._value

    def __repr__(self) -> str:
        return f"Tag(name={self.name!r}, size={len(self.raw)}, headers={len(self.headers)})"


@dataclass
class ModularTag:
    """An mAB/mBA tag: a chain of processing elements."""

    signature: str = ""
    input_channels: int = 0
    output_channels: int = 0
    elements: list[Tag] = field(default_factory=list)

    def to_ciexyz(self, *args: float) -> list[float]:
        """Run the channels through the element chain."""
        return self.transform_channels(list(args))

    def from_ciexyz(self, *args: float) -> list[float]:
        """Run the channels through the element chain."""
        return self.transform_channels(list(args))

    def transform_channels(self, channels: list[float]) -> list[float]:
        """Apply every transformable element in order to the channels."""
        if len(channels) != self.input_channels:
            raise ICCError(
                f"expected {self.input_channels} input channels, got {len(channels)}"
            )
        result = list(channels)
        applied = False
        for element in self.elements:
            if element.name not in _MODULAR_ELEMENTS:
                continue
            try:
                decoded = element.value()
            except ICCError as exc:
                raise ICCError(
                    f'failed decoding modular element "{element.name}": {exc}'
                ) from exc
            if isinstance(decoded, ChannelTransformer):
                try:
                    result = decoded.transform(*result)
                except ICCError as exc:
                    raise ICCError(
                        f'failed processing modular element "{element.name}": {exc}'
                    ) from exc
                applied = True
        if not applied:
            raise ICCError("modular tag has no transformable elements")
        return result


_MODULAR_ELEMENTS = frozenset(
    {TAG_CURVE, TAG_PARAMETRIC_CURVE, TAG_MATRIX, TAG_COLOR_LOOKUP_TABLE}
)


def is_ascii(data: bytes) -> bool:
    """True if the first four bytes are all printable ASCII."""
    return all(32 <= ch <= 126 for ch in bytes(data[:4]))


def decode_embedded_tag(signature: str, raw: bytes) -> Tag:
    """Decode an element embedded in a modular tag, recording any error on the tag."""
    decoder = DEFAULT_DECODERS.get(signature)
    if decoder is None:
        return Tag(
            name=bytes(raw[:4]).decode("latin-1"),
            raw=raw,
            error=ICCError(f'unknown embedded tag type: "{signature}"'),
        )
    value, error = _run_decoder(decoder, raw)
    return Tag(name=signature, raw=raw, value=value, error=error, decoder=decoder)


def decode_modular(raw: bytes) -> ModularTag:
    """Decode an mAB/mBA tag into its elements."""
    if len(raw) < 12:
        raise ICCError("modular (mAB/mBA) tag too short")
    input_channels, output_channels = struct.unpack_from(">HH", raw, 8)
    offset = 12
    offsets: list[int] = []
    if offset + 4 <= len(raw):
        (first,) = struct.unpack_from(">I", raw, offset)
        if first < len(raw) and not is_ascii(raw[offset:offset + 4]):
            while offset + 4 <= len(raw):
                (element_offset,) = struct.unpack_from(">I", raw, offset)
                if element_offset == 0 or (offsets and element_offset <= offsets[-1]):
                    break
                if element_offset >= len(raw):
                    break
                offsets.append(element_offset)
                offset += 4
    if not offsets:
        offsets.append(offset)

    elements: list[Tag] = []
    for index, start in enumerate(offsets):
        end = offsets[index + 1] if index + 1 < len(offsets) else len(raw)
        if end > len(raw):
            raise ICCError(
                f"modular (mAB/mBA): element {index} end offset 0x{end:X} out of bounds"
            )
        block = bytes(raw[start:end])
        if len(block) < 8:
            raise ICCError(
                f"modular (mAB/mBA): element {index} too short to contain header"
            )
        elements.append(decode_embedded_tag(block[0:4].decode("latin-1"), block))
    return ModularTag(
        signature=stringed(raw[:4]),
        input_channels=input_channels,
        output_channels=output_channels,
        elements=elements,
    )


def _discard(stream: BinaryIO, count: int) -> None:
    """Read and drop count bytes, raising ICCError if the stream ends first."""
    remaining = count
    while remaining > 0:
        chunk = stream.read(min(remaining, _SKIP_CHUNK))
        if not chunk:
            raise ICCError("EOF" if remaining == count else "unexpected EOF")
        remaining -= len(chunk)


def parse_tags(
    stream: BinaryIO, table: TagHeaderTable, options: ParseOptions | None
) -> list[Tag]:
    """Read the tag blocks that follow the tag table, in offset order.

    Headers that share an offset share one Tag.
    """
    if options is None:
        options = ParseOptions()
    headers = sorted(table.entries, key=lambda entry: entry.offset)
    current = HEADER_SIZE + 4 + 12 * len(headers)
    by_offset: dict[int, Tag] = {}
    result: list[Tag] = []
    for header in headers:
        cached = by_offset.get(header.offset)
        if cached is not None:
            cached.headers.append(header)
            result.append(cached)
            continue
        if header.offset > current:
            try:
                _discard(stream, header.offset - current)
            except ICCError as exc:
                raise ICCError(
                    f'failed to skip to tag "{header.name}" at 0x{header.offset:X}: {exc}'
                ) from exc
            current = header.offset
        if header.offset < current:
            raise ICCError(
                f'tag "{header.name}" has offset 0x{header.offset:X} '
                f"before current stream position 0x{current:X}"
            )
        try:
            raw = _read_exact(stream, header.size)
        except ICCError as exc:
            raise ICCError(
                f'failed to read tag "{header.name}" at 0x{header.offset:X}: {exc}'
            ) from exc
        current += header.size

        signature = stringed(raw[0:4])
        decoder = DEFAULT_DECODERS.get(signature)
        if signature in options.tag_decoders:
            decoder = options.tag_decoders[signature]
        block = Tag(
            name=signature,
            raw=raw,
            headers=[header],
            decoder=decoder,
            lazy=options.lazy_tag_decode,
        )
        if decoder is None:
            if options.error_on_unknown_tags:
                raise ICCError(f'unknown tag "{signature}" at 0x{header.offset:X}')
            block.error = ICCError(f'unknown tag "{signature}"')
            block._lazy = False
        elif not options.lazy_tag_decode:
            block._value, block.error = _run_decoder(decoder, raw)
            if options.error_on_tag_decode and block.error is not None:
                raise ICCError(
                    f'failed to decode tag "{signature}" at 0x{header.offset:X}: {block.error}'
                ) from block.error
        by_offset[header.offset] = block
        result.append(block)
    return result


DEFAULT_DECODERS: dict[str, Decoder] = {
    TAG_COLOR_LOOKUP_TABLE: decode_clut,
    TAG_CURVE: decode_curve,
    TAG_DESCRIPTION: decode_desc,
    TAG_DICTIONARY: decode_dict,
    TAG_GAMUT_BOUNDARY_DESCRIPTION: decode_gbd,
    TAG_MATRIX: decode_matrix,
    TAG_MODULAR_AB: decode_modular,
    TAG_MODULAR_BA: decode_modular,
    TAG_MEASUREMENT: decode_measurement,
    TAG_MULTI_FUNCTION_TABLE1: decode_mft1,
    TAG_MULTI_FUNCTION_TABLE2: decode_mft2,
    TAG_MULTI_LOCALIZED_UNICODE: decode_mluc,
    TAG_PARAMETRIC_CURVE: decode_parametric_curve,
    TAG_PROFILE_SEQUENCE_DESCRIPTION: decode_pseq,
    TAG_PROFILE_SEQUENCE_IDENTIFIER: decode_psid,
    TAG_S15_FIXED16_ARRAY: decode_sf32,
    TAG_SIGNATURE: decode_sig,
    TAG_TEXT: decode_text,
    TAG_VIEW: decode_view,
    TAG_XYZ: decode_xyz,
    "MSBN": decode_msbn,
    TAG_ZXML: decode_zxml,
}