"""Decoder and transform for the 'mtx' matrix element."""

from __future__ import annotations

from dataclasses import dataclass

from .common import ICCError, read_s15_fixed16

_MIN_LENGTH = 8 + 9 * 4
_WITH_OFFSETS_LENGTH = 12 * 4

Matrix3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]


@dataclass
class MatrixTag:
    """A 3x3 matrix with an optional offset vector."""

    matrix: Matrix3 = ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    offset: tuple[float, float, float] | None = None

    def transform(self, *args: float) -> list[float]:
        """Multiply three inputs by the matrix and add the offset if present."""
        if len(args) != 3:
            raise ICCError(f"matrix transform expects 3 inputs, got {len(args)}")
        out = [sum(m * v for m, v in zip(row, args)) for row in self.matrix]
        if self.offset is not None:
            out = [value + shift for value, shift in zip(out, self.offset)]
        return out


def decode_matrix(raw: bytes) -> MatrixTag:
    """Decode an 'mtx' element."""
    if len(raw) < _MIN_LENGTH:
        raise ICCError("mtx tag too short")
    body = raw[8:]
    values = [read_s15_fixed16(body[i:i + 4]) for i in range(0, 36, 4)]
    matrix = (tuple(values[0:3]), tuple(values[3:6]), tuple(values[6:9]))
    offset = None
    if len(body) >= _WITH_OFFSETS_LENGTH:
        offset = tuple(read_s15_fixed16(body[i:i + 4]) for i in range(36, 48, 4))
    return MatrixTag(matrix=matrix, offset=offset)