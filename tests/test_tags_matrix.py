import struct

import pytest

from iccarus.common import ICCError
from iccarus.tags_matrix import MatrixTag, decode_matrix


def _fixed(value: float) -> bytes:
    whole = int(value)
    return struct.pack(">hH", whole, int((value - whole) * 65536.0))


IDENTITY = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


def test_decode_with_offsets():
    raw = b"mtx " + bytes(4)
    raw += b"".join(_fixed(v) for row in IDENTITY for v in row)
    raw += b"".join(_fixed(v) for v in (0.1, 0.2, 0.3))
    tag = decode_matrix(raw)
    assert tag.matrix == IDENTITY
    assert tag.offset == pytest.approx((0.1, 0.2, 0.3), abs=0.0001)


def test_decode_without_offsets():
    values = [float(v) for v in range(1, 10)]
    raw = b"mtx " + bytes(4) + b"".join(_fixed(v) for v in values)
    tag = decode_matrix(raw)
    assert tag.matrix == ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0), (7.0, 8.0, 9.0))
    assert tag.offset is None


def test_decode_too_short():
    with pytest.raises(ICCError, match="mtx tag too short"):
        decode_matrix(bytes(20))


def test_transform_without_offset():
    out = MatrixTag(matrix=IDENTITY).transform(0.5, 0.25, 0.75)
    assert out == pytest.approx([0.5, 0.25, 0.75], abs=0.0001)


def test_transform_with_offset():
    out = MatrixTag(matrix=IDENTITY, offset=(0.1, 0.2, 0.3)).transform(0.5, 0.25, 0.75)
    assert out == pytest.approx([0.6, 0.45, 1.05], abs=0.0001)


def test_transform_matrix_applied():
    tag = MatrixTag(matrix=((2.0, 0.0, 0.0), (0.0, 3.0, 0.0), (0.0, 0.0, 4.0)))
    assert tag.transform(1, 1, 1) == pytest.approx([2, 3, 4], abs=0.0001)


def test_transform_wrong_input_length():
    with pytest.raises(ICCError, match="matrix transform expects 3 inputs"):
        MatrixTag().transform(1, 2)