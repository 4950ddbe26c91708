import math
import struct

import pytest

from iccarus.common import ICCError
from iccarus.tags_curve import (
    CurveTag,
    CurveType,
    ParametricCurveFunction,
    ParametricCurveTag,
    decode_curve,
    decode_parametric_curve,
)


def _fixed(value: float) -> bytes:
    whole = int(value)
    return struct.pack(">hH", whole, int((value - whole) * 65536.0))


def test_decode_identity():
    tag = decode_curve(b"curv\x00\x00\x00\x00\x00\x00\x00\x00")
    assert tag.curve_type == CurveType.IDENTITY


def test_decode_gamma():
    tag = decode_curve(b"curv\x00\x00\x00\x00\x00\x00\x00\x01\x01\x00")
    assert tag.curve_type == CurveType.GAMMA
    assert tag.gamma == pytest.approx(1.0, abs=0.001)


def test_decode_points():
    tag = decode_curve(b"curv\x00\x00\x00\x00\x00\x00\x00\x03\x00\x10\x00\x20\x00\x30")
    assert tag.curve_type == CurveType.POINTS
    assert tag.points == [0x10, 0x20, 0x30]


def test_decode_too_short():
    with pytest.raises(ICCError, match="curv tag too short"):
        decode_curve(bytes(11))


def test_decode_missing_gamma():
    with pytest.raises(ICCError, match="curv tag missing gamma value"):
        decode_curve(b"curv\x00\x00\x00\x00\x00\x00\x00\x01")


def test_decode_truncated_points():
    with pytest.raises(ICCError, match="curv tag truncated"):
        decode_curve(b"curv\x00\x00\x00\x00\x00\x00\x00\x02\x00\x10")


@pytest.mark.parametrize("function,count", [(0, 1), (1, 3), (2, 4), (3, 5), (4, 7)])
def test_decode_parametric(function, count):
    raw = b"para" + bytes(4) + struct.pack(">H", function)
    if function == 0:
        raw += _fixed(1.0)
        expected = [1.0]
    else:
        raw += b"".join(_fixed(float(i)) for i in range(count))
        expected = [float(i) for i in range(count)]
    tag = decode_parametric_curve(raw)
    assert tag.function_type == ParametricCurveFunction(function)
    assert tag.parameters == pytest.approx(expected, abs=0.0001)


def test_decode_parametric_too_short():
    with pytest.raises(ICCError, match="para tag too short"):
        decode_parametric_curve(bytes(11))


def test_decode_parametric_unknown_function():
    raw = b"para" + bytes(4) + struct.pack(">H", 5) + struct.pack(">I", 0x00010000) * 7
    with pytest.raises(ICCError, match="unknown parametric function type: 5"):
        decode_parametric_curve(raw)


def test_decode_parametric_truncated():
    raw = b"para\x00\x00\x00\x00\x00\x02" + b"\x00\x01\x00\x00" * 3
    with pytest.raises(ICCError, match="para tag truncated for function 2"):
        decode_parametric_curve(raw)


def test_curve_identity():
    assert CurveTag(curve_type=CurveType.IDENTITY).transform(0.5) == pytest.approx([0.5])


def test_curve_gamma():
    assert CurveTag(curve_type=CurveType.GAMMA, gamma=2.0).transform(0.5) == pytest.approx([0.25])


def test_curve_points_exact_index():
    tag = CurveTag(curve_type=CurveType.POINTS, points=[0, 32768, 65535])
    assert tag.transform(0.5)[0] == pytest.approx(0.5, abs=0.01)


def test_curve_points_interpolation():
    tag = CurveTag(curve_type=CurveType.POINTS, points=[0, 32768, 65535])
    assert tag.transform(0.25)[0] == pytest.approx(0.25, abs=0.01)


def test_curve_unknown_type():
    with pytest.raises(ICCError, match="unknown curve type"):
        CurveTag(curve_type=999).transform(0.5)


def test_curve_wrong_input_length():
    with pytest.raises(ICCError, match="curve expects 1 input"):
        CurveTag(curve_type=CurveType.IDENTITY).transform(0.1, 0.2)


def test_curve_empty_points():
    with pytest.raises(ICCError, match="curve has no points"):
        CurveTag(curve_type=CurveType.POINTS, points=[]).transform(0.5)


@pytest.mark.parametrize(
    "function,params,x,expected",
    [
        (ParametricCurveFunction.SIMPLE_GAMMA, [2.0], 0.5, 0.25),
        (ParametricCurveFunction.CONDITIONAL_ZERO, [1.0, 0.0, 2.0], -0.5, 0.0),
        (ParametricCurveFunction.CONDITIONAL_ZERO, [1.0, 0.0, 2.0], 0.5, 0.25),
        (ParametricCurveFunction.CONDITIONAL_C, [1.0, 0.0, 2.0, 0.1], -0.5, 0.1),
        (ParametricCurveFunction.CONDITIONAL_C, [1.0, 0.0, 2.0, 0.1], 0.5, 0.35),
        (ParametricCurveFunction.SPLIT, [1.0, 0.0, 2.0, 2.0, 0.5], 0.4, 0.8),
        (ParametricCurveFunction.SPLIT, [1.0, 0.0, 2.0, 0.5, 0.4], 0.5, 0.25),
        (ParametricCurveFunction.COMPLEX, [1.0, 0.0, 2.0, 2.0, 0.5, 0.1, 0.2], 0.6, math.pow(0.6, 2) + 0.1),
        (ParametricCurveFunction.COMPLEX, [1.0, 0.0, 2.0, 0.5, 0.6, 0.1, 0.2], 0.5, 0.45),
    ],
)
def test_parametric_transform(function, params, x, expected):
    out = ParametricCurveTag(function_type=function, parameters=params).transform(x)
    assert len(out) == 1
    assert out[0] == pytest.approx(expected, abs=0.001)


@pytest.mark.parametrize(
    "function,params,message",
    [
        (0, [], "function 0 expects 1 parameter"),
        (1, [1.0, 2.0], "function 1 expects 3 parameters"),
        (2, [1.0, 2.0, 3.0], "function 2 expects 4 parameters"),
        (3, [1.0, 0.0, 2.0], "function 3 expects 5 parameters"),
        (4, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0], "function 4 expects 7 parameters"),
        (99, [], "unknown parametric function type"),
    ],
)
def test_parametric_transform_errors(function, params, message):
    with pytest.raises(ICCError, match=message):
        ParametricCurveTag(function_type=function, parameters=params).transform(0.5)


def test_parametric_wrong_input_length():
    tag = ParametricCurveTag(function_type=0, parameters=[2.0])
    with pytest.raises(ICCError, match="expects 1 input"):
        tag.transform(0.5, 0.5)