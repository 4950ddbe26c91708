"""Decoders and transforms for 'curv' and 'para' curve tags."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .common import ICCError, read_s15_fixed16


class CurveType(IntEnum):
    """Kind of a 'curv' tag."""

    IDENTITY = 0
    GAMMA = 1
    POINTS = 2


class ParametricCurveFunction(IntEnum):
    """Function kind of a 'para' tag."""

    SIMPLE_GAMMA = 0
    CONDITIONAL_ZERO = 1
    CONDITIONAL_C = 2
    SPLIT = 3
    COMPLEX = 4


_PARAMETER_COUNTS = {
    ParametricCurveFunction.SIMPLE_GAMMA: 1,
    ParametricCurveFunction.CONDITIONAL_ZERO: 3,
    ParametricCurveFunction.CONDITIONAL_C: 4,
    ParametricCurveFunction.SPLIT: 5,
    ParametricCurveFunction.COMPLEX: 7,
}


def _pow(base: float, exponent: float) -> float:
    """Power that yields inf/nan instead of raising, like IEEE pow."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.inf if base == 0 else math.nan


def _threshold(a: float, b: float) -> float:
    """Compute -b/a with IEEE semantics for a zero divisor."""
    if a == 0:
        if b == 0:
            return math.nan
        return math.copysign(math.inf, -b) * math.copysign(1.0, a)
    return -b / a


@dataclass
class CurveTag:
    """A 'curv' tag: identity, a single gamma, or a sampled curve."""

    curve_type: int = CurveType.IDENTITY
    gamma: float = 0.0
    points: list[int] = field(default_factory=list)

    def transform(self, *args: float) -> list[float]:
        """Apply the curve to a single input value."""
        if len(args) != 1:
            raise ICCError(f"curve expects 1 input, got {len(args)}")
        value = args[0]
        if self.curve_type == CurveType.IDENTITY:
            return [value]
        if self.curve_type == CurveType.GAMMA:
            return [_pow(value, self.gamma)]
        if self.curve_type == CurveType.POINTS:
            if not self.points:
                raise ICCError("curve has no points")
            position = value * (len(self.points) - 1)
            lo = math.floor(position)
            hi = math.ceil(position)
            if lo < 0 or hi >= len(self.points):
                raise ICCError("curve input out of range")
            low_value = self.points[lo] / 65535.0
            if lo == hi:
                return [low_value]
            high_value = self.points[hi] / 65535.0
            return [low_value + (position - lo) * (high_value - low_value)]
        raise ICCError("unknown curve type")


@dataclass
class ParametricCurveTag:
    """A 'para' tag: one of the ICC parametric curve functions."""

    function_type: int
    parameters: list[float] = field(default_factory=list)

    def transform(self, *args: float) -> list[float]:
        """Evaluate the parametric function for a single input value."""
        if len(args) != 1:
            raise ICCError(f"parametric curve expects 1 input, got {len(args)}")
        x = args[0]
        expected = _PARAMETER_COUNTS.get(self.function_type)
        if expected is None:
            raise ICCError(f"unknown parametric function type: {int(self.function_type)}")
        if len(self.parameters) != expected:
            plural = "s" if expected > 1 else ""
            raise ICCError(
                f"function {int(self.function_type)} expects {expected} parameter{plural}"
            )
        p = self.parameters
        function = self.function_type
        if function == ParametricCurveFunction.SIMPLE_GAMMA:
            result = _pow(x, p[0])
        elif function == ParametricCurveFunction.CONDITIONAL_ZERO:
            a, b, g = p
            result = _pow(a * x + b, g) if x >= _threshold(a, b) else 0.0
        elif function == ParametricCurveFunction.CONDITIONAL_C:
            a, b, g, c = p
            result = _pow(a * x + b, g) + c if x >= _threshold(a, b) else c
        elif function == ParametricCurveFunction.SPLIT:
            a, b, g, c, d = p
            result = _pow(a * x + b, g) if x >= d else c * x
        else:
            a, b, g, c, d, e, f = p
            result = _pow(a * x + b, g) + e if x >= d else c * x + f
        return [result]


def decode_curve(raw: bytes) -> CurveTag:
    """Decode a 'curv' tag."""
    if len(raw) < 12:
        raise ICCError("curv tag too short")
    (count,) = struct.unpack_from(">I", raw, 8)
    if count == 0:
        return CurveTag(curve_type=CurveType.IDENTITY)
    if count == 1:
        if len(raw) < 14:
            raise ICCError("curv tag missing gamma value")
        (gamma_raw,) = struct.unpack_from(">H", raw, 12)
        return CurveTag(curve_type=CurveType.GAMMA, gamma=gamma_raw / 256.0)
    if len(raw) < 12 + count * 2:
        raise ICCError("curv tag truncated")
    points = list(struct.unpack_from(f">{count}H", raw, 12))
    return CurveTag(curve_type=CurveType.POINTS, points=points)


def decode_parametric_curve(raw: bytes) -> ParametricCurveTag:
    """Decode a 'para' tag."""
    if len(raw) < 12:
        raise ICCError("para tag too short")
    (function_raw,) = struct.unpack_from(">H", raw, 8)
    try:
        function = ParametricCurveFunction(function_raw)
    except ValueError:
        raise ICCError(f"unknown parametric function type: {function_raw}") from None
    expected = _PARAMETER_COUNTS[function]
    if len(raw) < 10 + expected * 4:
        raise ICCError(f"para tag truncated for function {function_raw}")
    parameters = [read_s15_fixed16(raw[offset:offset + 4]) for offset in range(10, 10 + expected * 4, 4)]
    return ParametricCurveTag(function_type=function, parameters=parameters)