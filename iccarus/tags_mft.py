"""Decoders and transforms for the 'mft1' and 'mft2' multi-function table tags."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Sequence

from .common import ICCError, read_s15_fixed16
from .tags_clut import clamp01

_ZERO_MATRIX = (0.0,) * 9
_MFT1_CURVE_SIZE = 256


def _read_matrix(raw: bytes) -> tuple[float, ...]:
    return tuple(read_s15_fixed16(raw[offset:offset + 4]) for offset in range(12, 48, 4))


def _sample_curve16(curve: Sequence[int], value: float, kind: str, channel: int) -> float:
    """Linearly interpolate a 16-bit curve at a value clamped to [0, 1]."""
    position = clamp01(value) * (len(curve) - 1)
    lo = math.floor(position)
    hi = math.ceil(position)
    if lo < 0 or hi >= len(curve):
        raise ICCError(f"{kind} curve index out of bounds for channel {channel}")
    low_value = curve[lo] / 65535.0
    if lo == hi:
        return low_value
    high_value = curve[hi] / 65535.0
    return low_value + (position - lo) * (high_value - low_value)


def _grid_cells(values: Sequence[float], grid: int) -> tuple[list[int], list[float]]:
    """Locate the grid cell and fractional offset of each value."""
    positions: list[int] = []
    fractions: list[float] = []
    for value in values:
        position = value * (grid - 1)
        cell = math.floor(position)
        if cell >= grid - 1:
            positions.append(grid - 2)
            fractions.append(1.0)
        else:
            positions.append(cell)
            fractions.append(position - cell)
    return positions, fractions


def _corners(positions: Sequence[int], fractions: Sequence[float], grid: int):
    """Yield (index, weight, out_of_bounds_dim) for every corner of the enclosing hypercube."""
    dims = len(positions)
    for corner in range(1 << dims):
        weight = 1.0
        index = 0
        stride = 1
        bad_dim = None
        for dim in reversed(range(dims)):
            bit = (corner >> dim) & 1
            pos = positions[dim] + bit
            if pos >= grid and bad_dim is None:
                bad_dim = dim
            index += pos * stride
            stride *= grid
            weight *= fractions[dim] if bit else 1 - fractions[dim]
        yield index, weight, bad_dim


@dataclass
class MFT2Tag:
    """A 16-bit multi-function table: input curves, a CLUT and output curves."""

    input_channels: int = 0
    output_channels: int = 0
    grid_points: int = 0
    matrix: tuple[float, ...] = _ZERO_MATRIX
    input_curves: list[list[int]] = field(default_factory=list)
    clut: list[float] = field(default_factory=list)
    output_curves: list[list[int]] = field(default_factory=list)

    def transform(self, *args: float) -> list[float]:
        """Run the inputs through input curves, CLUT interpolation and output curves."""
        if len(args) != self.input_channels:
            raise ICCError(f"expected {self.input_channels} input channels, got {len(args)}")
        mapped = [
            _sample_curve16(curve, value, "input", channel)
            for channel, (value, curve) in enumerate(zip(args, self.input_curves))
        ]
        outputs = self.output_channels
        grid = self.grid_points
        if len(self.clut) < grid ** self.input_channels * outputs:
            raise ICCError("CLUT index out of bounds")
        positions, fractions = _grid_cells(mapped, grid)
        out = [0.0] * outputs
        for index, weight, bad_dim in _corners(positions, fractions, grid):
            base = index * outputs
            if bad_dim is not None or base < 0 or base + outputs > len(self.clut):
                raise ICCError("CLUT index out of bounds")
            out = [acc + value * weight for acc, value in zip(out, self.clut[base:base + outputs])]
        return [
            _sample_curve16(curve, value, "output", channel)
            for channel, (value, curve) in enumerate(zip(out, self.output_curves))
        ]


@dataclass
class MFT1Tag:
    """An 8-bit multi-function table: 256-entry curves around a CLUT."""

    input_channels: int = 0
    output_channels: int = 0
    grid_points: int = 0
    matrix: tuple[float, ...] = _ZERO_MATRIX
    input_curves: list[bytes] = field(default_factory=list)
    clut: list[float] = field(default_factory=list)
    output_curves: list[bytes] = field(default_factory=list)

    def transform(self, *args: float) -> list[float]:
        """Run the inputs through input curves, CLUT interpolation and output curves."""
        if len(args) != self.input_channels:
            raise ICCError(
                f"mft1: expected {self.input_channels} input channels, got {len(args)}"
            )
        curved = []
        for value, curve in zip(args, self.input_curves):
            index = int(clamp01(value) * 255.0)
            if index >= len(curve):
                raise ICCError(f"mft1: input curve {index} out of bounds")
            curved.append(curve[index] / 255.0)
        outputs = self.output_channels
        grid = self.grid_points
        positions, fractions = _grid_cells(curved, grid)
        result = [0.0] * outputs
        for index, weight, bad_dim in _corners(positions, fractions, grid):
            if bad_dim is not None:
                raise ICCError(f"mft1: grid index out of bounds at dim {bad_dim}")
            base = index * outputs
            if base < 0 or base + outputs > len(self.clut):
                raise ICCError("mft1: CLUT index out of bounds")
            result = [acc + weight * value for acc, value in zip(result, self.clut[base:base + outputs])]
        final = []
        for value, curve in zip(result, self.output_curves):
            index = int(clamp01(value) * 255.0)
            if index >= len(curve):
                raise ICCError(f"mft1: output curve {index} out of bounds")
            final.append(curve[index] / 255.0)
        return final


def decode_mft2(raw: bytes) -> MFT2Tag:
    """Decode an 'mft2' tag."""
    if len(raw) < 52:
        raise ICCError("mft2 tag too short")
    input_channels, output_channels, grid_points = raw[8], raw[9], raw[10]
    matrix = _read_matrix(raw)
    input_entries, output_entries = struct.unpack_from(">HH", raw, 48)
    offset = 52

    input_curves: list[list[int]] = []
    for channel in range(input_channels):
        end = offset + input_entries * 2
        if end > len(raw):
            raise ICCError(f"mft2: input curve {channel} out of bounds")
        input_curves.append(list(struct.unpack_from(f">{input_entries}H", raw, offset)))
        offset = end

    clut_entries = grid_points ** input_channels * output_channels
    if offset + clut_entries * 2 > len(raw):
        raise ICCError("mft2: clut out of bounds")
    clut = [value / 65535.0 for value in struct.unpack_from(f">{clut_entries}H", raw, offset)]
    offset += clut_entries * 2

    output_curves: list[list[int]] = []
    for channel in range(output_channels):
        end = offset + output_entries * 2
        if end > len(raw):
            raise ICCError(f"mft2: output curve {channel} out of bounds")
        output_curves.append(list(struct.unpack_from(f">{output_entries}H", raw, offset)))
        offset = end

    return MFT2Tag(
        input_channels=input_channels,
        output_channels=output_channels,
        grid_points=grid_points,
        matrix=matrix,
        input_curves=input_curves,
        clut=clut,
        output_curves=output_curves,
    )


def decode_mft1(raw: bytes) -> MFT1Tag:
    """Decode an 'mft1' tag."""
    if len(raw) < 48:
        raise ICCError("mft1 tag too short")
    input_channels, output_channels, grid_points = raw[8], raw[9], raw[10]
    matrix = _read_matrix(raw)
    offset = 48

    input_curves: list[bytes] = []
    for channel in range(input_channels):
        if offset + _MFT1_CURVE_SIZE > len(raw):
            raise ICCError(f"mft1: input curve {channel} out of bounds")
        input_curves.append(bytes(raw[offset:offset + _MFT1_CURVE_SIZE]))
        offset += _MFT1_CURVE_SIZE

    clut_bytes = grid_points ** input_channels * output_channels
    if offset + clut_bytes > len(raw):
        raise ICCError("mft1: clut out of bounds")
    clut = [value / 255.0 for value in raw[offset:offset + clut_bytes]]
    offset += clut_bytes

    output_curves: list[bytes] = []
    for channel in range(output_channels):
        if offset + _MFT1_CURVE_SIZE > len(raw):
            raise ICCError(f"mft1: output curve {channel} out of bounds")
        output_curves.append(bytes(raw[offset:offset + _MFT1_CURVE_SIZE]))
        offset += _MFT1_CURVE_SIZE

    return MFT1Tag(
        input_channels=input_channels,
        output_channels=output_channels,
        grid_points=grid_points,
        matrix=matrix,
        input_curves=input_curves,
        clut=clut,
        output_curves=output_curves,
    )