"""Decoder and multilinear interpolation for the 'clut' element."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field

from .common import ICCError


def clamp01(value: float) -> float:
    """Clamp a value into the range [0, 1]."""
    if value < 0:
        return 0.0
    if value > 1:
        return 1.0
    return value


@dataclass
class CLUTTag:
    """A colour lookup table with per-input grid sizes and flattened output values."""

    grid_points: list[int] = field(default_factory=list)
    input_channels: int = 0
    output_channels: int = 0
    values: list[float] = field(default_factory=list)

    @property
    def expected_values(self) -> int:
        """Number of values the grid requires."""
        return math.prod(self.grid_points) * self.output_channels

    def transform(self, *args: float) -> list[float]:
        """Look up the inputs, checking channel count and table size first."""
        if len(args) != self.input_channels:
            raise ICCError(f"expected {self.input_channels} input channels, got {len(args)}")
        expected = self.expected_values
        if len(self.values) < expected:
            raise ICCError(f"not enough CLUT values: expected {expected}, got {len(self.values)}")
        return self.lookup(list(args))

    def lookup(self, inputs: list[float]) -> list[float]:
        """Interpolate the table at the given inputs, each clamped to [0, 1]."""
        if len(inputs) != self.input_channels:
            raise ICCError(f"expected {self.input_channels} inputs, got {len(inputs)}")
        if len(self.grid_points) != self.input_channels:
            raise ICCError(
                f"grid points mismatch: expected {self.input_channels}, got {len(self.grid_points)}"
            )
        positions: list[int] = []
        fractions: list[float] = []
        for channel, (value, points) in enumerate(zip(inputs, self.grid_points)):
            if points < 2:
                raise ICCError(f"CLUT input channel {channel} has invalid grid points: {points}")
            position = clamp01(value) * (points - 1)
            cell = int(position)
            if cell >= points - 1:
                positions.append(points - 2)
                fractions.append(1.0)
            else:
                positions.append(cell)
                fractions.append(position - cell)
        return self._interpolate(positions, fractions)

    def _interpolate(self, positions: list[int], fractions: list[float]) -> list[float]:
        outputs = self.output_channels
        dims = list(zip(positions, fractions, self.grid_points))
        out = [0.0] * outputs
        for corner in range(1 << self.input_channels):
            weight = 1.0
            index = 0
            stride = 1
            for dim in reversed(range(len(dims))):
                cell, fraction, points = dims[dim]
                bit = (corner >> dim) & 1
                pos = cell + bit
                if pos >= points:
                    raise ICCError(f"CLUT corner position out of bounds at dimension {dim}")
                index += pos * stride
                stride *= points
                weight *= fraction if bit else 1 - fraction
            base = index * outputs
            if base + outputs > len(self.values):
                raise ICCError("CLUT value index out of bounds")
            out = [acc + weight * v for acc, v in zip(out, self.values[base:base + outputs])]
        return out


def decode_clut(raw: bytes) -> CLUTTag:
    """Decode a 'clut' element with 16-bit values."""
    if len(raw) < 16:
        raise ICCError("clut tag too short")
    input_channels = raw[8]
    output_channels = raw[9]
    grid_points = list(raw[10:10 + input_channels])
    body = raw[10 + input_channels:]
    if len(body) % 2 != 0:
        raise ICCError("clut body size must be even")
    expected = math.prod(grid_points) * output_channels * 2
    if len(body) != expected:
        raise ICCError(f"CLUT unexpected body length: expected {expected}, got {len(body)}")
    values = [value / 65535.0 for (value,) in struct.iter_unpack(">H", body)]
    return CLUTTag(
        grid_points=grid_points,
        input_channels=input_channels,
        output_channels=output_channels,
        values=values,
    )