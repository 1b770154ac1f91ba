"""Accelerator configurations and the fixed-point arithmetic they use."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

ELEM_MAX = 127
ELEM_MIN = -128
MVIN_SCALE_IDENTITY = 1.0
ACC_SCALE_IDENTITY = 1.0


@dataclass(frozen=True)
class AcceleratorConfig:
    """Geometry of a systolic-array accelerator and its scratchpad."""

    dim: int
    addr_len: int
    bank_num: int
    bank_rows: int
    acc_rows: int
    max_bytes: int
    elem_bytes: int = 1
    acc_bytes: int = 4
    fixed_max_block_len_acc: int | None = None
    xcustom_acc: int | None = None
    has_mvin_scale: bool = False
    has_first_layer_optimizations: bool = False

    def max_block_len(self) -> int:
        """Number of DIM-wide input blocks moved in one transfer."""
        return self.max_bytes // (self.dim * self.elem_bytes)

    def max_block_len_acc(self) -> int:
        """Number of DIM-wide accumulator blocks moved in one transfer."""
        if self.fixed_max_block_len_acc is not None:
            return self.fixed_max_block_len_acc
        return self.max_bytes // (self.dim * self.acc_bytes)

    def row_alignment(self, blocks: int) -> int:
        """Byte alignment of a row spanning ``blocks`` input blocks."""
        if blocks < 1:
            raise ValueError(f"blocks must be positive, got {blocks}")
        return blocks * self.dim * self.elem_bytes

    def acc_row_alignment(self, blocks: int) -> int:
        """Byte alignment of a row spanning ``blocks`` accumulator blocks."""
        if blocks < 1:
            raise ValueError(f"blocks must be positive, got {blocks}")
        return blocks * self.dim * self.acc_bytes


DEFAULT_CONFIG = AcceleratorConfig(
    dim=16,
    addr_len=32,
    bank_num=4,
    bank_rows=4096,
    acc_rows=1024,
    max_bytes=64,
    xcustom_acc=3,
    has_mvin_scale=True,
    has_first_layer_optimizations=True,
)

EE290_CONFIG = AcceleratorConfig(
    dim=32,
    addr_len=32,
    bank_num=4,
    bank_rows=2048,
    acc_rows=512,
    max_bytes=64,
    fixed_max_block_len_acc=1,
)

EE290_SMALLSP_CONFIG = AcceleratorConfig(
    dim=32,
    addr_len=32,
    bank_num=4,
    bank_rows=1024,
    acc_rows=256,
    max_bytes=64,
    fixed_max_block_len_acc=1,
)

CONFIGS = {
    "default": DEFAULT_CONFIG,
    "ee290": EE290_CONFIG,
    "ee290_smallsp": EE290_SMALLSP_CONFIG,
}


def rounding_right_shift(x: int, shift: int) -> int:
    """Shift right with round-half-to-even; a non-positive shift shifts left."""
    if shift <= 0:
        return x << -shift
    half_bit = (x >> (shift - 1)) & 1
    below_half = x & ((1 << (shift - 1)) - 1) if shift > 1 else 0
    odd = (x >> shift) & 1
    round_up = half_bit & (int(below_half != 0) | odd)
    return (x >> shift) + round_up


def round_near_even(x: float) -> int:
    """Round to the nearest integer, ties to even."""
    truncated = math.trunc(x)
    away = truncated - 1 if x < 0 else truncated + 1
    remainder = abs(x - truncated)
    if remainder < 0.5:
        return truncated
    if remainder > 0.5:
        return away
    return truncated if truncated % 2 == 0 else away


def saturate_elem(x: int) -> int:
    """Clamp a value into the signed 8-bit element range."""
    return max(ELEM_MIN, min(ELEM_MAX, x))


def _float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _scale_to_elem(x: float, scale: float) -> int:
    product = _float32(x * scale)
    if math.isnan(product):
        raise ValueError("scaled value is not a number")
    if math.isinf(product):
        return ELEM_MAX if product > 0 else ELEM_MIN
    return saturate_elem(round_near_even(product))


def acc_scale(x: int, scale: float) -> int:
    """Scale an accumulator value and saturate it to the element range."""
    return _scale_to_elem(x, scale)


def mvin_scale(x: int, scale: float) -> int:
    """Scale a value being moved in and saturate it to the element range."""
    return _scale_to_elem(x, scale)


def mvin_scale_acc(x: int, scale: float) -> int:
    """Accumulator move-in scaling, which leaves the value unchanged."""
    return x