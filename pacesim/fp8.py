"""An 8-bit E4M3 floating point number (sign, 4-bit exponent with bias 7, 3-bit mantissa).

Exponent 0 encodes zero (subnormals are flushed), exponent 15 encodes
infinity (mantissa 0) or NaN (mantissa non-zero).
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = ["FP8"]

_EXP_MASK = 0b01111000
_MANT_MASK = 0b00000111
_SIGN_MASK = 0b10000000
_EXP_BIAS = 7
_EXP_MAX = 0b1111
_MANT_BITS = 3


def _encode(sign_bit: int, exp_field: int, mantissa: int, mant_bits: int, bias: int,
            value: float) -> int:
    sign = sign_bit << 7
    if math.isnan(value):
        return sign | _EXP_MASK | 0x01
    if math.isinf(value):
        return sign | _EXP_MASK
    exp8 = exp_field - bias + _EXP_BIAS
    if exp8 <= 0:
        return sign
    if exp8 >= _EXP_MAX:
        return sign | _EXP_MASK
    shift = mant_bits - _MANT_BITS
    man = mantissa >> shift
    rem = mantissa & ((1 << shift) - 1)
    half = 1 << (shift - 1)
    # round to nearest, ties to even
    if rem > half or (rem == half and man & 1):
        man += 1
        if man & (1 << _MANT_BITS):
            man = 0
            exp8 += 1
            if exp8 >= _EXP_MAX:
                return sign | _EXP_MASK
    return sign | ((exp8 << 3) & _EXP_MASK) | (man & _MANT_MASK)


def _round_to_float32(value: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


@dataclass(frozen=True)
class FP8:
    """An E4M3 value held as its raw bit pattern."""

    bits: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.bits <= 0xFF:
            raise ValueError(f"FP8 bit pattern out of range: {self.bits}")

    @classmethod
    def from_float(cls, value: float) -> FP8:
        """Round a double-precision value to the nearest FP8."""
        (raw,) = struct.unpack(">Q", struct.pack(">d", value))
        return cls(_encode(raw >> 63, (raw >> 52) & 0x7FF, raw & ((1 << 52) - 1),
                           52, 1023, value))

    @classmethod
    def from_float32(cls, value: float) -> FP8:
        """Round a value to single precision, then to the nearest FP8."""
        single = _round_to_float32(value)
        if math.isinf(single):
            sign_bit = 1 if math.copysign(1.0, single) < 0 else 0
            return cls((sign_bit << 7) | _EXP_MASK)
        (raw,) = struct.unpack(">I", struct.pack(">f", single))
        return cls(_encode(raw >> 31, (raw >> 23) & 0xFF, raw & 0x7FFFFF,
                           23, 127, single))

    def to_float(self) -> float:
        """Decode to a Python float."""
        sign = -1.0 if self.bits & _SIGN_MASK else 1.0
        exp = (self.bits & _EXP_MASK) >> 3
        man = self.bits & _MANT_MASK
        if exp == 0:
            return sign * 0.0
        if exp == _EXP_MAX:
            return sign * math.inf if man == 0 else math.nan
        return sign * (1.0 + man / (1 << _MANT_BITS)) * 2.0 ** (exp - _EXP_BIAS)

    def __int__(self) -> int:
        return self.bits

    def __float__(self) -> float:
        return self.to_float()

    def __add__(self, other: object) -> FP8:
        if not isinstance(other, FP8):
            return NotImplemented
        return FP8.from_float32(_round_to_float32(self.to_float() + other.to_float()))

    def __mul__(self, other: object) -> FP8:
        if not isinstance(other, FP8):
            return NotImplemented
        return FP8.from_float32(_round_to_float32(self.to_float() * other.to_float()))

    def __repr__(self) -> str:
        return f"{self.bits:08b}({self.to_float()})"