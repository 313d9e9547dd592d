"""Binary interchange formats and helpers for working on their bit patterns."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = ["FloatFormat", "F32", "F64", "leading_zeros", "eq_repr"]

_PACK_CODES = {32: "<f", 64: "<d"}


def leading_zeros(value: int, width: int) -> int:
    """Count the leading zero bits of ``value`` seen as a ``width``-bit integer."""
    if width <= 0:
        raise ValueError("width must be positive")
    return width - (value & ((1 << width) - 1)).bit_length()


@dataclass(frozen=True)
class FloatFormat:
    """An IEEE-754 binary format described by its total and significand widths."""

    name: str
    bits: int
    significand_bits: int

    def __post_init__(self) -> None:
        if self.bits not in _PACK_CODES:
            raise ValueError(f"unsupported float width: {self.bits}")
        if not 0 < self.significand_bits < self.bits - 1:
            raise ValueError("significand width does not fit the format")

    @property
    def int_mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def exponent_bits(self) -> int:
        return self.bits - self.significand_bits - 1

    @property
    def exponent_max(self) -> int:
        return (1 << self.exponent_bits) - 1

    @property
    def exponent_bias(self) -> int:
        return self.exponent_max >> 1

    @property
    def sign_mask(self) -> int:
        return 1 << (self.bits - 1)

    @property
    def significand_mask(self) -> int:
        return (1 << self.significand_bits) - 1

    @property
    def implicit_bit(self) -> int:
        return 1 << self.significand_bits

    @property
    def exponent_mask(self) -> int:
        return self.int_mask & ~(self.sign_mask | self.significand_mask)

    @property
    def abs_mask(self) -> int:
        return self.sign_mask - 1

    @property
    def quiet_bit(self) -> int:
        return self.implicit_bit >> 1

    def to_bits(self, value: float) -> int:
        """Return the bit pattern of ``value`` rounded to this format."""
        try:
            packed = struct.pack(_PACK_CODES[self.bits], value)
        except OverflowError:
            sign = self.sign_mask if math.copysign(1.0, value) < 0 else 0
            return self.exponent_mask | sign
        return int.from_bytes(packed, "little")

    def from_bits(self, bits: int) -> float:
        """Return the value whose bit pattern is ``bits``."""
        if not 0 <= bits <= self.int_mask:
            raise ValueError(f"{bits:#x} does not fit in {self.bits} bits")
        raw = bits.to_bytes(self.bits // 8, "little")
        return struct.unpack(_PACK_CODES[self.bits], raw)[0]

    def signed_repr(self, value: float) -> int:
        """Return the bit pattern of ``value`` read as a two's complement integer."""
        bits = self.to_bits(value)
        return bits - (1 << self.bits) if bits & self.sign_mask else bits

    def from_parts(self, sign: bool, exponent: int, significand: int) -> float:
        """Assemble a value from a sign flag, a biased exponent and a significand."""
        bits = (
            (int(bool(sign)) << (self.bits - 1))
            | ((exponent << self.significand_bits) & self.exponent_mask)
            | (significand & self.significand_mask)
        )
        return self.from_bits(bits)

    def normalize(self, significand: int) -> tuple[int, int]:
        """Shift a subnormal significand up to the implicit bit.

        Returns the adjusted exponent and the shifted significand.
        """
        shift = leading_zeros(significand, self.bits) - leading_zeros(
            self.implicit_bit, self.bits
        )
        return 1 - shift, (significand << shift) & self.int_mask

    def round(self, value: float) -> float:
        """Round ``value`` to the nearest value of this format."""
        return self.from_bits(self.to_bits(value))


def eq_repr(fmt: FloatFormat, a: float, b: float) -> bool:
    """Compare bit patterns, treating every NaN as equal to every other NaN."""
    if math.isnan(a) and math.isnan(b):
        return True
    return fmt.to_bits(a) == fmt.to_bits(b)


F32 = FloatFormat("f32", 32, 23)
F64 = FloatFormat("f64", 64, 52)