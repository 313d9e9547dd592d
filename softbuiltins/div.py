"""Soft-float division using a Newton-Raphson reciprocal estimate."""

from __future__ import annotations

from collections.abc import Callable

from .formats import F32, F64, FloatFormat

__all__ = ["divsf3", "divdf3"]

_M32 = 0xFFFF_FFFF
_M64 = 0xFFFF_FFFF_FFFF_FFFF

# 3/4 + 1/sqrt(2) in Q32: the starting point of the reciprocal estimate.
_RECIPROCAL_SEED = 0x7504F333


def _refine32(reciprocal: int, q31b: int) -> int:
    """Run three Newton-Raphson steps on a 32-bit reciprocal estimate."""
    for _ in range(3):
        correction = (-((reciprocal * q31b) >> 32)) & _M32
        reciprocal = ((reciprocal * correction) >> 31) & _M32
    return reciprocal


def _quotient32(a_significand: int, b_significand: int) -> int:
    q31b = (b_significand << 8) & _M32
    reciprocal = _refine32((_RECIPROCAL_SEED - q31b) & _M32, q31b)
    # Make the error strictly positive so the estimate stays below 1/b.
    reciprocal = (reciprocal - 2) & _M32
    return (((a_significand << 1) & _M32) * reciprocal) >> 32


def _quotient64(a_significand: int, b_significand: int) -> int:
    q31b = (b_significand >> 21) & _M32
    recip32 = _refine32((_RECIPROCAL_SEED - q31b) & _M32, q31b)
    # The estimate may have wrapped to zero when b's high word is exactly 1.0.
    recip32 = (recip32 - 1) & _M32

    # One more step at double width brings the estimate to about 56 bits.
    q63blo = (b_significand << 11) & _M32
    correction = (-(recip32 * q31b + ((recip32 * q63blo) >> 32))) & _M64
    c_hi = correction >> 32
    c_lo = correction & _M32
    reciprocal = (recip32 * c_hi + ((recip32 * c_lo) >> 32)) & _M64
    reciprocal = (reciprocal - 2) & _M64
    return (((a_significand << 2) & _M64) * reciprocal) >> 64


def _div_bits(
    fmt: FloatFormat,
    a_rep: int,
    b_rep: int,
    estimate: Callable[[int, int], int],
) -> int:
    mask = fmt.int_mask
    significand_bits = fmt.significand_bits
    max_exponent = fmt.exponent_max
    implicit_bit = fmt.implicit_bit
    significand_mask = fmt.significand_mask
    sign_bit = fmt.sign_mask
    abs_mask = fmt.abs_mask
    inf_rep = fmt.exponent_mask
    quiet_bit = fmt.quiet_bit
    qnan_rep = inf_rep | quiet_bit

    a_exponent = (a_rep >> significand_bits) & max_exponent
    b_exponent = (b_rep >> significand_bits) & max_exponent
    quotient_sign = (a_rep ^ b_rep) & sign_bit

    a_significand = a_rep & significand_mask
    b_significand = b_rep & significand_mask
    scale = 0

    # Zero, subnormal, infinity or NaN on either side.
    if ((a_exponent - 1) & mask) >= max_exponent - 1 or (
        (b_exponent - 1) & mask
    ) >= max_exponent - 1:
        a_abs = a_rep & abs_mask
        b_abs = b_rep & abs_mask

        if a_abs > inf_rep:
            return a_rep | quiet_bit
        if b_abs > inf_rep:
            return b_rep | quiet_bit
        if a_abs == inf_rep:
            return qnan_rep if b_abs == inf_rep else a_abs | quotient_sign
        if b_abs == inf_rep:
            return quotient_sign
        if a_abs == 0:
            return qnan_rep if b_abs == 0 else quotient_sign
        if b_abs == 0:
            return inf_rep | quotient_sign

        if a_abs < implicit_bit:
            exponent, a_significand = fmt.normalize(a_significand)
            scale += exponent
        if b_abs < implicit_bit:
            exponent, b_significand = fmt.normalize(b_significand)
            scale -= exponent

    a_significand |= implicit_bit
    b_significand |= implicit_bit
    quotient_exponent = a_exponent - b_exponent + scale

    quotient = estimate(a_significand, b_significand)

    # The quotient lies in [0.5, 2); bring it to [1, 2) and form the residual
    # a - q*b, which decides whether q rounds up.
    if quotient < implicit_bit << 1:
        quotient_exponent -= 1
        residual = ((a_significand << (significand_bits + 1)) - quotient * b_significand) & mask
    else:
        quotient >>= 1
        residual = ((a_significand << significand_bits) - quotient * b_significand) & mask

    written_exponent = quotient_exponent + fmt.exponent_bias

    if written_exponent >= max_exponent:
        return inf_rep | quotient_sign
    if written_exponent < 1:
        # Results below the normal range are flushed to zero.
        return quotient_sign

    round_up = int(((residual << 1) & mask) > b_significand)
    abs_result = (quotient & significand_mask) | (written_exponent << significand_bits)
    abs_result = (abs_result + round_up) & mask
    return abs_result | quotient_sign


def divsf3(a: float, b: float) -> float:
    """Single-precision division."""
    return F32.from_bits(_div_bits(F32, F32.to_bits(a), F32.to_bits(b), _quotient32))


def divdf3(a: float, b: float) -> float:
    """Double-precision division."""
    return F64.from_bits(_div_bits(F64, F64.to_bits(a), F64.to_bits(b), _quotient64))