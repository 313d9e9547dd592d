"""Soft-float multiplication with round-to-nearest-even."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = ["mul", "mulsf3", "muldf3"]


def _shift_right_with_sticky(high: int, low: int, count: int, bits: int) -> tuple[int, int]:
    """Shift a double-width value right, OR-ing lost bits into the lowest bit."""
    mask = (1 << bits) - 1
    wide = (high << bits) | low
    if count >= 2 * bits:
        return 0, int(wide != 0)
    lost = wide & ((1 << count) - 1)
    wide = (wide >> count) | int(lost != 0)
    return (wide >> bits) & mask, wide & mask


def _mul_bits(fmt: FloatFormat, a_rep: int, b_rep: int) -> int:
    mask = fmt.int_mask
    bits = fmt.bits
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
    product_sign = (a_rep ^ b_rep) & sign_bit

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
            return a_abs | product_sign if b_abs else qnan_rep
        if b_abs == inf_rep:
            return b_abs | product_sign if a_abs else qnan_rep
        if a_abs == 0 or b_abs == 0:
            return product_sign

        if a_abs < implicit_bit:
            exponent, a_significand = fmt.normalize(a_significand)
            scale += exponent
        if b_abs < implicit_bit:
            exponent, b_significand = fmt.normalize(b_significand)
            scale += exponent

    a_significand |= implicit_bit
    b_significand |= implicit_bit

    # Left-align one operand so the product's high word holds the result.
    product = a_significand * ((b_significand << fmt.exponent_bits) & mask)
    product_high = product >> bits
    product_low = product & mask

    product_exponent = a_exponent + b_exponent + scale - fmt.exponent_bias

    if product_high & implicit_bit:
        product_exponent += 1
    else:
        product_high = ((product_high << 1) | (product_low >> (bits - 1))) & mask
        product_low = (product_low << 1) & mask

    if product_exponent >= max_exponent:
        return inf_rep | product_sign

    if product_exponent <= 0:
        shift = 1 - product_exponent
        if shift >= bits:
            return product_sign
        product_high, product_low = _shift_right_with_sticky(
            product_high, product_low, shift, bits
        )
    else:
        product_high &= significand_mask
        product_high |= product_exponent << significand_bits

    product_high |= product_sign

    if product_low > sign_bit:
        product_high += 1
    if product_low == sign_bit:
        product_high += product_high & 1

    return product_high & mask


def mul(fmt: FloatFormat, a: float, b: float) -> float:
    """Return ``a * b`` computed bit by bit in ``fmt``."""
    return fmt.from_bits(_mul_bits(fmt, fmt.to_bits(a), fmt.to_bits(b)))


def mulsf3(a: float, b: float) -> float:
    """Single-precision multiplication."""
    return mul(F32, a, b)


def muldf3(a: float, b: float) -> float:
    """Double-precision multiplication."""
    return mul(F64, a, b)