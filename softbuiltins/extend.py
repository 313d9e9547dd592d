"""Widening conversion between binary floating-point formats."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat, leading_zeros

__all__ = ["extend", "extendsfdf2"]


def extend(src: FloatFormat, dst: FloatFormat, a: float) -> float:
    """Convert ``a`` from format ``src`` to the wider format ``dst``.

    Raises ValueError if ``dst`` is not at least as wide as ``src`` in every field.
    """
    if (
        dst.bits < src.bits
        or dst.significand_bits < src.significand_bits
        or dst.exponent_bits < src.exponent_bits
    ):
        raise ValueError(f"{dst.name} is not wider than {src.name}")

    src_mask = src.int_mask
    src_min_normal = src.implicit_bit
    src_infinity = src.exponent_mask
    src_qnan = src.significand_mask
    src_nan_code = src_qnan - 1

    dst_significand_bits = dst.significand_bits
    significand_delta = dst_significand_bits - src.significand_bits
    bias_delta = dst.exponent_bias - src.exponent_bias

    a_rep = src.to_bits(a)
    a_abs = a_rep & src.abs_mask
    abs_result = 0

    if ((a_abs - src_min_normal) & src_mask) < src_infinity - src_min_normal:
        # Normal: move the fields into place and rebias the exponent.
        abs_result = (a_abs << significand_delta) + (bias_delta << dst_significand_bits)
    elif a_abs >= src_infinity:
        # Infinity or NaN: keep the payload, right-aligned to the new width.
        abs_result = dst.exponent_max << dst_significand_bits
        abs_result |= (a_abs & src_qnan) << significand_delta
        abs_result |= (a_abs & src_nan_code) << significand_delta
    elif a_abs:
        # Subnormal: renormalise, drop the leading bit and set the exponent.
        scale = leading_zeros(a_abs, src.bits) - leading_zeros(src_min_normal, src.bits)
        abs_result = a_abs << (significand_delta + scale)
        abs_result = (abs_result ^ dst.implicit_bit) | (
            (bias_delta - scale + 1) << dst_significand_bits
        )

    sign_result = (a_rep & src.sign_mask) << (dst.bits - src.bits)
    return dst.from_bits((abs_result | sign_result) & dst.int_mask)


def extendsfdf2(a: float) -> float:
    """Widen a single-precision value to double precision."""
    return extend(F32, F64, a)