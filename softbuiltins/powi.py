"""Raising a floating-point value to an integer power by repeated squaring."""

from __future__ import annotations

import math

from .formats import F32, F64, FloatFormat

__all__ = ["powi", "powisf2", "powidf2"]

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


def _reciprocal(value: float) -> float:
    """Return 1/value with IEEE semantics for signed zeros."""
    if value == 0.0:
        return math.copysign(math.inf, value)
    return 1.0 / value


def powi(fmt: FloatFormat, a: float, b: int) -> float:
    """Return ``a`` raised to the 32-bit integer power ``b``, rounding each step to ``fmt``.

    Raises ValueError if ``b`` does not fit a 32-bit signed integer.
    """
    if not _I32_MIN <= b <= _I32_MAX:
        raise ValueError(f"exponent {b} does not fit in a 32-bit signed integer")

    base = fmt.round(a)
    reciprocal = b < 0
    result = 1.0
    while True:
        if b & 1:
            result = fmt.round(result * base)
        half = abs(b) // 2
        b = -half if b < 0 else half
        if b == 0:
            break
        base = fmt.round(base * base)

    if reciprocal:
        return fmt.round(_reciprocal(result))
    return result


def powisf2(a: float, b: int) -> float:
    """Single-precision integer power."""
    return powi(F32, a, b)


def powidf2(a: float, b: int) -> float:
    """Double-precision integer power."""
    return powi(F64, a, b)