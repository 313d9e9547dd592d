"""Conversions between integers and floating-point values, done bit by bit."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat, leading_zeros

__all__ = [
    "int_to_float",
    "float_to_int",
    "floatsisf",
    "floatsidf",
    "floatdisf",
    "floatdidf",
    "floattisf",
    "floattidf",
    "floatunsisf",
    "floatunsidf",
    "floatundisf",
    "floatundidf",
    "floatuntisf",
    "floatuntidf",
    "fixsfsi",
    "fixsfdi",
    "fixsfti",
    "fixdfsi",
    "fixdfdi",
    "fixdfti",
    "fixunssfsi",
    "fixunssfdi",
    "fixunssfti",
    "fixunsdfsi",
    "fixunsdfdi",
    "fixunsdfti",
]


def _int_limits(int_bits: int, signed: bool) -> tuple[int, int]:
    if int_bits <= 0:
        raise ValueError("integer width must be positive")
    if signed:
        return -(1 << (int_bits - 1)), (1 << (int_bits - 1)) - 1
    return 0, (1 << int_bits) - 1


def int_to_float(value: int, int_bits: int, signed: bool, fmt: FloatFormat) -> float:
    """Convert an ``int_bits``-wide integer to ``fmt``, rounding to nearest even.

    Raises ValueError if ``value`` does not fit the integer type.
    """
    lowest, highest = _int_limits(int_bits, signed)
    if not lowest <= value <= highest:
        kind = "signed" if signed else "unsigned"
        raise ValueError(f"{value} does not fit in a {int_bits}-bit {kind} integer")
    if value == 0:
        return 0.0

    mant_dig = fmt.significand_bits + 1
    bias = fmt.exponent_bias
    n = int_bits
    negative = value < 0
    a = -value if negative else value

    significant_digits = n - leading_zeros(a, n)
    e = significant_digits - 1

    if n < mant_dig:
        return fmt.from_parts(negative, e + bias, a << (mant_dig - e - 1))

    if significant_digits > mant_dig:
        # Keep mant_dig bits plus a round bit, a guard bit and a sticky bit.
        if significant_digits == mant_dig + 1:
            a <<= 1
        elif significant_digits != mant_dig + 2:
            dropped = (a << (n + mant_dig + 2 - significant_digits)) & ((1 << n) - 1)
            a = (a >> (significant_digits - mant_dig - 2)) | int(dropped != 0)
        a |= int(bool(a & 4))
        a += 1
        a >>= 2
        if a & (1 << mant_dig):
            a >>= 1
            e += 1
    else:
        a <<= mant_dig - significant_digits

    return fmt.from_parts(negative, e + bias, a)


def float_to_int(value: float, fmt: FloatFormat, int_bits: int, signed: bool) -> int:
    """Truncate a value of ``fmt`` towards zero into an ``int_bits``-wide integer.

    Out-of-range values and infinities saturate; NaNs saturate by their sign;
    negative values give zero for unsigned targets.
    """
    lowest, highest = _int_limits(int_bits, signed)
    significand_bits = fmt.significand_bits
    bias = fmt.exponent_bias

    rep = fmt.to_bits(value)
    negative = bool(rep & fmt.sign_mask)
    a_abs = rep & fmt.abs_mask
    exponent = a_abs >> significand_bits
    significand = (a_abs & fmt.significand_mask) | fmt.implicit_bit

    if exponent < bias or (not signed and negative):
        return 0
    exponent -= bias

    if exponent >= (int_bits - 1 if signed else int_bits):
        return lowest if negative else highest

    if exponent < significand_bits:
        result = significand >> (significand_bits - exponent)
    else:
        result = significand << (exponent - significand_bits)
    return -result if negative else result


def floatsisf(i: int) -> float:
    return int_to_float(i, 32, True, F32)


def floatsidf(i: int) -> float:
    return int_to_float(i, 32, True, F64)


def floatdisf(i: int) -> float:
    return int_to_float(i, 64, True, F32)


def floatdidf(i: int) -> float:
    return int_to_float(i, 64, True, F64)


def floattisf(i: int) -> float:
    return int_to_float(i, 128, True, F32)


def floattidf(i: int) -> float:
    return int_to_float(i, 128, True, F64)


def floatunsisf(i: int) -> float:
    return int_to_float(i, 32, False, F32)


def floatunsidf(i: int) -> float:
    return int_to_float(i, 32, False, F64)


def floatundisf(i: int) -> float:
    return int_to_float(i, 64, False, F32)


def floatundidf(i: int) -> float:
    return int_to_float(i, 64, False, F64)


def floatuntisf(i: int) -> float:
    return int_to_float(i, 128, False, F32)


def floatuntidf(i: int) -> float:
    return int_to_float(i, 128, False, F64)


def fixsfsi(f: float) -> int:
    return float_to_int(f, F32, 32, True)


def fixsfdi(f: float) -> int:
    return float_to_int(f, F32, 64, True)


def fixsfti(f: float) -> int:
    return float_to_int(f, F32, 128, True)


def fixdfsi(f: float) -> int:
    return float_to_int(f, F64, 32, True)


def fixdfdi(f: float) -> int:
    return float_to_int(f, F64, 64, True)


def fixdfti(f: float) -> int:
    return float_to_int(f, F64, 128, True)


def fixunssfsi(f: float) -> int:
    return float_to_int(f, F32, 32, False)


def fixunssfdi(f: float) -> int:
    return float_to_int(f, F32, 64, False)


def fixunssfti(f: float) -> int:
    return float_to_int(f, F32, 128, False)


def fixunsdfsi(f: float) -> int:
    return float_to_int(f, F64, 32, False)


def fixunsdfdi(f: float) -> int:
    return float_to_int(f, F64, 64, False)


def fixunsdfti(f: float) -> int:
    return float_to_int(f, F64, 128, False)