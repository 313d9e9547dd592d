"""Soft-float comparisons returning the conventional integer results."""

from __future__ import annotations

from enum import Enum

from .formats import F32, F64, FloatFormat

__all__ = [
    "Ordering",
    "compare",
    "unordered",
    "lesf2",
    "gesf2",
    "unordsf2",
    "eqsf2",
    "ltsf2",
    "nesf2",
    "gtsf2",
    "ledf2",
    "gedf2",
    "unorddf2",
    "eqdf2",
    "ltdf2",
    "nedf2",
    "gtdf2",
    "aeabi_fcmple",
    "aeabi_fcmpge",
    "aeabi_fcmpeq",
    "aeabi_fcmplt",
    "aeabi_fcmpgt",
    "aeabi_dcmple",
    "aeabi_dcmpge",
    "aeabi_dcmpeq",
    "aeabi_dcmplt",
    "aeabi_dcmpgt",
]


class Ordering(Enum):
    """Outcome of comparing two floating-point values."""

    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"
    UNORDERED = "unordered"

    def to_le_abi(self) -> int:
        """Integer result where an unordered pair counts as greater."""
        return {
            Ordering.LESS: -1,
            Ordering.EQUAL: 0,
            Ordering.GREATER: 1,
            Ordering.UNORDERED: 1,
        }[self]

    def to_ge_abi(self) -> int:
        """Integer result where an unordered pair counts as less."""
        return {
            Ordering.LESS: -1,
            Ordering.EQUAL: 0,
            Ordering.GREATER: 1,
            Ordering.UNORDERED: -1,
        }[self]


def _is_unordered(fmt: FloatFormat, a_rep: int, b_rep: int) -> bool:
    inf_rep = fmt.exponent_mask
    return (a_rep & fmt.abs_mask) > inf_rep or (b_rep & fmt.abs_mask) > inf_rep


def compare(fmt: FloatFormat, a: float, b: float) -> Ordering:
    """Order ``a`` and ``b`` using only their bit patterns in ``fmt``."""
    a_rep = fmt.to_bits(a)
    b_rep = fmt.to_bits(b)
    if _is_unordered(fmt, a_rep, b_rep):
        return Ordering.UNORDERED
    if (a_rep | b_rep) & fmt.abs_mask == 0:
        return Ordering.EQUAL

    a_srep = fmt.signed_repr(a)
    b_srep = fmt.signed_repr(b)
    if a_srep == b_srep:
        return Ordering.EQUAL
    # With at least one operand positive the integer order matches; with both
    # negative it is reversed.
    if a_srep & b_srep >= 0:
        return Ordering.LESS if a_srep < b_srep else Ordering.GREATER
    return Ordering.LESS if a_srep > b_srep else Ordering.GREATER


def unordered(fmt: FloatFormat, a: float, b: float) -> bool:
    """Return True if either operand is a NaN."""
    return _is_unordered(fmt, fmt.to_bits(a), fmt.to_bits(b))


def lesf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_le_abi()


def gesf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_ge_abi()


def unordsf2(a: float, b: float) -> int:
    return int(unordered(F32, a, b))


def eqsf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_le_abi()


def ltsf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_le_abi()


def nesf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_le_abi()


def gtsf2(a: float, b: float) -> int:
    return compare(F32, a, b).to_ge_abi()


def ledf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_le_abi()


def gedf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_ge_abi()


def unorddf2(a: float, b: float) -> int:
    return int(unordered(F64, a, b))


def eqdf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_le_abi()


def ltdf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_le_abi()


def nedf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_le_abi()


def gtdf2(a: float, b: float) -> int:
    return compare(F64, a, b).to_ge_abi()


def aeabi_fcmple(a: float, b: float) -> int:
    return int(lesf2(a, b) <= 0)


def aeabi_fcmpge(a: float, b: float) -> int:
    return int(gesf2(a, b) >= 0)


def aeabi_fcmpeq(a: float, b: float) -> int:
    return int(eqsf2(a, b) == 0)


def aeabi_fcmplt(a: float, b: float) -> int:
    return int(ltsf2(a, b) < 0)


def aeabi_fcmpgt(a: float, b: float) -> int:
    return int(gtsf2(a, b) > 0)


def aeabi_dcmple(a: float, b: float) -> int:
    return int(ledf2(a, b) <= 0)


def aeabi_dcmpge(a: float, b: float) -> int:
    return int(gedf2(a, b) >= 0)


def aeabi_dcmpeq(a: float, b: float) -> int:
    return int(eqdf2(a, b) == 0)


def aeabi_dcmplt(a: float, b: float) -> int:
    return int(ltdf2(a, b) < 0)


def aeabi_dcmpgt(a: float, b: float) -> int:
    return int(gtdf2(a, b) > 0)