import math

from hypothesis import assume, given
from hypothesis import strategies as st

from softbuiltins.div import divdf3, divsf3
from softbuiltins.formats import F32, F64

F32_MIN_NORMAL = F32.from_bits(F32.implicit_bit)
F32_MAX = F32.from_bits(F32.exponent_mask - 1)

f32_values = st.floats(width=32, allow_nan=False, allow_infinity=False)
f64_magnitudes = st.floats(min_value=1e-100, max_value=1e100)


@given(f32_values, f32_values)
def test_divsf3_matches_correctly_rounded_quotient(a, b):
    assume(b != 0.0)
    expected = F32.round(a / b)
    assume(2 * F32_MIN_NORMAL <= abs(expected) <= F32_MAX)
    assert F32.to_bits(divsf3(a, b)) == F32.to_bits(expected)


@given(f64_magnitudes, f64_magnitudes, st.booleans(), st.booleans())
def test_divdf3_matches_native_division(a, b, neg_a, neg_b):
    a = -a if neg_a else a
    b = -b if neg_b else b
    assert F64.to_bits(divdf3(a, b)) == F64.to_bits(a / b)


def test_divsf3_with_subnormal_operands():
    tiny = F32.from_bits(1)
    assert divsf3(tiny, tiny) == 1.0
    bigger = F32.from_bits(0x400)
    assert divsf3(bigger, tiny) == F32.round(bigger / tiny)


def test_divdf3_simple_exact_results():
    assert divdf3(6.0, 3.0) == 6.0 / 3.0
    assert divdf3(1.0, 4.0) == 1.0 / 4.0
    assert divdf3(1.0, 3.0) == 1.0 / 3.0


def test_division_by_zero_gives_signed_infinity():
    assert divsf3(1.0, 0.0) == math.inf
    assert divsf3(-1.0, 0.0) == -math.inf
    assert divdf3(1.0, -0.0) == -math.inf


def test_zero_by_zero_and_inf_by_inf_are_nan():
    assert math.isnan(divsf3(0.0, 0.0))
    assert math.isnan(divdf3(math.inf, math.inf))


def test_infinity_by_finite_keeps_infinity():
    assert divdf3(math.inf, -2.0) == -math.inf
    assert divsf3(-math.inf, -2.0) == math.inf


def test_finite_by_infinity_is_signed_zero():
    result = divdf3(-5.0, math.inf)
    assert result == 0.0
    assert math.copysign(1.0, result) == -1.0


def test_zero_by_finite_keeps_quotient_sign():
    result = divsf3(0.0, -3.0)
    assert F32.to_bits(result) == F32.sign_mask


def test_nan_operand_propagates_quiet():
    result = divdf3(math.nan, 2.0)
    assert math.isnan(result)
    assert F64.to_bits(result) & F64.quiet_bit
    assert math.isnan(divsf3(2.0, math.nan))


def test_subnormal_results_are_flushed_to_zero():
    positive = divsf3(F32_MIN_NORMAL, 2.0)
    assert F32.to_bits(positive) == 0
    negative = divsf3(-F32_MIN_NORMAL, 2.0)
    assert F32.to_bits(negative) == F32.sign_mask


def test_overflow_gives_infinity():
    assert divsf3(F32_MAX, 0.5) == math.inf
    assert divdf3(-1e300, 1e-300) == -math.inf