import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softbuiltins.formats import F32, F64
from softbuiltins.powi import powi, powidf2, powisf2


@given(st.floats())
def test_zero_exponent_gives_one(a):
    assert powidf2(a, 0) == 1.0


@given(st.floats(allow_nan=False))
def test_exponent_one_gives_value(a):
    assert powidf2(a, 1) == a


@given(st.floats(min_value=1e-100, max_value=1e100))
def test_exponent_minus_one_gives_reciprocal(a):
    assert powidf2(a, -1) == 1.0 / a


@given(st.integers(min_value=-10, max_value=10), st.integers(min_value=0, max_value=10))
def test_small_integer_powers_are_exact(base, exponent):
    assert powidf2(float(base), exponent) == float(base**exponent)


@given(st.integers(min_value=-60, max_value=60))
def test_powers_of_two(exponent):
    assert powidf2(2.0, exponent) == math.ldexp(1.0, exponent)


@given(st.integers(min_value=-120, max_value=120))
def test_single_precision_powers_of_two(exponent):
    assert powisf2(2.0, exponent) == math.ldexp(1.0, exponent)


def test_single_precision_overflow_gives_infinity():
    assert powisf2(2.0, 128) == math.inf
    assert powisf2(-2.0, 129) == -math.inf


def test_single_precision_results_are_rounded():
    result = powisf2(1.1, 3)
    assert F32.round(result) == result


def test_negative_exponent_of_zero_is_infinity():
    assert powidf2(0.0, -1) == math.inf
    assert powidf2(-0.0, -1) == -math.inf


def test_generic_powi_matches_named_entry_points():
    assert powi(F64, 3.0, 4) == powidf2(3.0, 4)
    assert powi(F32, 3.0, -2) == powisf2(3.0, -2)


@pytest.mark.parametrize("exponent", [1 << 31, -(1 << 31) - 1])
def test_exponent_out_of_range_raises(exponent):
    with pytest.raises(ValueError):
        powidf2(2.0, exponent)