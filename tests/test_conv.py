import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softbuiltins.conv import (
    fixdfdi,
    fixdfsi,
    fixdfti,
    fixsfdi,
    fixsfsi,
    fixunsdfdi,
    fixunsdfsi,
    fixunssfsi,
    float_to_int,
    floatdidf,
    floatdisf,
    floatsidf,
    floatsisf,
    floattidf,
    floattisf,
    floatundidf,
    floatunsidf,
    floatunsisf,
    floatuntidf,
    floatuntisf,
    int_to_float,
)
from softbuiltins.formats import F32, F64

I32_MIN, I32_MAX = -(2**31), 2**31 - 1
I64_MIN, I64_MAX = -(2**63), 2**63 - 1
I128_MIN, I128_MAX = -(2**127), 2**127 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


@given(st.integers(I32_MIN, I32_MAX))
def test_floatsisf_rounds_to_nearest(i):
    assert floatsisf(i) == F32.round(float(i))


@given(st.integers(I32_MIN, I32_MAX))
def test_floatsidf_is_exact(i):
    assert floatsidf(i) == float(i)


@given(st.integers(-(2**53), 2**53))
def test_floatdisf_rounds_to_nearest(i):
    assert floatdisf(i) == F32.round(float(i))


@given(st.integers(I64_MIN, I64_MAX))
def test_floatdidf_matches_correct_rounding(i):
    assert floatdidf(i) == float(i)


@given(st.integers(I128_MIN, I128_MAX))
def test_floattidf_matches_correct_rounding(i):
    assert floattidf(i) == float(i)


@given(st.integers(-(2**53), 2**53))
def test_floattisf_rounds_to_nearest(i):
    assert floattisf(i) == F32.round(float(i))


@given(st.integers(0, U32_MAX))
def test_unsigned_32_conversions(i):
    assert floatunsidf(i) == float(i)
    assert floatunsisf(i) == F32.round(float(i))


@given(st.integers(0, U64_MAX))
def test_floatundidf_matches_correct_rounding(i):
    assert floatundidf(i) == float(i)


@given(st.integers(0, U128_MAX))
def test_floatuntidf_matches_correct_rounding(i):
    assert floatuntidf(i) == float(i)


@given(st.integers(I64_MIN, I64_MAX), st.integers(I64_MIN, I64_MAX))
def test_floatdisf_is_monotonic(i, j):
    lo, hi = sorted((i, j))
    assert floatdisf(lo) <= floatdisf(hi)


@given(st.integers(-(2**23), 2**23), st.integers(0, 100))
def test_scaled_small_integers_are_exact_in_f32(k, shift):
    value = k << shift
    if -(2**127) <= value < 2**127:
        assert floattisf(value) == float(value)
    assert floatuntisf(abs(value)) == float(abs(value))


def test_ties_round_to_even():
    assert floatsisf(2**24 + 1) == float(2**24)
    assert floatsisf(2**24 + 3) == float(2**24 + 4)


def test_u128_max_overflows_f32():
    assert floatuntisf(U128_MAX) == math.inf


def test_zero_converts_to_positive_zero():
    result = floatdidf(0)
    assert result == 0.0 and math.copysign(1.0, result) == 1.0


@pytest.mark.parametrize(
    "func, value",
    [
        (floatsisf, 2**31),
        (floatsisf, -(2**31) - 1),
        (floatunsisf, -1),
        (floatundidf, 2**64),
        (floattidf, 2**127),
    ],
)
def test_out_of_range_integers_are_rejected(func, value):
    with pytest.raises(ValueError):
        func(value)


def test_zero_width_integer_is_rejected():
    with pytest.raises(ValueError):
        int_to_float(1, 0, True, F32)


@given(st.floats(min_value=-(2**31), max_value=2**31, exclude_max=True))
def test_fixdfsi_truncates(x):
    assert fixdfsi(x) == int(x)


@given(st.floats(min_value=-(2**63), max_value=2**63, exclude_max=True))
def test_fixdfdi_truncates(x):
    assert fixdfdi(x) == int(x)


@given(st.floats(min_value=-(2**127), max_value=2**127, exclude_max=True))
def test_fixdfti_truncates(x):
    assert fixdfti(x) == int(x)


@given(st.floats(min_value=0, max_value=2**32, exclude_max=True))
def test_fixunsdfsi_truncates(x):
    assert fixunsdfsi(x) == int(x)


@given(st.floats(min_value=-(2**31), max_value=2**31, exclude_max=True, width=32))
def test_fixsfsi_truncates(x):
    assert fixsfsi(x) == int(x)


@given(st.floats(min_value=-(2**63), max_value=2**63, exclude_max=True, width=32))
def test_fixsfdi_truncates(x):
    assert fixsfdi(x) == int(x)


@given(st.floats(min_value=0, max_value=2**32, exclude_max=True, width=32))
def test_fixunssfsi_truncates(x):
    assert fixunssfsi(x) == int(x)


@given(st.integers(I32_MIN, I32_MAX))
def test_int_round_trip_through_f64(i):
    assert fixdfsi(floatsidf(i)) == i


@pytest.mark.parametrize(
    "func, value, expected",
    [
        (fixdfsi, 1e10, I32_MAX),
        (fixdfsi, -1e10, I32_MIN),
        (fixdfsi, math.inf, I32_MAX),
        (fixdfsi, -math.inf, I32_MIN),
        (fixdfsi, math.nan, I32_MAX),
        (fixdfdi, 1e300, I64_MAX),
        (fixunsdfsi, float(2**32), U32_MAX),
        (fixunsdfdi, -3.5, 0),
        (fixunsdfsi, -math.inf, 0),
        (fixdfsi, -0.5, 0),
        (fixdfsi, 0.999, 0),
    ],
)
def test_saturation_and_small_values(func, value, expected):
    assert func(value) == expected


def test_generic_float_to_int_matches_named_helper():
    assert float_to_int(-7.9, F64, 16, True) == -7
    assert float_to_int(1e6, F64, 16, True) == 2**15 - 1