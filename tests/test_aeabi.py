import pytest
from hypothesis import given
from hypothesis import strategies as st

from softbuiltins.aeabi import (
    aeabi_idivmod,
    aeabi_ldivmod,
    aeabi_memclr,
    aeabi_memclr4,
    aeabi_memclr8,
    aeabi_memcpy,
    aeabi_memcpy4,
    aeabi_memcpy8,
    aeabi_memmove,
    aeabi_memmove4,
    aeabi_memmove8,
    aeabi_memset,
    aeabi_memset4,
    aeabi_memset8,
    aeabi_uidivmod,
    aeabi_uldivmod,
)

U32 = st.integers(0, (1 << 32) - 1)
U64 = st.integers(0, (1 << 64) - 1)
I32 = st.integers(-(1 << 31), (1 << 31) - 1)
I64 = st.integers(-(1 << 63), (1 << 63) - 1)


@given(U32, U32.filter(bool))
def test_uidivmod_invariant(a, b):
    q, r = aeabi_uidivmod(a, b)
    assert q * b + r == a
    assert 0 <= r < b


@given(U64, U64.filter(bool))
def test_uldivmod_invariant(a, b):
    q, r = aeabi_uldivmod(a, b)
    assert q * b + r == a
    assert 0 <= r < b


@pytest.mark.parametrize("func,strategy_bits", [(aeabi_idivmod, 32), (aeabi_ldivmod, 64)])
@given(data=st.data())
def test_signed_divmod_truncates(func, strategy_bits, data):
    limit = 1 << (strategy_bits - 1)
    a = data.draw(st.integers(-limit + 1, limit - 1))
    b = data.draw(st.integers(-limit + 1, limit - 1).filter(bool))
    q, r = func(a, b)
    assert q * b + r == a
    assert abs(r) < abs(b)
    assert r == 0 or (r < 0) == (a < 0)


def test_idivmod_negative_dividend():
    assert aeabi_idivmod(-7, 2) == (-3, -1)


def test_idivmod_wraps_on_overflow():
    assert aeabi_idivmod(-(1 << 31), -1) == (-(1 << 31), 0)


def test_ldivmod_wraps_on_overflow():
    assert aeabi_ldivmod(-(1 << 63), -1) == (-(1 << 63), 0)


@pytest.mark.parametrize("func", [aeabi_uidivmod, aeabi_uldivmod, aeabi_idivmod, aeabi_ldivmod])
def test_division_by_zero(func):
    with pytest.raises(ZeroDivisionError):
        func(5, 0)


def test_out_of_range_operands():
    with pytest.raises(ValueError):
        aeabi_uidivmod(1 << 32, 1)
    with pytest.raises(ValueError):
        aeabi_uidivmod(-1, 1)
    with pytest.raises(ValueError):
        aeabi_idivmod(1 << 31, 1)
    with pytest.raises(ValueError):
        aeabi_ldivmod(1, 1 << 63)


@pytest.mark.parametrize("func", [aeabi_memcpy, aeabi_memcpy4, aeabi_memcpy8])
@given(payload=st.binary(max_size=40), extra=st.integers(0, 5))
def test_memcpy_copies_prefix(func, payload, extra):
    dest = bytearray(len(payload) + extra)
    func(dest, payload, len(payload))
    assert dest[: len(payload)] == payload
    assert dest[len(payload):] == bytearray(extra)


@pytest.mark.parametrize("func", [aeabi_memcpy, aeabi_memcpy4])
def test_memcpy_partial_length(func):
    src = bytes(range(1, 12))
    dest = bytearray(11)
    func(dest, src, 7)
    assert dest[:7] == src[:7]
    assert dest[7:] == bytearray(4)


def _check_forward_overlap(func):
    original = bytes(range(10, 26))
    view = memoryview(bytearray(original))
    func(view[3:], view, 9)
    assert bytes(view[3:12]) == original[:9]
    assert bytes(view[:3]) == original[:3]


def test_memmove_overlap_forward():
    original = bytes(range(10, 26))
    view = memoryview(bytearray(original))
    aeabi_memmove(view[3:], view, 9)
    assert bytes(view[3:12]) == original[:9]
    assert bytes(view[:3]) == original[:3]


def test_memmove4_overlap_forward():
    original = bytes(range(10, 26))
    view = memoryview(bytearray(original))
    aeabi_memmove4(view[3:], view, 9)
    assert bytes(view[3:12]) == original[:9]
    assert bytes(view[:3]) == original[:3]


def test_memmove8_overlap_forward():
    original = bytes(range(10, 26))
    view = memoryview(bytearray(original))
    aeabi_memmove8(view[3:], view, 9)
    assert bytes(view[3:12]) == original[:9]
    assert bytes(view[:3]) == original[:3]


def test_memmove_overlap_backward():
    original = bytes(range(30, 46))
    view = memoryview(bytearray(original))
    aeabi_memmove(view, view[5:], 8)
    assert bytes(view[:8]) == original[5:13]
    assert bytes(view[8:]) == original[8:]


@pytest.mark.parametrize("func", [aeabi_memset, aeabi_memset4, aeabi_memset8])
@given(n=st.integers(0, 30), c=st.integers(0, 255))
def test_memset_fills(func, n, c):
    dest = bytearray(b"\x01" * 32)
    func(dest, n, c)
    assert all(byte == c for byte in dest[:n])
    assert all(byte == 1 for byte in dest[n:])


@pytest.mark.parametrize("func", [aeabi_memset, aeabi_memset4])
def test_memset_uses_low_byte(func):
    dest = bytearray(7)
    func(dest, 7, 0x1FF)
    assert dest == bytearray(b"\xff" * 7)


@pytest.mark.parametrize("func", [aeabi_memclr, aeabi_memclr4, aeabi_memclr8])
def test_memclr_zeroes(func):
    dest = bytearray(b"\x7f" * 10)
    func(dest, 6)
    assert dest[:6] == bytearray(6)
    assert dest[6:] == bytearray(b"\x7f" * 4)


def test_length_beyond_buffer_raises():
    with pytest.raises(ValueError):
        aeabi_memcpy(bytearray(2), b"abc", 3)
    with pytest.raises(ValueError):
        aeabi_memset(bytearray(2), 3, 0)
    with pytest.raises(ValueError):
        aeabi_memclr(bytearray(2), -1)


def test_readonly_destination_raises():
    with pytest.raises(TypeError):
        aeabi_memcpy(b"xyz", b"abc", 3)