"""Atomic read-modify-write operations built on a single word compare-and-swap.

Byte and halfword operations are done by updating the aligned 32-bit word
that contains them, retrying until the word-sized compare-and-swap succeeds.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

__all__ = [
    "AtomicMemory",
    "align_address",
    "get_shift_mask",
    "extract_aligned",
    "insert_aligned",
]

_WORD_MASK = 0xFFFF_FFFF
_SIZE_MASKS = {1: 0xFF, 2: 0xFFFF, 4: 0xFFFF_FFFF}


def _check_size(size: int) -> None:
    if size not in _SIZE_MASKS:
        raise ValueError(f"unsupported operand size: {size}")


def _offset_mask(size: int) -> int:
    return 3 & (4 - size)


def align_address(address: int, size: int) -> int:
    """Return the address of the 32-bit word holding a ``size``-byte value."""
    _check_size(size)
    return address & ~_offset_mask(size)


def get_shift_mask(address: int, size: int, byteorder: str = "little") -> tuple[int, int]:
    """Return the shift and mask of a ``size``-byte value inside its aligned word."""
    _check_size(size)
    if byteorder not in ("little", "big"):
        raise ValueError(f"unknown byte order: {byteorder}")
    endian_adjust = 0 if byteorder == "little" else 4 - size
    shift = ((address & _offset_mask(size)) ^ endian_adjust) * 8
    return shift, _SIZE_MASKS[size]


def extract_aligned(aligned: int, shift: int, mask: int) -> int:
    """Read a value out of an aligned word."""
    return (aligned >> shift) & mask


def insert_aligned(aligned: int, val: int, shift: int, mask: int) -> int:
    """Write a value into an aligned word, leaving the other bits alone."""
    return ((aligned & ~(mask << shift)) | ((val & mask) << shift)) & _WORD_MASK


def _to_signed(value: int, size: int) -> int:
    bits = size * 8
    return value - (1 << bits) if value >> (bits - 1) else value


class AtomicMemory:
    """A byte-addressed memory supporting atomic operations on 1, 2 and 4 byte values."""

    def __init__(self, data: int | bytes | bytearray = 0, byteorder: str = "little") -> None:
        if byteorder not in ("little", "big"):
            raise ValueError(f"unknown byte order: {byteorder}")
        self.memory = bytearray(data)
        self.byteorder = byteorder
        self._lock = threading.Lock()

    def _word_slice(self, address: int) -> slice:
        if address % 4:
            raise ValueError(f"address {address:#x} is not word aligned")
        if address < 0 or address + 4 > len(self.memory):
            raise IndexError(f"address {address:#x} is outside memory")
        return slice(address, address + 4)

    def _locate(self, address: int, size: int) -> tuple[int, int, int]:
        _check_size(size)
        if address % size:
            raise ValueError(f"address {address:#x} is not aligned to {size} bytes")
        shift, mask = get_shift_mask(address, size, self.byteorder)
        return align_address(address, size), shift, mask

    def load_word(self, address: int) -> int:
        """Read the aligned 32-bit word at ``address``."""
        return int.from_bytes(self.memory[self._word_slice(address)], self.byteorder)

    def cmpxchg_word(self, oldval: int, newval: int, address: int) -> bool:
        """Store ``newval`` at ``address`` if it still holds ``oldval``; report success."""
        span = self._word_slice(address)
        with self._lock:
            current = int.from_bytes(self.memory[span], self.byteorder)
            if current != oldval:
                return False
            self.memory[span] = (newval & _WORD_MASK).to_bytes(4, self.byteorder)
            return True

    def fetch_and_update(self, address: int, size: int, op: Callable[[int], int]) -> int:
        """Atomically replace the value with ``op(value)``; return the old value."""
        aligned, shift, mask = self._locate(address, size)
        while True:
            current_word = self.load_word(aligned)
            current = extract_aligned(current_word, shift, mask)
            new_word = insert_aligned(current_word, op(current), shift, mask)
            if self.cmpxchg_word(current_word, new_word, aligned):
                return current

    def compare_and_swap(self, address: int, size: int, oldval: int, newval: int) -> int:
        """Store ``newval`` if the value equals ``oldval``; return the value seen."""
        self._check_unsigned(oldval, size)
        self._check_unsigned(newval, size)
        aligned, shift, mask = self._locate(address, size)
        while True:
            current_word = self.load_word(aligned)
            current = extract_aligned(current_word, shift, mask)
            if current != oldval:
                return current
            new_word = insert_aligned(current_word, newval, shift, mask)
            if self.cmpxchg_word(current_word, new_word, aligned):
                return oldval

    @staticmethod
    def _check_unsigned(value: int, size: int) -> None:
        _check_size(size)
        if not 0 <= value <= _SIZE_MASKS[size]:
            raise ValueError(f"{value} does not fit in a {size * 8}-bit unsigned integer")

    @staticmethod
    def _check_signed(value: int, size: int) -> None:
        _check_size(size)
        limit = 1 << (size * 8 - 1)
        if not -limit <= value < limit:
            raise ValueError(f"{value} does not fit in a {size * 8}-bit signed integer")

    def _unsigned_op(self, address: int, size: int, value: int, op: Callable[[int, int], int]) -> int:
        self._check_unsigned(value, size)
        mask = _SIZE_MASKS[size]
        return self.fetch_and_update(address, size, lambda x: op(x, value) & mask)

    def _signed_op(self, address: int, size: int, value: int, op: Callable[[int, int], int]) -> int:
        self._check_signed(value, size)
        mask = _SIZE_MASKS[size]
        old = self.fetch_and_update(
            address, size, lambda x: op(_to_signed(x, size), value) & mask
        )
        return _to_signed(old, size)

    def fetch_and_add(self, address: int, size: int, value: int) -> int:
        """Wrapping add; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: a + b)

    def fetch_and_sub(self, address: int, size: int, value: int) -> int:
        """Wrapping subtract; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: a - b)

    def fetch_and_and(self, address: int, size: int, value: int) -> int:
        """Bitwise and; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: a & b)

    def fetch_and_or(self, address: int, size: int, value: int) -> int:
        """Bitwise or; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: a | b)

    def fetch_and_xor(self, address: int, size: int, value: int) -> int:
        """Bitwise exclusive or; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: a ^ b)

    def fetch_and_nand(self, address: int, size: int, value: int) -> int:
        """Bitwise not-and; returns the old value."""
        return self._unsigned_op(address, size, value, lambda a, b: ~(a & b))

    def fetch_and_max(self, address: int, size: int, value: int) -> int:
        """Signed maximum; returns the old value as a signed integer."""
        return self._signed_op(address, size, value, max)

    def fetch_and_umax(self, address: int, size: int, value: int) -> int:
        """Unsigned maximum; returns the old value."""
        return self._unsigned_op(address, size, value, max)

    def fetch_and_min(self, address: int, size: int, value: int) -> int:
        """Signed minimum; returns the old value as a signed integer."""
        return self._signed_op(address, size, value, min)

    def fetch_and_umin(self, address: int, size: int, value: int) -> int:
        """Unsigned minimum; returns the old value."""
        return self._unsigned_op(address, size, value, min)

    def lock_test_and_set(self, address: int, size: int, value: int) -> int:
        """Store ``value``; returns the old value."""
        return self._unsigned_op(address, size, value, lambda _a, b: b)

    def synchronize(self) -> None:
        """Full memory barrier: waits for any compare-and-swap in progress."""
        with self._lock:
            pass