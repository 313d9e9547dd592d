"""ARM EABI run-time helpers: combined division/remainder and memory routines.

The division helpers return ``(quotient, remainder)`` pairs.  The memory
helpers work on writable buffers (``bytearray`` or ``memoryview``); a
``memoryview`` slice stands in for a pointer offset.
"""

from __future__ import annotations

__all__ = [
    "aeabi_uidivmod",
    "aeabi_uldivmod",
    "aeabi_idivmod",
    "aeabi_ldivmod",
    "aeabi_memcpy",
    "aeabi_memcpy4",
    "aeabi_memcpy8",
    "aeabi_memmove",
    "aeabi_memmove4",
    "aeabi_memmove8",
    "aeabi_memset",
    "aeabi_memset4",
    "aeabi_memset8",
    "aeabi_memclr",
    "aeabi_memclr4",
    "aeabi_memclr8",
]


def _check_unsigned(value: int, bits: int, name: str) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name}={value} does not fit in a {bits}-bit unsigned integer")


def _check_signed(value: int, bits: int, name: str) -> None:
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"{name}={value} does not fit in a {bits}-bit signed integer")


def _wrap_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >> (bits - 1) else value


def _unsigned_divmod(a: int, b: int, bits: int) -> tuple[int, int]:
    _check_unsigned(a, bits, "a")
    _check_unsigned(b, bits, "b")
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    return divmod(a, b)


def _signed_divmod(a: int, b: int, bits: int) -> tuple[int, int]:
    """Division truncating towards zero, wrapping like two's complement."""
    _check_signed(a, bits, "a")
    _check_signed(b, bits, "b")
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    magnitude = abs(a) // abs(b)
    quotient = _wrap_signed(-magnitude if (a < 0) != (b < 0) else magnitude, bits)
    remainder = _wrap_signed(a - quotient * b, bits)
    return quotient, remainder


def aeabi_uidivmod(a: int, b: int) -> tuple[int, int]:
    """Unsigned 32-bit quotient and remainder."""
    return _unsigned_divmod(a, b, 32)


def aeabi_uldivmod(a: int, b: int) -> tuple[int, int]:
    """Unsigned 64-bit quotient and remainder."""
    return _unsigned_divmod(a, b, 64)


def aeabi_idivmod(a: int, b: int) -> tuple[int, int]:
    """Signed 32-bit quotient (towards zero) and remainder."""
    return _signed_divmod(a, b, 32)


def aeabi_ldivmod(a: int, b: int) -> tuple[int, int]:
    """Signed 64-bit quotient (towards zero) and remainder."""
    return _signed_divmod(a, b, 64)


def _writable(dest) -> memoryview:
    view = memoryview(dest)
    if view.readonly:
        raise TypeError("destination buffer is read-only")
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _readable(src) -> memoryview:
    view = memoryview(src)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _check_length(n: int, *views: memoryview) -> None:
    if n < 0:
        raise ValueError("length must not be negative")
    for view in views:
        if n > len(view):
            raise ValueError(f"length {n} exceeds buffer of {len(view)} bytes")


def aeabi_memcpy(dest, src, n: int) -> None:
    """Copy ``n`` bytes from ``src`` to ``dest``."""
    dview, sview = _writable(dest), _readable(src)
    _check_length(n, dview, sview)
    dview[:n] = bytes(sview[:n])


def aeabi_memcpy4(dest, src, n: int) -> None:
    """Copy ``n`` bytes, whole words first and then the tail."""
    dview, sview = _writable(dest), _readable(src)
    _check_length(n, dview, sview)
    whole = n - n % 4
    dview[:whole] = bytes(sview[:whole])
    aeabi_memcpy(dview[whole:], sview[whole:], n - whole)


def aeabi_memcpy8(dest, src, n: int) -> None:
    """Copy ``n`` bytes between 8-aligned buffers."""
    aeabi_memcpy4(dest, src, n)


def aeabi_memmove(dest, src, n: int) -> None:
    """Copy ``n`` bytes; the buffers may overlap."""
    dview, sview = _writable(dest), _readable(src)
    _check_length(n, dview, sview)
    snapshot = bytes(sview[:n])
    dview[:n] = snapshot


def aeabi_memmove4(dest, src, n: int) -> None:
    """Overlap-safe copy between 4-aligned buffers."""
    aeabi_memmove(dest, src, n)


def aeabi_memmove8(dest, src, n: int) -> None:
    """Overlap-safe copy between 8-aligned buffers."""
    aeabi_memmove(dest, src, n)


def aeabi_memset(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes of ``dest`` with the low byte of ``c``."""
    dview = _writable(dest)
    _check_length(n, dview)
    dview[:n] = bytes([c & 0xFF]) * n


def aeabi_memset4(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes, whole words first and then the tail."""
    dview = _writable(dest)
    _check_length(n, dview)
    byte = c & 0xFF
    whole = n - n % 4
    dview[:whole] = bytes([byte]) * whole
    aeabi_memset(dview[whole:], n - whole, byte)


def aeabi_memset8(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes of an 8-aligned buffer."""
    aeabi_memset4(dest, n, c)


def aeabi_memclr(dest, n: int) -> None:
    """Zero ``n`` bytes of ``dest``."""
    aeabi_memset(dest, n, 0)


def aeabi_memclr4(dest, n: int) -> None:
    """Zero ``n`` bytes of a 4-aligned buffer."""
    aeabi_memset4(dest, n, 0)


def aeabi_memclr8(dest, n: int) -> None:
    """Zero ``n`` bytes of an 8-aligned buffer."""
    aeabi_memset4(dest, n, 0)