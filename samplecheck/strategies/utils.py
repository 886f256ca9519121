"""Utility helpers shared by the sampling strategies."""

from __future__ import annotations

import time

INT32_MAX = 2**31 - 1
_WORD_MASK = 0xFFFFFFFF


def to_int32(value: int) -> int:
    """Wrap ``value`` into the signed 32-bit range (two's complement)."""

    value &= _WORD_MASK
    if value > INT32_MAX:
        value -= 1 << 32
    return value


def rotate_left32(value: int, shift: int) -> int:
    """Rotate the 32-bit word ``value`` left by ``shift`` bits.

    The result is returned as a signed 32-bit integer so it combines with other
    signed words the same way a fixed width integer would.
    """

    shift %= 32
    word = value & _WORD_MASK
    rotated = ((word << shift) | (word >> (32 - shift))) & _WORD_MASK
    return to_int32(rotated)


def clock_entropy() -> int:
    """Return a high resolution clock reading reduced into ``[0, 2**31 - 1)``."""

    return time.perf_counter_ns() % INT32_MAX


__all__ = ["INT32_MAX", "clock_entropy", "rotate_left32", "to_int32"]
