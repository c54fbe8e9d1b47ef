"""
Deterministic 64-bit number sources for table generation.

Both sources are pure functions of their seed: the same seed yields the
same sequence on every platform and interpreter version.

Lcg48 reproduces java.util.Random exactly:
    seed  = (seed ^ 0x5DEECE66D) & (2**48 - 1)
    next  = (seed * 0x5DEECE66D + 0xB) mod 2**48
    draw  = top `bits` bits of the state, as a signed 32-bit int
    u64   = (draw32 << 32) + draw32, reduced mod 2**64
"""

from __future__ import annotations

import random
from typing import Callable, Dict, Protocol

MASK_64 = (1 << 64) - 1
MASK_48 = (1 << 48) - 1

_MULTIPLIER = 0x5DEECE66D
_INCREMENT = 0xB


class RandomSource(Protocol):
    def next_u64(self) -> int: ...


class Lcg48:
    """48-bit linear congruential generator (java.util.Random compatible)."""

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = ((seed & MASK_64) ^ _MULTIPLIER) & MASK_48

    def next_bits(self, bits: int) -> int:
        if not (1 <= bits <= 32):
            raise ValueError(f"invalid bit count: {bits!r}")
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & MASK_48
        value = self._state >> (48 - bits)
        # Reinterpret as a signed 32-bit int.
        if value & 0x80000000:
            value -= 1 << 32
        return value

    def next_u64(self) -> int:
        high = self.next_bits(32)
        low = self.next_bits(32)
        return ((high << 32) + low) & MASK_64


class MersenneSource:
    """random.Random (MT19937) drawing 64 bits per value."""

    __slots__ = ("_rng",)

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed & MASK_64)

    def next_u64(self) -> int:
        return self._rng.getrandbits(64)


SOURCES: Dict[str, Callable[[int], RandomSource]] = {
    "lcg48": Lcg48,
    "mt19937": MersenneSource,
}


def make_source(name: str, seed: int) -> RandomSource:
    factory = SOURCES.get(name)
    if factory is None:
        raise ValueError(f"unknown random algorithm: {name!r} (expected one of {sorted(SOURCES)})")
    return factory(seed)
