"""Deterministic string-seeded pseudo-random generator.

The seed string is folded into a 32-bit accumulator (xor, multiply,
rotate per character), and draws use a 32-bit mulberry-style mixer.
All arithmetic wraps at 2**32.
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_TWO_32 = 4294967296.0

_HASH_INIT = 1779033703
_HASH_MUL = 3432918353
_STEP = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def hash_seed(text: str) -> int:
    """Fold ``text`` into an unsigned 32-bit state, one code point at a time."""
    h = _HASH_INIT
    for ch in text:
        h = _imul(h ^ ord(ch), _HASH_MUL)
        h = ((h << 13) | (h >> 19)) & _MASK32
    return h


class SeededRNG:
    """Float generator whose sequence is a pure function of its seed string.

    Owned by exactly one generation; never share an instance between
    concurrent renders.
    """

    __slots__ = ("seed_text", "state")

    def __init__(self, seed_text: str):
        self.seed_text = seed_text
        self.state: int = hash_seed(seed_text)

    @property
    def seed(self) -> float:
        """Initial state scaled to [0, 1)."""
        return hash_seed(self.seed_text) / _TWO_32

    def next(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        self.state = (self.state + _STEP) & _MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_32

    def range(self, lo: float, hi: float) -> float:
        """Uniform float in [lo, hi)."""
        if not lo < hi:
            raise ValueError(f"range() needs lo < hi, got {lo} >= {hi}")
        return lo + self.next() * (hi - lo)
