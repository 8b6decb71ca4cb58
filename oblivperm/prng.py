"""A 32-bit Mersenne Twister generator with bit and half-word helpers."""

from __future__ import annotations

import time
from collections.abc import Iterable

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_MASK32 = 0xFFFFFFFF
_DEFAULT_SEED = 5489


def _seed_sequence(entropy: list[int], count: int) -> list[int]:
    """Expand entropy words into ``count`` state words the way a seed sequence does."""
    words = [0x8B8B8B8B] * count
    size = len(entropy)
    if count >= 623:
        t = 11
    elif count >= 68:
        t = 7
    elif count >= 39:
        t = 5
    elif count >= 7:
        t = 3
    else:
        t = (count - 1) // 2
    p = (count - t) // 2
    q = p + t
    rounds = max(size + 1, count)

    def mix(x: int) -> int:
        return x ^ (x >> 27)

    for k in range(rounds):
        r1 = (1664525 * mix(words[k % count] ^ words[(k + p) % count] ^ words[(k - 1) % count])) & _MASK32
        if k == 0:
            extra = size
        elif k <= size:
            extra = k % count + entropy[k - 1]
        else:
            extra = k % count
        r2 = (r1 + extra) & _MASK32
        words[(k + p) % count] = (words[(k + p) % count] + r1) & _MASK32
        words[(k + q) % count] = (words[(k + q) % count] + r2) & _MASK32
        words[k % count] = r2
    for k in range(rounds, rounds + count):
        total = (words[k % count] + words[(k + p) % count] + words[(k - 1) % count]) & _MASK32
        r3 = (1566083941 * mix(total)) & _MASK32
        r4 = (r3 - k % count) & _MASK32
        words[(k + p) % count] ^= r3
        words[(k + q) % count] ^= r4
        words[k % count] = r4
    return words


class _MersenneTwister:
    """The MT19937 engine producing 32-bit words."""

    def __init__(self, seed: int = _DEFAULT_SEED) -> None:
        self._state: list[int] = []
        self._index = _N
        self.seed(seed)

    def seed(self, value: int) -> None:
        state = [value & _MASK32]
        for i in range(1, _N):
            prev = state[-1]
            state.append((1812433253 * (prev ^ (prev >> 30)) + i) & _MASK32)
        self._state = state
        self._index = _N

    def seed_words(self, entropy: list[int]) -> None:
        state = _seed_sequence(entropy, _N)
        if (state[0] & _UPPER_MASK) == 0 and not any(state[1:]):
            state[0] = _UPPER_MASK
        self._state = state
        self._index = _N

    def _twist(self) -> None:
        mt = self._state
        for i in range(_N):
            y = (mt[i] & _UPPER_MASK) | (mt[(i + 1) % _N] & _LOWER_MASK)
            value = mt[(i + _M) % _N] ^ (y >> 1)
            if y & 1:
                value ^= _MATRIX_A
            mt[i] = value
        self._index = 0

    def __call__(self) -> int:
        if self._index >= _N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _MASK32


class PRNG:
    """Pseudo-random generator handing out 64/32/16-bit words and single bits.

    Without an explicit seed the generator is seeded from the current time.
    """

    def __init__(self, seed: int | Iterable[int] | None = None) -> None:
        self._mt = _MersenneTwister()
        self._unused_bits = 0
        self._rand_value = 0
        self.seed(int(time.time()) if seed is None else seed)

    def seed(self, value: int | Iterable[int]) -> None:
        """Reseed from a 32-bit integer or from a sequence of integers."""
        if isinstance(value, int):
            self._mt.seed(value & _MASK32)
        else:
            entropy = [int(word) & _MASK32 for word in value]
            self._mt.seed_words(entropy)
        self._unused_bits = 0
        self._rand_value = 0

    def next_uint64(self) -> int:
        high = self._mt()
        low = self._mt()
        return (high << 32) | low

    def next_uint32(self) -> int:
        return self._mt()

    def next_uint16(self) -> int:
        if self._unused_bits < 16:
            word = self._mt()
            self._rand_value = ((self._rand_value << 16) | (word >> 16)) & _MASK32
            self._unused_bits += 16
            return word & 0xFFFF
        result = self._rand_value & 0xFFFF
        self._rand_value >>= 16
        self._unused_bits -= 16
        return result

    def next_bit(self) -> bool:
        if self._unused_bits == 0:
            self._rand_value = self._mt()
            self._unused_bits = 32
        bit = bool(self._rand_value & 1)
        self._rand_value >>= 1
        self._unused_bits -= 1
        return bit