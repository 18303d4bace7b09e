"""
Seeded Randomness
=================

``RandomSource`` is the explicit random context threaded through parameter
generation and element sampling. It wraps a GMP ``random_state`` (the GMP
default generator) so a given seed always reproduces the same stream.

Examples
--------
>>> rng = RandomSource(seed=1)
>>> rng.below(10)        # uniform in [0, 10)
>>> rng.between(1, 6)    # uniform in [1, 6]
>>> rng.uniform()        # uniform in [0, 1)
"""

import gmpy2
from gmpy2 import mpz


class RandomSource:
    """Seeded uniform integer and float draws."""

    def __init__(self, seed: int = 0):
        self.seed = seed
        self._state = gmpy2.random_state(seed)

    def below(self, upper) -> mpz:
        """Uniform integer in ``[0, upper)``."""
        if upper <= 0:
            raise ValueError(f"upper bound must be positive, got {upper}")
        return gmpy2.mpz_random(self._state, mpz(upper))

    def between(self, lower, upper) -> mpz:
        """Uniform integer in ``[lower, upper]`` (both inclusive)."""
        if upper < lower:
            raise ValueError(f"empty range [{lower}, {upper}]")
        return self.below(mpz(upper) - lower + 1) + lower

    def bits(self, count: int) -> mpz:
        """Uniform integer in ``[0, 2^count)``."""
        return gmpy2.mpz_urandomb(self._state, count)

    def uniform(self) -> float:
        """Uniform float in ``[0, 1)``."""
        return float(gmpy2.mpfr_random(self._state))

    def sign(self) -> int:
        """``+1`` or ``-1`` with probability one half each."""
        return 1 if self.uniform() < 0.5 else -1

    def bytes(self, length: int) -> bytes:
        """``length`` uniform bytes."""
        return int(self.bits(8 * length)).to_bytes(length, 'big')

    def __repr__(self):
        return f"RandomSource(seed={self.seed})"
