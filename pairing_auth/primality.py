"""
Probabilistic Primality
=======================

Thin wrapper around GMP's probabilistic test. With ``rounds`` Miller-Rabin
rounds a composite passes with probability at most ``4^-rounds``.
"""

import gmpy2

from .config import config


def is_probable_prime(n, rounds: int = None) -> bool:
    """
    Test ``n`` for primality.

    Parameters
    ----------
    n : int or mpz
        Candidate, must be non-negative
    rounds : int, optional
        Number of rounds; defaults to ``config.primality_rounds``

    Returns
    -------
    bool
        False if ``n`` is certainly composite, True if probably prime
    """
    if rounds is None:
        rounds = config.primality_rounds
    if rounds < 1:
        raise ValueError(f"rounds must be at least 1, got {rounds}")
    if n < 2:
        return False
    return bool(gmpy2.is_prime(gmpy2.mpz(n), rounds))


def error_bound(rounds: int) -> float:
    """Upper bound on the false-positive probability after ``rounds`` rounds."""
    return 4.0 ** -rounds
