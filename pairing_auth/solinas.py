"""
Solinas Parameter Generation
============================

Search for Type-A pairing parameters with a Solinas-form group order.

The group order ``r`` has the shape

    r = 2^exp2 + sign1 * 2^exp1 + sign0,    1 <= exp1 < exp2

which gives a short signed-binary representation and fast reduction modulo
``r``. The base field characteristic is ``q = h * r - 1`` with a cofactor
``h`` that is a multiple of 12, as required by symmetric Type-A curves.

The search is a retry loop:

1. pick the shape: ``exp2 = rbits - 1, sign1 = +1`` or ``exp2 = rbits, sign1 = -1``
2. draw ``exp1`` uniformly in ``[1, exp2 - 1]`` and ``sign0`` in ``{+1, -1}``
3. if ``r`` is probably prime, try ``cofactor_attempts`` cofactors
   ``h = 12 * u`` with ``u`` uniform in ``[0, 2^bit)``, ``bit = max(3, qbits - rbits - 3)``
4. the first ``q = h * r - 1`` that is probably prime ends the search

Both tests use ``rounds`` rounds, so the chance that either output is
composite stays below ``2 * 4^-rounds``.

Parameter blocks
----------------
The result is written in the PBC text format read by the pairing engine::

    type a
    q <decimal>
    r <decimal>
    h <decimal>
    exp1 <decimal>
    exp2 <decimal>
    sign0 <+1|-1>
    sign1 <+1|-1>
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from gmpy2 import mpz

from .config import config
from .errors import MalformedParameterBlock, ParameterSearchExhausted, ParameterSearchTimeout
from .primality import is_probable_prime
from .rng import RandomSource

logger = logging.getLogger(__name__)

PARAM_KEYS = ('q', 'r', 'h', 'exp1', 'exp2', 'sign0', 'sign1')


@dataclass(frozen=True)
class PairingParameters:
    """Immutable Type-A pairing parameters."""
    q: int
    r: int
    h: int
    exp1: int
    exp2: int
    sign0: int
    sign1: int

    def solinas_value(self) -> int:
        """Recompute ``2^exp2 + sign1 * 2^exp1 + sign0``."""
        return (1 << self.exp2) + self.sign1 * (1 << self.exp1) + self.sign0

    def validate(self, rounds: int = None) -> None:
        """
        Check every invariant of the parameter set.

        Raises
        ------
        ValueError
            Naming the first invariant that does not hold
        """
        if self.sign0 not in (1, -1) or self.sign1 not in (1, -1):
            raise ValueError(f"signs must be +1 or -1, got sign0={self.sign0}, sign1={self.sign1}")
        if not 1 <= self.exp1 < self.exp2:
            raise ValueError(f"need 1 <= exp1 < exp2, got exp1={self.exp1}, exp2={self.exp2}")
        if self.r != self.solinas_value():
            raise ValueError("r does not match 2^exp2 + sign1*2^exp1 + sign0")
        if self.h % 12 != 0:
            raise ValueError(f"cofactor h={self.h} is not a multiple of 12")
        if self.q != self.h * self.r - 1:
            raise ValueError("q != h*r - 1")
        if not is_probable_prime(self.r, rounds):
            raise ValueError("r is not prime")
        if not is_probable_prime(self.q, rounds):
            raise ValueError("q is not prime")

    def to_text(self) -> str:
        """Render as a PBC ``type a`` parameter block."""
        lines = ["type a"]
        lines += [f"{key} {getattr(self, key)}" for key in PARAM_KEYS]
        return "\n".join(lines) + "\n"

    @classmethod
    def from_text(cls, text: str) -> 'PairingParameters':
        """
        Parse a PBC ``type a`` parameter block.

        Raises
        ------
        MalformedParameterBlock
            On a wrong type line, a missing or duplicated key, or a
            non-integer value
        """
        values = {}
        pairing_type = None
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 2:
                raise MalformedParameterBlock(f"line {lineno}: expected '<key> <value>', got {raw!r}")
            key, value = parts
            if key == 'type':
                pairing_type = value
                continue
            if key not in PARAM_KEYS:
                raise MalformedParameterBlock(f"line {lineno}: unknown key {key!r}")
            if key in values:
                raise MalformedParameterBlock(f"line {lineno}: duplicate key {key!r}")
            try:
                values[key] = int(value)
            except ValueError:
                raise MalformedParameterBlock(f"line {lineno}: {key} is not an integer: {value!r}") from None

        if pairing_type != 'a':
            raise MalformedParameterBlock(f"expected 'type a', got {pairing_type!r}")
        missing = [key for key in PARAM_KEYS if key not in values]
        if missing:
            raise MalformedParameterBlock(f"missing keys: {', '.join(missing)}")
        return cls(**values)


def cofactor_bits(rbits: int, qbits: int) -> int:
    """Bit bound for ``h / 12``; never below 3 so ``h`` is not tiny."""
    return max(3, qbits - rbits - 3)


def generate_params(rbits: int = None, qbits: int = None, seed: int = None,
                    rng: RandomSource = None, rounds: int = None,
                    cofactor_attempts: int = None,
                    max_iterations: Optional[int] = -1,
                    timeout: Optional[float] = -1) -> PairingParameters:
    """
    Search for Solinas-form Type-A pairing parameters.

    Parameters
    ----------
    rbits : int
        Bit size of the group order ``r``
    qbits : int
        Target bit size of the base field ``q``; must exceed ``rbits``
    seed : int, optional
        Seed for a fresh ``RandomSource``; ignored when ``rng`` is given
    rng : RandomSource, optional
        Random context to draw from
    rounds : int, optional
        Primality rounds for both ``r`` and ``q``
    cofactor_attempts : int, optional
        Cofactors tried per prime ``r`` before restarting
    max_iterations : int or None, optional
        Bound on outer iterations; None searches forever. Left at -1 the
        bound comes from ``config.max_iterations``
    timeout : float or None, optional
        Wall-clock bound in seconds; None disables it. Left at -1 the
        bound comes from ``config.timeout``

    Returns
    -------
    PairingParameters
        Deterministic for a given seed

    Raises
    ------
    ParameterSearchExhausted
        If ``max_iterations`` outer iterations fail
    ParameterSearchTimeout
        If ``timeout`` elapses first
    """
    rbits = config.rbits if rbits is None else rbits
    qbits = config.qbits if qbits is None else qbits
    rounds = config.primality_rounds if rounds is None else rounds
    cofactor_attempts = config.cofactor_attempts if cofactor_attempts is None else cofactor_attempts
    if max_iterations == -1:
        max_iterations = config.max_iterations_or_none
    if timeout == -1:
        timeout = config.timeout_or_none

    if rbits < 3:
        raise ValueError(f"rbits must be at least 3, got {rbits}")
    if qbits <= rbits:
        raise ValueError(f"qbits ({qbits}) must exceed rbits ({rbits})")
    if cofactor_attempts < 1:
        raise ValueError(f"cofactor_attempts must be at least 1, got {cofactor_attempts}")

    if rng is None:
        rng = RandomSource(config.seed if seed is None else seed)

    h_bound = mpz(1) << cofactor_bits(rbits, qbits)
    start = time.monotonic()
    iterations = 0

    while True:
        if max_iterations is not None and iterations >= max_iterations:
            raise ParameterSearchExhausted(iterations)
        if timeout is not None and time.monotonic() - start > timeout:
            raise ParameterSearchTimeout(iterations, time.monotonic() - start)
        iterations += 1

        if rng.uniform() < 0.5:
            exp2, sign1 = rbits - 1, 1
        else:
            exp2, sign1 = rbits, -1
        exp1 = int(rng.between(1, exp2 - 1))
        sign0 = rng.sign()
        r = (mpz(1) << exp2) + sign1 * (mpz(1) << exp1) + sign0

        if not is_probable_prime(r, rounds):
            continue
        logger.debug("iteration %d: r = 2^%d %+d*2^%d %+d is prime", iterations, exp2, sign1, exp1, sign0)

        for _ in range(cofactor_attempts):
            h = rng.below(h_bound) * 12
            q = h * r - 1
            if is_probable_prime(q, rounds):
                logger.info("found Solinas parameters after %d iterations (%.2fs)",
                            iterations, time.monotonic() - start)
                return PairingParameters(
                    q=int(q), r=int(r), h=int(h),
                    exp1=exp1, exp2=exp2, sign0=sign0, sign1=sign1,
                )


def param_file_name(seed: int) -> str:
    return f"a-seed={seed}.param"


def write_param_file(params: PairingParameters, seed: int, directory: str = None) -> str:
    """
    Persist ``params`` as ``a-seed=<seed>.param`` under ``directory``.

    Returns
    -------
    str
        Path of the written file
    """
    directory = config.param_dir if directory is None else directory
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, param_file_name(seed))
    with open(path, 'w') as f:
        f.write(params.to_text())
    logger.debug("wrote parameter block to %s", path)
    return path


def read_param_file(path: str) -> PairingParameters:
    """Load a parameter block written by ``write_param_file``."""
    with open(path) as f:
        return PairingParameters.from_text(f.read())
