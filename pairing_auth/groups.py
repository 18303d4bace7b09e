"""
Pairing Group Context
=====================

Builds the charm-crypto pairing context from generated Type-A parameters and
provides seeded element sampling on top of it.

According to charm-crypto:
- ``PairingGroup(path, param_file=True)`` loads a PBC parameter file
- G1 and G2 coincide for Type-A (symmetric) pairings
- ``group.hash(data, G1)`` maps bytes deterministically to an element
- ``group.serialize(elem)`` gives a fixed-length encoding per group
"""

import logging
import os
import tempfile

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

from .rng import RandomSource
from .solinas import PairingParameters

logger = logging.getLogger(__name__)

GROUP_NAMES = {'ZR': ZR, 'G1': G1, 'G2': G2, 'GT': GT}


def pairing_group_from_params(params: PairingParameters, path: str = None) -> PairingGroup:
    """
    Construct a pairing context from ``params``.

    Parameters
    ----------
    params : PairingParameters
        Output of ``generate_params``
    path : str, optional
        Existing parameter file holding the same block. When omitted the
        block is written to a temporary file that is removed afterwards.

    Returns
    -------
    PairingGroup
        The charm-crypto context; engine errors on a bad block propagate
    """
    if path is not None:
        return PairingGroup(path, param_file=True)

    fd, tmp_path = tempfile.mkstemp(suffix='.param')
    try:
        with os.fdopen(fd, 'w') as f:
            f.write(params.to_text())
        group = PairingGroup(tmp_path, param_file=True)
    finally:
        os.remove(tmp_path)
    logger.debug("pairing context ready (r has %d bits)", params.r.bit_length())
    return group


def resolve_group_type(kind):
    """Accept a charm group constant or its name ('G1', 'ZR', ...)."""
    if isinstance(kind, str):
        try:
            return GROUP_NAMES[kind.upper()]
        except KeyError:
            raise ValueError(f"unknown group {kind!r}") from None
    return kind


def identity(group: PairingGroup, kind=G1):
    """Identity element of ``kind``."""
    return group.init(resolve_group_type(kind), 1)


def is_identity(group: PairingGroup, elem, kind=G1) -> bool:
    return elem == identity(group, kind)


def random_element(group: PairingGroup, kind=ZR, rng: RandomSource = None):
    """
    Sample a uniform element of ``kind``.

    Without ``rng`` the engine's own generator is used. With ``rng`` the
    draw is reproducible: scalars come straight from ``rng``, G1/G2
    elements are hashed from fresh ``rng`` bytes, GT elements are pairings
    of two such elements.
    """
    kind = resolve_group_type(kind)
    if rng is None:
        return group.random(kind)

    if kind == ZR:
        return group.init(ZR, int(rng.below(group.order())))
    if kind in (G1, G2):
        return group.hash(rng.bytes(32), kind)
    if kind == GT:
        return pair(group.hash(rng.bytes(32), G1), group.hash(rng.bytes(32), G2))
    raise ValueError(f"unsupported group type {kind!r}")


def random_generator(group: PairingGroup, rng: RandomSource = None):
    """Random G1 element, resampled until it is not the identity."""
    g = random_element(group, G1, rng)
    while is_identity(group, g):
        g = random_element(group, G1, rng)
    return g


def random_nonzero_scalar(group: PairingGroup, rng: RandomSource = None):
    """Random ZR element, resampled until it is invertible."""
    x = random_element(group, ZR, rng)
    while int(x) == 0:
        x = random_element(group, ZR, rng)
    return x


def element_bytes(group: PairingGroup, elem) -> bytes:
    """Canonical byte encoding of ``elem``."""
    return group.serialize(elem)


def element_from_bytes(group: PairingGroup, data: bytes):
    return group.deserialize(data)


def element_length(group: PairingGroup, kind) -> int:
    """Fixed byte length of the canonical encoding of ``kind`` elements."""
    return len(element_bytes(group, random_element(group, kind)))


def field_capacity_bits(group: PairingGroup) -> int:
    """
    Whole-byte bit capacity of ZR: the largest multiple of 8 strictly
    below the bit length of the group order, so every padded message
    stays smaller than the order.
    """
    return 8 * ((int(group.order()).bit_length() - 1) // 8)
