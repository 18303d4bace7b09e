"""
Pairing-Based Anonymous Authentication
======================================

Primitives for a symmetric (Type-A) pairing setting: Solinas-form parameter
generation, SHA-256 based domain hashing and a byte-string field codec. The
protocol roles built on top of them live in ``auth_gateway``,
``auth_vehicle`` and ``auth_protocol``.

Modules:
--------
- config: Environment-driven defaults
- errors: Error taxonomy
- rng: Seeded random source (GMP random state)
- primality: Probabilistic primality test
- solinas: Parameter search, parameter blocks and persistence
- groups: Pairing context construction and element sampling
- domain_hash: Hash-to-scalar and hash-to-element
- codec: Byte string <-> ZR encoding

Usage:
------
    from pairing_auth import generate_params, pairing_group_from_params

    params = generate_params(rbits=512, qbits=1024, seed=1)
    group = pairing_group_from_params(params)
"""

__version__ = "0.1.0"

from .solinas import PairingParameters, generate_params
from .groups import pairing_group_from_params

__all__ = ['PairingParameters', 'generate_params', 'pairing_group_from_params']
