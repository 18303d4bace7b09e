"""
Domain Hashing
==============

Hash-to-scalar and hash-to-element derivations built on SHA-256.

- ``hash_to_scalar``: digest of the canonical bytes of an integer (its
  decimal string), a string (UTF-8) or raw bytes, read as an unsigned
  big-endian integer and reduced into ZR
- ``hash_to_element``: canonical bytes of each group element, concatenated
  in argument order, digested once and handed to the engine's
  element-from-hash

Multi-input hashes concatenate before digesting (never hash successively),
so every party that sees the same ordered inputs derives the same value.
All functions are pure: no randomness, no state.
"""

import hashlib
from typing import Union

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1

from .groups import element_bytes, resolve_group_type

DIGEST_SIZE = hashlib.sha256().digest_size


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def canonical_bytes(value: Union[bytes, str, int]) -> bytes:
    """
    Canonical byte form of a plain value.

    Integers are encoded as their decimal string so the digest does not
    depend on word size or endianness.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, int) or hasattr(value, '__index__'):
        return str(int(value)).encode('ascii')
    raise TypeError(f"cannot hash value of type {type(value).__name__}")


def hash_to_int(value: Union[bytes, str, int]) -> int:
    """SHA-256 of ``canonical_bytes(value)`` as an unsigned integer."""
    return int.from_bytes(sha256(canonical_bytes(value)), 'big')


def hash_to_scalar(group: PairingGroup, value: Union[bytes, str, int]):
    """Hash a plain value into ZR."""
    return group.init(ZR, hash_to_int(value) % int(group.order()))


def serialize_for_hash(group: PairingGroup, *elements) -> bytes:
    """Concatenate the canonical encodings of ``elements`` in order."""
    if not elements:
        raise ValueError("at least one element is required")
    return b"".join(element_bytes(group, elem) for elem in elements)


def hash_elements(group: PairingGroup, *elements) -> bytes:
    """Single SHA-256 digest over the concatenated ``elements``."""
    return sha256(serialize_for_hash(group, *elements))


def hash_to_element(group: PairingGroup, *elements, target=ZR):
    """
    Derive an element of ``target`` from one or more group elements.

    Parameters
    ----------
    group : PairingGroup
        The pairing group
    *elements : G1, G2, GT or ZR
        Inputs, order matters
    target : group type, optional
        Output group, ZR by default

    Returns
    -------
    Element of ``target``
        ``group.hash(SHA-256(e_1 || ... || e_k), target)``
    """
    return group.hash(hash_elements(group, *elements), resolve_group_type(target))


def hash_element_to_element(group: PairingGroup, elem, target=G1):
    """Map a single element into ``target`` (G1 by default)."""
    return hash_to_element(group, elem, target=target)


def hash_label(group: PairingGroup, label: Union[bytes, str], target=G1):
    """Map a label (e.g. a vehicle identifier) into ``target``."""
    return group.hash(sha256(canonical_bytes(label)), resolve_group_type(target))
