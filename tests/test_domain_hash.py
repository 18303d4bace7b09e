"""
Tests for Domain Hashing
========================

hash_to_scalar and hash_to_element must be pure functions of their
byte-level inputs, and multi-input hashing must concatenate before
digesting.
"""

import hashlib

import pytest
from charm.toolbox.pairinggroup import ZR, G1, GT, pair

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pairing_auth import generate_params, pairing_group_from_params
from pairing_auth.domain_hash import (
    canonical_bytes, hash_element_to_element, hash_elements, hash_label,
    hash_to_element, hash_to_int, hash_to_scalar, serialize_for_hash,
)
from pairing_auth.groups import element_bytes, element_from_bytes, element_length, random_element
from pairing_auth.rng import RandomSource

SHA256_ABC = 0xba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad


@pytest.fixture(scope="module")
def group():
    return pairing_group_from_params(generate_params(rbits=160, qbits=512, seed=1))


@pytest.fixture(scope="module")
def elements(group):
    rng = RandomSource(11)
    a = random_element(group, G1, rng)
    b = random_element(group, G1, rng)
    return a, b, pair(a, b)


def test_hash_to_int_known_vector():
    assert hash_to_int(b"abc") == SHA256_ABC
    assert hash_to_int("abc") == SHA256_ABC


def test_integers_hash_their_decimal_string():
    assert canonical_bytes(1234567890123456789012345) == b"1234567890123456789012345"
    assert hash_to_int(123) == int.from_bytes(hashlib.sha256(b"123").digest(), 'big')


def test_canonical_bytes_rejects_unknown_types():
    with pytest.raises(TypeError):
        canonical_bytes(1.5)


def test_hash_to_scalar(group):
    expected = group.init(ZR, SHA256_ABC % int(group.order()))
    assert hash_to_scalar(group, b"abc") == expected
    assert hash_to_scalar(group, b"abc") == hash_to_scalar(group, b"abc")
    assert hash_to_scalar(group, b"abc") != hash_to_scalar(group, b"abd")


def test_hash_to_element_is_deterministic(group, elements):
    a, b, t = elements
    assert hash_to_element(group, t) == hash_to_element(group, t)
    assert hash_to_element(group, a, b) == hash_to_element(group, a, b)


def test_hash_to_element_concatenates(group, elements):
    a, b, _ = elements
    digest = hashlib.sha256(element_bytes(group, a) + element_bytes(group, b)).digest()
    assert hash_elements(group, a, b) == digest
    assert hash_to_element(group, a, b) == group.hash(digest, ZR)


def test_hash_to_element_order_matters(group, elements):
    a, b, _ = elements
    assert hash_to_element(group, a, b) != hash_to_element(group, b, a)


def test_hash_to_element_target_group(group, elements):
    a, _, t = elements
    mapped = hash_element_to_element(group, a)
    assert group.ismember(mapped)
    assert mapped == hash_to_element(group, a, target=G1)
    assert hash_to_element(group, t, target='G1') == hash_to_element(group, t, target=G1)


def test_mixed_group_inputs(group, elements):
    a, _, t = elements
    s = hash_to_element(group, t, a)
    assert s == hash_to_element(group, t, a)
    assert s != hash_to_element(group, t)


def test_serialization_has_fixed_width(group, elements):
    a, b, t = elements
    width = element_length(group, G1)
    assert len(element_bytes(group, a)) == width
    assert len(element_bytes(group, b)) == width
    assert len(serialize_for_hash(group, a, b)) == 2 * width
    assert len(element_bytes(group, t)) == element_length(group, GT)


def test_hash_requires_input(group):
    with pytest.raises(ValueError):
        hash_elements(group)


def test_hash_label(group):
    assert hash_label(group, "VIN-1") == hash_label(group, b"VIN-1")
    assert hash_label(group, "VIN-1") != hash_label(group, "VIN-2")


def test_element_bytes_round_trip(group, elements):
    a, _, t = elements
    s = hash_to_element(group, t)
    for elem in (a, t, s):
        assert element_from_bytes(group, element_bytes(group, elem)) == elem
