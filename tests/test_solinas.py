"""
Tests for Solinas Parameter Generation
======================================

Covers the parameter search invariants, determinism per seed, the
iteration and time guards, and the PBC parameter block format.
"""

import itertools

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pairing_auth import solinas
from pairing_auth.errors import (
    MalformedParameterBlock, ParameterSearchExhausted, ParameterSearchTimeout,
)
from pairing_auth.primality import is_probable_prime
from pairing_auth.rng import RandomSource
from pairing_auth.solinas import (
    PairingParameters, cofactor_bits, generate_params, read_param_file, write_param_file,
)


@pytest.fixture(scope="module")
def small_params():
    """Small parameters (rbits=100, qbits=200) for fast checks."""
    return generate_params(rbits=100, qbits=200, seed=1)


@pytest.mark.parametrize("seed", [1, 2, 3, 42])
@pytest.mark.parametrize("rbits,qbits", [(100, 200), (160, 512)])
def test_generated_params_satisfy_invariants(rbits, qbits, seed):
    p = generate_params(rbits=rbits, qbits=qbits, seed=seed)

    assert is_probable_prime(p.r)
    assert is_probable_prime(p.q)
    assert p.q == p.h * p.r - 1
    assert p.h % 12 == 0
    assert p.r == 2 ** p.exp2 + p.sign1 * 2 ** p.exp1 + p.sign0
    assert 1 <= p.exp1 < p.exp2
    assert p.sign0 in (1, -1)
    assert (p.exp2, p.sign1) in ((rbits - 1, 1), (rbits, -1))
    assert p.r.bit_length() in (rbits - 1, rbits)


def test_cofactor_is_bounded(small_params):
    assert small_params.h < 12 * 2 ** cofactor_bits(100, 200)


def test_cofactor_bits_floor():
    assert cofactor_bits(100, 200) == 97
    assert cofactor_bits(100, 101) == 3


def test_same_seed_same_params():
    assert generate_params(100, 200, seed=7) == generate_params(100, 200, seed=7)


def test_explicit_rng_matches_seed():
    assert generate_params(100, 200, rng=RandomSource(5)) == generate_params(100, 200, seed=5)


def test_different_seeds_differ():
    assert generate_params(100, 200, seed=1) != generate_params(100, 200, seed=2)


def test_validate_accepts_generated(small_params):
    small_params.validate()


def test_validate_rejects_broken_relation(small_params):
    broken = PairingParameters(
        q=small_params.q + 2, r=small_params.r, h=small_params.h,
        exp1=small_params.exp1, exp2=small_params.exp2,
        sign0=small_params.sign0, sign1=small_params.sign1,
    )
    with pytest.raises(ValueError):
        broken.validate()


def test_qbits_must_exceed_rbits():
    with pytest.raises(ValueError):
        generate_params(rbits=100, qbits=100, seed=1)


def test_iteration_guard():
    with pytest.raises(ParameterSearchExhausted) as exc_info:
        generate_params(100, 200, seed=1, max_iterations=0)
    assert exc_info.value.iterations == 0


def test_unbounded_search_still_terminates():
    p = generate_params(100, 200, seed=3, max_iterations=None, timeout=None)
    p.validate()


def test_timeout_guard(monkeypatch):
    clock = itertools.count(0, 10)
    monkeypatch.setattr(solinas.time, "monotonic", lambda: next(clock))
    with pytest.raises(ParameterSearchTimeout) as exc_info:
        generate_params(100, 200, seed=1, timeout=5, max_iterations=None)
    assert isinstance(exc_info.value, ParameterSearchExhausted)


# ============================================================================
# Parameter blocks
# ============================================================================

def test_to_text_layout(small_params):
    lines = small_params.to_text().splitlines()
    assert lines[0] == "type a"
    assert [line.split()[0] for line in lines[1:]] == ['q', 'r', 'h', 'exp1', 'exp2', 'sign0', 'sign1']
    assert lines[1] == f"q {small_params.q}"
    assert lines[6] == f"sign0 {small_params.sign0}"


def test_text_round_trip(small_params):
    assert PairingParameters.from_text(small_params.to_text()) == small_params


def test_from_text_accepts_explicit_plus_sign(small_params):
    text = small_params.to_text().replace("sign1 1\n", "sign1 +1\n").replace("sign0 1\n", "sign0 +1\n")
    assert PairingParameters.from_text(text) == small_params


@pytest.mark.parametrize("text", [
    "",
    "type d\nq 1\nr 1\nh 1\nexp1 1\nexp2 2\nsign0 1\nsign1 1\n",
    "type a\nq 1\nr 1\nh 1\nexp1 1\nexp2 2\nsign0 1\n",
    "type a\nq 1\nr 1\nh 1\nexp1 1\nexp2 2\nsign0 1\nsign1 x\n",
    "type a\nq 1\nq 1\nr 1\nh 1\nexp1 1\nexp2 2\nsign0 1\nsign1 1\n",
    "type a\nq 1 2\n",
    "type a\nfoo 1\n",
])
def test_from_text_rejects_malformed(text):
    with pytest.raises(MalformedParameterBlock):
        PairingParameters.from_text(text)


def test_param_file_round_trip(small_params, tmp_path):
    path = write_param_file(small_params, seed=1, directory=str(tmp_path))
    assert os.path.basename(path) == "a-seed=1.param"
    assert read_param_file(path) == small_params
