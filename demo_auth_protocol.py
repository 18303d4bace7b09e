#!/usr/bin/env python3
"""
Anonymous Authentication Demo
=============================

Walks through parameter generation, gateway setup, enrollment, discovery,
exchange and extraction, then prints the outcome of every check.

Usage:
    python demo_auth_protocol.py [rbits] [qbits] [seed] [message]
"""

import sys

from pairing_auth import generate_params, pairing_group_from_params
from pairing_auth.config import config, configure_logging
from pairing_auth.rng import RandomSource
from pairing_auth.solinas import write_param_file
from auth_gateway import Gateway
from auth_protocol import DEFAULT_PLAINTEXT, flip_cyphertext_bit, run_session


def main(argv):
    rbits = int(argv[1]) if len(argv) > 1 else config.rbits
    qbits = int(argv[2]) if len(argv) > 2 else config.qbits
    seed = int(argv[3]) if len(argv) > 3 else config.seed
    plaintext = argv[4].encode('utf-8') if len(argv) > 4 else DEFAULT_PLAINTEXT

    configure_logging()

    print("=" * 60)
    print("Pairing-based anonymous authentication")
    print("=" * 60)

    # 1. Parameters
    print(f"\n[1] Searching Solinas parameters (rbits={rbits}, qbits={qbits}, seed={seed})...")
    rng = RandomSource(seed)
    params = generate_params(rbits, qbits, rng=rng)
    path = write_param_file(params, seed)
    print(f"    r = 2^{params.exp2} {params.sign1:+d}*2^{params.exp1} {params.sign0:+d}")
    print(f"    q has {params.q.bit_length()} bits, h = {params.h}")
    print(f"    written to {path}")

    group = pairing_group_from_params(params, path)

    # 2. Honest run
    print("\n[2] Setup, enrollment, discovery, exchange, extraction...")
    gateway = Gateway(group, rng)
    result = run_session(group, plaintext, rng=rng, gateway=gateway)
    for name, passed in vars(result.report).items():
        print(f"    {name:<11} {'ok' if passed else 'ERROR'}")
    print(f"    received: {result.receiver.plaintext!r}")

    # 3. Tampered run
    print("\n[3] Same vehicles, cyphertext bit flipped in transit...")
    tampered = run_session(
        group, plaintext, rng=rng, gateway=gateway,
        vehicle_a=result.vehicle_a, vehicle_b=result.vehicle_b,
        tamper=lambda msg: flip_cyphertext_bit(group, msg),
    )
    print(f"    failed checks: {', '.join(tampered.report.failures()) or 'none'}")
    print(f"    fresh temporary identity: {tampered.session_a.tid != result.session_a.tid}")

    return 0 if result.report.ok and not tampered.report.ok else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
