"""
Vehicle Implementation
======================

A vehicle holds a long-term identity id in G1 and the private key
id^priv issued by the Gateway. For every session it runs discovery:

    n   <- random ZR
    tid  = id^n          (temporary identity)
    pub  = g^n           (temporary public key)

A fresh nonce is drawn on every call, so two sessions of the same vehicle
show unrelated temporary identities.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from charm.toolbox.pairinggroup import PairingGroup

from pairing_auth.groups import random_nonzero_scalar
from pairing_auth.rng import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VehicleSession:
    """Per-session values of one vehicle; never reused across sessions."""
    nonce: object
    tid: object
    pub: object


class Vehicle:
    """Long-term credentials of an enrolled vehicle."""

    def __init__(self, name: str, identity, private_key, public_params: Dict, group: PairingGroup):
        self.name = name
        self.identity = identity
        self.private_key = private_key
        self.g = public_params["g"]
        self.gateway_pub = public_params["pub"]
        self.group = group

    def discover(self, rng: RandomSource = None) -> VehicleSession:
        """Start a session with a fresh nonce."""
        n = random_nonzero_scalar(self.group, rng)
        session = VehicleSession(nonce=n, tid=self.identity ** n, pub=self.g ** n)
        logger.debug("vehicle %s: new temporary identity", self.name)
        return session

    def __repr__(self):
        return f"Vehicle({self.name!r})"
