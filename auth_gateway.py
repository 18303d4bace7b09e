"""
Gateway (GW) Implementation
===========================

The Gateway is the trusted party of the authentication scheme. It:
1. Picks the public generator g and its secret key priv
2. Publishes pub = g^priv
3. Enrolls vehicles by issuing privKey = id^priv for their identity id

Security Model:
---------------
- priv never leaves the Gateway
- Identities are assumed distinct per vehicle; uniqueness is checked only
  within this Gateway's own enrollment table
- priv is immutable after setup, so enrollments need no locking
"""

import logging
from typing import Dict, Union

from charm.toolbox.pairinggroup import PairingGroup

from pairing_auth.domain_hash import hash_label
from pairing_auth.groups import random_generator, random_nonzero_scalar
from pairing_auth.rng import RandomSource
from auth_vehicle import Vehicle

logger = logging.getLogger(__name__)


class Gateway:
    """
    Gateway (GW) - holds the master secret and issues vehicle keys.
    """

    def __init__(self, group: PairingGroup, rng: RandomSource = None):
        """
        Run setup: sample g (never the identity), priv, and pub = g^priv.

        Parameters
        ----------
        group : PairingGroup
            The pairing context built from the generated parameters
        rng : RandomSource, optional
            Random context; the engine's generator is used when omitted
        """
        self.group = group
        self.rng = rng

        self.g = random_generator(group, rng)
        self._priv = random_nonzero_scalar(group, rng)
        self.pub = self.g ** self._priv

        self.enrolled: Dict[str, Vehicle] = {}
        logger.info("gateway setup complete")

    def get_public_params(self) -> Dict:
        """
        Public parameters every vehicle needs.

        Returns
        -------
        dict
            - g: The generator of G1
            - pub: The gateway public key g^priv
        """
        return {"g": self.g, "pub": self.pub}

    def issue_private_key(self, identity):
        """privKey = identity^priv."""
        return identity ** self._priv

    def enroll(self, name: str, identity=None) -> Vehicle:
        """
        Enroll a vehicle and hand back its credentials.

        Parameters
        ----------
        name : str
            Label of the vehicle, unique per gateway
        identity : G1, optional
            Long-term identity; derived from ``name`` when omitted

        Returns
        -------
        Vehicle
            Holder of identity, private key and the public parameters
        """
        if name in self.enrolled:
            raise ValueError(f"vehicle {name!r} is already enrolled")
        if identity is None:
            identity = identity_for(self.group, name)

        vehicle = Vehicle(
            name=name,
            identity=identity,
            private_key=self.issue_private_key(identity),
            public_params=self.get_public_params(),
            group=self.group,
        )
        self.enrolled[name] = vehicle
        logger.info("enrolled vehicle %s", name)
        return vehicle


def identity_for(group: PairingGroup, name: Union[str, bytes]):
    """Deterministic G1 identity for a vehicle label."""
    return hash_label(group, name)
