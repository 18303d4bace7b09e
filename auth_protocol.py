"""
Anonymous Mutual Authentication and Key Exchange
================================================

Data exchange, extraction and verification between two enrolled vehicles
A (sender) and B (receiver). All messages are in-memory values.

Exchange (A, with B's blinding):
    rA, otiA = tidA^rA
    rB, otiB = g^rB,  t = e(tidB, pubGW)^rB
    tempZr   = H(t)
    paramsA  = rA + tempZr,  paramsB = rB + tempZr
    sharedKey  = e(privKeyA, tidB^nA)
    message    = encode(plaintext)
    cyphertext = message + H(sharedKey)
    sign       = H(sharedKey, message)

Extraction (B):
    t'   = e(privKeyB, otiB^nB)
    rA'  = paramsA - H(t'),  rB' = paramsB - H(t')
    g^rB' == otiB,  tidA' = otiA^(1/rA')
    sharedKey' = e(tidA', privKeyB^nB)
    message'   = cyphertext - H(sharedKey')
    sign'      = H(sharedKey', message')

Both t and sharedKey agree by bilinearity:
    e(idB^nB, g^priv)^rB == e(idB^priv, g^(rB nB))
    e(idA^priv, idB^(nB nA)) == e(idA^nA, idB^(priv nB))
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Callable, List, Optional

from charm.toolbox.pairinggroup import PairingGroup, ZR, pair

from pairing_auth import codec
from pairing_auth.domain_hash import hash_to_element
from pairing_auth.errors import ProtocolVerificationFailure
from pairing_auth.groups import field_capacity_bits, random_nonzero_scalar
from pairing_auth.rng import RandomSource
from auth_gateway import Gateway
from auth_vehicle import Vehicle, VehicleSession

logger = logging.getLogger(__name__)

DEFAULT_PLAINTEXT = b"The quick brown fox jumps over the lazy dog"


@dataclass(frozen=True)
class ExchangeMessage:
    """Everything B receives from the exchange phase."""
    tid_a: object
    oti_a: object
    oti_b: object
    params_a: object
    params_b: object
    cyphertext: object
    sign: object
    length: int


@dataclass(frozen=True)
class SenderTranscript:
    """Values held on the sending side of one run."""
    t: object
    r_a: object
    r_b: object
    oti_b: object
    tid_a: object
    shared_key: object
    message: object
    sign: object
    plaintext: bytes


@dataclass(frozen=True)
class ReceiverTranscript:
    """Values recomputed by B during extraction."""
    t: object
    r_a: object
    r_b: object
    oti_b: object
    tid_a: object
    shared_key: object
    message: object
    sign: object
    plaintext: Optional[bytes]


@dataclass(frozen=True)
class VerificationReport:
    """One boolean per terminal check; a run is correct only if all hold."""
    t: bool
    r_a: bool
    r_b: bool
    oti_b: bool
    tid_a: bool
    message: bool
    shared_key: bool
    sign: bool

    @property
    def ok(self) -> bool:
        return not self.failures()

    def failures(self) -> List[str]:
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def raise_for_failure(self) -> None:
        failed = self.failures()
        if failed:
            raise ProtocolVerificationFailure(failed[0], self)


@dataclass
class SessionResult:
    gateway: Gateway
    vehicle_a: Vehicle
    vehicle_b: Vehicle
    session_a: VehicleSession
    session_b: VehicleSession
    exchange: ExchangeMessage
    sender: SenderTranscript
    receiver: ReceiverTranscript
    report: VerificationReport


def begin_exchange(vehicle_a: Vehicle, session_a: VehicleSession, rng: RandomSource = None):
    """A: rA and otiA = tidA^rA."""
    r_a = random_nonzero_scalar(vehicle_a.group, rng)
    return r_a, session_a.tid ** r_a


def blind_responder(vehicle_b: Vehicle, session_b: VehicleSession, rng: RandomSource = None):
    """B: rB, otiB = g^rB and the masking value t = e(tidB, pubGW)^rB."""
    r_b = random_nonzero_scalar(vehicle_b.group, rng)
    oti_b = vehicle_b.g ** r_b
    t = pair(session_b.tid, vehicle_b.gateway_pub) ** r_b
    return r_b, oti_b, t


def mask_nonces(group: PairingGroup, t, r_a, r_b):
    """Hide both nonces behind H(t)."""
    temp = hash_to_element(group, t, target=ZR)
    return r_a + temp, r_b + temp


def unmask_nonces(group: PairingGroup, t, params_a, params_b):
    temp = hash_to_element(group, t, target=ZR)
    return params_a - temp, params_b - temp


def derive_sender_key(vehicle_a: Vehicle, session_a: VehicleSession, tid_b):
    """sharedKey = e(privKeyA, tidB^nA)."""
    return pair(vehicle_a.private_key, tid_b ** session_a.nonce)


def derive_receiver_key(vehicle_b: Vehicle, session_b: VehicleSession, tid_a):
    """sharedKey' = e(tidA, privKeyB^nB)."""
    return pair(tid_a, vehicle_b.private_key ** session_b.nonce)


def encrypt_and_sign(group: PairingGroup, shared_key, plaintext: bytes, field_bits: int):
    """
    Mask the encoded plaintext with H(sharedKey) and bind it with a tag.

    Returns
    -------
    tuple
        (message, cyphertext, sign)

    Raises
    ------
    MessageTooLong
        If the plaintext does not fit in ``field_bits``
    """
    message = codec.encode(group, plaintext, field_bits)
    cyphertext, sign = mask_and_sign(group, shared_key, message)
    return message, cyphertext, sign


def mask_and_sign(group: PairingGroup, shared_key, message):
    """cyphertext = message + H(sharedKey), sign = H(sharedKey, message)."""
    cyphertext = message + hash_to_element(group, shared_key, target=ZR)
    sign = hash_to_element(group, shared_key, message, target=ZR)
    return cyphertext, sign


def decrypt(group: PairingGroup, shared_key, cyphertext):
    return cyphertext - hash_to_element(group, shared_key, target=ZR)


def exchange(vehicle_a: Vehicle, session_a: VehicleSession,
             vehicle_b: Vehicle, session_b: VehicleSession,
             plaintext: bytes, rng: RandomSource = None, field_bits: int = None):
    """
    Run the data-exchange phase.

    Parameters
    ----------
    vehicle_a, session_a : Vehicle, VehicleSession
        The sender and its current session
    vehicle_b, session_b : Vehicle, VehicleSession
        The receiver and its current session
    plaintext : bytes or str
        Message to transfer
    rng : RandomSource, optional
        Random context for rA and rB
    field_bits : int, optional
        Codec capacity; defaults to the whole-byte capacity of ZR

    Returns
    -------
    tuple
        (ExchangeMessage, SenderTranscript)
    """
    group = vehicle_a.group
    if isinstance(plaintext, str):
        plaintext = plaintext.encode('utf-8')
    if field_bits is None:
        field_bits = field_capacity_bits(group)

    # Oversized plaintexts must fail before rng is touched
    message = codec.encode(group, plaintext, field_bits)

    r_a, oti_a = begin_exchange(vehicle_a, session_a, rng)
    r_b, oti_b, t = blind_responder(vehicle_b, session_b, rng)
    params_a, params_b = mask_nonces(group, t, r_a, r_b)

    shared_key = derive_sender_key(vehicle_a, session_a, session_b.tid)
    cyphertext, sign = mask_and_sign(group, shared_key, message)
    logger.info("exchange: %s -> %s, %d byte payload", vehicle_a.name, vehicle_b.name, len(plaintext))

    msg = ExchangeMessage(
        tid_a=session_a.tid, oti_a=oti_a, oti_b=oti_b,
        params_a=params_a, params_b=params_b,
        cyphertext=cyphertext, sign=sign, length=len(plaintext),
    )
    sender = SenderTranscript(
        t=t, r_a=r_a, r_b=r_b, oti_b=oti_b, tid_a=session_a.tid,
        shared_key=shared_key, message=message, sign=sign, plaintext=plaintext,
    )
    return msg, sender


def extract(vehicle_b: Vehicle, session_b: VehicleSession, msg: ExchangeMessage,
            field_bits: int = None) -> ReceiverTranscript:
    """
    Run extraction and key agreement on B's side.

    The recovered temporary identity tidA' = otiA^(1/rA') is the one used to
    derive the session key, so A never has to reveal it directly. The
    decoded plaintext is None when message' is not a valid field encoding.
    """
    group = vehicle_b.group
    if field_bits is None:
        field_bits = field_capacity_bits(group)

    t = pair(vehicle_b.private_key, msg.oti_b ** session_b.nonce)
    r_a, r_b = unmask_nonces(group, t, msg.params_a, msg.params_b)
    oti_b = vehicle_b.g ** r_b
    tid_a = msg.oti_a ** (r_a ** -1)

    shared_key = derive_receiver_key(vehicle_b, session_b, tid_a)
    message = decrypt(group, shared_key, msg.cyphertext)
    sign = hash_to_element(group, shared_key, message, target=ZR)

    try:
        plaintext = codec.unpad(codec.decode(message, field_bits), msg.length)
    except ValueError:
        plaintext = None
    logger.info("extraction by %s complete", vehicle_b.name)

    return ReceiverTranscript(
        t=t, r_a=r_a, r_b=r_b, oti_b=oti_b, tid_a=tid_a,
        shared_key=shared_key, message=message, sign=sign, plaintext=plaintext,
    )


def check_t(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.t == receiver.t


def check_r_a(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.r_a == receiver.r_a


def check_r_b(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.r_b == receiver.r_b


def check_oti_b(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.oti_b == receiver.oti_b


def check_tid_a(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.tid_a == receiver.tid_a


def check_message(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.message == receiver.message


def check_shared_key(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.shared_key == receiver.shared_key


def check_sign(sender: SenderTranscript, receiver: ReceiverTranscript) -> bool:
    return sender.sign == receiver.sign


def verify(sender: SenderTranscript, receiver: ReceiverTranscript) -> VerificationReport:
    """Evaluate every terminal check of one run."""
    report = VerificationReport(
        t=check_t(sender, receiver),
        r_a=check_r_a(sender, receiver),
        r_b=check_r_b(sender, receiver),
        oti_b=check_oti_b(sender, receiver),
        tid_a=check_tid_a(sender, receiver),
        message=check_message(sender, receiver),
        shared_key=check_shared_key(sender, receiver),
        sign=check_sign(sender, receiver),
    )
    for name in report.failures():
        logger.warning("verification check failed: %s", name)
    return report


def flip_cyphertext_bit(group: PairingGroup, msg: ExchangeMessage, bit: int = 0) -> ExchangeMessage:
    """Copy of ``msg`` with one bit of the cyphertext flipped."""
    tampered = group.init(ZR, int(msg.cyphertext) ^ (1 << bit))
    return replace(msg, cyphertext=tampered)


def run_session(group: PairingGroup, plaintext=DEFAULT_PLAINTEXT, rng: RandomSource = None,
                gateway: Gateway = None, vehicle_a: Vehicle = None, vehicle_b: Vehicle = None,
                tamper: Callable[[ExchangeMessage], ExchangeMessage] = None,
                field_bits: int = None) -> SessionResult:
    """
    Setup -> Enrollment -> Discovery -> Exchange -> Extraction -> Verification.

    Parameters
    ----------
    group : PairingGroup
        The pairing context
    plaintext : bytes or str, optional
        Message sent from A to B
    rng : RandomSource, optional
        Random context shared by every step
    gateway : Gateway, optional
        Existing gateway; a new one is set up when omitted
    vehicle_a, vehicle_b : Vehicle, optional
        Existing enrolled vehicles; enrolled as 'vehicle-A'/'vehicle-B' when omitted
    tamper : callable, optional
        Applied to the ExchangeMessage before extraction
    field_bits : int, optional
        Codec capacity

    Returns
    -------
    SessionResult
        All transcripts and the VerificationReport; failures are reported,
        not raised (see ``VerificationReport.raise_for_failure``)
    """
    if gateway is None:
        gateway = Gateway(group, rng)
    if vehicle_a is None:
        vehicle_a = gateway.enroll('vehicle-A')
    if vehicle_b is None:
        vehicle_b = gateway.enroll('vehicle-B')

    session_a = vehicle_a.discover(rng)
    session_b = vehicle_b.discover(rng)

    msg, sender = exchange(vehicle_a, session_a, vehicle_b, session_b, plaintext, rng, field_bits)
    if tamper is not None:
        msg = tamper(msg)

    receiver = extract(vehicle_b, session_b, msg, field_bits)
    report = verify(sender, receiver)

    return SessionResult(
        gateway=gateway, vehicle_a=vehicle_a, vehicle_b=vehicle_b,
        session_a=session_a, session_b=session_b,
        exchange=msg, sender=sender, receiver=receiver, report=report,
    )
