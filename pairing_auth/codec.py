"""
Field Codec
===========

Encodes a short byte string into a ZR element and back.

Encoding right-pads the message with a fixed padding byte to exactly
``field_bits // 8`` bytes and reads the result as an unsigned big-endian
integer. Decoding writes the integer back out at the same width. There is
no length prefix, so ``decode(encode(m)) == pad(m)`` and callers that need
the exact message must know its length (see ``unpad``).
"""

from typing import NamedTuple, Optional

from charm.toolbox.pairinggroup import PairingGroup, ZR

from .config import config
from .errors import MessageTooLong
from .groups import field_capacity_bits


class EncodeResult(NamedTuple):
    """Either an encoded scalar (``value``) or the error that prevented it."""
    value: object
    error: Optional[MessageTooLong]

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value


def field_width(field_bits: int) -> int:
    """Byte width of an encoded message."""
    if field_bits < 8:
        raise ValueError(f"field must hold at least one byte, got {field_bits} bits")
    return field_bits // 8


def pad(message: bytes, field_bits: int, pad_byte: bytes = None) -> bytes:
    pad_byte = config.pad_byte if pad_byte is None else pad_byte
    if len(message) * 8 > field_bits:
        raise MessageTooLong(len(message) * 8, field_bits)
    return message + pad_byte * (field_width(field_bits) - len(message))


def unpad(padded: bytes, length: int) -> bytes:
    """Trim a decoded buffer to the out-of-band plaintext ``length``."""
    if length > len(padded):
        raise ValueError(f"length {length} exceeds decoded width {len(padded)}")
    return padded[:length]


def encode_int(message: bytes, field_bits: int, pad_byte: bytes = None) -> int:
    """Padded message as an unsigned integer."""
    return int.from_bytes(pad(message, field_bits, pad_byte), 'big')


def decode_int(value: int, field_bits: int) -> bytes:
    """Integer back to the fixed-width padded buffer."""
    width = field_width(field_bits)
    value = int(value)
    if value < 0 or value.bit_length() > 8 * width:
        raise ValueError(f"value does not fit in {width} bytes, not a field encoding")
    return value.to_bytes(width, 'big')


def try_encode(group: PairingGroup, message: bytes, field_bits: int,
               pad_byte: bytes = None) -> EncodeResult:
    """Encode ``message`` into ZR, reporting an oversized message as a value."""
    capacity = field_capacity_bits(group)
    if field_bits > capacity:
        raise ValueError(f"field_bits={field_bits} exceeds the ZR capacity of {capacity} bits")
    if isinstance(message, str):
        message = message.encode('utf-8')
    if len(message) * 8 > field_bits:
        return EncodeResult(None, MessageTooLong(len(message) * 8, field_bits))
    return EncodeResult(group.init(ZR, encode_int(message, field_bits, pad_byte)), None)


def encode(group: PairingGroup, message: bytes, field_bits: int, pad_byte: bytes = None):
    """
    Encode ``message`` into ZR.

    Raises
    ------
    MessageTooLong
        If ``len(message) * 8 > field_bits``
    ValueError
        If ``field_bits`` exceeds ``field_capacity_bits(group)``, where
        padded values could wrap modulo the group order
    """
    return try_encode(group, message, field_bits, pad_byte).unwrap()


def decode(scalar, field_bits: int) -> bytes:
    """Fixed-width padded bytes of ``scalar``."""
    return decode_int(int(scalar), field_bits)
