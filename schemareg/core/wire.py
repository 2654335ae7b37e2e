"""
Confluent wire format framing.

    byte 0      magic byte, always 0x00
    bytes 1..4  registry id, big-endian unsigned 32-bit
    bytes 5..   schema-type specific payload
"""

from __future__ import annotations

import struct
from typing import Tuple

from schemareg.errors import InvalidRegistryId, MagicByteMismatch, TruncatedMessage

MAGIC_BYTE: int = 0
HEADER_SIZE: int = 5
MAX_REGISTRY_ID: int = 0xFFFFFFFF

_HEADER = struct.Struct(">BI")


def check_registry_id(registry_id: object) -> int:
    """Return ``registry_id`` unchanged if it fits an unsigned 32-bit integer."""
    if isinstance(registry_id, bool) or not isinstance(registry_id, int):
        raise InvalidRegistryId(registry_id)
    if not 0 <= registry_id <= MAX_REGISTRY_ID:
        raise InvalidRegistryId(registry_id)
    return registry_id


def frame(registry_id: int, payload: bytes) -> bytes:
    """
    Prefix ``payload`` with the magic byte and the registry id.

    Raises:
        InvalidRegistryId: if the id does not fit an unsigned 32-bit integer.
    """
    check_registry_id(registry_id)
    return _HEADER.pack(MAGIC_BYTE, registry_id) + bytes(payload)


def unframe(buffer: bytes) -> Tuple[int, bytes]:
    """
    Split a framed message into ``(registry_id, payload)``.

    The payload is returned as-is; decoding it is the caller's job.

    Raises:
        MagicByteMismatch: if the first byte is not ``MAGIC_BYTE``.
        TruncatedMessage: if the buffer is shorter than the header.
    """
    data = bytes(buffer)
    if not data:
        raise TruncatedMessage(0, HEADER_SIZE)
    if data[0] != MAGIC_BYTE:
        raise MagicByteMismatch(observed=data[0], expected=MAGIC_BYTE)
    if len(data) < HEADER_SIZE:
        raise TruncatedMessage(len(data), HEADER_SIZE)
    _, registry_id = _HEADER.unpack_from(data)
    return registry_id, data[HEADER_SIZE:]
