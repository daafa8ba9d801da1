"""Wire format shared by the prime search server and its clients.

Every message starts with a three byte header: one byte of message type
followed by a little-endian 16-bit count of 64-bit payload values.  The
payload is that many little-endian unsigned 64-bit integers.
"""

from __future__ import annotations

import socket
import struct
from enum import IntEnum
from typing import Iterable

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 27015
DEFAULT_BUFLEN = 512

HEADER_SIZE = 3
VALUE_SIZE = 8
MAX_PAYLOAD_VALUES = 0xFFFF

_HEADER = struct.Struct("<BH")
_VALUE = struct.Struct("<Q")


class MessageType(IntEnum):
    """Kinds of message exchanged between server and client."""

    CLOSE_CONNECTION = 0x00
    RANGE = 0x01
    SET = 0x02


class ProtocolError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


def _encode(msg_type: MessageType, values: Iterable[int]) -> bytes:
    values = list(values)
    if len(values) > MAX_PAYLOAD_VALUES:
        raise ProtocolError(
            f"payload of {len(values)} values exceeds {MAX_PAYLOAD_VALUES}"
        )
    try:
        body = b"".join(_VALUE.pack(value) for value in values)
    except struct.error as exc:
        raise ProtocolError(f"value does not fit in 64 bits: {exc}") from exc
    return _HEADER.pack(msg_type, len(values)) + body


def encode_close() -> bytes:
    """Build the message that announces a closing connection."""
    return _encode(MessageType.CLOSE_CONNECTION, ())


def encode_primes(primes: Iterable[int]) -> bytes:
    """Build a SET message carrying a list of primes."""
    return _encode(MessageType.SET, primes)


def encode_range(search_range: tuple[int, int]) -> bytes:
    """Build a RANGE message carrying an inclusive ``(low, high)`` range."""
    low, high = search_range
    return _encode(MessageType.RANGE, (low, high))


def decode_header(header: bytes) -> tuple[MessageType, int]:
    """Return the message type and payload value count of a header."""
    if len(header) != HEADER_SIZE:
        raise ProtocolError(f"header must be {HEADER_SIZE} bytes, got {len(header)}")
    raw_type, payload_size = _HEADER.unpack(bytes(header))
    try:
        msg_type = MessageType(raw_type)
    except ValueError as exc:
        raise ProtocolError(f"unknown message type {raw_type:#04x}") from exc
    return msg_type, payload_size


def _decode_values(payload: bytes, payload_size: int) -> list[int]:
    needed = payload_size * VALUE_SIZE
    if payload_size < 0 or len(payload) < needed:
        raise ProtocolError(
            f"payload of {len(payload)} bytes is too short for {payload_size} values"
        )
    return [value for (value,) in _VALUE.iter_unpack(bytes(payload[:needed]))]


def decode_range(payload: bytes, payload_size: int) -> tuple[int, int]:
    """Decode the inclusive ``(low, high)`` range carried by a RANGE payload."""
    if payload_size != 2:
        raise ProtocolError(f"a range holds 2 values, not {payload_size}")
    low, high = _decode_values(payload, payload_size)
    return low, high


def decode_primes(payload: bytes, payload_size: int) -> list[int]:
    """Decode the list of primes carried by a SET payload."""
    return _decode_values(payload, payload_size)


def recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``sock``.

    Raises ConnectionError if the peer closes the connection first.
    """
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            raise ConnectionError(
                f"connection closed after {len(chunks)} of {size} bytes"
            )
        chunks.extend(chunk)
    return bytes(chunks)