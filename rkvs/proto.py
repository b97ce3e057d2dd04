"""Length-prefixed framing: a 4-byte little-endian length, then the payload."""

import struct

MAX_MSG_SIZE = 4096
HEADER_SIZE = 4

_HEADER = struct.Struct("<I")


class ProtocolError(Exception):
    """Raised when a peer breaks the framing protocol."""


class MessageTooBigError(ProtocolError):
    """Raised when a message exceeds ``MAX_MSG_SIZE``."""


def encode_frame(payload):
    """Return ``payload`` prefixed with its length header."""
    if len(payload) > MAX_MSG_SIZE:
        raise MessageTooBigError(f"message of {len(payload)} bytes exceeds {MAX_MSG_SIZE}")
    return _HEADER.pack(len(payload)) + bytes(payload)


def decode_length(header):
    """Return the payload length carried by a 4-byte header."""
    if len(header) != HEADER_SIZE:
        raise ProtocolError(f"header must be {HEADER_SIZE} bytes, got {len(header)}")
    (length,) = _HEADER.unpack(bytes(header))
    if length > MAX_MSG_SIZE:
        raise MessageTooBigError(f"message of {length} bytes exceeds {MAX_MSG_SIZE}")
    return length


def read_exact(sock, n):
    """Read exactly ``n`` bytes from a stream socket."""
    data = bytearray()
    while len(data) < n:
        chunk = sock.recv(n - len(data))
        if not chunk:
            raise ProtocolError(f"connection closed after {len(data)} of {n} bytes")
        data += chunk
    return bytes(data)


def write_all(sock, data):
    """Write all of ``data`` to a stream socket."""
    sock.sendall(data)