import socket
import struct

import pytest

from rkvs.proto import (
    HEADER_SIZE,
    MAX_MSG_SIZE,
    MessageTooBigError,
    ProtocolError,
    decode_length,
    encode_frame,
    read_exact,
    write_all,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    a.settimeout(2)
    b.settimeout(2)
    yield a, b
    a.close()
    b.close()


def test_encode_frame_wire_bytes():
    assert encode_frame(b"foo") == b"\x03\x00\x00\x00foo"


@pytest.mark.parametrize("payload", [b"", b"H", b"hello2", b"x" * MAX_MSG_SIZE])
def test_frame_round_trip(payload):
    frame = encode_frame(payload)
    assert decode_length(frame[:HEADER_SIZE]) == len(payload)
    assert frame[HEADER_SIZE:] == payload


def test_encode_frame_too_big():
    with pytest.raises(MessageTooBigError):
        encode_frame(b"x" * (MAX_MSG_SIZE + 1))


def test_decode_length_too_big():
    with pytest.raises(MessageTooBigError):
        decode_length(struct.pack("<I", MAX_MSG_SIZE + 1))


def test_decode_length_wrong_size():
    with pytest.raises(ProtocolError):
        decode_length(b"\x01\x00")


def test_too_big_is_a_protocol_error():
    with pytest.raises(ProtocolError):
        encode_frame(bytes(MAX_MSG_SIZE + 1))


def test_read_exact_joins_chunks(pair):
    a, b = pair
    b.sendall(b"abc")
    b.sendall(b"defg")
    assert read_exact(a, 7) == b"abcdefg"


def test_read_exact_leaves_extra_bytes(pair):
    a, b = pair
    b.sendall(b"abcdef")
    assert read_exact(a, 2) == b"ab"
    assert read_exact(a, 4) == b"cdef"


def test_read_exact_eof_raises(pair):
    a, b = pair
    b.sendall(b"ab")
    b.close()
    with pytest.raises(ProtocolError):
        read_exact(a, 5)


def test_write_all_delivers_everything(pair):
    a, b = pair
    payload = bytes(range(256)) * 8
    write_all(a, payload)
    assert read_exact(b, len(payload)) == payload