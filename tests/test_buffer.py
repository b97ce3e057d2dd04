import pytest

from rkvs.buffer import IO_MAX, BufferOverflowError, ByteBuffer


def test_append_keeps_order():
    buf = ByteBuffer()
    buf.append(b"hello")
    buf.append(b"world")
    assert bytes(buf) == b"helloworld"
    assert len(buf) == len(b"helloworld")


def test_consume_returns_prefix_and_keeps_rest():
    buf = ByteBuffer(b"abcdef")
    taken = buf.consume(2)
    assert taken == b"ab"
    assert bytes(buf) == b"cdef"


def test_consume_more_than_held_empties():
    buf = ByteBuffer(b"abc")
    assert buf.consume(10) == b"abc"
    assert len(buf) == 0
    assert not buf


def test_append_to_capacity_raises():
    buf = ByteBuffer(capacity=8)
    buf.append(b"1234567")
    with pytest.raises(BufferOverflowError):
        buf.append(b"x")
    assert bytes(buf) == b"1234567"


def test_default_capacity_rejects_full_size_append():
    buf = ByteBuffer()
    with pytest.raises(BufferOverflowError):
        buf.append(bytes(IO_MAX))
    assert len(buf) == 0


@pytest.mark.parametrize("n", [IO_MAX, -1])
def test_consume_out_of_range_raises(n):
    buf = ByteBuffer(b"data")
    with pytest.raises(ValueError):
        buf.consume(n)


def test_available_tracks_contents():
    buf = ByteBuffer(capacity=16)
    buf.append(b"abcd")
    assert buf.available == buf.capacity - 1 - len(buf)
    buf.append(bytes(buf.available))
    with pytest.raises(BufferOverflowError):
        buf.append(b"z")


def test_slicing_returns_bytes():
    buf = ByteBuffer(b"abcdef")
    assert buf[1:3] == b"bc"
    assert buf[0] == ord("a")