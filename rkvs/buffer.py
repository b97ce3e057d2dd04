"""Bounded FIFO byte buffer used for connection input and output."""

IO_MAX = 0x10000


class BufferOverflowError(Exception):
    """Raised when appending would fill the buffer to its capacity."""


class ByteBuffer:
    """A FIFO byte buffer that always holds fewer than ``capacity`` bytes."""

    def __init__(self, data=b"", capacity=IO_MAX):
        self.capacity = capacity
        self._data = bytearray()
        if data:
            self.append(data)

    def __len__(self):
        return len(self._data)

    def __bool__(self):
        return bool(self._data)

    def __bytes__(self):
        return bytes(self._data)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return bytes(self._data[index])
        return self._data[index]

    def __repr__(self):
        return f"ByteBuffer({bytes(self._data)!r}, capacity={self.capacity})"

    @property
    def available(self):
        """Number of bytes that can still be appended."""
        return self.capacity - 1 - len(self._data)

    def append(self, data):
        """Append ``data`` to the end of the buffer."""
        if len(self._data) + len(data) >= self.capacity:
            raise BufferOverflowError(
                f"cannot append {len(data)} bytes to a buffer holding "
                f"{len(self._data)} of {self.capacity}"
            )
        self._data += data

    def consume(self, n):
        """Remove and return up to ``n`` bytes from the front of the buffer."""
        if n < 0 or n >= self.capacity:
            raise ValueError(f"cannot consume {n} bytes from a buffer of capacity {self.capacity}")
        taken = bytes(self._data[:n])
        del self._data[:n]
        return taken