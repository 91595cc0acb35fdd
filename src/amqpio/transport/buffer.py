"""
Read Buffer

Bytes received from the socket but not yet consumed by the protocol layer.
"""


class ReadBuffer:
    """FIFO byte accumulator: append at the tail, consume from the head."""

    __slots__ = ('_data',)

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def append(self, data: bytes) -> None:
        self._data += data

    def consume(self, n: int) -> bytes:
        """Remove and return the first n bytes"""
        if n < 0:
            raise ValueError(f'Cannot consume a negative length: {n}')
        if n > len(self._data):
            raise ValueError(
                f'Cannot consume {n} bytes, only {len(self._data)} buffered'
            )
        chunk = bytes(self._data[:n])
        del self._data[:n]
        return chunk

    def peek(self) -> bytes:
        return bytes(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f'ReadBuffer(size={len(self._data)})'
