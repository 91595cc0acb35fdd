"""
AMQP Wire Writer

This module provides the big-endian field writer used to assemble frames
that the transport emits on its own behalf, such as heartbeats.
"""

import struct

from ..exceptions import AMQPFrameException
from .constants import (
    CONNECTION_CHANNEL,
    FRAME_END,
    MAX_LONG,
    MAX_LONGLONG,
    MAX_OCTET,
    MAX_SHORT,
    FrameType,
)


def encode_integer(value: int, size: int) -> bytes:
    """
    Encode an unsigned integer to bytes with specified size.

    Args:
        value: Integer value to encode
        size: Size in bytes (1, 2, 4, or 8)

    Returns:
        Encoded bytes in big-endian format

    Raises:
        AMQPFrameException: If value is out of range or invalid size
    """
    format_map = {1: 'B', 2: 'H', 4: 'I', 8: 'Q'}

    if size not in format_map:
        raise AMQPFrameException(f'Invalid integer size: {size}')

    try:
        return struct.pack('>' + format_map[size], value)
    except struct.error as e:
        raise AMQPFrameException(f'Integer encoding error: {e}') from e


class AMQPWriter:
    """Accumulates AMQP wire fields into a byte string."""

    def __init__(self) -> None:
        self._out = bytearray()

    def _check_range(self, value: int, maximum: int, name: str) -> None:
        if not 0 <= value <= maximum:
            raise AMQPFrameException(f'{name} out of range: {value}')

    def write(self, data: bytes) -> 'AMQPWriter':
        """Append raw bytes"""
        self._out += data
        return self

    def write_octet(self, value: int) -> 'AMQPWriter':
        self._check_range(value, MAX_OCTET, 'Octet')
        return self.write(encode_integer(value, 1))

    def write_short(self, value: int) -> 'AMQPWriter':
        self._check_range(value, MAX_SHORT, 'Short')
        return self.write(encode_integer(value, 2))

    def write_long(self, value: int) -> 'AMQPWriter':
        self._check_range(value, MAX_LONG, 'Long')
        return self.write(encode_integer(value, 4))

    def write_longlong(self, value: int) -> 'AMQPWriter':
        self._check_range(value, MAX_LONGLONG, 'Longlong')
        return self.write(encode_integer(value, 8))

    def getvalue(self) -> bytes:
        """Return everything written so far"""
        return bytes(self._out)

    def __len__(self) -> int:
        return len(self._out)


def build_heartbeat_frame() -> bytes:
    """
    Build the heartbeat frame.

    A heartbeat is a frame of type 8 on channel 0 with an empty payload,
    followed by the frame-end octet: ``08 0000 00000000 CE``.
    """
    writer = AMQPWriter()
    writer.write_octet(FrameType.HEARTBEAT)
    writer.write_short(CONNECTION_CHANNEL)
    writer.write_long(0)
    writer.write_octet(FRAME_END)
    return writer.getvalue()


HEARTBEAT_FRAME = build_heartbeat_frame()
