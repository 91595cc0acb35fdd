"""
AMQP Protocol Helpers

Frame constants and the minimal wire writer the transport needs to emit
heartbeat frames. Method and content frame encoding live above the transport.
"""

from .codec import HEARTBEAT_FRAME, AMQPWriter, build_heartbeat_frame, encode_integer
from .constants import (
    CONNECTION_CHANNEL,
    DEFAULT_PORT,
    DEFAULT_TLS_PORT,
    FRAME_END,
    FRAME_HEADER_SIZE,
    FrameType,
)

__all__ = [
    'AMQPWriter',
    'build_heartbeat_frame',
    'encode_integer',
    'HEARTBEAT_FRAME',
    'FrameType',
    'FRAME_END',
    'FRAME_HEADER_SIZE',
    'CONNECTION_CHANNEL',
    'DEFAULT_PORT',
    'DEFAULT_TLS_PORT',
]
