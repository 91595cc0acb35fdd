"""
AMQP 0-9-1 Protocol Constants

Frame-level constants used by the transport layer.
"""

from enum import IntEnum


class FrameType(IntEnum):
    """AMQP frame type octets"""

    METHOD = 1
    HEADER = 2
    BODY = 3
    HEARTBEAT = 8


# Every frame is terminated by this octet
FRAME_END = 0xCE

# type (1) + channel (2) + payload size (4)
FRAME_HEADER_SIZE = 7

DEFAULT_PORT = 5672
DEFAULT_TLS_PORT = 5671

# Heartbeats always travel on the connection channel
CONNECTION_CHANNEL = 0

# Field limits
MAX_OCTET = 0xFF
MAX_SHORT = 0xFFFF
MAX_LONG = 0xFFFFFFFF
MAX_LONGLONG = 0xFFFFFFFFFFFFFFFF
