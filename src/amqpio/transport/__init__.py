"""
AMQP Transport Layer

This module provides the byte transport beneath an AMQP client, including the
cooperative TCP socket, the read buffer, heartbeat monitoring and the
connection endpoint that ties them together.
"""

from ..config import TransportConfig
from .buffer import ReadBuffer
from .connection import AMQPTransport, TransportState
from .heartbeat import HeartbeatAction, HeartbeatMonitor
from .socket import AsyncSocket

__all__ = [
    'AMQPTransport',
    'TransportState',
    'TransportConfig',
    'AsyncSocket',
    'ReadBuffer',
    'HeartbeatMonitor',
    'HeartbeatAction',
]
