"""
amqpio - Async AMQP 0-9-1 Transport

The transport layer of an AMQP 0-9-1 client: it moves raw bytes between the
client and the broker over one long-lived asyncio socket, enforces the
heartbeat keep-alive contract and recovers from stalled connections.

This package provides:
- Exact-length reads with a carry-forward read buffer
- Whole-buffer writes bounded by a write timeout
- Heartbeat sending at half the interval, reconnect after twice the interval
- Optional in-place TLS upgrade
- Configuration from keyword arguments, environment and JSON files

Quick Start:
    from amqpio import AMQPTransport

    async with AMQPTransport('localhost', 5672, heartbeat=60) as transport:
        await transport.write(b'AMQP\\x00\\x00\\x09\\x01')
        frame_header = await transport.read(7)
"""

from .config import (
    AMQPSettings,
    LoggingConfig,
    TransportConfig,
    create_transport_config,
    create_transport_config_from_sources,
    load_config_from_env,
    load_config_from_file,
)
from .exceptions import (
    AMQPConfigurationException,
    AMQPConnectionException,
    AMQPConnectionLostException,
    AMQPErrorCode,
    AMQPException,
    AMQPFrameException,
    AMQPReceiveException,
    AMQPSendException,
    AMQPValidationException,
)
from .protocol import (
    FRAME_END,
    HEARTBEAT_FRAME,
    AMQPWriter,
    FrameType,
    build_heartbeat_frame,
)
from .transport import (
    AMQPTransport,
    AsyncSocket,
    HeartbeatAction,
    HeartbeatMonitor,
    ReadBuffer,
    TransportState,
)

__version__ = '0.1.0'

__all__ = [
    # Transport
    'AMQPTransport',
    'TransportState',
    'AsyncSocket',
    'ReadBuffer',
    'HeartbeatMonitor',
    'HeartbeatAction',
    # Protocol
    'AMQPWriter',
    'FrameType',
    'FRAME_END',
    'HEARTBEAT_FRAME',
    'build_heartbeat_frame',
    # Configuration
    'TransportConfig',
    'LoggingConfig',
    'AMQPSettings',
    'create_transport_config',
    'create_transport_config_from_sources',
    'load_config_from_env',
    'load_config_from_file',
    # Exceptions
    'AMQPException',
    'AMQPErrorCode',
    'AMQPConnectionException',
    'AMQPConnectionLostException',
    'AMQPReceiveException',
    'AMQPSendException',
    'AMQPFrameException',
    'AMQPValidationException',
    'AMQPConfigurationException',
]


def create_transport(host: str, port: int, **kwargs) -> AMQPTransport:
    """
    Create a transport from a validated configuration.

    Args:
        host: Broker host address
        port: Broker port number
        **kwargs: Additional TransportConfig options

    Returns:
        Configured AMQPTransport instance
    """
    config = create_transport_config(host=host, port=port, **kwargs)
    return AMQPTransport.from_config(config)


__all__.append('create_transport')

# Module-level configuration
import logging  # noqa: E402

# Set up default logging to reduce noise unless explicitly configured
logging.getLogger(__name__).addHandler(logging.NullHandler())
