"""
AMQP Transport Configuration Defaults

This module provides default configuration values for the transport layer.
"""

from ..protocol.constants import DEFAULT_PORT, DEFAULT_TLS_PORT
from .settings import LoggingConfig, TransportConfig

DEFAULT_TRANSPORT_CONFIG = TransportConfig(
    host='localhost',
    port=DEFAULT_PORT,
    connect_timeout=3.0,
    read_timeout=130.0,
    write_timeout=130.0,
    keepalive=False,
    tcp_nodelay=True,
    heartbeat=60,
    use_ssl=False,
    recv_size=65536,
)

DEFAULT_LOGGING_CONFIG = LoggingConfig(
    level='INFO',
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    log_file=None,
    enable_console=True,
)

AMQP_PROTOCOL_DEFAULTS = {
    'DEFAULT_PORT': DEFAULT_PORT,
    'DEFAULT_TLS_PORT': DEFAULT_TLS_PORT,
    'FRAME_HEADER_SIZE': 7,
    'FRAME_END': 0xCE,
    'FRAME_MIN_SIZE': 4096,
    # Client sends at half the interval and gives up on the peer at twice it
    'HEARTBEAT_SEND_FACTOR': 0.5,
    'HEARTBEAT_DEAD_FACTOR': 2,
}

ENV_VAR_DEFAULTS = {
    'AMQP_HOST': 'localhost',
    'AMQP_PORT': str(DEFAULT_PORT),
    'AMQP_CONNECT_TIMEOUT': '3.0',
    'AMQP_READ_TIMEOUT': '130.0',
    'AMQP_WRITE_TIMEOUT': '130.0',
    'AMQP_KEEPALIVE': 'false',
    'AMQP_TCP_NODELAY': 'true',
    'AMQP_HEARTBEAT': '60',
    'AMQP_SSL': 'false',
    'AMQP_RECV_SIZE': '65536',
}
