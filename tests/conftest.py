"""
Shared test fixtures and configuration for amqpio unit tests.
"""

from unittest.mock import MagicMock

import pytest

from amqpio.transport.connection import AMQPTransport, TransportState
from amqpio.transport.socket import AsyncSocket


@pytest.fixture
def mock_socket():
    """Mock AsyncSocket that accepts every send and is connected"""
    sock = MagicMock(spec=AsyncSocket)
    sock.connected = True
    sock.recv.return_value = b''
    sock.send.side_effect = lambda data, timeout=None: len(data)
    return sock


@pytest.fixture
def transport():
    """Disconnected transport with a 10 second heartbeat"""
    return AMQPTransport(
        'localhost', 5672, read_timeout=5.0, write_timeout=5.0, heartbeat=10
    )


@pytest.fixture
def connected_transport(transport, mock_socket):
    """Transport wired to the mock socket without opening a connection"""
    transport._socket = mock_socket
    transport._set_state(TransportState.CONNECTED)
    return transport


@pytest.fixture
def sample_host_port():
    """Sample host and port for testing."""
    return {'host': 'localhost', 'port': 5672}
