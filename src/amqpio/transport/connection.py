"""
AMQP Transport Connection

This module provides the byte transport under an AMQP 0-9-1 client: it owns a
single cooperative TCP socket, hands exact-length reads and whole writes to the
protocol layer, and enforces the heartbeat keep-alive contract.

Every read, and every explicit poll through ``check_heartbeat``/``select``,
first runs the heartbeat monitor. As a side effect of that call the transport
may write a heartbeat frame or tear down and re-open the socket. A reconnect
drops any buffered bytes; the protocol layer above must treat it as a broken
session and negotiate again.

An AMQPTransport is not internally synchronized. Use it from one task at a
time and multiplex channels above it.
"""

import asyncio
import contextlib
import errno
import logging
import ssl
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..exceptions import (
    AMQPConnectionException,
    AMQPConnectionLostException,
    AMQPReceiveException,
    AMQPSendException,
    AMQPValidationException,
)
from ..protocol.codec import HEARTBEAT_FRAME
from ..utils import wait_timeout
from .buffer import ReadBuffer
from .heartbeat import HeartbeatAction, HeartbeatMonitor
from .socket import DEFAULT_RECV_SIZE, AsyncSocket

if TYPE_CHECKING:
    from ..config import TransportConfig

logger = logging.getLogger(__name__)


class TransportState(Enum):
    """Transport connection states"""

    DISCONNECTED = 'DISCONNECTED'
    CONNECTED = 'CONNECTED'


def _describe_error(
    error: BaseException, timeout: Optional[float]
) -> Tuple[Optional[int], str]:
    """Extract the native error code and message from a socket failure"""
    if isinstance(error, asyncio.TimeoutError):
        return errno.ETIMEDOUT, f'Timed out after {timeout}s'
    code = getattr(error, 'errno', None)
    message = getattr(error, 'strerror', None) or str(error) or type(error).__name__
    return code, message


class AMQPTransport:
    """
    Async AMQP byte transport

    Manages the TCP socket, the read buffer and the heartbeat monitor.
    Provides async methods for reading exact lengths and writing frames.
    """

    def __init__(
        self,
        host: str,
        port: int,
        connect_timeout: float = 0.0,
        read_timeout: float = 0.0,
        write_timeout: float = 0.0,
        keepalive: bool = False,
        heartbeat: float = 0,
        use_ssl: bool = False,
        ssl_context: Optional[ssl.SSLContext] = None,
        tcp_nodelay: bool = True,
        recv_size: int = DEFAULT_RECV_SIZE,
    ):
        """
        Initialize the transport. No socket is opened until connect().

        Args:
            host: Broker host address
            port: Broker port number
            connect_timeout: Timeout for connecting, 0 waits indefinitely
            read_timeout: Timeout for each socket receive, 0 waits indefinitely
            write_timeout: Timeout for each socket send, 0 waits indefinitely
            keepalive: Enable TCP keep-alive on the socket
            heartbeat: Heartbeat interval in seconds, 0 disables monitoring
            use_ssl: Upgrade the connection to TLS right after connecting
            ssl_context: Context for the TLS upgrade (default context if None)
            tcp_nodelay: Disable Nagle's algorithm on the socket
            recv_size: Maximum bytes requested from a single socket receive
        """
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.keepalive = keepalive
        self.use_ssl = use_ssl
        self.tcp_nodelay = tcp_nodelay
        self.recv_size = recv_size
        self._ssl_context = ssl_context

        self._socket: Optional[AsyncSocket] = None
        self._buffer = ReadBuffer()
        self._monitor = HeartbeatMonitor(heartbeat)
        self._state = TransportState.DISCONNECTED
        self._last_read_at: Optional[float] = None
        self._last_write_at: Optional[float] = None

        self.on_state_changed: Optional[
            Callable[[TransportState, TransportState], None]
        ] = None

    @classmethod
    def from_config(
        cls, config: 'TransportConfig', ssl_context: Optional[ssl.SSLContext] = None
    ) -> 'AMQPTransport':
        """Create a transport from a validated TransportConfig"""
        config.validate()
        return cls(
            host=config.host,
            port=config.port,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            write_timeout=config.write_timeout,
            keepalive=config.keepalive,
            heartbeat=config.heartbeat,
            use_ssl=config.use_ssl,
            ssl_context=ssl_context,
            tcp_nodelay=config.tcp_nodelay,
            recv_size=config.recv_size,
        )

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    @property
    def socket(self) -> Optional[AsyncSocket]:
        return self._socket

    @property
    def last_read_at(self) -> Optional[float]:
        return self._last_read_at

    @property
    def last_write_at(self) -> Optional[float]:
        return self._last_write_at

    @property
    def heartbeat(self) -> float:
        """Heartbeat interval currently in force (0 when disabled)"""
        return self._monitor.interval

    @property
    def initial_heartbeat(self) -> float:
        return self._monitor.initial_interval

    @property
    def buffered(self) -> int:
        """Number of received bytes not yet read"""
        return len(self._buffer)

    def _set_state(self, new_state: TransportState) -> None:
        """Set transport state and trigger state change event"""
        old_state = self._state
        if old_state != new_state:
            self._state = new_state
            logger.debug(
                f'Transport state changed: {old_state.value} -> {new_state.value}'
            )
            if self.on_state_changed:
                try:
                    self.on_state_changed(old_state, new_state)
                except Exception as e:
                    logger.exception(f'Error in state change handler: {e}')

    def _require_socket(self, operation: str) -> AsyncSocket:
        if self._socket is None:
            raise AMQPConnectionException(
                f'Cannot {operation}: not connected', host=self.host, port=self.port
            )
        return self._socket

    async def connect(self) -> None:
        """
        Open the TCP socket, upgrading it to TLS when enabled.

        Re-arms heartbeat monitoring with the configured interval.

        Raises:
            AMQPConnectionException: If already connected, or if the connect
                or the TLS upgrade fails
        """
        if self._socket is not None:
            raise AMQPConnectionException(
                'Already connected', host=self.host, port=self.port
            )

        sock = AsyncSocket(
            keepalive=self.keepalive,
            tcp_nodelay=self.tcp_nodelay,
            recv_size=self.recv_size,
        )
        timeout = wait_timeout(self.connect_timeout)

        logger.info(f'Connecting to {self.host}:{self.port}')
        try:
            await sock.connect(self.host, self.port, timeout=timeout)
        except (asyncio.TimeoutError, OSError) as e:
            code, message = _describe_error(e, timeout)
            raise AMQPConnectionException(
                f'Error Connecting to server({code}): {message}',
                host=self.host,
                port=self.port,
                errno=code,
                original_error=e,
            ) from e

        if self.use_ssl:
            context = self._ssl_context or ssl.create_default_context()
            try:
                await sock.enable_encryption(
                    context, server_hostname=self.host, timeout=timeout
                )
            except (asyncio.TimeoutError, OSError) as e:
                sock.close()
                code, message = _describe_error(e, timeout)
                raise AMQPConnectionException(
                    f'TLS upgrade failed({code}): {message}',
                    host=self.host,
                    port=self.port,
                    errno=code,
                    original_error=e,
                ) from e

        self._socket = sock
        self._buffer.clear()
        self._monitor.reenable()
        self._set_state(TransportState.CONNECTED)
        logger.info(
            f'Connected to {self.host}:{self.port}'
            + (' (TLS)' if self.use_ssl else '')
        )

    async def reconnect(self) -> None:
        """Close the socket and open a new one; unread bytes are discarded"""
        logger.warning(
            f'Reconnecting to {self.host}:{self.port}, '
            f'dropping {len(self._buffer)} buffered bytes'
        )
        self.close()
        await self.connect()

    async def read(self, n: int) -> bytes:
        """
        Read exactly n bytes.

        Runs the heartbeat check first, which may send a heartbeat frame or
        reconnect. Then serves from the read buffer, receiving from the socket
        until enough bytes are buffered. Surplus bytes stay buffered for the
        next call.

        Args:
            n: Number of bytes to return

        Returns:
            The next n bytes of the stream

        Raises:
            AMQPConnectionLostException: If the peer closed the connection
            AMQPReceiveException: If a socket receive fails or times out
            AMQPConnectionException: If not connected, or a heartbeat-driven
                reconnect fails
        """
        if n < 0:
            raise AMQPValidationException(
                f'Invalid read length: {n}',
                field_name='n',
                field_value=str(n),
                validation_rule='non_negative',
            )

        await self.check_heartbeat()
        self._require_socket('read')
        timeout = wait_timeout(self.read_timeout)

        while True:
            if n <= len(self._buffer):
                data = self._buffer.consume(n)
                self._last_read_at = time.time()
                return data

            if not self._socket.connected:
                raise AMQPConnectionLostException(host=self.host, port=self.port)

            try:
                chunk = await self._socket.recv(timeout=timeout)
            except (asyncio.TimeoutError, OSError) as e:
                code, message = _describe_error(e, timeout)
                raise AMQPReceiveException(
                    f'Error receiving data, errno={code}',
                    errno=code,
                    errmsg=message,
                    original_error=e,
                ) from e

            if not chunk:
                continue

            self._buffer.append(chunk)

    async def write(self, data: bytes) -> None:
        """
        Write all of data to the socket.

        Raises:
            AMQPConnectionLostException: If the socket accepted nothing because
                the peer is gone
            AMQPSendException: If a socket send fails or times out
            AMQPConnectionException: If not connected
        """
        sock = self._require_socket('write')
        timeout = wait_timeout(self.write_timeout)
        data = bytes(data)
        offset = 0

        while offset < len(data):
            try:
                sent = await sock.send(data[offset:], timeout=timeout)
            except (asyncio.TimeoutError, OSError) as e:
                code, message = _describe_error(e, timeout)
                raise AMQPSendException(
                    f'Error sending data: {message}',
                    errno=code,
                    errmsg=message,
                    original_error=e,
                ) from e

            if sent == 0:
                if not sock.connected:
                    raise AMQPConnectionLostException(host=self.host, port=self.port)
                raise AMQPSendException('Error sending data: socket accepted 0 bytes')

            offset += sent

        self._last_write_at = time.time()

    async def write_heartbeat(self) -> None:
        """Send a heartbeat frame"""
        logger.debug('Sending heartbeat')
        await self.write(HEARTBEAT_FRAME)

    async def check_heartbeat(self) -> None:
        """
        Enforce the heartbeat contract without reading.

        Reconnects when nothing has been read for more than twice the interval;
        otherwise sends a heartbeat when nothing has been written for more than
        half the interval. No-op while monitoring is disabled or before both a
        read and a write have happened.
        """
        action = self._monitor.evaluate(self._last_read_at, self._last_write_at)

        if action is HeartbeatAction.RECONNECT:
            logger.warning(
                f'No data from {self.host}:{self.port} within '
                f'{self._monitor.interval * 2}s, presuming the peer is gone'
            )
            await self.reconnect()
        elif action is HeartbeatAction.SEND_HEARTBEAT:
            await self.write_heartbeat()

    async def select(self, timeout: Optional[float] = None) -> int:
        """
        Poll for liveness while waiting on the peer.

        Runs the heartbeat check and always reports the transport as ready; the
        caller's next read suspends cooperatively until data arrives. The timeout
        is accepted for interface compatibility with select-based transports.
        """
        await self.check_heartbeat()
        return 1

    def disable_heartbeat(self) -> 'AMQPTransport':
        """Suspend heartbeat monitoring, keeping the configured interval"""
        self._monitor.disable()
        return self

    def reenable_heartbeat(self) -> 'AMQPTransport':
        """Restore the configured heartbeat interval with fresh timestamps"""
        self._monitor.reenable()
        if self._socket is not None:
            now = time.time()
            self._last_read_at = now
            self._last_write_at = now
        return self

    def close(self) -> None:
        """Close the socket and forget timestamps; safe to call repeatedly"""
        self._monitor.disable()

        if self._socket is not None:
            logger.info(f'Closing connection to {self.host}:{self.port}')
            self._socket.close()

        self._socket = None
        self._buffer.clear()
        self._last_read_at = None
        self._last_write_at = None
        self._set_state(TransportState.DISCONNECTED)

    async def aclose(self) -> None:
        """Close and wait for the socket to finish closing"""
        sock = self._socket
        self.close()
        if sock is not None:
            await sock.wait_closed()

    def __del__(self):
        sock = getattr(self, '_socket', None)
        if sock is not None:
            # The loop may already be gone at interpreter shutdown
            with contextlib.suppress(RuntimeError):
                sock.close()

    def __repr__(self) -> str:
        return (
            f'AMQPTransport(host={self.host}, port={self.port}, '
            f'state={self._state.value}, heartbeat={self._monitor.interval})'
        )

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.aclose()
