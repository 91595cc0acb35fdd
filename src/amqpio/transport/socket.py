"""
Cooperative TCP Socket

This module wraps an asyncio stream pair in the small socket surface the
transport consumes: connect, send, recv, in-place TLS upgrade, close and a
connected status flag. Every operation that waits on the network suspends the
calling task rather than blocking the loop.
"""

import asyncio
import logging
import socket
import ssl
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_RECV_SIZE = 65536


class AsyncSocket:
    """
    Async TCP client socket.

    Failures surface as the native ``OSError`` (``TimeoutError`` when a bounded
    wait elapses) so callers can report the platform error code and message.
    A timeout of None waits indefinitely.
    """

    def __init__(
        self,
        keepalive: bool = False,
        tcp_nodelay: bool = True,
        recv_size: int = DEFAULT_RECV_SIZE,
    ):
        self.keepalive = keepalive
        self.tcp_nodelay = tcp_nodelay
        self.recv_size = recv_size

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._closed_writer: Optional[asyncio.StreamWriter] = None
        self.connected = False

    @property
    def encrypted(self) -> bool:
        if self._writer is None:
            return False
        return self._writer.get_extra_info('ssl_object') is not None

    async def connect(
        self, host: str, port: int, timeout: Optional[float] = None
    ) -> None:
        """Open a TCP stream to host:port"""
        if self.connected:
            raise OSError('Socket is already connected')

        self._reader, self._writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout
        )
        self.connected = True
        self._apply_socket_options()

    def _apply_socket_options(self) -> None:
        raw = self._writer.get_extra_info('socket') if self._writer else None
        if raw is None:
            return
        try:
            if self.keepalive:
                raw.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            if self.tcp_nodelay and raw.family in (socket.AF_INET, socket.AF_INET6):
                raw.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError as e:
            logger.warning(f'Could not apply socket options: {e}')

    async def enable_encryption(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Upgrade the open stream to TLS in place"""
        if self._writer is None:
            raise OSError('Socket is not connected')

        await asyncio.wait_for(
            self._writer.start_tls(ssl_context, server_hostname=server_hostname),
            timeout=timeout,
        )

    async def send(self, data: bytes, timeout: Optional[float] = None) -> int:
        """
        Queue data and wait for the write buffer to drain.

        Returns the number of bytes accepted, or 0 when the stream is already
        closing (the connected flag is cleared in that case).
        """
        if self._writer is None or self._writer.is_closing():
            self.connected = False
            return 0

        self._writer.write(data)
        try:
            await asyncio.wait_for(self._writer.drain(), timeout=timeout)
        except ConnectionError:
            self.connected = False
            raise
        return len(data)

    async def recv(self, timeout: Optional[float] = None) -> bytes:
        """
        Receive up to recv_size bytes.

        Returns b'' at end of stream and clears the connected flag.
        """
        if self._reader is None:
            self.connected = False
            return b''

        try:
            data = await asyncio.wait_for(
                self._reader.read(self.recv_size), timeout=timeout
            )
        except ConnectionError:
            self.connected = False
            raise

        if not data:
            self.connected = False
        return data

    def close(self) -> None:
        """Close the stream; safe to call more than once"""
        if self._writer is not None:
            self._writer.close()
            self._closed_writer = self._writer
        self._writer = None
        self._reader = None
        self.connected = False

    async def wait_closed(self) -> None:
        writer, self._closed_writer = self._closed_writer, None
        if writer is None:
            return
        try:
            await writer.wait_closed()
        except (ConnectionError, ssl.SSLError) as e:
            logger.debug(f'Error while waiting for socket close: {e}')

    def __repr__(self) -> str:
        return f'AsyncSocket(connected={self.connected})'
