"""
Integration tests for AMQPTransport against a loopback TCP server

These tests run the transport over real sockets to verify exact-length
reads, peer close detection, heartbeat emission and reconnects.
"""

import asyncio
import time

import pytest

from amqpio.exceptions import AMQPConnectionException, AMQPConnectionLostException
from amqpio.protocol.codec import HEARTBEAT_FRAME
from amqpio.transport import AMQPTransport, TransportState


class LoopbackBroker:
    """Minimal TCP peer that records what it receives"""

    def __init__(self, on_connect=None):
        self.on_connect = on_connect
        self.connections = 0
        self.received = bytearray()
        self.data_event = asyncio.Event()
        self._server = None
        self._writers = []

    async def start(self) -> int:
        self._server = await asyncio.start_server(self._handle, '127.0.0.1', 0)
        return self._server.sockets[0].getsockname()[1]

    async def _handle(self, reader, writer):
        self.connections += 1
        self._writers.append(writer)
        if self.on_connect:
            await self.on_connect(writer)
        while True:
            data = await reader.read(1024)
            if not data:
                break
            self.received += data
            self.data_event.set()
        writer.close()

    async def wait_for_data(self, size: int, timeout: float = 2.0) -> None:
        deadline = time.monotonic() + timeout
        while len(self.received) < size:
            self.data_event.clear()
            await asyncio.wait_for(self.data_event.wait(), deadline - time.monotonic())

    async def stop(self):
        for writer in self._writers:
            writer.close()
        self._server.close()
        await self._server.wait_closed()


@pytest.mark.integration
class TestTransportIntegration:
    @pytest.mark.asyncio
    async def test_exact_reads_across_chunks(self):
        async def send_in_pieces(writer):
            writer.write(b'\x01\x00\x00')
            await writer.drain()
            await asyncio.sleep(0.05)
            writer.write(b'\x00\x00\x00\x04abcd\xce')
            await writer.drain()

        broker = LoopbackBroker(on_connect=send_in_pieces)
        port = await broker.start()
        transport = AMQPTransport('127.0.0.1', port, read_timeout=2.0)

        try:
            await transport.connect()
            assert await transport.read(7) == b'\x01\x00\x00\x00\x00\x00\x04'
            assert await transport.read(4) == b'abcd'
            assert await transport.read(1) == b'\xce'
            assert transport.buffered == 0
            assert transport.last_read_at is not None
        finally:
            await transport.aclose()
            await broker.stop()

    @pytest.mark.asyncio
    async def test_write_reaches_peer(self):
        broker = LoopbackBroker()
        port = await broker.start()
        transport = AMQPTransport('127.0.0.1', port, write_timeout=2.0)

        try:
            await transport.connect()
            await transport.write(b'AMQP\x00\x00\x09\x01')
            await broker.wait_for_data(8)

            assert bytes(broker.received) == b'AMQP\x00\x00\x09\x01'
            assert transport.last_write_at is not None
        finally:
            await transport.aclose()
            await broker.stop()

    @pytest.mark.asyncio
    async def test_peer_close_raises_connection_lost(self):
        async def close_immediately(writer):
            writer.write(b'\x08')
            await writer.drain()
            writer.close()

        broker = LoopbackBroker(on_connect=close_immediately)
        port = await broker.start()
        transport = AMQPTransport('127.0.0.1', port, read_timeout=2.0)

        try:
            await transport.connect()
            with pytest.raises(AMQPConnectionLostException):
                await transport.read(8)
            # The partial byte stays buffered for inspection
            assert transport.buffered == 1
        finally:
            await transport.aclose()
            await broker.stop()

    @pytest.mark.asyncio
    async def test_stale_writes_emit_heartbeat(self):
        broker = LoopbackBroker()
        port = await broker.start()
        transport = AMQPTransport('127.0.0.1', port, heartbeat=2)

        try:
            await transport.connect()
            now = time.time()
            transport._last_read_at = now
            transport._last_write_at = now - 5

            assert await transport.select() == 1
            await broker.wait_for_data(len(HEARTBEAT_FRAME))

            assert bytes(broker.received) == HEARTBEAT_FRAME
            assert transport.last_write_at >= now
        finally:
            await transport.aclose()
            await broker.stop()

    @pytest.mark.asyncio
    async def test_stale_reads_trigger_reconnect(self):
        broker = LoopbackBroker()
        port = await broker.start()
        transport = AMQPTransport('127.0.0.1', port, heartbeat=2)

        try:
            await transport.connect()
            first_socket = transport.socket
            now = time.time()
            transport._last_read_at = now - 10
            transport._last_write_at = now

            await transport.check_heartbeat()
            for _ in range(50):
                if broker.connections == 2:
                    break
                await asyncio.sleep(0.01)

            assert broker.connections == 2
            assert transport.state == TransportState.CONNECTED
            assert transport.socket is not first_socket
            assert transport.heartbeat == 2
            assert broker.received == b''
        finally:
            await transport.aclose()
            await broker.stop()

    @pytest.mark.asyncio
    async def test_connect_refused(self):
        broker = LoopbackBroker()
        port = await broker.start()
        await broker.stop()

        transport = AMQPTransport('127.0.0.1', port, connect_timeout=1.0)

        with pytest.raises(AMQPConnectionException, match='Error Connecting'):
            await transport.connect()
        assert transport.state == TransportState.DISCONNECTED
