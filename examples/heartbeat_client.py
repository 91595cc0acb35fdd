#!/usr/bin/env python3
"""
AMQP Transport Example

This example opens a transport to a broker, sends the AMQP 0-9-1 protocol
header and reads the first frame header the broker answers with. While idle it
polls the heartbeat monitor so the connection stays alive.

Configuration is taken from AMQP_* environment variables, for example:

    AMQP_HOST=localhost AMQP_PORT=5672 AMQP_HEARTBEAT=10 python heartbeat_client.py
"""

import asyncio
import logging
import os
import struct
import sys

# Add parent directory to path for imports
sys.path.insert(
    0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
)

from amqpio import (  # noqa: E402
    AMQPException,
    AMQPTransport,
    FrameType,
    create_transport_config_from_sources,
)

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s',
    datefmt='%H:%M:%S',
)
logger = logging.getLogger(__name__)

PROTOCOL_HEADER = b'AMQP\x00\x00\x09\x01'


async def main() -> int:
    config = create_transport_config_from_sources()
    transport = AMQPTransport.from_config(config)

    try:
        async with transport:
            await transport.write(PROTOCOL_HEADER)

            frame_type, channel, size = struct.unpack('>BHI', await transport.read(7))
            payload = await transport.read(size)
            await transport.read(1)  # frame end
            logger.info(
                f'Broker answered with {FrameType(frame_type).name} frame on '
                f'channel {channel} ({len(payload)} bytes)'
            )

            for _ in range(3):
                await asyncio.sleep(config.heartbeat or 1)
                await transport.select()
    except AMQPException as e:
        logger.error(f'Transport error: {e}')
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
