"""
AMQP Transport Utilities Module

This module provides small helper functions shared by the transport layer,
including timeout normalisation, second rounding and logging setup.
"""

import logging
import math
from typing import TYPE_CHECKING, Optional

from .exceptions import AMQPConfigurationException

if TYPE_CHECKING:
    from .config import LoggingConfig


def wait_timeout(timeout: Optional[float]) -> Optional[float]:
    """Map a configured timeout to an asyncio wait timeout (0 means forever)."""
    if not timeout:
        return None
    return float(timeout)


def round_seconds(value: float) -> int:
    """Round to whole seconds, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def setup_logging(config: Optional['LoggingConfig'] = None) -> None:
    """Set up logging for the amqpio package from a LoggingConfig."""
    if config is None:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )
        return

    config.validate()

    handlers: list = []
    if config.enable_console:
        handlers.append(logging.StreamHandler())
    if config.log_file:
        try:
            handlers.append(logging.FileHandler(config.log_file, encoding='utf-8'))
        except OSError as e:
            raise AMQPConfigurationException(
                f'Cannot open log file: {e}',
                config_key='log_file',
                config_value=config.log_file,
                original_error=e,
            ) from e

    formatter = logging.Formatter(config.format)
    package_logger = logging.getLogger('amqpio')
    package_logger.setLevel(config.level.upper())
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)


__all__ = [
    'wait_timeout',
    'round_seconds',
    'setup_logging',
]
