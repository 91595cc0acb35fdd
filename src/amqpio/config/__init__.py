"""
AMQP Transport Configuration Management

This module provides centralized configuration for the transport layer,
including default values, validation, and environment-based configuration.
"""

from .defaults import (
    AMQP_PROTOCOL_DEFAULTS,
    DEFAULT_LOGGING_CONFIG,
    DEFAULT_TRANSPORT_CONFIG,
    ENV_VAR_DEFAULTS,
)
from .settings import (
    AMQPSettings,
    LoggingConfig,
    TransportConfig,
    create_transport_config,
    create_transport_config_from_sources,
    load_config_from_env,
    load_config_from_file,
    merge_configurations,
)

__all__ = [
    'TransportConfig',
    'LoggingConfig',
    'AMQPSettings',
    'create_transport_config',
    'create_transport_config_from_sources',
    'load_config_from_env',
    'load_config_from_file',
    'merge_configurations',
    'DEFAULT_TRANSPORT_CONFIG',
    'DEFAULT_LOGGING_CONFIG',
    'ENV_VAR_DEFAULTS',
    'AMQP_PROTOCOL_DEFAULTS',
]
