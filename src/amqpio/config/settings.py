"""
AMQP Transport Configuration Settings

This module defines configuration classes and factory functions for the
transport layer, providing type-safe and validated configuration management.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import AMQPValidationException
from ..protocol.constants import DEFAULT_PORT

logger = logging.getLogger(__name__)


@dataclass
class TransportConfig:
    """Transport-related configuration settings"""

    host: str = 'localhost'
    port: int = DEFAULT_PORT

    # 0 means wait indefinitely
    connect_timeout: float = 3.0
    read_timeout: float = 130.0
    write_timeout: float = 130.0

    keepalive: bool = False
    tcp_nodelay: bool = True
    heartbeat: int = 60
    use_ssl: bool = False
    recv_size: int = 65536

    def validate(self) -> None:
        """Validate transport configuration"""
        if not self.host:
            raise AMQPValidationException(
                'host cannot be empty', field_name='host', validation_rule='non_empty'
            )
        if not (1 <= self.port <= 65535):
            raise AMQPValidationException(
                f'Invalid port: {self.port} (must be 1-65535)',
                field_name='port',
                field_value=str(self.port),
                validation_rule='port_range',
            )
        for name in ('connect_timeout', 'read_timeout', 'write_timeout'):
            value = getattr(self, name)
            if value < 0:
                raise AMQPValidationException(
                    f'{name} must be non-negative',
                    field_name=name,
                    field_value=str(value),
                    validation_rule='non_negative',
                )
        if self.heartbeat < 0:
            raise AMQPValidationException(
                'heartbeat must be non-negative',
                field_name='heartbeat',
                field_value=str(self.heartbeat),
                validation_rule='non_negative',
            )
        if self.recv_size <= 0:
            raise AMQPValidationException(
                'recv_size must be positive',
                field_name='recv_size',
                field_value=str(self.recv_size),
                validation_rule='positive_number',
            )

        # Reads would time out before the monitor declares the peer dead
        if (
            self.heartbeat
            and self.read_timeout
            and self.read_timeout < self.heartbeat * 2
        ):
            logger.warning(
                f'read_timeout ({self.read_timeout}s) is less than twice the '
                f'heartbeat ({self.heartbeat}s)'
            )


@dataclass
class LoggingConfig:
    """Logging configuration settings"""

    level: str = 'INFO'
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    log_file: Optional[str] = None
    enable_console: bool = True

    def validate(self) -> None:
        """Validate logging configuration"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.level.upper() not in valid_levels:
            raise AMQPValidationException(f'Invalid log level: {self.level}')


@dataclass
class AMQPSettings:
    """Transport and logging settings loaded together"""

    transport: TransportConfig = field(default_factory=TransportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.transport.validate()
        self.logging.validate()


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


def create_transport_config(**kwargs) -> TransportConfig:
    """
    Create a validated transport configuration.

    Args:
        **kwargs: Configuration parameters

    Returns:
        Validated TransportConfig instance

    Raises:
        AMQPValidationException: If configuration is invalid
    """
    known = {f.name for f in fields(TransportConfig)}
    unknown = set(kwargs) - known
    if unknown:
        raise AMQPValidationException(
            f'Unknown transport options: {", ".join(sorted(unknown))}',
            field_name='config_data',
            validation_rule='known_fields',
        )

    config = TransportConfig(**kwargs)
    config.validate()
    return config


def load_config_from_env(prefix: str = 'AMQP_') -> Dict[str, Any]:
    """
    Load transport configuration from environment variables.

    Args:
        prefix: Environment variable prefix

    Returns:
        Dictionary of configuration values
    """
    config: Dict[str, Any] = {}

    env_mappings = {
        f'{prefix}HOST': 'host',
        f'{prefix}PORT': ('port', int),
        f'{prefix}CONNECT_TIMEOUT': ('connect_timeout', float),
        f'{prefix}READ_TIMEOUT': ('read_timeout', float),
        f'{prefix}WRITE_TIMEOUT': ('write_timeout', float),
        f'{prefix}KEEPALIVE': ('keepalive', _parse_bool),
        f'{prefix}TCP_NODELAY': ('tcp_nodelay', _parse_bool),
        f'{prefix}HEARTBEAT': ('heartbeat', int),
        f'{prefix}SSL': ('use_ssl', _parse_bool),
        f'{prefix}RECV_SIZE': ('recv_size', int),
    }

    for env_var, mapping in env_mappings.items():
        value = os.getenv(env_var)
        if value is None:
            continue
        if isinstance(mapping, tuple):
            key, converter = mapping
            try:
                config[key] = converter(value)
            except (ValueError, TypeError) as e:
                raise AMQPValidationException(
                    f'Invalid value for {env_var}: {e}',
                    field_name=key,
                    field_value=value,
                    validation_rule='env_type_conversion',
                    original_error=e,
                ) from e
        else:
            config[mapping] = value

    return config


def load_config_from_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        file_path: Path to configuration file

    Returns:
        Dictionary of configuration values

    Raises:
        AMQPValidationException: If file cannot be read or parsed
    """
    path = Path(file_path)
    if not path.exists():
        raise AMQPValidationException(
            f'Configuration file not found: {file_path}',
            field_name='config_file',
            field_value=str(file_path),
            validation_rule='file_exists',
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise AMQPValidationException(
            f'Invalid JSON in configuration file: {e}',
            field_name='config_file',
            field_value=str(file_path),
            validation_rule='valid_json',
            original_error=e,
        ) from e
    except OSError as e:
        raise AMQPValidationException(
            f'Error reading configuration file: {e}',
            field_name='config_file',
            field_value=str(file_path),
            validation_rule='file_readable',
            original_error=e,
        ) from e

    if not isinstance(config, dict):
        raise AMQPValidationException('Configuration file must contain a JSON object')

    return config


def merge_configurations(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge multiple configuration dictionaries.
    Later configurations override earlier ones.
    """
    result: Dict[str, Any] = {}

    for config in configs:
        if not isinstance(config, dict):
            continue

        for key, value in config.items():
            if (
                isinstance(value, dict)
                and key in result
                and isinstance(result[key], dict)
            ):
                result[key] = merge_configurations(result[key], value)
            else:
                result[key] = value

    return result


def create_transport_config_from_sources(
    file_path: Optional[Union[str, Path]] = None,
    env_prefix: str = 'AMQP_',
    **overrides,
) -> TransportConfig:
    """
    Create transport configuration from multiple sources.

    Priority order (highest to lowest):
    1. Keyword overrides
    2. Environment variables
    3. Configuration file
    4. Defaults

    Args:
        file_path: Optional configuration file path
        env_prefix: Environment variable prefix
        **overrides: Direct configuration overrides

    Returns:
        Validated TransportConfig instance
    """
    configs = []

    if file_path:
        configs.append(load_config_from_file(file_path))

    configs.append(load_config_from_env(env_prefix))

    if overrides:
        configs.append(overrides)

    return create_transport_config(**merge_configurations(*configs))
