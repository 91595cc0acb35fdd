"""
AMQP Transport Exception Classes

This module defines all exception classes raised by the AMQP transport layer.
"""

from enum import IntEnum
from typing import Any, Dict, Optional, Union


class AMQPErrorCode(IntEnum):
    """Transport error codes for better error categorization."""

    UNKNOWN = 0
    CONNECTION_FAILED = 1000
    CONNECTION_LOST = 1001
    RECEIVE_FAILED = 1002
    SEND_FAILED = 1003
    INVALID_FRAME = 1004
    VALIDATION_ERROR = 1005
    CONFIGURATION_ERROR = 1006


class AMQPException(Exception):
    """Base exception for all AMQP transport errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[Union[str, AMQPErrorCode]] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.original_error = original_error
        self.details = kwargs

    def __str__(self) -> str:
        """Enhanced string representation with context."""
        parts = [super().__str__()]

        if self.error_code:
            if isinstance(self.error_code, AMQPErrorCode):
                parts.append(
                    f'Error Code: {self.error_code.name} ({self.error_code.value})'
                )
            else:
                parts.append(f'Error Code: {self.error_code}')

        if self.context:
            context_str = ', '.join(f'{k}={v}' for k, v in self.context.items())
            parts.append(f'Context: {context_str}')

        return ' | '.join(parts)


class AMQPConnectionException(AMQPException):
    """Raised when a connection or TLS upgrade cannot be established."""

    def __init__(
        self,
        message: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
        errno: Optional[int] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        context = {}
        if host:
            context['host'] = host
        if port:
            context['port'] = str(port)
        if errno is not None:
            context['errno'] = str(errno)

        if 'error_code' not in kwargs:
            kwargs['error_code'] = AMQPErrorCode.CONNECTION_FAILED

        super().__init__(
            message,
            context=context,
            original_error=original_error,
            **kwargs,
        )
        self.host = host
        self.port = port
        self.errno = errno


class AMQPConnectionLostException(AMQPConnectionException):
    """Raised when the peer has gone away during a read or write."""

    def __init__(
        self,
        message: str = 'Broken pipe or closed connection',
        host: Optional[str] = None,
        port: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(
            message,
            host=host,
            port=port,
            error_code=AMQPErrorCode.CONNECTION_LOST,
            **kwargs,
        )


class _SocketOperationException(AMQPException):
    """Shared shape of receive and send failures."""

    default_error_code = AMQPErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        errmsg: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        context = {}
        if errno is not None:
            context['errno'] = str(errno)
        if errmsg:
            context['errmsg'] = errmsg

        super().__init__(
            message,
            error_code=self.default_error_code,
            context=context,
            original_error=original_error,
            **kwargs,
        )
        self.errno = errno
        self.errmsg = errmsg


class AMQPReceiveException(_SocketOperationException):
    """Raised when the underlying socket fails to receive data."""

    default_error_code = AMQPErrorCode.RECEIVE_FAILED


class AMQPSendException(_SocketOperationException):
    """Raised when the underlying socket fails to send data."""

    default_error_code = AMQPErrorCode.SEND_FAILED


class AMQPFrameException(AMQPException):
    """Exception raised for frame encoding errors."""

    def __init__(
        self,
        message: str,
        frame_type: Optional[int] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        context = {}
        if frame_type is not None:
            context['frame_type'] = str(frame_type)

        super().__init__(
            message,
            error_code=AMQPErrorCode.INVALID_FRAME,
            context=context,
            original_error=original_error,
            **kwargs,
        )
        self.frame_type = frame_type


class AMQPValidationException(AMQPException):
    """Exception raised for validation errors."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[str] = None,
        validation_rule: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        context = {}
        if field_name:
            context['field_name'] = field_name
        if field_value:
            context['field_value'] = field_value
        if validation_rule:
            context['validation_rule'] = validation_rule

        super().__init__(
            message,
            error_code=AMQPErrorCode.VALIDATION_ERROR,
            context=context,
            original_error=original_error,
            **kwargs,
        )
        self.field_name = field_name
        self.field_value = field_value
        self.validation_rule = validation_rule


class AMQPConfigurationException(AMQPException):
    """Exception raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        context = {}
        if config_key:
            context['config_key'] = config_key
        if config_value:
            context['config_value'] = config_value

        super().__init__(
            message,
            error_code=AMQPErrorCode.CONFIGURATION_ERROR,
            context=context,
            original_error=original_error,
            **kwargs,
        )
        self.config_key = config_key
        self.config_value = config_value
