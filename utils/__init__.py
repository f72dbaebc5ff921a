"""
Utils Module
Logging and error taxonomy shared across the gateway
"""
from .logger import configure_logging, setup_logger
from .exceptions import (
    ConfigurationError,
    ContentGatewayError,
    ErrorCode,
    GatewayError,
)

__all__ = [
    "configure_logging",
    "setup_logger",
    "ConfigurationError",
    "ContentGatewayError",
    "ErrorCode",
    "GatewayError",
]
