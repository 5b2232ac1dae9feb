"""
Common utilities and abstractions shared across the package.
"""
from .config import B2Config, ConfigOption, CONFIG_OPTIONS, DEFAULT_AUTH_URL, get_config
from .exceptions import (
    ServiceError,
    ConfigurationError,
    StorageError,
    TransportError,
    ObjectNotFoundError,
    ProtocolError,
)
from .logging import setup_logging
from .resource_pools import calculate_pool_size

__all__ = [
    # Config
    'B2Config', 'ConfigOption', 'CONFIG_OPTIONS', 'DEFAULT_AUTH_URL', 'get_config',
    # Exceptions
    'ServiceError', 'ConfigurationError', 'StorageError', 'TransportError',
    'ObjectNotFoundError', 'ProtocolError',
    # Logging
    'setup_logging',
    # Resource pools
    'calculate_pool_size',
]
