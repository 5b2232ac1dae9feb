"""
Backblaze B2 object-store client and pluggable storage engine.
"""
from .common import (
    B2Config,
    ConfigurationError,
    ObjectNotFoundError,
    ProtocolError,
    ServiceError,
    StorageError,
    TransportError,
)
from .storage import B2Client, B2FileStorageEngine

__version__ = "0.1.0"

__all__ = [
    'B2Config', 'B2Client', 'B2FileStorageEngine',
    'ServiceError', 'ConfigurationError', 'StorageError', 'TransportError',
    'ObjectNotFoundError', 'ProtocolError',
]
