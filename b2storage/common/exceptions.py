"""
Standardized exception hierarchy for the B2 storage client and engine.
"""
from typing import Optional


class ServiceError(Exception):
    """Base exception for service-related errors."""
    def __init__(self, message: str, service: str = None, error_code: str = None):
        super().__init__(message)
        self.service = service
        self.error_code = error_code
        self.message = message


class ConfigurationError(ServiceError):
    """Configuration-related error."""
    def __init__(self, message: str, config_key: str = None):
        super().__init__(message, error_code="CONFIG_ERROR")
        self.config_key = config_key


class StorageError(ServiceError):
    """Storage (B2) related error."""
    def __init__(self, message: str, operation: str = None, error_code: str = "STORAGE_ERROR"):
        super().__init__(message, service="storage", error_code=error_code)
        self.operation = operation


class TransportError(StorageError):
    """The HTTP call could not be completed (network failure, timeout, bad status)."""
    def __init__(self, message: str, operation: str = None, status_code: Optional[int] = None):
        super().__init__(message, operation=operation, error_code="TRANSPORT_ERROR")
        self.status_code = status_code


class ObjectNotFoundError(TransportError):
    """The requested file does not exist on the remote store."""
    def __init__(self, message: str, operation: str = None):
        super().__init__(message, operation=operation, status_code=404)


class ProtocolError(StorageError):
    """Response was not valid JSON, was missing a field, or echoed a wrong value."""
    def __init__(self, message: str, operation: str = None, field: str = None):
        super().__init__(message, operation=operation, error_code="PROTOCOL_ERROR")
        self.field = field
