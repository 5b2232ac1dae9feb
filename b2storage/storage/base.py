"""
Abstract base classes for object-store clients and host storage engines.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ObjectStoreClient(ABC):
    """Abstract object-store client interface."""

    @abstractmethod
    def upload_file(self, name: str, data: bytes, timeout: Optional[float] = None) -> str:
        """Upload data under `name` and return the remote file ID."""
        pass

    @abstractmethod
    def download_file(self, file_id: str, timeout: Optional[float] = None) -> bytes:
        """Return the raw contents of a stored file."""
        pass

    @abstractmethod
    def delete_file(self, file_id: str, timeout: Optional[float] = None) -> None:
        """Delete a stored file."""
        pass


class FileStorageEngine(ABC):
    """Pluggable storage backend as seen by the host application.

    The host orders candidate engines by `engine_priority` (higher first) and
    only writes through engines whose `can_write_files()` returns True.
    """

    engine_identifier: str = ""
    engine_priority: int = 0

    @abstractmethod
    def can_write_files(self) -> bool:
        """Whether the engine is configured well enough to accept writes."""
        pass

    @abstractmethod
    def write_file(self, data: bytes, params: Optional[Dict[str, Any]] = None) -> str:
        """Store data and return an opaque handle."""
        pass

    @abstractmethod
    def read_file(self, handle: str) -> bytes:
        """Load data previously stored under `handle`."""
        pass

    @abstractmethod
    def delete_file(self, handle: str) -> None:
        """Remove data previously stored under `handle`."""
        pass
