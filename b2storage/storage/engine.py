"""
Host-facing storage engine that keeps file data in a Backblaze B2 bucket.
"""
import logging
import secrets
import string
from typing import Any, Callable, Dict, Optional

from ..common.config import B2Config
from ..metrics import profiled_call
from .b2_client import B2Client
from .base import FileStorageEngine, ObjectStoreClient

logger = logging.getLogger(__name__)

_NAME_ALPHABET = string.ascii_lowercase + string.digits


def generate_file_name(prefix: str = "files", instance_name: str = "", seed_length: int = 20) -> str:
    """Generate a random object name such as `files/ab/cd/ef1234...`.

    The two short directory levels keep large buckets browsable with web and
    debugging tools.
    """
    seed = "".join(secrets.choice(_NAME_ALPHABET) for _ in range(seed_length))
    parts = [prefix] if prefix else []
    if instance_name:
        parts.append(instance_name)
    parts.extend([seed[0:2], seed[2:4], seed[4:]])
    return "/".join(parts)


class B2FileStorageEngine(FileStorageEngine):
    """Storage engine that keeps file data in a B2 bucket."""

    # Just below S3, which the host treats as the preferred remote engine
    engine_identifier = "backblaze-b2"
    engine_priority = 99

    def __init__(
        self,
        config: B2Config,
        client_factory: Optional[Callable[[B2Config], ObjectStoreClient]] = None,
    ):
        self.config = config
        self._client_factory = client_factory or B2Client

    def can_write_files(self) -> bool:
        return self.config.is_complete

    def write_file(self, data: bytes, params: Optional[Dict[str, Any]] = None) -> str:
        client = self._new_client()
        name = generate_file_name(self.config.name_prefix, self.config.instance_name)

        with profiled_call("b2", "uploadFile"):
            file_id = client.upload_file(name, data)

        logger.debug(f"[engine] Wrote {len(data)} bytes to {name}")
        return file_id

    def read_file(self, handle: str) -> bytes:
        client = self._new_client()
        with profiled_call("b2", "downloadFile"):
            return client.download_file(handle)

    def delete_file(self, handle: str) -> None:
        client = self._new_client()
        with profiled_call("b2", "deleteFileByName"):
            client.delete_file(handle)

    def _new_client(self) -> ObjectStoreClient:
        """Build a client, failing before any network call if settings are missing."""
        self.config.require_complete()
        return self._client_factory(self.config)
