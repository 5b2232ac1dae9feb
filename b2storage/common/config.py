"""
Centralized configuration for the B2 client and storage engine.
"""
import os
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URL = "https://api.backblazeb2.com/b2api/v1/b2_authorize_account"


@dataclass(frozen=True)
class ConfigOption:
    """A host-visible setting backing the storage engine."""
    key: str
    env_var: str
    field_name: str
    summary: str
    description: str
    locked: bool = True
    hidden: bool = True


CONFIG_OPTIONS: Tuple[ConfigOption, ...] = (
    ConfigOption(
        key="backblaze-b2.account-id",
        env_var="B2_ACCOUNT_ID",
        field_name="account_id",
        summary="Account ID for Backblaze B2 Storage.",
        description="Account ID for Backblaze B2 Storage.",
    ),
    ConfigOption(
        key="backblaze-b2.application-key",
        env_var="B2_APPLICATION_KEY",
        field_name="application_key",
        summary="Application key for B2 storage.",
        description="Application key for B2 storage.",
    ),
    ConfigOption(
        key="storage.b2.bucket-id",
        env_var="B2_BUCKET_ID",
        field_name="bucket_id",
        summary="Bucket id for file storage.",
        description=(
            "Set this to a valid B2 bucket ID to store files in. This ID must "
            "be the exact bucket ID corresponding to the bucket named in "
            "`storage.b2.bucket-name`."
        ),
    ),
    ConfigOption(
        key="storage.b2.bucket-name",
        env_var="B2_BUCKET_NAME",
        field_name="bucket_name",
        summary="Bucket name for file storage.",
        description="Set this to a valid B2 bucket name to store files in.",
    ),
)


def _parse_timeout(value, source: str) -> float:
    """Convert a configured timeout to a positive number of seconds."""
    try:
        if isinstance(value, bool):
            raise TypeError("boolean is not a timeout")
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid timeout {value!r} in {source}", config_key="timeout")
    if not timeout > 0:
        raise ConfigurationError(f"Timeout in {source} must be positive, got {value!r}", config_key="timeout")
    return timeout


@dataclass(frozen=True)
class B2Config:
    """Backblaze B2 credentials, bucket reference and transport settings."""
    account_id: str = ""
    application_key: str = field(default="", repr=False)
    bucket_id: str = ""
    bucket_name: str = ""
    auth_url: str = DEFAULT_AUTH_URL
    timeout: float = 30.0
    instance_name: str = ""
    name_prefix: str = "files"

    @property
    def is_complete(self) -> bool:
        """True when all four required settings are non-empty."""
        return not self.missing_keys()

    def missing_keys(self) -> List[str]:
        """Return the host keys of required settings that are empty."""
        return [
            option.key
            for option in CONFIG_OPTIONS
            if not getattr(self, option.field_name)
        ]

    def require_complete(self) -> None:
        """Raise ConfigurationError naming the first missing setting."""
        # Bucket settings are reported first, matching the engine's lookup order
        ordered = sorted(
            self.missing_keys(),
            key=lambda k: (not k.startswith("storage."), k),
        )
        if ordered:
            raise ConfigurationError(f"No '{ordered[0]}' specified!", config_key=ordered[0])

    @classmethod
    def from_env(cls, prefix: str = "B2") -> 'B2Config':
        """Load from environment variables with optional prefix."""
        return cls(
            account_id=os.environ.get(f"{prefix}_ACCOUNT_ID", "").strip(),
            application_key=os.environ.get(f"{prefix}_APPLICATION_KEY", "").strip(),
            bucket_id=os.environ.get(f"{prefix}_BUCKET_ID", "").strip(),
            bucket_name=os.environ.get(f"{prefix}_BUCKET_NAME", "").strip(),
            auth_url=os.environ.get(f"{prefix}_AUTH_URL", DEFAULT_AUTH_URL),
            timeout=_parse_timeout(os.environ.get(f"{prefix}_TIMEOUT", "30"), f"{prefix}_TIMEOUT"),
            instance_name=os.environ.get(f"{prefix}_INSTANCE_NAME", "").strip(),
            name_prefix=os.environ.get(f"{prefix}_NAME_PREFIX", "files").strip(),
        )

    @classmethod
    def from_json_file(cls, path: str) -> 'B2Config':
        """Load from a JSON file with `account-id`, `application-key`,
        `bucket-id` and `bucket-name` entries."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Could not read B2 config file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"B2 config file {path} must contain a JSON object")

        return cls(
            account_id=str(data.get("account-id") or ""),
            application_key=str(data.get("application-key") or ""),
            bucket_id=str(data.get("bucket-id") or ""),
            bucket_name=str(data.get("bucket-name") or ""),
            auth_url=data.get("auth-url") or DEFAULT_AUTH_URL,
            timeout=_parse_timeout(data.get("timeout", 30), "timeout"),
            instance_name=str(data.get("instance-name") or ""),
            name_prefix=str(data.get("name-prefix") or "files"),
        )


# Global config instance (singleton pattern), used by the CLI only
_b2_config: Optional[B2Config] = None


def get_config() -> B2Config:
    """Get or create the process-wide B2 configuration."""
    global _b2_config
    if _b2_config is None:
        _b2_config = B2Config.from_env()
        if not _b2_config.is_complete:
            logger.warning(f"[config] Missing B2 settings: {', '.join(_b2_config.missing_keys())}")
    return _b2_config
