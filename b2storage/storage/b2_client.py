"""
Backblaze B2 client implementation over the native B2 HTTP API.

Every public operation authorizes the account from scratch; nothing obtained
from the API outlives the operation that requested it.
"""
import base64
import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

from ..common.config import B2Config
from ..common.exceptions import ObjectNotFoundError, TransportError
from ..common.resource_pools import calculate_pool_size
from .base import ObjectStoreClient
from .validation import decode_json_object, require_keys, require_value

logger = logging.getLogger(__name__)

API_PREFIX = "/b2api/v1"


@dataclass(frozen=True)
class AccountAuthorization:
    """Result of b2_authorize_account, valid for a single public operation."""
    api_url: str
    authorization_token: str
    download_url: str


@dataclass(frozen=True)
class UploadTarget:
    """One-time upload URL and its token, from b2_get_upload_url."""
    upload_url: str
    authorization_token: str


def build_session() -> requests.Session:
    """Create a pooled HTTP session. Retries are disabled."""
    pool_connections, pool_maxsize = calculate_pool_size()

    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
        max_retries=0
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class B2Client(ObjectStoreClient):
    """B2 implementation of ObjectStoreClient."""

    def __init__(self, config: B2Config, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or build_session()

    # --- Primary API ---------------------------------------------------------

    def upload_file(self, name: str, data: bytes, timeout: Optional[float] = None) -> str:
        """Upload `data` into the bucket as `name` and return the new file ID."""
        auth = self._authorize_account(timeout)
        target = self._get_upload_url(auth, timeout)

        content_sha1 = hashlib.sha1(data).hexdigest()
        response = self._execute(
            "POST",
            target.upload_url,
            operation="upload_file",
            headers={
                "Content-Type": "application/octet-stream",
                "Authorization": target.authorization_token,
                "X-Bz-File-Name": quote(name, safe="/"),
                "X-Bz-Content-Sha1": content_sha1,
            },
            data=data,
            timeout=timeout,
        )

        json_data = decode_json_object(response.content, operation="upload_file")
        require_keys(json_data, ("fileId", "fileName"), operation="upload_file")
        # Make sure the file we got back is the one we asked for
        require_value(json_data, "fileName", name, operation="upload_file")

        logger.info(f"[b2] Uploaded {name} ({len(data)} bytes) as {json_data['fileId']}")
        return json_data["fileId"]

    def download_file(self, file_id: str, timeout: Optional[float] = None) -> bytes:
        """Download the contents of the file with the given ID."""
        auth = self._authorize_account(timeout)

        response = self._execute(
            "GET",
            f"{auth.download_url}{API_PREFIX}/b2_download_file_by_id",
            operation="download_file",
            headers={"Authorization": auth.authorization_token},
            params={"fileId": file_id},
            timeout=timeout,
        )

        if response.status_code == 404:
            raise ObjectNotFoundError(f"File {file_id} not found", operation="download_file")
        if not response.ok:
            raise TransportError(
                f"Download of {file_id} failed with HTTP {response.status_code}",
                operation="download_file",
                status_code=response.status_code,
            )

        logger.debug(f"[b2] Downloaded {file_id} ({len(response.content)} bytes)")
        return response.content

    def delete_file(self, file_id: str, timeout: Optional[float] = None) -> None:
        """Delete the file version with the given ID."""
        # One authorization covers the name lookup and the delete itself
        auth = self._authorize_account(timeout)
        file_name = self._get_file_name(auth, file_id, timeout)

        json_data = self._post_json(
            auth,
            "b2_delete_file_version",
            {"fileId": file_id, "fileName": file_name},
            operation="delete_file",
            timeout=timeout,
        )
        require_keys(json_data, ("fileId", "fileName"), operation="delete_file")
        require_value(json_data, "fileId", file_id, operation="delete_file")
        require_value(json_data, "fileName", file_name, operation="delete_file")

        logger.info(f"[b2] Deleted {file_name} ({file_id})")

    # --- API calls -----------------------------------------------------------

    def _authorize_account(self, timeout: Optional[float] = None) -> AccountAuthorization:
        """Call b2_authorize_account and return the API/download URLs and token."""
        response = self._execute(
            "GET",
            self.config.auth_url,
            operation="authorize_account",
            headers={
                "Accept": "application/json",
                "Authorization": f"Basic {self._encoded_credentials()}",
            },
            timeout=timeout,
        )

        json_data = decode_json_object(response.content, operation="authorize_account")
        require_keys(
            json_data,
            ("apiUrl", "authorizationToken", "accountId", "downloadUrl"),
            operation="authorize_account",
        )
        # Catches credentials belonging to a different account
        require_value(json_data, "accountId", self.config.account_id, operation="authorize_account")

        return AccountAuthorization(
            api_url=json_data["apiUrl"],
            authorization_token=json_data["authorizationToken"],
            download_url=json_data["downloadUrl"],
        )

    def _get_upload_url(self, auth: AccountAuthorization, timeout: Optional[float] = None) -> UploadTarget:
        json_data = self._post_json(
            auth,
            "b2_get_upload_url",
            {"bucketId": self.config.bucket_id},
            operation="get_upload_url",
            timeout=timeout,
        )
        require_keys(
            json_data,
            ("bucketId", "authorizationToken", "uploadUrl"),
            operation="get_upload_url",
        )
        require_value(json_data, "bucketId", self.config.bucket_id, operation="get_upload_url")

        return UploadTarget(
            upload_url=json_data["uploadUrl"],
            authorization_token=json_data["authorizationToken"],
        )

    def _get_file_name(self, auth: AccountAuthorization, file_id: str, timeout: Optional[float] = None) -> str:
        json_data = self._post_json(
            auth,
            "b2_get_file_info",
            {"fileId": file_id},
            operation="get_file_info",
            timeout=timeout,
        )
        require_keys(json_data, ("fileId", "fileName"), operation="get_file_info")
        require_value(json_data, "fileId", file_id, operation="get_file_info")
        return json_data["fileName"]

    # --- HTTP helpers --------------------------------------------------------

    def _encoded_credentials(self) -> str:
        raw = f"{self.config.account_id}:{self.config.application_key}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def _post_json(
        self,
        auth: AccountAuthorization,
        api_name: str,
        payload: Dict[str, Any],
        operation: str,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        response = self._execute(
            "POST",
            f"{auth.api_url}{API_PREFIX}/{api_name}",
            operation=operation,
            headers={"Authorization": auth.authorization_token},
            json=payload,
            timeout=timeout,
        )
        return decode_json_object(response.content, operation=operation)

    def _execute(self, method: str, url: str, operation: str, timeout: Optional[float] = None, **kwargs) -> requests.Response:
        """Perform one HTTP round trip, mapping transport failures to TransportError."""
        effective_timeout = timeout if timeout is not None else self.config.timeout
        logger.debug(f"[b2] {method} {url} ({operation})")
        try:
            return self.session.request(method, url, timeout=effective_timeout, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"Request timed out after {effective_timeout}s: {e}", operation=operation)
        except requests.RequestException as e:
            raise TransportError(f"Couldn't make HTTP request: {e}", operation=operation)
