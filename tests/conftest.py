import base64
import hashlib
import json
import uuid
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import parse_qs, unquote, urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter

from b2storage import metrics
from b2storage.common import B2Config
from b2storage.storage import B2Client, B2FileStorageEngine

ACCOUNT_ID = "acct-1"
APPLICATION_KEY = "key-1"
BUCKET_ID = "buck-1"
BUCKET_NAME = "bucket-name"

AUTH_URL = "https://api.fake-b2.test/b2api/v1/b2_authorize_account"
API_URL = "https://api001.fake-b2.test"
DOWNLOAD_URL = "https://f001.fake-b2.test"
UPLOAD_URL = f"https://pod-000.fake-b2.test/b2api/v1/b2_upload_file/{BUCKET_ID}/c001"

ACCOUNT_TOKEN = "account-token"
UPLOAD_TOKEN = "upload-token"

# Body override: a dict is served as JSON, str/bytes verbatim, a callable is
# called with the parsed request payload and its result served as JSON.
Override = Union[Dict[str, Any], str, bytes, Callable[[Dict[str, Any]], Dict[str, Any]]]


class FakeB2Server(BaseAdapter):
    """In-memory B2 API mounted on a requests session."""

    def __init__(self) -> None:
        super().__init__()
        self.files: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.overrides: Dict[str, Override] = {}
        self.failures: Dict[str, Exception] = {}
        self.account_id = ACCOUNT_ID
        self.bucket_id = BUCKET_ID

    # --- requests adapter interface -----------------------------------------

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        url = urlsplit(request.url)
        endpoint = self._endpoint_for(url.netloc, url.path)
        payload = self._payload(request, endpoint)
        self.calls.append({
            "endpoint": endpoint,
            "method": request.method,
            "url": request.url,
            "headers": dict(request.headers),
            "payload": payload,
            "query": parse_qs(url.query),
            "timeout": timeout,
        })

        if endpoint in self.failures:
            raise self.failures[endpoint]

        if endpoint in self.overrides:
            override = self.overrides[endpoint]
            if callable(override):
                return self._json(request, 200, override(payload))
            if isinstance(override, dict):
                return self._json(request, 200, override)
            body = override.encode("utf-8") if isinstance(override, str) else override
            return self._build(request, 200, body, "application/json")

        handler = getattr(self, f"_handle_{endpoint}")
        return handler(request, payload, parse_qs(url.query))

    def close(self) -> None:
        pass

    # --- helpers -------------------------------------------------------------

    @staticmethod
    def _endpoint_for(netloc: str, path: str) -> str:
        if path.endswith("b2_authorize_account"):
            return "authorize"
        if path.endswith("b2_get_upload_url"):
            return "get_upload_url"
        if "b2_upload_file" in path:
            return "upload"
        if path.endswith("b2_download_file_by_id"):
            return "download"
        if path.endswith("b2_get_file_info"):
            return "get_file_info"
        if path.endswith("b2_delete_file_version"):
            return "delete"
        raise AssertionError(f"unexpected request to {netloc}{path}")

    @staticmethod
    def _payload(request, endpoint: str) -> Any:
        if endpoint in ("get_upload_url", "get_file_info", "delete") and request.body:
            return json.loads(request.body)
        return request.body

    @staticmethod
    def _build(request, status: int, body: bytes, content_type: str) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response._content = body
        response.headers["Content-Type"] = content_type
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        return response

    def _json(self, request, status: int, data: Any) -> requests.Response:
        return self._build(request, status, json.dumps(data).encode("utf-8"), "application/json")

    def _error(self, request, status: int, code: str, message: str) -> requests.Response:
        return self._json(request, status, {"status": status, "code": code, "message": message})

    def _token_ok(self, request, token: str) -> bool:
        return request.headers.get("Authorization") == token

    # --- endpoints -----------------------------------------------------------

    def _handle_authorize(self, request, payload, query):
        expected = base64.b64encode(f"{ACCOUNT_ID}:{APPLICATION_KEY}".encode()).decode()
        if request.headers.get("Authorization") != f"Basic {expected}":
            return self._error(request, 401, "unauthorized", "invalid credentials")
        return self._json(request, 200, {
            "accountId": self.account_id,
            "apiUrl": API_URL,
            "authorizationToken": ACCOUNT_TOKEN,
            "downloadUrl": DOWNLOAD_URL,
            "recommendedPartSize": 100000000,
        })

    def _handle_get_upload_url(self, request, payload, query):
        if not self._token_ok(request, ACCOUNT_TOKEN):
            return self._error(request, 401, "bad_auth_token", "invalid token")
        return self._json(request, 200, {
            "bucketId": self.bucket_id,
            "uploadUrl": UPLOAD_URL,
            "authorizationToken": UPLOAD_TOKEN,
        })

    def _handle_upload(self, request, payload, query):
        if not self._token_ok(request, UPLOAD_TOKEN):
            return self._error(request, 401, "bad_auth_token", "invalid upload token")
        data = payload or b""
        if request.headers.get("X-Bz-Content-Sha1") != hashlib.sha1(data).hexdigest():
            return self._error(request, 400, "bad_request", "sha1 did not match data")
        name = unquote(request.headers["X-Bz-File-Name"])
        file_id = f"4_z{uuid.uuid4().hex}"
        self.files[file_id] = {"name": name, "data": data}
        return self._json(request, 200, {
            "fileId": file_id,
            "fileName": name,
            "accountId": ACCOUNT_ID,
            "bucketId": BUCKET_ID,
            "contentLength": len(data),
            "contentSha1": request.headers["X-Bz-Content-Sha1"],
            "contentType": request.headers.get("Content-Type"),
        })

    def _handle_download(self, request, payload, query):
        if not self._token_ok(request, ACCOUNT_TOKEN):
            return self._error(request, 401, "bad_auth_token", "invalid token")
        file_id = query.get("fileId", [""])[0]
        if file_id not in self.files:
            return self._error(request, 404, "not_found", f"file not present: {file_id}")
        return self._build(request, 200, self.files[file_id]["data"], "application/octet-stream")

    def _handle_get_file_info(self, request, payload, query):
        if not self._token_ok(request, ACCOUNT_TOKEN):
            return self._error(request, 401, "bad_auth_token", "invalid token")
        file_id = payload["fileId"]
        if file_id not in self.files:
            return self._error(request, 404, "not_found", f"file not present: {file_id}")
        return self._json(request, 200, {"fileId": file_id, "fileName": self.files[file_id]["name"]})

    def _handle_delete(self, request, payload, query):
        if not self._token_ok(request, ACCOUNT_TOKEN):
            return self._error(request, 401, "bad_auth_token", "invalid token")
        file_id = payload["fileId"]
        stored = self.files.get(file_id)
        if stored is None or stored["name"] != payload["fileName"]:
            return self._error(request, 400, "bad_request", "file not present")
        del self.files[file_id]
        return self._json(request, 200, {"fileId": file_id, "fileName": payload["fileName"]})

    # --- assertions helpers ----------------------------------------------------

    def endpoints(self) -> List[str]:
        return [call["endpoint"] for call in self.calls]

    def last_call(self, endpoint: str) -> Optional[Dict[str, Any]]:
        matching = [call for call in self.calls if call["endpoint"] == endpoint]
        return matching[-1] if matching else None


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics.reset_metrics()
    yield
    metrics.reset_metrics()


@pytest.fixture
def b2_config() -> B2Config:
    return B2Config(
        account_id=ACCOUNT_ID,
        application_key=APPLICATION_KEY,
        bucket_id=BUCKET_ID,
        bucket_name=BUCKET_NAME,
        auth_url=AUTH_URL,
        timeout=5.0,
    )


@pytest.fixture
def fake_server() -> FakeB2Server:
    return FakeB2Server()


@pytest.fixture
def b2_session(fake_server: FakeB2Server) -> requests.Session:
    session = requests.Session()
    session.mount("https://", fake_server)
    return session


@pytest.fixture
def client(b2_config: B2Config, b2_session: requests.Session) -> B2Client:
    return B2Client(b2_config, session=b2_session)


@pytest.fixture
def engine(b2_config: B2Config, b2_session: requests.Session) -> B2FileStorageEngine:
    return B2FileStorageEngine(b2_config, client_factory=lambda cfg: B2Client(cfg, session=b2_session))
