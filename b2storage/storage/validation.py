"""
Response-shape checks for B2 API calls.

All helpers are stateless and raise ProtocolError on the first problem found.
"""
import json
from typing import Any, Dict, Iterable, Union

from ..common.exceptions import ProtocolError


def decode_json_object(body: Union[bytes, str], operation: str = None) -> Dict[str, Any]:
    """Decode a response body that must be a JSON object.

    Non-JSON text, bare scalars (`null`, `true`, `false`, numbers, strings)
    and arrays are all rejected.
    """
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        data = json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise ProtocolError(f"Couldn't decode JSON response: {e}", operation=operation)

    if not isinstance(data, dict):
        raise ProtocolError(
            f"Couldn't decode JSON response: expected an object, got {type(data).__name__}",
            operation=operation,
        )
    return data


def require_keys(data: Dict[str, Any], keys: Iterable[str], operation: str = None) -> None:
    """Ensure every key is present with a non-null value."""
    for key in keys:
        if data.get(key) is None:
            raise ProtocolError(
                f"Malformed JSON response! Did not contain expected field {key}"
                f"{_describe_api_error(data)}",
                operation=operation,
                field=key,
            )


def require_value(data: Dict[str, Any], key: str, expected: Any, operation: str = None) -> None:
    """Ensure `data[key]` equals `expected` exactly (no type coercion)."""
    actual = data.get(key)
    if type(actual) is not type(expected) or actual != expected:
        raise ProtocolError(
            f'Malformed JSON response! Expected the key {key} to have the value "{expected}"',
            operation=operation,
            field=key,
        )


def _describe_api_error(data: Dict[str, Any]) -> str:
    # B2 error bodies look like {"status": 401, "code": "unauthorized", "message": "..."}
    if "code" in data and "status" in data:
        return f" (API error {data.get('status')} {data.get('code')}: {data.get('message', '')})"
    return ""
