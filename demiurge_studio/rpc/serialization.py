"""Serialization helpers for JSON-RPC frames."""

from __future__ import annotations

import json
from typing import Any

from .errors import ProtocolError
from .protocol import RpcRequest


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def encode_request_body(request: RpcRequest) -> bytes:
    """Encode a request frame as compact UTF-8 JSON."""
    return json.dumps(request.envelope(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def normalize_result(result: Any) -> dict[str, Any]:
    """Objects pass through; any other JSON value is wrapped as ``{"value": result}``."""
    if isinstance(result, dict):
        return result
    return {"value": result}


def parse_response_body(body: bytes | str) -> dict[str, Any]:
    """Parse a response body into a JSON object or raise ProtocolError."""
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise ProtocolError.invalid_response() from exc
    if not isinstance(parsed, dict):
        raise ProtocolError.invalid_response()
    return parsed


def decode_response_payload(body: bytes | str, *, request_id: int) -> dict[str, Any]:
    """
    Decode a raw response body into the normalized success payload.

    Raises ProtocolError for unparseable bodies, id mismatches, ``error``
    objects and missing ``result`` fields, checked in that order.
    """
    obj = parse_response_body(body)

    response_id = obj.get("id")
    # JSON true would otherwise compare equal to id 1.
    if response_id is not None and (isinstance(response_id, bool) or response_id != request_id):
        raise ProtocolError.id_mismatch(request_id, response_id)

    error = obj.get("error")
    if isinstance(error, dict):
        raise ProtocolError.from_rpc_error(error)

    if "result" not in obj:
        raise ProtocolError.missing_result()

    return normalize_result(obj["result"])
