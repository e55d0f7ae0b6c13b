import json

import pytest

from demiurge_studio.rpc.errors import ErrorCategory, ProtocolError, TransportError
from demiurge_studio.rpc.protocol import RequestIdAllocator, RpcRequest, RpcResult
from demiurge_studio.rpc.serialization import (
    decode_response_payload,
    encode_request_body,
    normalize_result,
    parse_response_body,
    safe_dict,
)


def test_encode_request_body_is_compact_and_ordered() -> None:
    body = encode_request_body(RpcRequest(id=1, method="cgt_getBalance", params={"address": "ab"}))
    assert body == b'{"jsonrpc":"2.0","method":"cgt_getBalance","params":{"address":"ab"},"id":1}'


def test_encode_request_body_keeps_null_params() -> None:
    sent = json.loads(encode_request_body(RpcRequest(id=3, method="cgt_getChainInfo")))
    assert sent == {"jsonrpc": "2.0", "method": "cgt_getChainInfo", "params": None, "id": 3}


def test_normalize_result_wraps_non_objects() -> None:
    assert normalize_result({"height": 1}) == {"height": 1}
    assert normalize_result(7) == {"value": 7}
    assert normalize_result(None) == {"value": None}
    assert normalize_result([1, 2]) == {"value": [1, 2]}
    assert normalize_result("x") == {"value": "x"}


def test_parse_response_body_rejects_non_objects() -> None:
    for body in (b"not json", b"[1,2]", b"42", b"\xff\xfe"):
        with pytest.raises(ProtocolError) as exc_info:
            parse_response_body(body)
        assert exc_info.value.message == "Invalid JSON-RPC response"
        assert exc_info.value.code == "INVALID_RESPONSE"


def test_decode_response_payload_checks_id_before_error() -> None:
    body = json.dumps({"id": 9, "error": {"message": "boom"}})
    with pytest.raises(ProtocolError) as exc_info:
        decode_response_payload(body, request_id=1)
    assert exc_info.value.code == "ID_MISMATCH"
    assert exc_info.value.details == {"expected_id": 1, "received_id": 9}


def test_decode_response_payload_accepts_missing_or_null_id() -> None:
    assert decode_response_payload('{"result": {"a": 1}}', request_id=5) == {"a": 1}
    assert decode_response_payload('{"id": null, "result": 2}', request_id=5) == {"value": 2}


def test_decode_response_payload_ignores_null_error_field() -> None:
    body = '{"jsonrpc":"2.0","id":1,"result":{"height":3},"error":null}'
    assert decode_response_payload(body, request_id=1) == {"height": 3}


def test_decode_response_payload_rpc_error_keeps_server_code() -> None:
    body = json.dumps({"id": 1, "error": {"code": -32602, "message": "invalid address", "data": "x"}})
    with pytest.raises(ProtocolError) as exc_info:
        decode_response_payload(body, request_id=1)
    err = exc_info.value
    assert err.message == "RPC error: invalid address"
    assert err.code == "RPC_ERROR"
    assert err.details == {"rpc_code": -32602, "data": "x"}


def test_decode_response_payload_non_string_error_message() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        decode_response_payload('{"error": {"message": 12}}', request_id=1)
    assert exc_info.value.message == "RPC error: Unknown error"


def test_decode_response_payload_missing_result() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        decode_response_payload('{"jsonrpc":"2.0","id":1}', request_id=1)
    assert exc_info.value.message == "JSON-RPC: no 'result' field"


def test_error_to_dict_and_str() -> None:
    err = TransportError("HTTP 502 Bad Gateway", code="HTTP_ERROR", status_code=502)
    assert str(err) == "[HTTP_ERROR] Network error: HTTP 502 Bad Gateway"
    assert err.category is ErrorCategory.TRANSPORT
    assert err.to_dict() == {
        "error": "HTTP_ERROR",
        "message": "Network error: HTTP 502 Bad Gateway",
        "category": "transport",
        "details": {"diagnostic": "HTTP 502 Bad Gateway", "status_code": 502},
    }


def test_rpc_result_unwrap() -> None:
    assert RpcResult(request_id=1, method="m", payload={"a": 1}).unwrap() == {"a": 1}
    failed = RpcResult(request_id=1, method="m", error=ProtocolError.missing_result())
    assert not failed.ok
    with pytest.raises(ProtocolError):
        failed.unwrap()


def test_request_id_allocator_is_monotonic() -> None:
    ids = RequestIdAllocator()
    assert [ids.next_id() for _ in range(3)] == [1, 2, 3]


def test_safe_dict() -> None:
    assert safe_dict({"a": 1}) == {"a": 1}
    assert safe_dict(None) == {}
    assert safe_dict([1]) == {}


def test_parse_response_body_deeply_nested_is_invalid_response() -> None:
    body = b"[" * 200000 + b"]" * 200000
    with pytest.raises(ProtocolError) as exc_info:
        parse_response_body(body)
    assert exc_info.value.code == "INVALID_RESPONSE"


def test_decode_response_payload_boolean_id_is_mismatch() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        decode_response_payload('{"id": true, "result": {"height": 1}}', request_id=1)
    assert exc_info.value.code == "ID_MISMATCH"
    assert exc_info.value.details == {"expected_id": 1, "received_id": True}
