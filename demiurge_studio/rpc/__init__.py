"""JSON-RPC protocol layer: envelopes, error taxonomy and the HTTP client."""

from .client import JsonRpcClient
from .errors import ErrorCategory, ProtocolError, RpcClientError, TransportError
from .protocol import RequestIdAllocator, RpcRequest, RpcResult
from .serialization import decode_response_payload, encode_request_body, normalize_result, safe_dict

__all__ = [
    "JsonRpcClient",
    "ErrorCategory",
    "ProtocolError",
    "RpcClientError",
    "TransportError",
    "RequestIdAllocator",
    "RpcRequest",
    "RpcResult",
    "decode_response_payload",
    "encode_request_body",
    "normalize_result",
    "safe_dict",
]
