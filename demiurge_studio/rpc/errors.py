"""
Error types for the JSON-RPC client.

Two families, matching where an exchange can go wrong:
- TransportError: the HTTP exchange itself failed (network, timeout, bad URL, HTTP status)
- ProtocolError: the exchange succeeded but the payload breaks the JSON-RPC contract

Errors are delivered as values inside RpcResult; they are only raised by
RpcResult.unwrap().
"""

from __future__ import annotations

from enum import Enum
from typing import Any

INVALID_RESPONSE_MESSAGE = "Invalid JSON-RPC response"
MISSING_RESULT_MESSAGE = "JSON-RPC: no 'result' field"
ID_MISMATCH_MESSAGE = "JSON-RPC: response id mismatch"
UNKNOWN_RPC_ERROR = "Unknown error"


class ErrorCategory(Enum):
    """Where in the exchange an error originated."""
    TRANSPORT = "transport"
    PROTOCOL = "protocol"


class RpcClientError(Exception):
    """Base exception for all client-side RPC errors."""

    def __init__(
        self,
        message: str,
        code: str = "RPC_CLIENT_ERROR",
        category: ErrorCategory = ErrorCategory.PROTOCOL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TransportError(RpcClientError):
    """The HTTP exchange failed before a usable body was received."""

    def __init__(self, diagnostic: str, code: str = "NETWORK_ERROR", status_code: int | None = None):
        details: dict[str, Any] = {"diagnostic": diagnostic}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Network error: {diagnostic}",
            code=code,
            category=ErrorCategory.TRANSPORT,
            details=details,
        )
        self.diagnostic = diagnostic
        self.status_code = status_code


class ProtocolError(RpcClientError):
    """The response body violates the expected JSON-RPC contract."""

    def __init__(self, message: str, code: str = "PROTOCOL_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, category=ErrorCategory.PROTOCOL, details=details)

    @classmethod
    def invalid_response(cls) -> ProtocolError:
        return cls(INVALID_RESPONSE_MESSAGE, code="INVALID_RESPONSE")

    @classmethod
    def missing_result(cls) -> ProtocolError:
        return cls(MISSING_RESULT_MESSAGE, code="MISSING_RESULT")

    @classmethod
    def id_mismatch(cls, expected: Any, received: Any) -> ProtocolError:
        return cls(
            ID_MISMATCH_MESSAGE,
            code="ID_MISMATCH",
            details={"expected_id": expected, "received_id": received},
        )

    @classmethod
    def from_rpc_error(cls, error: dict[str, Any]) -> ProtocolError:
        """Build from a server ``error`` object; keeps its code/data in details."""
        message = error.get("message")
        if not isinstance(message, str):
            message = UNKNOWN_RPC_ERROR
        details: dict[str, Any] = {}
        if "code" in error:
            details["rpc_code"] = error.get("code")
        if "data" in error:
            details["data"] = error.get("data")
        return cls(f"RPC error: {message}", code="RPC_ERROR", details=details)
