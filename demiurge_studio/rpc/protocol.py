"""JSON-RPC 2.0 request/result models shared by the chain client."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Any

from .errors import RpcClientError

JSONRPC_VERSION = "2.0"


@dataclass(slots=True)
class RpcRequest:
    """JSON-RPC request frame."""

    id: int
    method: str
    params: Any = None

    def envelope(self) -> dict[str, Any]:
        """Return the wire envelope, keys in wire order."""
        return {
            "jsonrpc": JSONRPC_VERSION,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }


@dataclass(slots=True)
class RpcResult:
    """Outcome of one request: a success payload or an error, never both."""

    request_id: int
    method: str
    payload: dict[str, Any] | None = None
    error: RpcClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> dict[str, Any]:
        """Return the payload, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.payload or {}


class RequestIdAllocator:
    """Monotonic per-client request ids, starting at 1."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)
