"""
JSON-RPC over HTTP client.

Builds the request envelope, POSTs it to the configured endpoint and turns
the reply into an RpcResult: a normalized success payload, a TransportError
or a ProtocolError. send() never raises for failures of the exchange itself.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from demiurge_studio.config.schema import RpcClientConfig
from demiurge_studio.rpc.errors import RpcClientError, TransportError
from demiurge_studio.rpc.protocol import RequestIdAllocator, RpcRequest, RpcResult
from demiurge_studio.rpc.serialization import decode_response_payload, encode_request_body

_REQUEST_HEADERS = {"Content-Type": "application/json"}


def _diagnostic(exc: Exception) -> str:
    text = str(exc).strip()
    return text or type(exc).__name__


class JsonRpcClient:
    """Async JSON-RPC 2.0 client bound to one (mutable) endpoint."""

    def __init__(
        self,
        config: RpcClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Endpoint and timeout settings (defaults to the local node)
            http_client: Externally owned client; not closed by close()
            transport: Transport for the internally created client (tests use httpx.MockTransport)
        """
        self._config = (config or RpcClientConfig()).model_copy()
        self._transport = transport
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None
        self._ids = RequestIdAllocator()

    @property
    def endpoint_url(self) -> str:
        return self._config.endpoint_url

    @endpoint_url.setter
    def endpoint_url(self, url: str) -> None:
        self._config.endpoint_url = url

    @property
    def config(self) -> RpcClientConfig:
        return self._config

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self._config.timeout_seconds is not None:
                kwargs["timeout"] = self._config.timeout_seconds
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**kwargs)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> JsonRpcClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def send(self, method: str, params: Any = None) -> RpcResult:
        """Send one request and classify its outcome."""
        if not method:
            raise ValueError("JSON-RPC method name must be a non-empty string")

        request = RpcRequest(id=self._ids.next_id(), method=method, params=params)
        # Captured here so endpoint changes only affect later requests.
        url = self._config.endpoint_url
        body = encode_request_body(request)
        logger.debug(f"RPC -> {method} id={request.id} url={url}")

        try:
            payload = await self._exchange(url, body, request.id)
        except RpcClientError as e:
            logger.warning(f"RPC {method} id={request.id} failed: {e.message}")
            return RpcResult(request_id=request.id, method=method, error=e)

        logger.debug(f"RPC <- {method} id={request.id} ok")
        return RpcResult(request_id=request.id, method=method, payload=payload)

    async def _exchange(self, url: str, body: bytes, request_id: int) -> dict[str, Any]:
        client = await self._get_client()
        try:
            resp = await client.post(url, content=body, headers=_REQUEST_HEADERS)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(_diagnostic(exc)) from exc

        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code} {resp.reason_phrase}".strip(),
                code="HTTP_ERROR",
                status_code=resp.status_code,
            )
        return decode_response_payload(resp.content, request_id=request_id)
