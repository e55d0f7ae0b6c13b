"""
Demiurge chain client.

Typed queries on top of JsonRpcClient. Every fetch sends exactly one
request, emits exactly one event (``*_UPDATED`` or ``*_ERROR``) and returns a
QueryResult, so callers can either await the result or listen for events.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from demiurge_studio.chain.decoding import (
    decode_accepted,
    decode_balance,
    decode_height,
    decode_is_archon,
    decode_nfts,
    decode_optional_object,
)
from demiurge_studio.chain.events import ChainEvent, ChainEventType, EventEmitter, Listener
from demiurge_studio.config.schema import Config, RpcClientConfig
from demiurge_studio.rpc.client import JsonRpcClient
from demiurge_studio.rpc.errors import RpcClientError
from demiurge_studio.rpc.serialization import safe_dict

METHOD_CHAIN_INFO = "cgt_getChainInfo"
METHOD_BALANCE = "cgt_getBalance"
METHOD_IS_ARCHON = "cgt_isArchon"
METHOD_NFTS_BY_OWNER = "cgt_getNftsByOwner"
METHOD_LISTING = "cgt_getListing"
METHOD_FABRIC_ASSET = "cgt_getFabricAsset"
METHOD_BLOCK_BY_HEIGHT = "cgt_getBlockByHeight"
METHOD_SEND_RAW_TRANSACTION = "cgt_sendRawTransaction"


@dataclass
class QueryResult:
    """Decoded outcome of one chain query"""
    method: str
    value: Any = None
    error: RpcClientError | None = None
    address: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class ChainClient:
    """Chain queries with event broadcasting"""

    def __init__(
        self,
        config: RpcClientConfig | None = None,
        *,
        rpc: JsonRpcClient | None = None,
        emitter: EventEmitter | None = None,
    ):
        self.rpc = rpc or JsonRpcClient(config)
        self.events = emitter or EventEmitter()
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> ChainClient:
        return cls(config.client_config(), **kwargs)

    @property
    def endpoint_url(self) -> str:
        return self.rpc.endpoint_url

    @endpoint_url.setter
    def endpoint_url(self, url: str) -> None:
        if self.rpc.endpoint_url == url:
            return
        self.rpc.endpoint_url = url
        self.events.emit(ChainEvent(type=ChainEventType.ENDPOINT_CHANGED, endpoint_url=url))

    def add_listener(self, listener: Listener, event_type: ChainEventType | None = None) -> Callable[[], None]:
        return self.events.add_listener(listener, event_type)

    def remove_listener(self, listener: Listener, event_type: ChainEventType | None = None) -> bool:
        return self.events.remove_listener(listener, event_type)

    def submit(self, query: Awaitable[QueryResult]) -> asyncio.Task:
        """Run a query in the background; the task is kept alive until it finishes."""
        task = asyncio.ensure_future(query)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def close(self) -> None:
        """Wait for submitted queries and listeners, then close the HTTP client."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self.events.drain()
        await self.rpc.close()

    async def __aenter__(self) -> ChainClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _query(
        self,
        method: str,
        params: Any,
        decode: Callable[[dict[str, Any]], Any],
        *,
        updated: ChainEventType,
        failed: ChainEventType,
        fields: Callable[[Any], dict[str, Any]],
        address: str | None = None,
    ) -> QueryResult:
        result = await self.rpc.send(method, params)
        if result.error is not None:
            self.events.emit(ChainEvent(type=failed, message=result.error.message, address=address))
            return QueryResult(method=method, error=result.error, address=address)

        value = decode(safe_dict(result.payload))
        self.events.emit(ChainEvent(type=updated, address=address, **fields(value)))
        return QueryResult(method=method, value=value, address=address)

    async def fetch_chain_info(self) -> QueryResult:
        """Current chain height."""
        return await self._query(
            METHOD_CHAIN_INFO,
            None,
            decode_height,
            updated=ChainEventType.CHAIN_INFO_UPDATED,
            failed=ChainEventType.CHAIN_INFO_ERROR,
            fields=lambda height: {"height": height},
        )

    async def fetch_balance(self, address_hex: str) -> QueryResult:
        """CGT balance of ``address_hex``; the event carries the queried address."""
        return await self._query(
            METHOD_BALANCE,
            {"address": address_hex},
            decode_balance,
            updated=ChainEventType.BALANCE_UPDATED,
            failed=ChainEventType.BALANCE_ERROR,
            fields=lambda balance: {"balance": balance},
            address=address_hex,
        )

    async def fetch_is_archon(self, address_hex: str) -> QueryResult:
        """Whether ``address_hex`` holds Archon status."""
        return await self._query(
            METHOD_IS_ARCHON,
            {"address": address_hex},
            decode_is_archon,
            updated=ChainEventType.ARCHON_STATUS_UPDATED,
            failed=ChainEventType.ARCHON_STATUS_ERROR,
            fields=lambda flag: {"is_archon": flag},
            address=address_hex,
        )

    async def fetch_nfts_by_owner(self, address_hex: str) -> QueryResult:
        return await self._query(
            METHOD_NFTS_BY_OWNER,
            {"address": address_hex},
            decode_nfts,
            updated=ChainEventType.NFTS_UPDATED,
            failed=ChainEventType.NFTS_ERROR,
            fields=lambda nfts: {"value": nfts},
            address=address_hex,
        )

    async def fetch_listing(self, listing_id: int) -> QueryResult:
        """Marketplace listing, or None when the id is unknown."""
        return await self._query(
            METHOD_LISTING,
            {"listing_id": listing_id},
            decode_optional_object,
            updated=ChainEventType.LISTING_UPDATED,
            failed=ChainEventType.LISTING_ERROR,
            fields=lambda listing: {"value": listing},
        )

    async def fetch_fabric_asset(self, fabric_root_hash: str) -> QueryResult:
        return await self._query(
            METHOD_FABRIC_ASSET,
            {"fabric_root_hash": fabric_root_hash},
            decode_optional_object,
            updated=ChainEventType.FABRIC_ASSET_UPDATED,
            failed=ChainEventType.FABRIC_ASSET_ERROR,
            fields=lambda asset: {"value": asset},
        )

    async def fetch_block(self, height: int) -> QueryResult:
        return await self._query(
            METHOD_BLOCK_BY_HEIGHT,
            {"height": height},
            decode_optional_object,
            updated=ChainEventType.BLOCK_UPDATED,
            failed=ChainEventType.BLOCK_ERROR,
            fields=lambda block: {"value": block, "height": height},
        )

    async def send_raw_transaction(self, tx_hex: str) -> QueryResult:
        """Submit a hex-encoded transaction; value is the node's ``accepted`` flag."""
        return await self._query(
            METHOD_SEND_RAW_TRANSACTION,
            {"tx": tx_hex},
            decode_accepted,
            updated=ChainEventType.TRANSACTION_SUBMITTED,
            failed=ChainEventType.TRANSACTION_ERROR,
            fields=lambda accepted: {"value": accepted},
        )
