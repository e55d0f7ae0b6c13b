"""Demiurge chain queries, decoders and events."""

from demiurge_studio.chain.client import ChainClient, QueryResult
from demiurge_studio.chain.decoding import (
    NftInfo,
    decode_accepted,
    decode_balance,
    decode_height,
    decode_is_archon,
    decode_nfts,
    decode_optional_object,
)
from demiurge_studio.chain.events import ChainEvent, ChainEventType, EventEmitter

__all__ = [
    "ChainClient",
    "QueryResult",
    "ChainEvent",
    "ChainEventType",
    "EventEmitter",
    "NftInfo",
    "decode_accepted",
    "decode_balance",
    "decode_height",
    "decode_is_archon",
    "decode_nfts",
    "decode_optional_object",
]
