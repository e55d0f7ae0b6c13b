"""
Lenient decoders for chain RPC results.

Every decoder accepts the normalized success payload (always a dict) and
never raises: malformed or missing fields fall back to 0 / False / None.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

U64_MAX = 2**64 - 1

_DECIMAL_RE = re.compile(r"\s*\+?([0-9]+)\s*")


def _is_number(value: Any) -> bool:
    # JSON booleans arrive as bool, which is an int subclass.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_int(value: Any) -> int:
    """Integral JSON numbers as int, anything else as 0."""
    if not _is_number(value):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return 0
        return int(value)
    return value


def decode_height(result: dict[str, Any]) -> int:
    """Chain height; 0 unless ``height`` is an integral number."""
    return _as_int(result.get("height"))


def decode_balance(result: dict[str, Any]) -> int:
    """
    CGT balance as an unsigned 64-bit integer.

    Numbers are truncated toward zero; decimal strings are parsed exactly.
    Anything else, unparseable strings, negatives and values above 2**64-1
    decode to 0.
    """
    value = result.get("balance")
    balance: int
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        balance = int(value)
    elif isinstance(value, str):
        match = _DECIMAL_RE.fullmatch(value)
        if match is None:
            return 0
        balance = int(match.group(1))
    else:
        return 0
    if balance < 0 or balance > U64_MAX:
        return 0
    return balance


def decode_is_archon(result: dict[str, Any]) -> bool:
    """Archon flag; False unless ``is_archon`` is a JSON boolean."""
    value = result.get("is_archon")
    return value if isinstance(value, bool) else False


def decode_accepted(result: dict[str, Any]) -> bool:
    """Mempool acceptance flag from cgt_sendRawTransaction."""
    value = result.get("accepted")
    return value if isinstance(value, bool) else False


def decode_optional_object(result: dict[str, Any]) -> dict[str, Any] | None:
    """
    Object-or-null results (listing, fabric asset, block).

    A ``null`` result reaches us wrapped as ``{"value": None}``; objects come
    through unchanged. After wrapping, an object whose only key is ``value``
    cannot be told apart from a wrapped primitive, so ``{"value": 5}`` decodes
    to None and ``{"value": {...}}`` to the inner object. The node never
    returns such objects for these methods.
    """
    if set(result) == {"value"}:
        inner = result["value"]
        return inner if isinstance(inner, dict) else None
    return result


@dataclass(slots=True)
class NftInfo:
    """One entry of cgt_getNftsByOwner."""

    id: int
    owner: str = ""
    creator: str = ""
    fabric_root_hash: str = ""
    royalty_bps: int = 0
    missing: bool = False

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> NftInfo:
        def _str(key: str) -> str:
            value = raw.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            id=_as_int(raw.get("id")),
            owner=_str("owner"),
            creator=_str("creator"),
            fabric_root_hash=_str("fabric_root_hash"),
            royalty_bps=_as_int(raw.get("royalty_bps")),
            missing=raw.get("missing") is True,
        )


def decode_nfts(result: dict[str, Any]) -> list[NftInfo]:
    """NFTs held by an owner; non-object entries are dropped."""
    entries = result.get("nfts")
    if not isinstance(entries, list):
        return []
    return [NftInfo.from_dict(entry) for entry in entries if isinstance(entry, dict)]
