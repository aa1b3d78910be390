"""Pure parsing functions for raw provider payloads. No I/O.

Every function tolerates missing or malformed fields and falls back to a
neutral default instead of raising.
"""
from __future__ import annotations

import math
from typing import Any

from ..models import NFTHolding, TokenHolding, TransactionRecord
from .classifier import categorize_token

MICRO_STX_PER_STX = 1_000_000
NFT_ASSET_SEPARATOR = "::"


def parse_float(value: Any, default: float = 0.0) -> float:
    """Parse a decimal string or number, returning ``default`` on failure.

    NaN and infinities count as failures.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def _parse_optional_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _text(value: Any) -> str | None:
    """Non-empty string value, or ``None`` for anything else."""
    return value if isinstance(value, str) and value else None


def parse_stx_balance(payload: dict[str, Any]) -> float:
    """Convert the micro-STX ``balance`` field of a balance payload to STX."""
    try:
        return int(payload.get("balance") or "0") / MICRO_STX_PER_STX
    except (TypeError, ValueError, OverflowError):
        return 0.0


def parse_bns_name(payload: dict[str, Any]) -> str | None:
    """Return the first BNS name registered for the address, if any."""
    names = payload.get("names") or []
    if isinstance(names, list) and names:
        return str(names[0])
    return None


def parse_token_row(row: dict[str, Any]) -> TokenHolding:
    """Parse one holdings row into a :class:`TokenHolding`.

    Example row::

        {"token_address": "SP...token-alex", "balance": "1000000",
         "balance_formatted": "1.0", "value_usd": "0.25",
         "token": {"symbol": "ALEX", "name": "ALEX Token",
                   "price_usd": "0.25", "change_24h": "-3.1"}}
    """
    token = row.get("token")
    if not isinstance(token, dict):
        token = {}
    symbol = _text(token.get("symbol")) or "UNKNOWN"
    contract = _text(row.get("token_address")) or ""
    change_raw = token.get("change_24h")

    return TokenHolding(
        symbol=symbol,
        name=_text(token.get("name")) or "Unknown Token",
        contract=contract,
        balance=str(row.get("balance") or "0"),
        balance_formatted=parse_float(row.get("balance_formatted")),
        value_usd=parse_float(row.get("value_usd")),
        price_usd=parse_float(token.get("price_usd")),
        change_24h=_parse_optional_float(change_raw),
        category=categorize_token(symbol, contract),
    )


def parse_token_rows(payload: dict[str, Any]) -> list[TokenHolding]:
    """Parse a holdings payload (``data.rows``) into token holdings."""
    rows = (payload.get("data") or {}).get("rows") or []
    return [parse_token_row(row) for row in rows if isinstance(row, dict)]


def parse_clarity_uint(repr_value: Any) -> int:
    """Parse a Clarity uint repr such as ``"u42"``; 0 when unparseable."""
    if not isinstance(repr_value, str):
        return 0
    try:
        return int(repr_value.replace("u", ""))
    except ValueError:
        return 0


def split_asset_identifier(asset_identifier: str | None) -> tuple[str, str]:
    """Return ``(collection_id, collection_name)`` for an NFT asset identifier.

    Examples:
        "SP2X.bitcoin-monkeys::bitcoin-monkeys" → ("SP2X.bitcoin-monkeys", "bitcoin-monkeys")
    """
    collection_id = (asset_identifier or "").split(NFT_ASSET_SEPARATOR)[0] or "Unknown"
    collection_name = collection_id.split(".")[-1] or "Unknown"
    return collection_id, collection_name


def group_nft_holdings(results: list[dict[str, Any]]) -> list[NFTHolding]:
    """Group raw NFT asset records by collection.

    The representative token id is the first one seen in provider order.
    """
    groups: dict[str, dict[str, Any]] = {}

    for nft in results:
        if not isinstance(nft, dict):
            continue
        collection_id, collection_name = split_asset_identifier(
            nft.get("asset_identifier")
        )
        token_id = parse_clarity_uint((nft.get("value") or {}).get("repr"))

        group = groups.setdefault(
            collection_id,
            {"name": collection_name, "count": 0, "token_id": token_id},
        )
        group["count"] += 1

    return [
        NFTHolding(
            collection=collection_id,
            collection_name=group["name"],
            token_id=group["token_id"],
            count=group["count"],
        )
        for collection_id, group in groups.items()
    ]


def parse_transaction(tx: dict[str, Any]) -> TransactionRecord:
    """Parse one transaction-history entry."""
    contract_call = tx.get("contract_call")
    if not isinstance(contract_call, dict):
        contract_call = {}
    return TransactionRecord(
        tx_id=str(tx.get("tx_id") or ""),
        tx_type=str(tx.get("tx_type") or ""),
        timestamp=_text(tx.get("burn_block_time_iso")),
        contract_id=_text(contract_call.get("contract_id")),
        sender=str(tx.get("sender_address") or ""),
    )


def parse_transactions(payload: dict[str, Any]) -> list[TransactionRecord]:
    results = payload.get("results") or []
    return [parse_transaction(tx) for tx in results if isinstance(tx, dict)]
