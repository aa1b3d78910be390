"""Portfolio aggregation: totals, allocation and activity summaries. No I/O."""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable

from ..models import (
    Allocation,
    DeFiPosition,
    NFTHolding,
    RecentActivity,
    TokenHolding,
    TransactionRecord,
)
from .classifier import match_protocol

RECENT_WINDOW = timedelta(days=30)
TOP_INTERACTIONS_LIMIT = 5
CONTRACT_CALL = "contract_call"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) to an aware datetime."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sum_value(tokens: Iterable[TokenHolding]) -> float:
    return sum(t.value_usd for t in tokens)


def calc_total_value(
    tokens: list[TokenHolding], stx_balance: float, stx_price: float
) -> float:
    """Total USD value = token values + STX balance × STX price."""
    return sum_value(tokens) + stx_balance * stx_price


def calc_allocation(
    tokens: list[TokenHolding], stx_value_usd: float, total_value_usd: float
) -> Allocation:
    """Fraction of ``total_value_usd`` held per bucket; all zero when total is 0."""
    if total_value_usd <= 0:
        return Allocation()

    by_category = {"blue-chip": 0.0, "defi": 0.0, "meme": 0.0, "other": 0.0}
    for token in tokens:
        by_category[token.category] += token.value_usd

    return Allocation(
        stx=stx_value_usd / total_value_usd,
        blue_chip=by_category["blue-chip"] / total_value_usd,
        defi=by_category["defi"] / total_value_usd,
        meme=by_category["meme"] / total_value_usd,
        other=by_category["other"] / total_value_usd,
    )


def sort_tokens(tokens: Iterable[TokenHolding]) -> tuple[TokenHolding, ...]:
    return tuple(sorted(tokens, key=lambda t: t.value_usd, reverse=True))


def sort_nfts(nfts: Iterable[NFTHolding]) -> tuple[NFTHolding, ...]:
    return tuple(sorted(nfts, key=lambda n: n.count, reverse=True))


def count_nfts(nfts: Iterable[NFTHolding]) -> int:
    return sum(n.count for n in nfts)


def _newest_first(transactions: list[TransactionRecord]) -> list[TransactionRecord]:
    """Stable sort newest-first; entries without a parseable timestamp go last."""
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(
        transactions,
        key=lambda tx: parse_timestamp(tx.timestamp) or epoch,
        reverse=True,
    )


def detect_defi_positions(transactions: list[TransactionRecord]) -> list[DeFiPosition]:
    """Build one position per recognised protocol from contract-call history.

    Positions keep first-seen protocol order; ``last_interaction`` is the
    newest matching transaction timestamp.
    """
    interactions: dict[str, dict] = {}

    for tx in _newest_first(transactions):
        if tx.tx_type != CONTRACT_CALL or not tx.contract_id:
            continue
        info = match_protocol(tx.contract_id)
        if info is None:
            continue
        entry = interactions.setdefault(
            info.name,
            {"type": info.type, "count": 0, "last": tx.timestamp},
        )
        entry["count"] += 1

    return [
        DeFiPosition(
            protocol=name,
            type=entry["type"],
            interactions=entry["count"],
            last_interaction=entry["last"],
        )
        for name, entry in interactions.items()
    ]


def top_interactions(
    transactions: list[TransactionRecord], limit: int = TOP_INTERACTIONS_LIMIT
) -> tuple[str, ...]:
    """Most-called contracts across the whole window, ties in first-seen order."""
    counts = Counter(
        tx.contract_id
        for tx in transactions
        if tx.tx_type == CONTRACT_CALL and tx.contract_id
    )
    # Counter.most_common keeps insertion order among equal counts.
    return tuple(contract for contract, _ in counts.most_common(limit))


def summarize_activity(
    transactions: list[TransactionRecord], now: datetime
) -> RecentActivity:
    """Count 30-day activity and record the most recent transaction timestamp."""
    cutoff = now - RECENT_WINDOW
    recent = 0
    for tx in transactions:
        ts = parse_timestamp(tx.timestamp)
        if ts is not None and ts > cutoff:
            recent += 1

    ordered = _newest_first(transactions)
    last_active = ordered[0].timestamp if ordered else None

    return RecentActivity(
        tx_count_30d=recent,
        last_active=last_active,
        top_interactions=top_interactions(transactions),
    )
