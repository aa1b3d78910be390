"""Assemble normalised provider data into a scored :class:`WalletReport`."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ..models import (
    NFTHolding,
    QuickSummary,
    Summary,
    TokenHolding,
    TopHolding,
    TransactionRecord,
    WalletReport,
)
from . import aggregator, scoring
from .scoring import to_fixed
from .insights import generate_insights

QUICK_TOP_HOLDINGS = 5


def format_timestamp(now: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and ``Z`` suffix."""
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble_report(
    *,
    address: str,
    bns_name: str | None,
    stx_price: float,
    stx_balance: float,
    tokens: list[TokenHolding],
    nfts: list[NFTHolding],
    transactions: list[TransactionRecord],
    now: datetime,
) -> WalletReport:
    """Aggregate, score and annotate the joined provider results.

    Insights are generated last, from the otherwise complete report.
    """
    stx_value_usd = stx_balance * stx_price
    total_value_usd = aggregator.calc_total_value(tokens, stx_balance, stx_price)
    allocation = aggregator.calc_allocation(tokens, stx_value_usd, total_value_usd)

    positions = aggregator.detect_defi_positions(transactions)
    activity = aggregator.summarize_activity(transactions, now)

    risk_score, risk_level = scoring.calc_risk_score(tokens, allocation)
    activity_level = scoring.calc_activity_level(
        activity.tx_count_30d, total_value_usd
    )
    portfolio_health = scoring.calc_portfolio_health(allocation, tokens)

    report = WalletReport(
        address=address,
        bns_name=bns_name,
        timestamp=format_timestamp(now),
        summary=Summary(
            total_value_usd=total_value_usd,
            stx_balance=stx_balance,
            stx_price=stx_price,
            token_count=len(tokens),
            nft_count=aggregator.count_nfts(nfts),
            defi_protocols=len(positions),
            risk_score=risk_score,
            risk_level=risk_level,
            activity_level=activity_level,
            portfolio_health=portfolio_health,
        ),
        allocation=allocation,
        tokens=aggregator.sort_tokens(tokens),
        nfts=aggregator.sort_nfts(nfts),
        defi=tuple(positions),
        recent_activity=activity,
    )
    return replace(report, insights=generate_insights(report))


def _format_change(change_24h: float | None) -> str | None:
    if not change_24h:
        return None
    sign = "+" if change_24h > 0 else ""
    return f"{sign}{to_fixed(change_24h, 1)}%"


def assemble_quick_summary(
    *,
    address: str,
    bns_name: str | None,
    stx_price: float,
    stx_balance: float,
    tokens: list[TokenHolding],
    now: datetime,
) -> QuickSummary:
    """Display-ready projection: formatted totals and the top holdings by value."""
    total_value_usd = aggregator.calc_total_value(tokens, stx_balance, stx_price)
    top = aggregator.sort_tokens(tokens)[:QUICK_TOP_HOLDINGS]

    return QuickSummary(
        address=address,
        bns_name=bns_name,
        timestamp=format_timestamp(now),
        total_value_usd=f"${to_fixed(total_value_usd, 2)}",
        stx_balance=f"{to_fixed(stx_balance, 2)} STX",
        stx_price=f"${to_fixed(stx_price, 4)}",
        token_count=len(tokens),
        top_holdings=tuple(
            TopHolding(
                symbol=t.symbol,
                value=f"${to_fixed(t.value_usd, 2)}",
                change_24h=_format_change(t.change_24h),
            )
            for t in top
        ),
    )
