"""Actionable insight rules evaluated over an assembled report."""
from __future__ import annotations

from typing import Callable, Optional

from ..models import Insight, WalletReport
from .scoring import round_half_up, to_fixed

YIELD_ASSET_SYMBOL = "sBTC"

InsightRule = Callable[[WalletReport], Optional[Insight]]


def _large_portfolio(report: WalletReport) -> Insight | None:
    total = report.summary.total_value_usd
    if total <= 50_000:
        return None
    return Insight(
        type="info",
        title="Large Portfolio",
        description=(
            f"Portfolio value of ${total:,.2f} puts you in the top tier of Stacks holders."
        ),
    )


def _high_risk(report: WalletReport) -> Insight | None:
    if report.summary.risk_level != "high":
        return None
    meme_pct = round_half_up(report.allocation.meme * 100)
    return Insight(
        type="risk",
        title="High Risk Profile",
        description=f"{meme_pct}% of your portfolio is in high-volatility tokens.",
        action="Consider rebalancing into stable assets like STX, sBTC, or USDA.",
    )


def _concentration(report: WalletReport) -> Insight | None:
    total = report.summary.total_value_usd
    if not report.tokens or total <= 0:
        return None
    top = max(report.tokens, key=lambda t: t.value_usd)
    share = top.value_usd / total
    if share <= 0.6:
        return None
    return Insight(
        type="warning",
        title="Concentration Risk",
        description=f"{round_half_up(share * 100)}% of your portfolio is in {top.symbol}.",
        action="Diversification could reduce volatility.",
    )


def _low_stx(report: WalletReport) -> Insight | None:
    if report.allocation.stx >= 0.1 or report.summary.total_value_usd <= 100:
        return None
    return Insight(
        type="warning",
        title="Low STX Balance",
        description="STX is needed for transaction fees and stacking rewards.",
        action="Consider holding at least 10% in STX for gas and stacking.",
    )


def _idle_balance(report: WalletReport) -> Insight | None:
    if report.defi or report.summary.stx_balance <= 100:
        return None
    return Insight(
        type="opportunity",
        title="DeFi Opportunities",
        description="You have STX that could be earning yield.",
        action="Explore stacking via StackingDAO or liquidity provision on ALEX.",
    )


def _stacking_available(report: WalletReport) -> Insight | None:
    stx_balance = report.summary.stx_balance
    if stx_balance <= 500 or any(p.type == "staking" for p in report.defi):
        return None
    return Insight(
        type="opportunity",
        title="Stacking Available",
        description=f"Your {to_fixed(stx_balance, 0)} STX could earn ~8-10% APY through stacking.",
        action="Stack directly or use liquid stacking protocols like StackingDAO.",
    )


def _yield_asset(report: WalletReport) -> Insight | None:
    if report.allocation.blue_chip <= 0.5:
        return None
    if any(t.symbol == YIELD_ASSET_SYMBOL for t in report.tokens):
        return None
    return Insight(
        type="opportunity",
        title="sBTC Consideration",
        description="sBTC offers Bitcoin exposure with DeFi utility on Stacks.",
        action="Consider allocating some portfolio to sBTC for yield opportunities.",
    )


def _dormant(report: WalletReport) -> Insight | None:
    if report.summary.activity_level != "inactive":
        return None
    return Insight(
        type="info",
        title="Dormant Wallet",
        description="No transactions in the last 30 days.",
        action="Your assets may be missing yield opportunities.",
    )


def _collector(report: WalletReport) -> Insight | None:
    if report.summary.nft_count <= 10:
        return None
    return Insight(
        type="info",
        title="NFT Collector",
        description=(
            f"Holding {report.summary.nft_count} NFTs across "
            f"{len(report.nfts)} collections."
        ),
    )


# Evaluation order is the output order.
INSIGHT_RULES: tuple[InsightRule, ...] = (
    _large_portfolio,
    _high_risk,
    _concentration,
    _low_stx,
    _idle_balance,
    _stacking_available,
    _yield_asset,
    _dormant,
    _collector,
)


def generate_insights(report: WalletReport) -> tuple[Insight, ...]:
    """Run every rule in order and collect the insights that fire."""
    insights: list[Insight] = []
    for rule in INSIGHT_RULES:
        insight = rule(report)
        if insight is not None:
            insights.append(insight)
    return tuple(insights)
