"""Data models: all frozen (immutable).

``to_dict`` renders the camelCase JSON shape returned to API consumers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

TokenCategory = Literal["blue-chip", "defi", "meme", "other"]
PositionType = Literal["dex", "lending", "staking", "vault"]
RiskLevel = Literal["low", "medium", "high"]
ActivityLevel = Literal["inactive", "low", "moderate", "high", "whale"]
PortfolioHealth = Literal["poor", "fair", "good", "excellent"]
InsightType = Literal["info", "warning", "opportunity", "risk"]


@dataclass(frozen=True)
class TokenHolding:
    """Fungible token balance held by the account."""

    symbol: str
    name: str
    contract: str
    balance: str
    balance_formatted: float
    value_usd: float
    price_usd: float
    change_24h: float | None
    category: TokenCategory

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "contract": self.contract,
            "balance": self.balance,
            "balanceFormatted": self.balance_formatted,
            "valueUsd": self.value_usd,
            "priceUsd": self.price_usd,
            "change24h": self.change_24h,
            "category": self.category,
        }


@dataclass(frozen=True)
class NFTHolding:
    """One collection of NFTs held by the account."""

    collection: str
    collection_name: str
    token_id: int
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection": self.collection,
            "collectionName": self.collection_name,
            "tokenId": self.token_id,
            "count": self.count,
        }


@dataclass(frozen=True)
class DeFiPosition:
    """Interaction summary for a recognised protocol (not an on-chain balance)."""

    protocol: str
    type: PositionType
    interactions: int
    last_interaction: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocol": self.protocol,
            "type": self.type,
            "interactions": self.interactions,
            "lastInteraction": self.last_interaction,
        }


@dataclass(frozen=True)
class TransactionRecord:
    """Normalised transaction-history entry."""

    tx_id: str
    tx_type: str
    timestamp: str | None
    contract_id: str | None = None
    sender: str = ""


@dataclass(frozen=True)
class Allocation:
    """Fractions of total USD value per bucket."""

    stx: float = 0.0
    blue_chip: float = 0.0
    defi: float = 0.0
    meme: float = 0.0
    other: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "stx": self.stx,
            "blueChip": self.blue_chip,
            "defi": self.defi,
            "meme": self.meme,
            "other": self.other,
        }


@dataclass(frozen=True)
class Summary:
    total_value_usd: float
    stx_balance: float
    stx_price: float
    token_count: int
    nft_count: int
    defi_protocols: int
    risk_score: int
    risk_level: RiskLevel
    activity_level: ActivityLevel
    portfolio_health: PortfolioHealth

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalValueUsd": self.total_value_usd,
            "stxBalance": self.stx_balance,
            "stxPrice": self.stx_price,
            "tokenCount": self.token_count,
            "nftCount": self.nft_count,
            "defiProtocols": self.defi_protocols,
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level,
            "activityLevel": self.activity_level,
            "portfolioHealth": self.portfolio_health,
        }


@dataclass(frozen=True)
class RecentActivity:
    tx_count_30d: int = 0
    last_active: str | None = None
    top_interactions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "txCount30d": self.tx_count_30d,
            "lastActive": self.last_active,
            "topInteractions": list(self.top_interactions),
        }


@dataclass(frozen=True)
class Insight:
    type: InsightType
    title: str
    description: str
    action: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "description": self.description,
        }
        if self.action is not None:
            data["action"] = self.action
        return data


@dataclass(frozen=True)
class WalletReport:
    """Full intelligence report for one address."""

    address: str
    bns_name: str | None
    timestamp: str
    summary: Summary
    allocation: Allocation
    tokens: tuple[TokenHolding, ...] = ()
    nfts: tuple[NFTHolding, ...] = ()
    defi: tuple[DeFiPosition, ...] = ()
    recent_activity: RecentActivity = field(default_factory=RecentActivity)
    insights: tuple[Insight, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "bnsName": self.bns_name,
            "timestamp": self.timestamp,
            "summary": self.summary.to_dict(),
            "allocation": self.allocation.to_dict(),
            "tokens": [t.to_dict() for t in self.tokens],
            "nfts": [n.to_dict() for n in self.nfts],
            "defi": [d.to_dict() for d in self.defi],
            "recentActivity": self.recent_activity.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
        }


@dataclass(frozen=True)
class TopHolding:
    symbol: str
    value: str
    change_24h: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"symbol": self.symbol, "value": self.value, "change24h": self.change_24h}


@dataclass(frozen=True)
class QuickSummary:
    """Reduced projection of a report with pre-formatted display strings."""

    address: str
    bns_name: str | None
    timestamp: str
    total_value_usd: str
    stx_balance: str
    stx_price: str
    token_count: int
    top_holdings: tuple[TopHolding, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "bnsName": self.bns_name,
            "timestamp": self.timestamp,
            "summary": {
                "totalValueUsd": self.total_value_usd,
                "stxBalance": self.stx_balance,
                "stxPrice": self.stx_price,
                "tokenCount": self.token_count,
                "topHoldings": [h.to_dict() for h in self.top_holdings],
            },
        }
