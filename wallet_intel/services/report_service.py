"""Report orchestration: concurrent provider fan-out joined into one report."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, TypeVar

from ..analysis import assemble_quick_summary, assemble_report
from ..chains.stacks import HiroClient
from ..config import AppConfig
from ..indexers import TeneroClient
from ..interfaces import ChainClient, HoldingsProvider, PriceOracle
from ..models import QuickSummary, WalletReport
from ..oracles import StxPriceOracle

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _or_default(name: str, call: Awaitable[T], default: T) -> T:
    """Await a provider call, substituting ``default`` if it raises anyway."""
    try:
        return await call
    except Exception as e:
        logger.error("Provider call %s failed: %s", name, e)
        return default


class ReportService:
    """Builds wallet reports from the configured providers.

    The address is expected to be validated by the caller.
    """

    def __init__(
        self,
        config: AppConfig,
        chain: ChainClient | None = None,
        holdings: HoldingsProvider | None = None,
        oracle: PriceOracle | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._chain: ChainClient = chain or HiroClient(config.providers)
        self._holdings: HoldingsProvider = holdings or TeneroClient(config.providers)
        self._oracle: PriceOracle = oracle or StxPriceOracle(
            config.providers, config.price
        )
        self._clock = clock

    async def build_report(self, address: str) -> WalletReport:
        """Full report: all six provider calls run concurrently, then aggregate."""
        logger.info("Building wallet report for %s", address)

        stx_price, bns_name, stx_balance, tokens, nfts, transactions = await asyncio.gather(
            _or_default("stx_price", self._oracle.fetch_stx_price(), self._config.price.fallback_price),
            _or_default("bns_name", self._chain.get_bns_name(address), None),
            _or_default("stx_balance", self._chain.get_stx_balance(address), 0.0),
            _or_default("token_holdings", self._holdings.get_token_holdings(address), []),
            _or_default("nft_holdings", self._chain.get_nft_holdings(address), []),
            _or_default("transactions", self._chain.get_transactions(address), []),
        )

        report = assemble_report(
            address=address,
            bns_name=bns_name,
            stx_price=stx_price,
            stx_balance=stx_balance,
            tokens=tokens,
            nfts=nfts,
            transactions=transactions,
            now=self._clock(),
        )
        logger.info(
            "Report for %s: $%.2f total, risk %d (%s), %s, %d insights",
            address,
            report.summary.total_value_usd,
            report.summary.risk_score,
            report.summary.risk_level,
            report.summary.activity_level,
            len(report.insights),
        )
        return report

    async def build_quick_summary(self, address: str) -> QuickSummary:
        """Reduced report: price, name, balance and tokens only."""
        logger.info("Building quick summary for %s", address)

        stx_price, bns_name, stx_balance, tokens = await asyncio.gather(
            _or_default("stx_price", self._oracle.fetch_stx_price(), self._config.price.fallback_price),
            _or_default("bns_name", self._chain.get_bns_name(address), None),
            _or_default("stx_balance", self._chain.get_stx_balance(address), 0.0),
            _or_default("token_holdings", self._holdings.get_token_holdings(address), []),
        )

        return assemble_quick_summary(
            address=address,
            bns_name=bns_name,
            stx_price=stx_price,
            stx_balance=stx_balance,
            tokens=tokens,
            now=self._clock(),
        )
