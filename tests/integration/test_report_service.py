"""Integration tests for ReportService: concurrent fan-out with mocked providers."""
from __future__ import annotations

import asyncio
import math
from unittest.mock import AsyncMock, patch

import pytest

from conftest import ADDRESS, NOW, make_mock_session, make_token, make_tx
from wallet_intel.config import AppConfig
from wallet_intel.models import NFTHolding
from wallet_intel.services.report_service import ReportService

STACKING_DAO = "SP4SZE494VC2YC5JYG7AYFQ44F5Q4PYV7DVMDPBG.stacking-dao-core-v1"


def _providers():
    chain = AsyncMock()
    chain.get_bns_name.return_value = "alice.btc"
    chain.get_stx_balance.return_value = 1000.0
    chain.get_nft_holdings.return_value = [NFTHolding("SP2X.monkeys", "monkeys", 42, 12)]
    chain.get_transactions.return_value = [make_tx(STACKING_DAO, "2026-10-18T00:00:00Z")]

    holdings = AsyncMock()
    holdings.get_token_holdings.return_value = [
        make_token("FOO", 50.0, "other"),
        make_token("ALEX", 150.0, "blue-chip"),
    ]

    oracle = AsyncMock()
    oracle.fetch_stx_price.return_value = 0.8
    return chain, holdings, oracle


@pytest.fixture()
def service(sample_app_config: AppConfig) -> ReportService:
    chain, holdings, oracle = _providers()
    return ReportService(
        sample_app_config, chain=chain, holdings=holdings, oracle=oracle, clock=lambda: NOW
    )


class TestBuildReport:
    @pytest.mark.asyncio
    async def test_full_report(self, service: ReportService) -> None:
        report = await service.build_report(ADDRESS)

        assert report.address == ADDRESS
        assert report.bns_name == "alice.btc"
        assert report.timestamp == "2026-10-19T12:00:00.000Z"
        assert report.summary.total_value_usd == pytest.approx(1000.0)
        assert report.summary.stx_price == 0.8
        assert report.summary.token_count == 2
        assert report.summary.nft_count == 12
        assert report.summary.defi_protocols == 1
        assert [t.symbol for t in report.tokens] == ["ALEX", "FOO"]
        assert report.allocation.stx == pytest.approx(0.8)
        assert report.recent_activity.tx_count_30d == 1
        assert report.recent_activity.top_interactions == (STACKING_DAO,)
        assert [i.title for i in report.insights] == ["NFT Collector"]

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self, sample_app_config: AppConfig) -> None:
        chain, holdings, oracle = _providers()
        in_flight = 0
        peak = 0

        async def slow_balance(address: str) -> float:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return 10.0

        async def slow_tokens(address: str) -> list:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return []

        chain.get_stx_balance.side_effect = slow_balance
        holdings.get_token_holdings.side_effect = slow_tokens
        service = ReportService(
            sample_app_config, chain=chain, holdings=holdings, oracle=oracle, clock=lambda: NOW
        )
        await service.build_report(ADDRESS)
        assert peak == 2

    @pytest.mark.asyncio
    async def test_raising_provider_collapses_to_default(self, sample_app_config: AppConfig) -> None:
        chain, holdings, oracle = _providers()
        holdings.get_token_holdings.side_effect = RuntimeError("upstream down")
        chain.get_bns_name.side_effect = RuntimeError("upstream down")
        oracle.fetch_stx_price.side_effect = RuntimeError("upstream down")
        service = ReportService(
            sample_app_config, chain=chain, holdings=holdings, oracle=oracle, clock=lambda: NOW
        )

        report = await service.build_report(ADDRESS)

        assert report.tokens == ()
        assert report.bns_name is None
        assert report.summary.stx_price == sample_app_config.price.fallback_price
        assert report.summary.total_value_usd == pytest.approx(850.0)

    @pytest.mark.asyncio
    async def test_everything_empty(self, sample_app_config: AppConfig) -> None:
        chain = AsyncMock()
        chain.get_bns_name.return_value = None
        chain.get_stx_balance.return_value = 0.0
        chain.get_nft_holdings.return_value = []
        chain.get_transactions.return_value = []
        holdings = AsyncMock()
        holdings.get_token_holdings.return_value = []
        oracle = AsyncMock()
        oracle.fetch_stx_price.return_value = 0.85
        service = ReportService(
            sample_app_config, chain=chain, holdings=holdings, oracle=oracle, clock=lambda: NOW
        )

        report = await service.build_report(ADDRESS)

        assert report.summary.risk_score == 0
        assert report.summary.portfolio_health == "poor"
        assert [i.title for i in report.insights] == ["Dormant Wallet"]


class TestMalformedProviderData:
    @staticmethod
    def _session(holding_value: str) -> object:
        return make_mock_session({
            f"/stacks/{ADDRESS}": (200, {"names": []}),
            f"/address/{ADDRESS}/stx": (200, {"balance": "10000000"}),
            "/nft/holdings": (200, {"results": []}),
            f"/address/{ADDRESS}/transactions": (200, {"results": [
                {
                    "tx_id": "0x1",
                    "tx_type": "contract_call",
                    "burn_block_time_iso": 1697000000,
                    "contract_call": {"contract_id": 42},
                },
                {
                    "tx_id": "0x2",
                    "tx_type": "contract_call",
                    "burn_block_time_iso": "2026-10-18T00:00:00Z",
                    "contract_call": {"contract_id": STACKING_DAO},
                },
                {
                    "tx_id": "0x3",
                    "tx_type": "contract_call",
                    "burn_block_time_iso": "2026-10-17T00:00:00Z",
                    "contract_call": "garbage",
                },
            ]}),
            f"/wallets/{ADDRESS}/holdings": (200, {"data": {"rows": [
                {
                    "token_address": "SPX.welsh-token",
                    "value_usd": holding_value,
                    "token": {"symbol": "WELSH", "price_usd": holding_value, "change_24h": holding_value},
                },
                {
                    "token_address": "SPY.alex-token",
                    "value_usd": "100",
                    "token": {"symbol": "ALEX", "price_usd": "1"},
                },
            ]}}),
        })

    @pytest.mark.asyncio
    @pytest.mark.parametrize("holding_value", ["NaN", "Infinity", "-Infinity"])
    async def test_report_still_produced(
        self, sample_app_config: AppConfig, holding_value: str
    ) -> None:
        oracle = AsyncMock()
        oracle.fetch_stx_price.return_value = 1.0
        service = ReportService(sample_app_config, oracle=oracle, clock=lambda: NOW)

        with patch("wallet_intel.http.aiohttp.ClientSession", return_value=self._session(holding_value)):
            with patch("wallet_intel.http.aiohttp.TCPConnector"):
                report = await service.build_report(ADDRESS)

        assert report.summary.total_value_usd == pytest.approx(110.0)
        allocation = report.allocation
        assert all(
            math.isfinite(v)
            for v in (allocation.stx, allocation.blue_chip, allocation.meme, allocation.defi, allocation.other)
        )
        # 100/100.01 * 30 for concentration plus 20 for two tokens.
        assert report.summary.risk_score == 50
        assert [p.protocol for p in report.defi] == ["StackingDAO"]
        assert report.defi[0].last_interaction == "2026-10-18T00:00:00Z"
        assert report.recent_activity.last_active == "2026-10-18T00:00:00Z"
        assert report.recent_activity.tx_count_30d == 2
        assert report.recent_activity.top_interactions == (STACKING_DAO,)

class TestQuickSummary:
    @pytest.mark.asyncio
    async def test_skips_nft_and_history(self, sample_app_config: AppConfig) -> None:
        chain, holdings, oracle = _providers()
        service = ReportService(
            sample_app_config, chain=chain, holdings=holdings, oracle=oracle, clock=lambda: NOW
        )

        summary = await service.build_quick_summary(ADDRESS)

        assert summary.total_value_usd == "$1000.00"
        assert summary.stx_balance == "1000.00 STX"
        assert summary.stx_price == "$0.8000"
        assert [h.symbol for h in summary.top_holdings] == ["ALEX", "FOO"]
        chain.get_nft_holdings.assert_not_called()
        chain.get_transactions.assert_not_called()

    def test_default_providers(self, sample_app_config: AppConfig) -> None:
        service = ReportService(sample_app_config)
        assert service._chain.base_url == "https://hiro.example.com"
        assert service._holdings.base_url == "https://tenero.example.com"
