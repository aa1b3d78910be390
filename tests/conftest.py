"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from pathlib import Path

import pytest

from wallet_intel.config import AppConfig, PaymentConfig, PriceConfig, ProvidersConfig
from wallet_intel.models import TokenHolding, TransactionRecord

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

ADDRESS = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


def make_token(
    symbol: str = "ALEX",
    value_usd: float = 100.0,
    category: str = "blue-chip",
    change_24h: float | None = None,
    contract: str = "",
) -> TokenHolding:
    return TokenHolding(
        symbol=symbol,
        name=f"{symbol} Token",
        contract=contract or f"SP000.{symbol.lower()}-token",
        balance="1000000",
        balance_formatted=1.0,
        value_usd=value_usd,
        price_usd=value_usd,
        change_24h=change_24h,
        category=category,  # type: ignore[arg-type]
    )


def make_tx(
    contract_id: str | None = None,
    timestamp: str = "2026-10-18T12:00:00.000Z",
    tx_type: str | None = None,
) -> TransactionRecord:
    return TransactionRecord(
        tx_id="0x01",
        tx_type=tx_type or ("contract_call" if contract_id else "token_transfer"),
        timestamp=timestamp,
        contract_id=contract_id,
        sender=ADDRESS,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_providers_config() -> ProvidersConfig:
    return ProvidersConfig(
        hiro_url="https://hiro.example.com",
        tenero_url="https://tenero.example.com",
        coingecko_url="https://coingecko.example.com/api/v3",
        request_timeout=5,
        nft_limit=50,
        tx_limit=50,
    )


@pytest.fixture()
def sample_price_config() -> PriceConfig:
    return PriceConfig(cache_ttl_seconds=300, fallback_price=0.85)


@pytest.fixture()
def sample_payment_config() -> PaymentConfig:
    return PaymentConfig(
        pay_to="SPPAY",
        settlement_contract="SPSBTC.token-sbtc",
        payment_contract="SPPAY.sbtc-payment",
    )


@pytest.fixture()
def sample_app_config(
    sample_providers_config: ProvidersConfig,
    sample_price_config: PriceConfig,
    sample_payment_config: PaymentConfig,
) -> AppConfig:
    return AppConfig(
        providers=sample_providers_config,
        price=sample_price_config,
        payment=sample_payment_config,
    )


SAMPLE_YAML = textwrap.dedent("""\
    providers:
      hiro_url: "https://hiro.example.com/"
      tenero_url: "https://tenero.example.com"
      coingecko_url: "https://coingecko.example.com/api/v3"
      request_timeout: 10
      nft_limit: 20
      tx_limit: 40
    price:
      cache_ttl_seconds: 60
      fallback_price: 1.25
    payment:
      enabled: true
      variant: contract
      pay_to: "SPPAY"
      full_report_price: 3000
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample provider payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_holdings_payload() -> dict:
    return {
        "data": {
            "rows": [
                {
                    "token_address": "SP3K8BC0PPEVCV7NZ6QSRWPQ2JE9E5B6N3PA0KBR9.token-alex",
                    "balance": "250000000",
                    "balance_formatted": "2.5",
                    "value_usd": "0.75",
                    "token": {
                        "symbol": "ALEX",
                        "name": "ALEX Token",
                        "price_usd": "0.3",
                        "change_24h": "-4.2",
                    },
                },
                {
                    "token_address": "SP3NE50GEXFG9SZGTT51P40X2CKYSZ5CC4ZTZ7A2G.welshcorgicoin-token",
                    "balance": "1000000",
                    "balance_formatted": "not-a-number",
                    "value_usd": "12.5",
                    "token": {"symbol": "WELSH", "price_usd": "0.0001"},
                },
            ]
        }
    }


@pytest.fixture()
def sample_nft_results() -> list[dict]:
    return [
        {
            "asset_identifier": "SP2X.bitcoin-monkeys::bitcoin-monkeys",
            "value": {"repr": "u42"},
        },
        {
            "asset_identifier": "SP2X.bitcoin-monkeys::bitcoin-monkeys",
            "value": {"repr": "u7"},
        },
        {
            "asset_identifier": "SP3Y.megapont-ape-club::Megapont-Ape-Club",
            "value": {"repr": "u1001"},
        },
    ]


@pytest.fixture()
def sample_tx_payload() -> dict:
    return {
        "results": [
            {
                "tx_id": "0xaaa",
                "tx_type": "contract_call",
                "burn_block_time_iso": "2026-10-18T10:00:00.000Z",
                "sender_address": ADDRESS,
                "contract_call": {
                    "contract_id": "SP1Y5YSTAHZ88XYK1VPDH24GY0HPX5J4JECTMY4A1.velar-v2-swap"
                },
            },
            {
                "tx_id": "0xbbb",
                "tx_type": "token_transfer",
                "burn_block_time_iso": "2026-08-01T10:00:00.000Z",
                "sender_address": ADDRESS,
            },
        ]
    }


# ---------------------------------------------------------------------------
# aiohttp mocks
# ---------------------------------------------------------------------------


def make_mock_session(responses: dict[str, tuple[int, object]] | None = None, error: Exception | None = None):
    """Mock ``aiohttp.ClientSession`` answering GETs by URL suffix.

    ``responses`` maps a URL suffix to ``(status, json_body)``; unmatched URLs
    answer 404.
    """
    from unittest.mock import AsyncMock, MagicMock

    responses = responses or {}
    calls: list[tuple[str, dict | None]] = []

    def _get(url: str, params: dict | None = None, **kwargs):
        calls.append((url, params))
        if error:
            raise error
        status, body = 404, None
        for suffix, (s, b) in responses.items():
            if url.endswith(suffix):
                status, body = s, b
                break
        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.json = AsyncMock(return_value=body)
        mock_response.__aenter__ = AsyncMock(return_value=mock_response)
        mock_response.__aexit__ = AsyncMock(return_value=None)
        return mock_response

    mock_session = AsyncMock()
    mock_session.get = MagicMock(side_effect=_get)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    mock_session.calls = calls
    return mock_session
