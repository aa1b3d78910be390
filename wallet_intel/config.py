"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProvidersConfig:
    hiro_url: str = "https://api.hiro.so"
    tenero_url: str = "https://api.tenero.io"
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    request_timeout: int = 30
    nft_limit: int = 100
    tx_limit: int = 100


@dataclass(frozen=True)
class PriceConfig:
    cache_ttl_seconds: int = 300
    fallback_price: float = 0.85
    coingecko_id: str = "blockstack"
    tenero_wstx_contract: str = "SP1Y5YSTAHZ88XYK1VPDH24GY0HPX5J4JECTMY4A1.wstx"


@dataclass(frozen=True)
class PaymentConfig:
    enabled: bool = True
    variant: str = "sbtc"
    network: str = "mainnet"
    pay_to: str = "SPKH9AWG0ENZ87J1X0PBD4HETP22G8W22AFNVF8K"
    settlement_contract: str = "SP3K8BC0PPEVCV7NZ6QSRWPQ2JE9E5B6N3PA0KBR9.token-sbtc"
    payment_contract: str = "SPKH9AWG0ENZ87J1X0PBD4HETP22G8W22AFNVF8K.sbtc-payment"
    full_report_price: int = 2500
    quick_summary_price: int = 500
    challenge_ttl_seconds: int = 600


@dataclass(frozen=True)
class AppConfig:
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)
    price: PriceConfig = field(default_factory=PriceConfig)
    payment: PaymentConfig = field(default_factory=PaymentConfig)


PAYMENT_VARIANTS = ("sbtc", "contract")

# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_providers(raw: dict[str, Any]) -> ProvidersConfig:
    defaults = ProvidersConfig()
    return ProvidersConfig(
        hiro_url=str(raw.get("hiro_url", defaults.hiro_url)).rstrip("/"),
        tenero_url=str(raw.get("tenero_url", defaults.tenero_url)).rstrip("/"),
        coingecko_url=str(raw.get("coingecko_url", defaults.coingecko_url)).rstrip("/"),
        request_timeout=int(raw.get("request_timeout", defaults.request_timeout)),
        nft_limit=int(raw.get("nft_limit", defaults.nft_limit)),
        tx_limit=int(raw.get("tx_limit", defaults.tx_limit)),
    )


def _build_price(raw: dict[str, Any]) -> PriceConfig:
    defaults = PriceConfig()
    return PriceConfig(
        cache_ttl_seconds=int(raw.get("cache_ttl_seconds", defaults.cache_ttl_seconds)),
        fallback_price=float(raw.get("fallback_price", defaults.fallback_price)),
        coingecko_id=raw.get("coingecko_id", defaults.coingecko_id),
        tenero_wstx_contract=raw.get(
            "tenero_wstx_contract", defaults.tenero_wstx_contract
        ),
    )


def _build_payment(raw: dict[str, Any]) -> PaymentConfig:
    defaults = PaymentConfig()
    return PaymentConfig(
        enabled=bool(raw.get("enabled", defaults.enabled)),
        variant=raw.get("variant", defaults.variant),
        network=raw.get("network", defaults.network),
        pay_to=raw.get("pay_to", defaults.pay_to),
        settlement_contract=raw.get(
            "settlement_contract", defaults.settlement_contract
        ),
        payment_contract=raw.get("payment_contract", defaults.payment_contract),
        full_report_price=int(raw.get("full_report_price", defaults.full_report_price)),
        quick_summary_price=int(
            raw.get("quick_summary_price", defaults.quick_summary_price)
        ),
        challenge_ttl_seconds=int(
            raw.get("challenge_ttl_seconds", defaults.challenge_ttl_seconds)
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        providers=_build_providers(raw.get("providers") or {}),
        price=_build_price(raw.get("price") or {}),
        payment=_build_payment(raw.get("payment") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    providers = cfg.providers
    for name in ("hiro_url", "tenero_url", "coingecko_url"):
        if not getattr(providers, name):
            raise ValueError(f"providers.{name} must not be empty")
    if providers.request_timeout <= 0:
        raise ValueError("providers.request_timeout must be positive")
    if providers.nft_limit <= 0 or providers.tx_limit <= 0:
        raise ValueError("providers.nft_limit and providers.tx_limit must be positive")

    if cfg.price.cache_ttl_seconds <= 0:
        raise ValueError("price.cache_ttl_seconds must be positive")
    if cfg.price.fallback_price < 0:
        raise ValueError("price.fallback_price must not be negative")

    if cfg.payment.variant not in PAYMENT_VARIANTS:
        raise ValueError(
            f"Unknown payment variant '{cfg.payment.variant}' "
            f"(expected one of {', '.join(PAYMENT_VARIANTS)})"
        )
    if cfg.payment.enabled and not cfg.payment.pay_to:
        raise ValueError("payment.pay_to is required when payment is enabled")
