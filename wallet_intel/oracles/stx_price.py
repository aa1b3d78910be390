"""STX/USD price oracle with a process-wide TTL cache."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..analysis.normalizer import parse_float
from ..config import PriceConfig, ProvidersConfig
from ..http import fetch_json
from ..indexers.tenero import TeneroClient

logger = logging.getLogger(__name__)


@dataclass
class CachedPrice:
    value: float
    fetched_at: float


class PriceCache:
    """Single cached price value.

    Not locked: concurrent refreshes after expiry all write, last one wins.
    """

    def __init__(self) -> None:
        self._entry: CachedPrice | None = None

    def get_fresh(self, now: float, ttl: float) -> float | None:
        if self._entry is not None and now - self._entry.fetched_at < ttl:
            return self._entry.value
        return None

    def get_stale(self) -> float | None:
        return self._entry.value if self._entry is not None else None

    def set(self, value: float, now: float) -> None:
        self._entry = CachedPrice(value=value, fetched_at=now)

    def clear(self) -> None:
        self._entry = None


PRICE_CACHE = PriceCache()


class StxPriceOracle:
    """Fetch the STX price from CoinGecko, falling back to Tenero's wSTX price."""

    def __init__(
        self,
        providers: ProvidersConfig,
        config: PriceConfig,
        cache: PriceCache = PRICE_CACHE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.coingecko_url = providers.coingecko_url
        self.timeout = providers.request_timeout
        self.config = config
        self.cache = cache
        self.clock = clock
        self.tenero = TeneroClient(providers)

    async def _from_coingecko(self) -> float | None:
        data = await fetch_json(
            f"{self.coingecko_url}/simple/price",
            params={"ids": self.config.coingecko_id, "vs_currencies": "usd"},
            timeout=self.timeout,
        )
        if not isinstance(data, dict):
            return None
        price = parse_float((data.get(self.config.coingecko_id) or {}).get("usd"))
        return price or None

    async def _from_tenero(self) -> float | None:
        return await self.tenero.get_token_price(self.config.tenero_wstx_contract)

    async def fetch_stx_price(self) -> float:
        """Current STX/USD price; never raises.

        Serves the cached value inside the TTL. When every source fails the
        last known price is returned, or the configured fallback.
        """
        cached = self.cache.get_fresh(self.clock(), self.config.cache_ttl_seconds)
        if cached is not None:
            return cached

        for source_name, source in (
            ("CoinGecko", self._from_coingecko),
            ("Tenero", self._from_tenero),
        ):
            try:
                price = await source()
            except Exception as e:
                logger.error("Error fetching STX price from %s: %s", source_name, e)
                continue
            if price:
                self.cache.set(price, self.clock())
                logger.info("STX price from %s: $%.4f", source_name, price)
                return price

        stale = self.cache.get_stale()
        if stale:
            logger.warning("All STX price sources failed; using last known $%.4f", stale)
            return stale
        logger.warning(
            "All STX price sources failed; using fallback $%.4f",
            self.config.fallback_price,
        )
        return self.config.fallback_price
