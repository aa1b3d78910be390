"""Tenero indexer client: token holdings and token prices."""
import logging

from ..analysis import normalizer
from ..config import ProvidersConfig
from ..http import fetch_json
from ..models import TokenHolding

logger = logging.getLogger(__name__)


class TeneroClient:
    """Fetch valued token holdings from Tenero."""

    def __init__(self, config: ProvidersConfig) -> None:
        self.base_url = config.tenero_url
        self.timeout = config.request_timeout

    async def get_token_holdings(self, address: str) -> list[TokenHolding]:
        try:
            data = await fetch_json(
                f"{self.base_url}/v1/stacks/wallets/{address}/holdings",
                timeout=self.timeout,
            )
            if not isinstance(data, dict):
                return []
            holdings = normalizer.parse_token_rows(data)
            logger.debug("Fetched %d token holdings for %s", len(holdings), address)
            return holdings
        except Exception as e:
            logger.error("Error fetching token holdings for %s: %s", address, e)
            return []

    async def get_token_price(self, contract: str) -> float | None:
        """USD price of a token contract, ``None`` when unavailable."""
        data = await fetch_json(
            f"{self.base_url}/v1/stacks/tokens/{contract}", timeout=self.timeout
        )
        if not isinstance(data, dict):
            return None
        price = normalizer.parse_float((data.get("data") or {}).get("price_usd"))
        return price or None
