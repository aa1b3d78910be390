"""Hiro API client for Stacks account data."""
import logging
from typing import Any

from ...analysis import normalizer
from ...config import ProvidersConfig
from ...http import fetch_json
from ...models import NFTHolding, TransactionRecord

logger = logging.getLogger(__name__)


class HiroClient:
    """Stacks account lookups against the Hiro API.

    Failures are logged and collapse to a default value.
    """

    def __init__(self, config: ProvidersConfig) -> None:
        self.base_url = config.hiro_url
        self.timeout = config.request_timeout
        self.nft_limit = config.nft_limit
        self.tx_limit = config.tx_limit

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        data = await fetch_json(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        return data if isinstance(data, dict) else {}

    async def get_bns_name(self, address: str) -> str | None:
        """Resolve the first BNS name for ``address``."""
        try:
            data = await self._get(f"/v1/addresses/stacks/{address}")
            return normalizer.parse_bns_name(data)
        except Exception as e:
            logger.error("Error resolving BNS name for %s: %s", address, e)
            return None

    async def get_stx_balance(self, address: str) -> float:
        """STX balance in whole STX."""
        try:
            data = await self._get(f"/extended/v1/address/{address}/stx")
            return normalizer.parse_stx_balance(data)
        except Exception as e:
            logger.error("Error fetching STX balance for %s: %s", address, e)
            return 0.0

    async def get_nft_holdings(self, address: str) -> list[NFTHolding]:
        """NFT holdings grouped by collection."""
        try:
            data = await self._get(
                "/extended/v1/tokens/nft/holdings",
                params={"principal": address, "limit": self.nft_limit},
            )
            return normalizer.group_nft_holdings(data.get("results") or [])
        except Exception as e:
            logger.error("Error fetching NFT holdings for %s: %s", address, e)
            return []

    async def get_transactions(self, address: str) -> list[TransactionRecord]:
        """Most recent transactions, up to the configured limit."""
        try:
            data = await self._get(
                f"/extended/v1/address/{address}/transactions",
                params={"limit": self.tx_limit},
            )
            return normalizer.parse_transactions(data)
        except Exception as e:
            logger.error("Error fetching transactions for %s: %s", address, e)
            return []

    async def get_transaction(self, tx_id: str) -> dict[str, Any] | None:
        """Raw transaction lookup; ``None`` when not found."""
        normalized = tx_id if tx_id.startswith("0x") else f"0x{tx_id}"
        data = await fetch_json(
            f"{self.base_url}/extended/v1/tx/{normalized}", timeout=self.timeout
        )
        return data if isinstance(data, dict) else None
