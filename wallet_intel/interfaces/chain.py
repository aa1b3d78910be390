"""Chain client protocol: account data from a Stacks indexer."""
from typing import Any, Protocol

from ..models import NFTHolding, TransactionRecord


class ChainClient(Protocol):
    """Account lookups; every method returns a default instead of raising."""

    async def get_bns_name(self, address: str) -> str | None: ...

    async def get_stx_balance(self, address: str) -> float: ...

    async def get_nft_holdings(self, address: str) -> list[NFTHolding]: ...

    async def get_transactions(self, address: str) -> list[TransactionRecord]: ...

    async def get_transaction(self, tx_id: str) -> dict[str, Any] | None: ...
