"""Holdings provider protocol: fungible token balances with USD values."""
from typing import Protocol

from ..models import TokenHolding


class HoldingsProvider(Protocol):
    async def get_token_holdings(self, address: str) -> list[TokenHolding]: ...
