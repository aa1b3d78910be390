"""Price oracle protocol: native coin price feed."""
from typing import Protocol


class PriceOracle(Protocol):
    async def fetch_stx_price(self) -> float: ...
