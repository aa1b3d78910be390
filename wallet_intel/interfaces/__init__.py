"""Protocol interfaces for the wallet intelligence providers."""
from .chain import ChainClient
from .holdings import HoldingsProvider
from .price_oracle import PriceOracle

__all__ = ["ChainClient", "HoldingsProvider", "PriceOracle"]
