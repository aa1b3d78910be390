from .stx_price import PRICE_CACHE, PriceCache, StxPriceOracle

__all__ = ["PRICE_CACHE", "PriceCache", "StxPriceOracle"]
