"""Price feed implementations."""
from .pyth import PythPriceSource
from .static import StaticPriceFeed, build_price_feeds

__all__ = ["PythPriceSource", "StaticPriceFeed", "build_price_feeds"]
