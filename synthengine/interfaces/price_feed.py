"""Price feed protocol — latest-round price abstraction."""
from typing import Protocol

from ..models import PriceData


class PriceFeed(Protocol):
    """Abstract interface for a single asset's USD price feed."""

    def latest_round_data(self) -> PriceData: ...
