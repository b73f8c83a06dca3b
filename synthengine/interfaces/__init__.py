"""Protocol interfaces for the engine's external collaborators."""
from .price_feed import PriceFeed
from .token import CollateralToken, DebtToken, Journaled

__all__ = ["CollateralToken", "DebtToken", "Journaled", "PriceFeed"]
