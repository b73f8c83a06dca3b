"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PriceData:
    """Latest round reported by a price feed.

    ``answer`` is the raw signed price expressed with ``decimals`` decimals,
    e.g. ``200000000000`` with ``decimals=8`` is $2000.
    """

    answer: int
    decimals: int
    updated_at: int = 0


@dataclass(frozen=True)
class CollateralAsset:
    """Approved collateral asset and the feed that prices it."""

    address: str
    token: Any
    price_feed: Any


@dataclass(frozen=True)
class AccountInformation:
    """Debt and collateral value of a single user, both in 18-decimal USD."""

    total_debt_minted: int
    collateral_value_usd: int


@dataclass(frozen=True)
class CollateralDeposited:
    user: str
    asset: str
    amount: int


@dataclass(frozen=True)
class CollateralRedeemed:
    redeemed_from: str
    redeemed_to: str
    asset: str
    amount: int


@dataclass(frozen=True)
class LiquidationResult:
    """Outcome of a successful liquidation."""

    target: str
    liquidator: str
    asset: str
    debt_covered: int
    collateral_seized: int
    bonus: int
    health_factor_before: int
    health_factor_after: int
