"""Pure fixed-point conversion and solvency functions (no I/O)."""
from __future__ import annotations

from decimal import Decimal

from .constants import (
    FEED_TARGET_DECIMALS,
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MAX_HEALTH_FACTOR,
    PRECISION,
)


def scale_price(answer: int, decimals: int) -> int:
    """Scale a raw feed answer to 18-decimal fixed point.

    Examples:
        (200000000000, 8) → 2000 * 10**18
        (10**21, 21)      → 10**18
    """
    if decimals <= FEED_TARGET_DECIMALS:
        return answer * 10 ** (FEED_TARGET_DECIMALS - decimals)
    return answer // 10 ** (decimals - FEED_TARGET_DECIMALS)


def usd_value(amount: int, price: int) -> int:
    """USD value of ``amount`` tokens at an 18-decimal ``price``."""
    return amount * price // PRECISION


def token_amount_from_usd(usd_amount: int, price: int) -> int:
    """Token amount worth ``usd_amount`` at an 18-decimal ``price``."""
    return usd_amount * PRECISION // price


def liquidation_bonus(amount: int) -> int:
    return amount * LIQUIDATION_BONUS // LIQUIDATION_PRECISION


def calc_health_factor(total_debt: int, collateral_value_usd: int) -> int:
    """Calculate health factor in 18-decimal fixed point.

    health_factor = (collateral * threshold%) / debt

    A position without debt cannot be liquidated, so it reports the maximal
    health factor instead of dividing by zero.
    """
    if total_debt == 0:
        return MAX_HEALTH_FACTOR
    adjusted = collateral_value_usd * LIQUIDATION_THRESHOLD // LIQUIDATION_PRECISION
    return adjusted * PRECISION // total_debt


def to_wei(amount: str | int | float | Decimal) -> int:
    """Convert a human amount (``"1.5"``) to 18-decimal fixed point."""
    return int(Decimal(str(amount)) * PRECISION)


def from_wei(amount: int) -> Decimal:
    return Decimal(amount) / PRECISION
