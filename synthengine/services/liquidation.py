"""Liquidation of undercollateralized positions."""
from __future__ import annotations

import logging

from ..constants import MIN_HEALTH_FACTOR
from ..errors import HealthFactorNotImprovedError, HealthFactorOkError
from ..ledgers import CollateralLedger, DebtLedger, require_positive
from ..models import LiquidationResult
from ..pricing import liquidation_bonus
from .health import HealthFactorCalculator

logger = logging.getLogger(__name__)


class LiquidationEngine:
    """Repay part of a target's debt in exchange for collateral plus a bonus.

    The caller supplies the atomic boundary; every check here raises and
    relies on that boundary to undo any ledger change already made.
    """

    def __init__(
        self,
        collateral: CollateralLedger,
        debt: DebtLedger,
        health: HealthFactorCalculator,
    ) -> None:
        self._collateral = collateral
        self._debt = debt
        self._health = health

    def quote(self, asset: str, debt_to_cover: int) -> tuple[int, int]:
        """Return ``(collateral_for_debt, bonus)`` for covering ``debt_to_cover``."""
        covered = self._health.get_token_amount_from_usd(asset, debt_to_cover)
        return covered, liquidation_bonus(covered)

    def liquidate(
        self, liquidator: str, asset: str, target: str, debt_to_cover: int
    ) -> LiquidationResult:
        require_positive(debt_to_cover)

        starting_health_factor = self._health.health_factor(target)
        if starting_health_factor >= MIN_HEALTH_FACTOR:
            raise HealthFactorOkError(target, starting_health_factor)

        covered, bonus = self.quote(asset, debt_to_cover)
        seized = covered + bonus

        self._collateral.seize(target, liquidator, asset, seized)
        self._debt.burn(target, liquidator, debt_to_cover)

        ending_health_factor = self._health.health_factor(target)
        if ending_health_factor <= starting_health_factor:
            raise HealthFactorNotImprovedError(
                target, starting_health_factor, ending_health_factor
            )

        logger.info(
            "Liquidated %s: %s covered %d debt, seized %d %s (bonus %d)",
            target, liquidator, debt_to_cover, seized, asset, bonus,
        )
        return LiquidationResult(
            target=target,
            liquidator=liquidator,
            asset=asset,
            debt_covered=debt_to_cover,
            collateral_seized=seized,
            bonus=bonus,
            health_factor_before=starting_health_factor,
            health_factor_after=ending_health_factor,
        )
