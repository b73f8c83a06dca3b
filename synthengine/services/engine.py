"""Core engine — public operation surface over ledgers and risk checks."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from .. import constants
from ..errors import HealthFactorBrokenError
from ..interfaces.price_feed import PriceFeed
from ..interfaces.token import CollateralToken, DebtToken
from ..ledgers import CollateralLedger, DebtLedger
from ..models import AccountInformation, LiquidationResult
from ..pricing import calc_health_factor
from ..registry import AssetRegistry
from ..state import EngineState, Event
from ..transaction import atomic, guarded_read
from .health import HealthFactorCalculator
from .liquidation import LiquidationEngine

logger = logging.getLogger(__name__)


class CoreEngine:
    """Over-collateralized synthetic-asset engine.

    The acting user is passed explicitly as the first argument of every
    mutating operation. Each operation is atomic and non-reentrant; every
    one except a plain deposit ends by asserting the acting user's health
    factor.
    """

    PRECISION = constants.PRECISION
    LIQUIDATION_THRESHOLD = constants.LIQUIDATION_THRESHOLD
    LIQUIDATION_PRECISION = constants.LIQUIDATION_PRECISION
    LIQUIDATION_BONUS = constants.LIQUIDATION_BONUS
    MIN_HEALTH_FACTOR = constants.MIN_HEALTH_FACTOR

    def __init__(
        self,
        collateral_tokens: Sequence[CollateralToken],
        price_feeds: Sequence[PriceFeed],
        debt_token: DebtToken,
        address: str = "engine",
    ) -> None:
        self.address = address
        self._registry = AssetRegistry(collateral_tokens, price_feeds)
        self._debt_token = debt_token
        self._state = EngineState()
        self._in_flight: str | None = None

        self._collateral = CollateralLedger(self._state, self._registry, address)
        self._debt = DebtLedger(self._state, debt_token, address)
        self._health = HealthFactorCalculator(self._registry, self._collateral, self._debt)
        self._liquidation = LiquidationEngine(self._collateral, self._debt, self._health)

        logger.info(
            "Engine %s initialised with collateral: %s",
            address, ", ".join(self._registry.addresses),
        )

    def _participants(self) -> list[object]:
        return [self._state, self._debt_token, *(a.token for a in self._registry)]

    def _revert_if_health_factor_is_broken(self, user: str) -> None:
        health_factor = self._health.health_factor(user)
        if health_factor < self.MIN_HEALTH_FACTOR:
            raise HealthFactorBrokenError(user, health_factor)

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    @atomic
    def deposit_collateral(self, user: str, asset: str, amount: int) -> None:
        self._collateral.deposit(user, asset, amount)
        logger.info("%s deposited %d %s", user, amount, asset)

    @atomic
    def mint(self, user: str, amount: int) -> None:
        self._debt.mint(user, amount)
        self._revert_if_health_factor_is_broken(user)
        logger.info("%s minted %d", user, amount)

    @atomic
    def deposit_collateral_and_mint(
        self, user: str, asset: str, collateral_amount: int, debt_amount: int
    ) -> None:
        self._collateral.deposit(user, asset, collateral_amount)
        self._debt.mint(user, debt_amount)
        self._revert_if_health_factor_is_broken(user)
        logger.info(
            "%s deposited %d %s and minted %d", user, collateral_amount, asset, debt_amount
        )

    @atomic
    def redeem_collateral(self, user: str, asset: str, amount: int) -> None:
        self._collateral.withdraw(user, user, asset, amount)
        self._revert_if_health_factor_is_broken(user)
        logger.info("%s redeemed %d %s", user, amount, asset)

    @atomic
    def burn(self, user: str, amount: int) -> None:
        self._debt.burn(user, user, amount)
        # Burning can only raise the health factor; checked for uniformity.
        self._revert_if_health_factor_is_broken(user)
        logger.info("%s burned %d", user, amount)

    @atomic
    def redeem_collateral_for_debt(
        self, user: str, asset: str, collateral_amount: int, debt_amount: int
    ) -> None:
        # Burn first so the redemption is checked against the reduced debt.
        self._debt.burn(user, user, debt_amount)
        self._collateral.withdraw(user, user, asset, collateral_amount)
        self._revert_if_health_factor_is_broken(user)
        logger.info(
            "%s burned %d and redeemed %d %s", user, debt_amount, collateral_amount, asset
        )

    @atomic
    def liquidate(
        self, liquidator: str, asset: str, user: str, debt_to_cover: int
    ) -> LiquidationResult:
        result = self._liquidation.liquidate(liquidator, asset, user, debt_to_cover)
        self._revert_if_health_factor_is_broken(liquidator)
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @guarded_read
    def get_usd_value(self, asset: str, amount: int) -> int:
        return self._health.get_usd_value(asset, amount)

    @guarded_read
    def get_token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        return self._health.get_token_amount_from_usd(asset, usd_amount)

    @guarded_read
    def get_account_collateral_value(self, user: str) -> int:
        return self._health.get_account_collateral_value(user)

    @guarded_read
    def get_account_information(self, user: str) -> AccountInformation:
        return self._health.get_account_information(user)

    @guarded_read
    def health_factor(self, user: str) -> int:
        return self._health.health_factor(user)

    @staticmethod
    def calculate_health_factor(total_debt_minted: int, collateral_value_usd: int) -> int:
        return calc_health_factor(total_debt_minted, collateral_value_usd)

    @guarded_read
    def quote_liquidation(self, asset: str, debt_to_cover: int) -> tuple[int, int]:
        return self._liquidation.quote(asset, debt_to_cover)

    @guarded_read
    def get_collateral_balance_of_user(self, user: str, asset: str) -> int:
        return self._collateral.balance_of(user, asset)

    @guarded_read
    def get_total_collateral_deposited(self, asset: str) -> int:
        self._registry.get(asset)
        return self._collateral.total_deposited(asset)

    @guarded_read
    def get_debt_minted(self, user: str) -> int:
        return self._debt.debt_of(user)

    @guarded_read
    def get_total_debt(self) -> int:
        return self._debt.total_debt()

    def get_collateral_tokens(self) -> tuple[str, ...]:
        return self._registry.addresses

    def get_collateral_token_price_feed(self, asset: str) -> PriceFeed:
        return self._registry.price_feed(asset)

    @property
    def debt_token(self) -> DebtToken:
        return self._debt_token

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._state.events)
