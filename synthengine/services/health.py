"""Health factor and valuation reads over the ledgers."""
from __future__ import annotations

import logging

from ..errors import EngineError, InvalidPriceError, PriceFeedError
from ..ledgers import CollateralLedger, DebtLedger
from ..models import AccountInformation
from ..pricing import calc_health_factor, scale_price, token_amount_from_usd, usd_value
from ..registry import AssetRegistry

logger = logging.getLogger(__name__)


class HealthFactorCalculator:
    """Derive USD values and solvency ratios from ledger state and feeds.

    Every price is read fresh from the asset's feed; the returned answer is
    trusted as-is apart from rejecting non-positive values.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        collateral: CollateralLedger,
        debt: DebtLedger,
    ) -> None:
        self._registry = registry
        self._collateral = collateral
        self._debt = debt

    def price(self, asset: str) -> int:
        """Current 18-decimal USD price of one whole token."""
        feed = self._registry.price_feed(asset)
        try:
            round_data = feed.latest_round_data()
        except EngineError:
            raise
        except Exception as e:
            logger.warning("Price feed for %s failed: %s", asset, e)
            raise PriceFeedError(asset, str(e)) from e
        if round_data.answer <= 0:
            raise InvalidPriceError(asset, round_data.answer)
        price = scale_price(round_data.answer, round_data.decimals)
        logger.debug("Price %s: %d (raw %d, %d decimals)", asset, price,
                     round_data.answer, round_data.decimals)
        return price

    def get_usd_value(self, asset: str, amount: int) -> int:
        return usd_value(amount, self.price(asset))

    def get_token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        return token_amount_from_usd(usd_amount, self.price(asset))

    def get_account_collateral_value(self, user: str) -> int:
        total = 0
        for asset, amount in self._collateral.balances(user).items():
            if amount:
                total += self.get_usd_value(asset, amount)
        return total

    def get_account_information(self, user: str) -> AccountInformation:
        return AccountInformation(
            total_debt_minted=self._debt.debt_of(user),
            collateral_value_usd=self.get_account_collateral_value(user),
        )

    def health_factor(self, user: str) -> int:
        total_debt = self._debt.debt_of(user)
        if total_debt == 0:
            return calc_health_factor(0, 0)
        info = self.get_account_information(user)
        return calc_health_factor(info.total_debt_minted, info.collateral_value_usd)
