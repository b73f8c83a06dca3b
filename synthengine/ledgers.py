"""Collateral and debt ledgers.

Both ledgers record the change in :class:`EngineState` first and only then ask
the external token to move funds, so a failing or re-entering collaborator
never observes a half-applied ledger.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .errors import (
    EngineError,
    InsufficientCollateralError,
    InsufficientDebtError,
    MintFailedError,
    NonPositiveAmountError,
    TransferFailedError,
)
from .interfaces.token import DebtToken
from .models import CollateralDeposited, CollateralRedeemed
from .registry import AssetRegistry
from .state import EngineState

logger = logging.getLogger(__name__)


def require_positive(amount: int) -> None:
    if amount <= 0:
        raise NonPositiveAmountError(amount)


def _external_call(
    error: type[EngineError], message: str, call: Callable[..., Any], *args: Any
) -> Any:
    """Invoke a token method, turning a raised fault into ``error``.

    Engine errors raised from inside the collaborator (a rejected re-entrant
    call, for instance) propagate unchanged.
    """
    try:
        return call(*args)
    except EngineError:
        raise
    except Exception as e:
        logger.warning("%s: %s", message, e)
        raise error(f"{message}: {e}") from e


class CollateralLedger:
    """Per-user, per-asset deposited collateral."""

    def __init__(self, state: EngineState, registry: AssetRegistry, custodian: str) -> None:
        self._state = state
        self._registry = registry
        self._custodian = custodian

    def balance_of(self, user: str, asset: str) -> int:
        return self._state.collateral.get(user, {}).get(asset, 0)

    def balances(self, user: str) -> dict[str, int]:
        held = self._state.collateral.get(user, {})
        return {asset: held.get(asset, 0) for asset in self._registry.addresses}

    def total_deposited(self, asset: str) -> int:
        return sum(held.get(asset, 0) for held in self._state.collateral.values())

    def deposit(self, user: str, asset: str, amount: int) -> None:
        require_positive(amount)
        token = self._registry.token(asset)

        held = self._state.collateral.setdefault(user, {})
        held[asset] = held.get(asset, 0) + amount
        self._state.events.append(CollateralDeposited(user=user, asset=asset, amount=amount))

        message = f"Collateral transfer of {amount} {asset} from {user} failed"
        if not _external_call(
            TransferFailedError, message, token.transfer_from, user, self._custodian, amount
        ):
            raise TransferFailedError(message)
        logger.debug("Deposited %d %s for %s", amount, asset, user)

    def withdraw(self, from_user: str, to: str, asset: str, amount: int) -> None:
        require_positive(amount)
        self.seize(from_user, to, asset, amount)

    def seize(self, from_user: str, to: str, asset: str, amount: int) -> None:
        """Move ``amount`` of ``from_user``'s collateral to ``to``.

        Unlike :meth:`withdraw`, a zero amount is accepted and moves nothing;
        liquidations of dust debt quote zero collateral.
        """
        token = self._registry.token(asset)

        available = self.balance_of(from_user, asset)
        if amount > available:
            raise InsufficientCollateralError(from_user, asset, amount, available)
        if amount == 0:
            return

        self._state.collateral[from_user][asset] = available - amount
        self._state.events.append(
            CollateralRedeemed(
                redeemed_from=from_user, redeemed_to=to, asset=asset, amount=amount
            )
        )

        message = f"Collateral transfer of {amount} {asset} to {to} failed"
        if not _external_call(
            TransferFailedError, message, token.transfer, self._custodian, to, amount
        ):
            raise TransferFailedError(message)
        logger.debug("Withdrew %d %s from %s to %s", amount, asset, from_user, to)


class DebtLedger:
    """Per-user minted debt."""

    def __init__(self, state: EngineState, debt_token: DebtToken, custodian: str) -> None:
        self._state = state
        self._debt_token = debt_token
        self._custodian = custodian

    def debt_of(self, user: str) -> int:
        return self._state.debt.get(user, 0)

    def total_debt(self) -> int:
        return sum(self._state.debt.values())

    def mint(self, user: str, amount: int) -> None:
        """Record new debt and mint the tokens.

        The caller must assert the user's health factor afterwards; the
        ledger itself does not authorize the mint.
        """
        require_positive(amount)
        self._state.debt[user] = self.debt_of(user) + amount

        message = f"Debt token mint of {amount} to {user} failed"
        if not _external_call(MintFailedError, message, self._debt_token.mint, user, amount):
            raise MintFailedError(message)
        logger.debug("Minted %d debt for %s", amount, user)

    def burn(self, on_behalf_of: str, payer: str, amount: int) -> None:
        require_positive(amount)
        minted = self.debt_of(on_behalf_of)
        if amount > minted:
            raise InsufficientDebtError(on_behalf_of, amount, minted)

        self._state.debt[on_behalf_of] = minted - amount

        message = f"Debt token transfer of {amount} from {payer} failed"
        if not _external_call(
            TransferFailedError, message,
            self._debt_token.transfer_from, payer, self._custodian, amount,
        ):
            raise TransferFailedError(message)
        _external_call(
            TransferFailedError, f"Debt token burn of {amount} failed",
            self._debt_token.burn, self._custodian, amount,
        )
        logger.debug("Burned %d debt of %s paid by %s", amount, on_behalf_of, payer)
