"""In-memory token implementations used by simulations and tests."""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryToken:
    """Balance-only fungible token.

    Transfers report failure with ``False`` instead of raising, the way the
    engine's collateral contract expects. ``fail_transfers`` forces every
    transfer to fail.
    """

    def __init__(self, address: str, symbol: str = "", fail_transfers: bool = False) -> None:
        self._address = address
        self.symbol = symbol or address
        self.fail_transfers = fail_transfers
        self.balances: dict[str, int] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._address!r})"

    @property
    def address(self) -> str:
        return self._address

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def mint_to(self, account: str, amount: int) -> None:
        """Credit ``account`` out of thin air (faucet)."""
        self.balances[account] = self.balance_of(account) + amount

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if self.fail_transfers or amount < 0 or self.balance_of(sender) < amount:
            logger.debug("%s transfer %s -> %s of %d refused", self.symbol, sender, recipient, amount)
            return False
        self.balances[sender] = self.balance_of(sender) - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        return True

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        return self.transfer(sender, recipient, amount)

    def snapshot(self) -> Any:
        return dict(self.balances)

    def restore(self, state: Any) -> None:
        self.balances = dict(state)


class InMemoryDebtToken(InMemoryToken):
    """Synthetic debt token; only the engine is expected to mint and burn."""

    def __init__(
        self,
        address: str = "DSC",
        symbol: str = "",
        fail_transfers: bool = False,
        fail_mints: bool = False,
    ) -> None:
        super().__init__(address, symbol, fail_transfers)
        self.fail_mints = fail_mints

    @property
    def total_supply(self) -> int:
        return sum(self.balances.values())

    def mint(self, account: str, amount: int) -> bool:
        if self.fail_mints or amount <= 0:
            return False
        self.mint_to(account, amount)
        return True

    def burn(self, holder: str, amount: int) -> None:
        balance = self.balance_of(holder)
        if amount <= 0:
            raise ValueError(f"Burn amount must be positive, got {amount}")
        if balance < amount:
            raise ValueError(f"Burn amount {amount} exceeds balance {balance} of {holder}")
        self.balances[holder] = balance - amount
