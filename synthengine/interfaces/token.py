"""Token protocols for collateral assets and the debt token."""
from typing import Any, Protocol


class CollateralToken(Protocol):
    """Transfer surface the engine needs from an approved collateral asset."""

    @property
    def address(self) -> str: ...

    def balance_of(self, account: str) -> int: ...

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...


class DebtToken(Protocol):
    """Mint/burn surface the engine needs from the synthetic debt token."""

    @property
    def address(self) -> str: ...

    def balance_of(self, account: str) -> int: ...

    def mint(self, account: str, amount: int) -> bool: ...

    def burn(self, holder: str, amount: int) -> None: ...

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool: ...


class Journaled(Protocol):
    """State that can be captured and restored by a transaction."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...
