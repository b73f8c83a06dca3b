"""Owned engine store: collateral and debt mappings plus the event log."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Union

from .models import CollateralDeposited, CollateralRedeemed

Event = Union[CollateralDeposited, CollateralRedeemed]


@dataclass
class EngineState:
    """Mutable ledger state owned by a single engine instance.

    ``collateral`` maps user → asset → amount, ``debt`` maps user → minted
    amount. Entries are created on first touch and never removed.
    """

    collateral: dict[str, dict[str, int]] = field(default_factory=dict)
    debt: dict[str, int] = field(default_factory=dict)
    events: list[Event] = field(default_factory=list)

    def snapshot(self) -> Any:
        return (copy.deepcopy(self.collateral), dict(self.debt), len(self.events))

    def restore(self, state: Any) -> None:
        collateral, debt, event_count = state
        self.collateral = collateral
        self.debt = debt
        del self.events[event_count:]
