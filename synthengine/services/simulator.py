"""Scenario runner — drives an engine through scripted steps."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from ..constants import MAX_HEALTH_FACTOR
from ..errors import EngineError
from ..factory import Deployment
from ..pricing import from_wei, to_wei

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    index: int
    action: str
    ok: bool
    error: str = ""
    error_kind: str = ""
    detail: str = ""
    expect: str = "ok"

    @property
    def passed(self) -> bool:
        """Whether the outcome matches the step's ``expect`` entry.

        ``expect`` is ``ok``, an error class name or an error kind.
        """
        if self.expect == "ok":
            return self.ok
        return not self.ok and self.expect in (self.error, self.error_kind)


def load_scenario(path: str | Path) -> list[dict[str, Any]]:
    """Read a scenario file: a mapping with a ``steps`` list."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    steps = raw.get("steps", [])
    if not isinstance(steps, list):
        raise ValueError(f"'steps' must be a list in {path}")
    return steps


def _usd(amount: int) -> str:
    return f"${from_wei(amount):,.2f}"


def _health(value: int) -> str:
    if value == MAX_HEALTH_FACTOR:
        return "∞"
    return f"{from_wei(value):.4f}"


class Simulator:
    """Execute scenario steps against a :class:`Deployment`.

    Amounts in steps are human units (``1.5`` tokens, ``2000`` USD) and are
    converted to 18-decimal integers. Engine errors are recorded on the step
    result; anything else propagates.
    """

    def __init__(self, deployment: Deployment) -> None:
        self._d = deployment
        self._engine = deployment.engine
        self._handlers = {
            "fund": self._fund,
            "deposit": self._deposit,
            "mint": self._mint,
            "deposit_and_mint": self._deposit_and_mint,
            "redeem": self._redeem,
            "burn": self._burn,
            "redeem_for_debt": self._redeem_for_debt,
            "liquidate": self._liquidate,
            "set_price": self._set_price,
            "inspect": self._inspect,
        }

    def run(self, steps: list[dict[str, Any]]) -> list[StepResult]:
        return [self.run_step(i, step) for i, step in enumerate(steps, start=1)]

    def run_step(self, index: int, step: dict[str, Any]) -> StepResult:
        action = step.get("action", "")
        expect = str(step.get("expect", "ok"))
        handler = self._handlers.get(action)
        if handler is None:
            raise ValueError(f"Step {index}: unknown action '{action}'")

        try:
            detail = handler(step)
        except EngineError as e:
            result = StepResult(
                index=index,
                action=action,
                ok=False,
                error=type(e).__name__,
                error_kind=e.kind.value,
                detail=str(e),
                expect=expect,
            )
        else:
            result = StepResult(index=index, action=action, ok=True, detail=detail, expect=expect)

        if not result.passed:
            logger.warning("Step %d (%s) did not match expectation '%s'", index, action, expect)
        return result

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def _fund(self, step: dict[str, Any]) -> str:
        token = self._d.tokens[step["token"]]
        token.mint_to(step["account"], to_wei(step["amount"]))
        return f"{step['account']} funded with {step['amount']} {step['token']}"

    def _deposit(self, step: dict[str, Any]) -> str:
        self._engine.deposit_collateral(step["user"], step["asset"], to_wei(step["amount"]))
        return self._describe(step["user"])

    def _mint(self, step: dict[str, Any]) -> str:
        self._engine.mint(step["user"], to_wei(step["amount"]))
        return self._describe(step["user"])

    def _deposit_and_mint(self, step: dict[str, Any]) -> str:
        self._engine.deposit_collateral_and_mint(
            step["user"], step["asset"], to_wei(step["collateral"]), to_wei(step["debt"])
        )
        return self._describe(step["user"])

    def _redeem(self, step: dict[str, Any]) -> str:
        self._engine.redeem_collateral(step["user"], step["asset"], to_wei(step["amount"]))
        return self._describe(step["user"])

    def _burn(self, step: dict[str, Any]) -> str:
        self._engine.burn(step["user"], to_wei(step["amount"]))
        return self._describe(step["user"])

    def _redeem_for_debt(self, step: dict[str, Any]) -> str:
        self._engine.redeem_collateral_for_debt(
            step["user"], step["asset"], to_wei(step["collateral"]), to_wei(step["debt"])
        )
        return self._describe(step["user"])

    def _liquidate(self, step: dict[str, Any]) -> str:
        result = self._engine.liquidate(
            step["liquidator"], step["asset"], step["user"], to_wei(step["debt"])
        )
        return (
            f"seized {from_wei(result.collateral_seized):f} {result.asset} "
            f"(bonus {from_wei(result.bonus):f}); "
            f"HF {_health(result.health_factor_before)} -> "
            f"{_health(result.health_factor_after)}"
        )

    def _set_price(self, step: dict[str, Any]) -> str:
        feed = self._d.feeds[step["feed"]]
        answer = int(Decimal(str(step["price"])) * 10**feed.decimals)
        feed.update_answer(answer)
        return f"{step['feed']} = ${step['price']}"

    def _inspect(self, step: dict[str, Any]) -> str:
        return self._describe(step["user"])

    def _describe(self, user: str) -> str:
        info = self._engine.get_account_information(user)
        hf = self._engine.health_factor(user)
        return (
            f"{user}: collateral {_usd(info.collateral_value_usd)} · "
            f"debt {_usd(info.total_debt_minted)} · HF {_health(hf)}"
        )
