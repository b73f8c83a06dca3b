"""Unit tests for the collateral and debt ledgers."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from synthengine.errors import (
    ErrorKind,
    InsufficientCollateralError,
    InsufficientDebtError,
    MintFailedError,
    NonPositiveAmountError,
    ReentrancyError,
    TransferFailedError,
    UnsupportedAssetError,
)
from synthengine.ledgers import CollateralLedger, DebtLedger
from synthengine.models import CollateralDeposited, CollateralRedeemed
from synthengine.oracles.static import StaticPriceFeed
from synthengine.registry import AssetRegistry
from synthengine.state import EngineState
from synthengine.tokens import InMemoryDebtToken, InMemoryToken

ENGINE = "engine"


@pytest.fixture()
def state() -> EngineState:
    return EngineState()


@pytest.fixture()
def token() -> InMemoryToken:
    t = InMemoryToken("WETH")
    t.mint_to("alice", 100)
    return t


@pytest.fixture()
def collateral(state: EngineState, token: InMemoryToken) -> CollateralLedger:
    registry = AssetRegistry([token], [StaticPriceFeed(2000 * 10**8)])
    return CollateralLedger(state, registry, ENGINE)


@pytest.fixture()
def debt_token() -> InMemoryDebtToken:
    return InMemoryDebtToken("DSC")


@pytest.fixture()
def debt(state: EngineState, debt_token: InMemoryDebtToken) -> DebtLedger:
    return DebtLedger(state, debt_token, ENGINE)


class TestCollateralLedger:
    def test_deposit_credits_and_transfers(
        self, collateral: CollateralLedger, token: InMemoryToken, state: EngineState
    ) -> None:
        collateral.deposit("alice", "WETH", 40)
        assert collateral.balance_of("alice", "WETH") == 40
        assert token.balance_of(ENGINE) == 40
        assert token.balance_of("alice") == 60
        assert state.events == [CollateralDeposited(user="alice", asset="WETH", amount=40)]

    def test_zero_deposit_rejected(self, collateral: CollateralLedger) -> None:
        with pytest.raises(NonPositiveAmountError):
            collateral.deposit("alice", "WETH", 0)

    def test_negative_deposit_rejected(self, collateral: CollateralLedger) -> None:
        with pytest.raises(NonPositiveAmountError):
            collateral.deposit("alice", "WETH", -1)

    def test_unsupported_asset_rejected(self, collateral: CollateralLedger) -> None:
        with pytest.raises(UnsupportedAssetError):
            collateral.deposit("alice", "DOGE", 1)

    def test_failed_transfer_raises_after_ledger_write(
        self, collateral: CollateralLedger, state: EngineState
    ) -> None:
        # The ledger is written before the transfer; rollback is the caller's job.
        with pytest.raises(TransferFailedError):
            collateral.deposit("alice", "WETH", 1000)
        assert state.collateral["alice"]["WETH"] == 1000

    def test_withdraw_moves_tokens_to_recipient(
        self, collateral: CollateralLedger, token: InMemoryToken, state: EngineState
    ) -> None:
        collateral.deposit("alice", "WETH", 40)
        collateral.withdraw("alice", "bob", "WETH", 15)
        assert collateral.balance_of("alice", "WETH") == 25
        assert token.balance_of("bob") == 15
        assert state.events[-1] == CollateralRedeemed(
            redeemed_from="alice", redeemed_to="bob", asset="WETH", amount=15
        )

    def test_withdraw_more_than_balance_rejected(self, collateral: CollateralLedger) -> None:
        collateral.deposit("alice", "WETH", 10)
        with pytest.raises(InsufficientCollateralError) as exc_info:
            collateral.withdraw("alice", "alice", "WETH", 11)
        assert exc_info.value.available == 10

    def test_withdraw_everything_keeps_zero_entry(self, collateral: CollateralLedger) -> None:
        collateral.deposit("alice", "WETH", 10)
        collateral.withdraw("alice", "alice", "WETH", 10)
        assert collateral.balances("alice") == {"WETH": 0}

    def test_seize_zero_moves_nothing(
        self, collateral: CollateralLedger, token: InMemoryToken, state: EngineState
    ) -> None:
        collateral.deposit("alice", "WETH", 10)
        collateral.seize("alice", "bob", "WETH", 0)
        assert collateral.balance_of("alice", "WETH") == 10
        assert token.balance_of("bob") == 0
        assert len(state.events) == 1

    def test_withdraw_zero_still_rejected(self, collateral: CollateralLedger) -> None:
        collateral.deposit("alice", "WETH", 10)
        with pytest.raises(NonPositiveAmountError):
            collateral.withdraw("alice", "alice", "WETH", 0)

    def test_total_deposited(self, collateral: CollateralLedger, token: InMemoryToken) -> None:
        token.mint_to("bob", 5)
        collateral.deposit("alice", "WETH", 10)
        collateral.deposit("bob", "WETH", 5)
        assert collateral.total_deposited("WETH") == 15


class TestDebtLedger:
    def test_mint_records_and_mints(
        self, debt: DebtLedger, debt_token: InMemoryDebtToken
    ) -> None:
        debt.mint("alice", 50)
        assert debt.debt_of("alice") == 50
        assert debt_token.balance_of("alice") == 50

    def test_mint_zero_rejected(self, debt: DebtLedger) -> None:
        with pytest.raises(NonPositiveAmountError):
            debt.mint("alice", 0)

    def test_mint_failure(self, state: EngineState) -> None:
        ledger = DebtLedger(state, InMemoryDebtToken(fail_mints=True), ENGINE)
        with pytest.raises(MintFailedError):
            ledger.mint("alice", 1)

    def test_burn_pulls_from_payer_and_destroys(
        self, debt: DebtLedger, debt_token: InMemoryDebtToken
    ) -> None:
        debt.mint("alice", 50)
        debt_token.mint_to("bob", 20)
        debt.burn("alice", "bob", 20)
        assert debt.debt_of("alice") == 30
        assert debt_token.balance_of("bob") == 0
        assert debt_token.balance_of(ENGINE) == 0
        assert debt_token.total_supply == 50

    def test_burn_more_than_minted_rejected(self, debt: DebtLedger) -> None:
        debt.mint("alice", 5)
        with pytest.raises(InsufficientDebtError):
            debt.burn("alice", "alice", 6)

    def test_burn_without_payer_tokens_fails(
        self, debt: DebtLedger, debt_token: InMemoryDebtToken
    ) -> None:
        debt.mint("alice", 5)
        debt_token.transfer("alice", "carol", 5)
        with pytest.raises(TransferFailedError):
            debt.burn("alice", "alice", 5)

    def test_total_debt(self, debt: DebtLedger) -> None:
        debt.mint("alice", 5)
        debt.mint("bob", 7)
        assert debt.total_debt() == 12


class _RaisingToken(InMemoryToken):
    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        raise RuntimeError("token contract fault")


class TestCollaboratorFaults:
    @pytest.fixture()
    def faulty(self, state: EngineState) -> CollateralLedger:
        token = _RaisingToken("WETH")
        token.mint_to("alice", 100)
        registry = AssetRegistry([token], [StaticPriceFeed(2000 * 10**8)])
        return CollateralLedger(state, registry, ENGINE)

    def test_raising_deposit_transfer_becomes_transfer_failed(
        self, faulty: CollateralLedger
    ) -> None:
        with pytest.raises(TransferFailedError, match="token contract fault") as exc_info:
            faulty.deposit("alice", "WETH", 10)
        assert exc_info.value.kind is ErrorKind.EXTERNAL
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_raising_withdraw_transfer_becomes_transfer_failed(
        self, faulty: CollateralLedger, state: EngineState
    ) -> None:
        state.collateral["alice"] = {"WETH": 10}
        with pytest.raises(TransferFailedError):
            faulty.withdraw("alice", "alice", "WETH", 5)

    def test_raising_mint_becomes_mint_failed(self, state: EngineState) -> None:
        token = MagicMock()
        token.mint.side_effect = RuntimeError("node down")
        with pytest.raises(MintFailedError, match="node down"):
            DebtLedger(state, token, ENGINE).mint("alice", 1)

    def test_raising_burn_becomes_transfer_failed(self, state: EngineState) -> None:
        token = MagicMock()
        token.mint.return_value = True
        token.transfer_from.return_value = True
        token.burn.side_effect = ValueError("burn refused")
        ledger = DebtLedger(state, token, ENGINE)
        ledger.mint("alice", 5)
        with pytest.raises(TransferFailedError, match="burn refused"):
            ledger.burn("alice", "alice", 5)

    def test_engine_errors_from_collaborator_pass_through(self, state: EngineState) -> None:
        token = MagicMock()
        token.mint.side_effect = ReentrancyError("mint")
        with pytest.raises(ReentrancyError):
            DebtLedger(state, token, ENGINE).mint("alice", 1)
