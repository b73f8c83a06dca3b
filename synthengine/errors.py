"""Engine error taxonomy.

Every failure aborts the whole operation and surfaces as one of the classes
below. ``kind`` groups them so callers can branch without matching every
class.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    EXTERNAL = "external"
    INVARIANT = "invariant"
    LIQUIDATION = "liquidation"
    CONCURRENCY = "concurrency"


class EngineError(Exception):
    """Base class for all engine failures."""

    kind: ErrorKind = ErrorKind.VALIDATION


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class NonPositiveAmountError(EngineError):
    def __init__(self, amount: int) -> None:
        super().__init__(f"Amount must be more than zero, got {amount}")
        self.amount = amount


class UnsupportedAssetError(EngineError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"Token not supported: {asset}")
        self.asset = asset


class ConfigurationError(EngineError):
    """Rejected construction parameters."""


class InsufficientCollateralError(EngineError):
    def __init__(self, user: str, asset: str, requested: int, available: int) -> None:
        super().__init__(
            f"Cannot withdraw {requested} {asset} from {user}: balance is {available}"
        )
        self.user = user
        self.asset = asset
        self.requested = requested
        self.available = available


class InsufficientDebtError(EngineError):
    def __init__(self, user: str, requested: int, available: int) -> None:
        super().__init__(
            f"Cannot burn {requested} debt for {user}: minted is {available}"
        )
        self.user = user
        self.requested = requested
        self.available = available


# ---------------------------------------------------------------------------
# External collaborator failures
# ---------------------------------------------------------------------------


class TransferFailedError(EngineError):
    kind = ErrorKind.EXTERNAL


class MintFailedError(EngineError):
    kind = ErrorKind.EXTERNAL


class PriceFeedError(EngineError):
    kind = ErrorKind.EXTERNAL

    def __init__(self, asset: str, reason: str) -> None:
        super().__init__(f"Price feed for {asset} failed: {reason}")
        self.asset = asset
        self.reason = reason


class InvalidPriceError(EngineError):
    kind = ErrorKind.EXTERNAL

    def __init__(self, asset: str, answer: int) -> None:
        super().__init__(f"Price feed for {asset} returned non-positive answer {answer}")
        self.asset = asset
        self.answer = answer


# ---------------------------------------------------------------------------
# Invariant and liquidation failures
# ---------------------------------------------------------------------------


class HealthFactorBrokenError(EngineError):
    kind = ErrorKind.INVARIANT

    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(f"Health factor broken for {user}: {health_factor}")
        self.user = user
        self.health_factor = health_factor


class HealthFactorOkError(EngineError):
    kind = ErrorKind.LIQUIDATION

    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(f"Health factor is good for {user}: {health_factor}")
        self.user = user
        self.health_factor = health_factor


class HealthFactorNotImprovedError(EngineError):
    kind = ErrorKind.LIQUIDATION

    def __init__(self, user: str, before: int, after: int) -> None:
        super().__init__(
            f"Liquidation did not improve health factor for {user}: {before} -> {after}"
        )
        self.user = user
        self.before = before
        self.after = after


class ReentrancyError(EngineError):
    kind = ErrorKind.CONCURRENCY

    def __init__(self, operation: str) -> None:
        super().__init__(f"Re-entrant call into {operation} rejected")
        self.operation = operation
