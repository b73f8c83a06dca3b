"""Atomic operation boundary and re-entrancy guard."""
from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from .errors import EngineError, ReentrancyError
from .interfaces.token import Journaled

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class Transaction:
    """Snapshot participants on entry, restore them all if the body raises.

    Participants are objects exposing ``snapshot()`` / ``restore(state)``.
    Collaborators without those methods are not restored.
    """

    def __init__(self, participants: Iterable[object], name: str = "tx") -> None:
        self.participants: list[Journaled] = [
            p for p in participants if hasattr(p, "snapshot") and hasattr(p, "restore")
        ]
        self.name = name
        self._snapshots: list[tuple[Journaled, Any]] = []

    def __enter__(self) -> Transaction:
        self._snapshots = [(p, p.snapshot()) for p in self.participants]
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self._rollback()
            if isinstance(exc, EngineError):
                logger.warning(
                    "%s reverted (%s): %s", self.name, exc.kind.value, exc
                )
            else:
                logger.error("%s reverted on unexpected error: %s", self.name, exc)
        self._snapshots = []
        return False

    def _rollback(self) -> None:
        for participant, state in reversed(self._snapshots):
            participant.restore(state)


def atomic(func: F) -> F:
    """Run an engine method as one non-reentrant, all-or-nothing unit.

    The decorated object must provide ``_participants()`` and an
    ``_in_flight`` attribute.
    """

    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        if self._in_flight is not None:
            raise ReentrancyError(func.__name__)
        self._in_flight = func.__name__
        try:
            with Transaction(self._participants(), name=func.__name__):
                return func(self, *args, **kwargs)
        finally:
            self._in_flight = None

    return wrapper  # type: ignore[return-value]


def guarded_read(func: F) -> F:
    """Reject a read made while an atomic operation of the same object runs.

    Ledgers are written before external calls, so a collaborator calling back
    mid-operation would otherwise see balances that are not yet settled.
    """

    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        if self._in_flight is not None:
            raise ReentrancyError(func.__name__)
        return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
