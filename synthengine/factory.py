"""Wire an engine with in-memory tokens from configuration."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import EngineConfig
from .oracles.static import StaticPriceFeed
from .services.engine import CoreEngine
from .tokens import InMemoryDebtToken, InMemoryToken

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    engine: CoreEngine
    tokens: dict[str, InMemoryToken]
    debt_token: InMemoryDebtToken
    feeds: dict[str, StaticPriceFeed]


def build_engine(config: EngineConfig, feeds: dict[str, StaticPriceFeed]) -> Deployment:
    """Create collateral tokens, a debt token and the engine.

    Tokens and feeds are passed to the engine in configuration order, so a
    length mismatch surfaces as the engine's ``ConfigurationError``.
    """
    tokens = {symbol: InMemoryToken(symbol) for symbol in config.collateral_tokens}
    debt_token = InMemoryDebtToken(config.debt_token)
    engine = CoreEngine(
        collateral_tokens=[tokens[s] for s in config.collateral_tokens],
        price_feeds=[feeds[name] for name in config.price_feeds],
        debt_token=debt_token,
        address=config.address,
    )
    return Deployment(engine=engine, tokens=tokens, debt_token=debt_token, feeds=feeds)
