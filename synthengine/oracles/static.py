"""In-memory price feed and feed construction from configuration."""
from __future__ import annotations

import logging
import time

from ..config import PriceOracleConfig
from ..models import PriceData
from .pyth import PythPriceSource

logger = logging.getLogger(__name__)


class StaticPriceFeed:
    """Feed holding a single round that callers update explicitly."""

    def __init__(self, answer: int, decimals: int = 8, updated_at: int | None = None) -> None:
        self._round = PriceData(
            answer=answer,
            decimals=decimals,
            updated_at=int(time.time()) if updated_at is None else updated_at,
        )

    def __repr__(self) -> str:
        return f"StaticPriceFeed(answer={self._round.answer}, decimals={self._round.decimals})"

    @property
    def decimals(self) -> int:
        return self._round.decimals

    def latest_round_data(self) -> PriceData:
        return self._round

    def update_answer(self, answer: int, updated_at: int | None = None) -> None:
        self.update_round(
            PriceData(
                answer=answer,
                decimals=self._round.decimals,
                updated_at=int(time.time()) if updated_at is None else updated_at,
            )
        )

    def update_round(self, round_data: PriceData) -> None:
        self._round = round_data


async def build_price_feeds(config: PriceOracleConfig) -> dict[str, StaticPriceFeed]:
    """Build one feed per configured name, fetching live rounds for Pyth."""
    if config.provider == "pyth":
        rounds = await PythPriceSource(config.pyth).fetch_round_data()
        missing = sorted(set(config.pyth.feeds) - set(rounds))
        if missing:
            raise ValueError(f"No price data for feeds: {', '.join(missing)}")
        return {
            name: StaticPriceFeed(r.answer, r.decimals, r.updated_at)
            for name, r in rounds.items()
        }

    feeds = {
        name: StaticPriceFeed(cfg.answer, cfg.decimals)
        for name, cfg in config.static.items()
    }
    logger.info("Built %d static price feeds", len(feeds))
    return feeds
