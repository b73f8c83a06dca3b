"""Pyth Network price source."""
from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from ..models import PriceData

logger = logging.getLogger(__name__)


class PythPriceSource:
    """Fetch latest price rounds from the Pyth Hermes API.

    Staleness is not judged here; ``publish_time`` is passed through as
    ``updated_at`` for whoever consumes the round.
    """

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.price_feeds = dict(config.feeds)
        self.timeout = config.timeout

    async def fetch_round_data(self, names: list[str] | None = None) -> dict[str, PriceData]:
        """Fetch current rounds from Pyth Network.

        Args:
            names: Optional list of feed names to fetch. If None, fetches all
                   configured feeds.
        """
        rounds: dict[str, PriceData] = {}

        feeds = self.price_feeds
        if names is not None:
            feeds = {k: v for k, v in self.price_feeds.items() if k in names}

        feed_ids = list(set(feeds.values()))
        if not feed_ids:
            return rounds

        query_params = "&".join([f"ids[]={fid}" for fid in feed_ids])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(connector=connector, timeout=timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return rounds

                    data = await response.json()
                    parsed = data.get("parsed", [])

                    # Hermes returns ids without the 0x prefix
                    id_to_names: dict[str, list[str]] = {}
                    for name, feed_id in feeds.items():
                        id_to_names.setdefault(feed_id.lower().removeprefix("0x"), []).append(name)

                    for item in parsed:
                        feed_id = str(item.get("id", "")).lower().removeprefix("0x")
                        price_data = item.get("price", {})
                        round_data = PriceData(
                            answer=int(price_data.get("price", 0)),
                            decimals=-int(price_data.get("expo", 0)),
                            updated_at=int(price_data.get("publish_time", 0)),
                        )

                        for name in id_to_names.get(feed_id, []):
                            rounds[name] = round_data

                    logger.info("Fetched prices from Pyth Network:")
                    for name, r in sorted(rounds.items()):
                        logger.info("  %s: %d (expo -%d)", name, r.answer, r.decimals)

        except (aiohttp.ClientError, TimeoutError, ConnectionError, ValueError) as e:
            logger.error("Error fetching prices from Pyth: %s", e)

        return rounds
