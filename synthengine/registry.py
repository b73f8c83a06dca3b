"""Approved collateral assets and their price feeds."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from types import MappingProxyType

from .errors import ConfigurationError, UnsupportedAssetError
from .interfaces.price_feed import PriceFeed
from .interfaces.token import CollateralToken
from .models import CollateralAsset

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Immutable mapping of asset address → :class:`CollateralAsset`.

    Built once from two parallel, ordered sequences; there is no way to add or
    remove assets afterwards.
    """

    def __init__(
        self,
        tokens: Sequence[CollateralToken],
        price_feeds: Sequence[PriceFeed],
    ) -> None:
        if len(tokens) != len(price_feeds):
            raise ConfigurationError(
                "Token addresses and price feed addresses must be the same length "
                f"({len(tokens)} != {len(price_feeds)})"
            )
        if not tokens:
            raise ConfigurationError("At least one collateral token is required")

        assets: dict[str, CollateralAsset] = {}
        for token, feed in zip(tokens, price_feeds):
            if token.address in assets:
                raise ConfigurationError(f"Duplicate collateral token: {token.address}")
            assets[token.address] = CollateralAsset(
                address=token.address, token=token, price_feed=feed
            )

        self._assets = MappingProxyType(assets)
        logger.debug("Registered collateral assets: %s", ", ".join(assets))

    def __contains__(self, asset: object) -> bool:
        return asset in self._assets

    def __iter__(self) -> Iterator[CollateralAsset]:
        return iter(self._assets.values())

    def __len__(self) -> int:
        return len(self._assets)

    @property
    def addresses(self) -> tuple[str, ...]:
        return tuple(self._assets)

    def get(self, asset: str) -> CollateralAsset:
        """Return the registered asset or raise :class:`UnsupportedAssetError`."""
        try:
            return self._assets[asset]
        except KeyError:
            raise UnsupportedAssetError(asset) from None

    def token(self, asset: str) -> CollateralToken:
        return self.get(asset).token

    def price_feed(self, asset: str) -> PriceFeed:
        return self.get(asset).price_feed
