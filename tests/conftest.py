"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from synthengine.config import (
    AppConfig,
    EngineConfig,
    PriceOracleConfig,
    PythConfig,
    StaticFeedConfig,
)
from synthengine.oracles.static import StaticPriceFeed
from synthengine.pricing import to_wei
from synthengine.services.engine import CoreEngine
from synthengine.tokens import InMemoryDebtToken, InMemoryToken

USER = "0xUSER"
LIQUIDATOR = "0xLIQUIDATOR"

ETH_USD_PRICE = 2000 * 10**8
BTC_USD_PRICE = 1000 * 10**8

COLLATERAL_AMOUNT = to_wei(10)
AMOUNT_TO_MINT = to_wei(100)
COLLATERAL_TO_COVER = to_wei(20)


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def weth() -> InMemoryToken:
    token = InMemoryToken("WETH")
    token.mint_to(USER, COLLATERAL_AMOUNT)
    return token


@pytest.fixture()
def wbtc() -> InMemoryToken:
    token = InMemoryToken("WBTC")
    token.mint_to(USER, COLLATERAL_AMOUNT)
    return token


@pytest.fixture()
def eth_usd() -> StaticPriceFeed:
    return StaticPriceFeed(ETH_USD_PRICE, decimals=8, updated_at=1_700_000_000)


@pytest.fixture()
def btc_usd() -> StaticPriceFeed:
    return StaticPriceFeed(BTC_USD_PRICE, decimals=8, updated_at=1_700_000_000)


@pytest.fixture()
def dsc() -> InMemoryDebtToken:
    return InMemoryDebtToken("DSC")


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine(
    weth: InMemoryToken,
    wbtc: InMemoryToken,
    eth_usd: StaticPriceFeed,
    btc_usd: StaticPriceFeed,
    dsc: InMemoryDebtToken,
) -> CoreEngine:
    return CoreEngine([weth, wbtc], [eth_usd, btc_usd], dsc, address="engine")


@pytest.fixture()
def engine_deposited(engine: CoreEngine) -> CoreEngine:
    engine.deposit_collateral(USER, "WETH", COLLATERAL_AMOUNT)
    return engine


@pytest.fixture()
def engine_minted(engine: CoreEngine) -> CoreEngine:
    engine.deposit_collateral_and_mint(USER, "WETH", COLLATERAL_AMOUNT, AMOUNT_TO_MINT)
    return engine


@pytest.fixture()
def funded_liquidator(
    engine_minted: CoreEngine, weth: InMemoryToken
) -> CoreEngine:
    """Liquidator holding AMOUNT_TO_MINT debt tokens backed by 20 WETH."""
    weth.mint_to(LIQUIDATOR, COLLATERAL_TO_COVER)
    engine_minted.deposit_collateral_and_mint(
        LIQUIDATOR, "WETH", COLLATERAL_TO_COVER, AMOUNT_TO_MINT
    )
    return engine_minted


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_engine_config() -> EngineConfig:
    return EngineConfig(
        address="engine",
        debt_token="DSC",
        collateral_tokens=("WETH", "WBTC"),
        price_feeds=("ETH_USD", "BTC_USD"),
    )


@pytest.fixture()
def sample_pyth_config() -> PythConfig:
    return PythConfig(
        hermes_url="https://hermes.pyth.network/v2/updates/price/latest",
        feeds={"ETH_USD": "aaa111", "BTC_USD": "bbb222"},
    )


@pytest.fixture()
def sample_app_config(
    sample_engine_config: EngineConfig, sample_pyth_config: PythConfig
) -> AppConfig:
    return AppConfig(
        engine=sample_engine_config,
        price_oracle=PriceOracleConfig(
            provider="static",
            static={
                "ETH_USD": StaticFeedConfig(answer=ETH_USD_PRICE, decimals=8),
                "BTC_USD": StaticFeedConfig(answer=BTC_USD_PRICE, decimals=8),
            },
            pyth=sample_pyth_config,
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    engine:
      address: engine
      debt_token: DSC
      collateral_tokens: [WETH, WBTC]
      price_feeds: [ETH_USD, BTC_USD]
    price_oracle:
      provider: static
      static:
        ETH_USD: {answer: 200000000000, decimals: 8}
        BTC_USD: {answer: 100000000000, decimals: 8}
      pyth:
        hermes_url: "https://hermes.example.com"
        feeds: {ETH_USD: "aaa", BTC_USD: "bbb"}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
