"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROVIDERS = ("static", "pyth")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    address: str = "engine"
    debt_token: str = "DSC"
    collateral_tokens: tuple[str, ...] = ()
    price_feeds: tuple[str, ...] = ()


@dataclass(frozen=True)
class StaticFeedConfig:
    answer: int = 0
    decimals: int = 8


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feeds: dict[str, str] = field(default_factory=dict)
    timeout: int = 10


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "static"
    static: dict[str, StaticFeedConfig] = field(default_factory=dict)
    pyth: PythConfig = field(default_factory=PythConfig)

    def feed_names(self) -> tuple[str, ...]:
        if self.provider == "pyth":
            return tuple(self.pyth.feeds)
        return tuple(self.static)


@dataclass(frozen=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_engine(raw: dict[str, Any]) -> EngineConfig:
    return EngineConfig(
        address=str(raw.get("address", "engine")),
        debt_token=str(raw.get("debt_token", "DSC")),
        collateral_tokens=tuple(str(t) for t in raw.get("collateral_tokens", [])),
        price_feeds=tuple(str(f) for f in raw.get("price_feeds", [])),
    )


def _build_static_feeds(raw: dict[str, Any]) -> dict[str, StaticFeedConfig]:
    feeds: dict[str, StaticFeedConfig] = {}
    for name, cfg in raw.items():
        feeds[name] = StaticFeedConfig(
            answer=int(cfg.get("answer", 0)),
            decimals=int(cfg.get("decimals", 8)),
        )
    return feeds


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider") or "static",
        static=_build_static_feeds(raw.get("static", {})),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feeds=dict(pyth_raw.get("feeds", {})),
            timeout=int(pyth_raw.get("timeout", PythConfig.timeout)),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        engine=_build_engine(raw.get("engine", {})),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration.

    Mismatched token/feed list lengths are left to the engine constructor,
    which rejects them with ``ConfigurationError``.
    """
    if not cfg.engine.collateral_tokens:
        raise ValueError("At least one collateral token must be configured")

    if cfg.price_oracle.provider not in PROVIDERS:
        raise ValueError(
            f"Unknown price oracle provider '{cfg.price_oracle.provider}'"
        )

    known = cfg.price_oracle.feed_names()
    for feed in cfg.engine.price_feeds:
        if feed not in known:
            raise ValueError(
                f"Engine references unknown price feed '{feed}' "
                f"for provider '{cfg.price_oracle.provider}'"
            )
