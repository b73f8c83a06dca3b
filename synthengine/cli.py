"""Command-line interface for the synthetic-asset engine."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import AppConfig, load_config
from .factory import Deployment, build_engine
from .logging_setup import configure_logging
from .oracles import build_price_feeds
from .pricing import from_wei, to_wei
from .services import Simulator, load_scenario


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="synth-engine",
        description="Over-collateralized synthetic-asset engine",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("prices", help="Show the current price of every configured feed")

    value_parser = sub.add_parser("value", help="USD value of a collateral amount")
    value_parser.add_argument("token", help="Collateral token symbol")
    value_parser.add_argument("amount", help="Token amount, e.g. 1.5")

    convert_parser = sub.add_parser("convert", help="Collateral amount worth a USD amount")
    convert_parser.add_argument("token", help="Collateral token symbol")
    convert_parser.add_argument("usd", help="USD amount, e.g. 2500")

    simulate_parser = sub.add_parser("simulate", help="Run a scenario file")
    simulate_parser.add_argument("scenario", help="Path to scenario YAML")

    return parser


async def _deploy(config: AppConfig) -> Deployment:
    feeds = await build_price_feeds(config.price_oracle)
    return build_engine(config.engine, feeds)


def _print_prices(deployment: Deployment) -> None:
    engine = deployment.engine
    for asset in engine.get_collateral_tokens():
        price = engine.get_usd_value(asset, to_wei(1))
        print(f"{asset}: ${from_wei(price):,.4f}")


def _print_simulation(deployment: Deployment, scenario: str) -> int:
    results = Simulator(deployment).run(load_scenario(scenario))
    failed = 0
    for r in results:
        if r.ok:
            outcome = "ok"
        else:
            outcome = f"{r.error} [{r.error_kind}]"
        marker = "✅" if r.passed else "❌"
        failed += not r.passed
        print(f"{marker} {r.index:>3} {r.action:<17} {outcome}")
        if r.detail:
            print(f"      {r.detail}")
    print(f"\n{len(results) - failed}/{len(results)} steps matched expectations")
    return 1 if failed else 0


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    deployment = await _deploy(config)
    engine = deployment.engine

    if args.command == "prices":
        _print_prices(deployment)
    elif args.command == "value":
        usd = engine.get_usd_value(args.token, to_wei(args.amount))
        print(f"{args.amount} {args.token} = ${from_wei(usd):,.2f}")
    elif args.command == "convert":
        amount = engine.get_token_amount_from_usd(args.token, to_wei(args.usd))
        print(f"${args.usd} = {from_wei(amount):f} {args.token}")
    elif args.command == "simulate":
        return _print_simulation(deployment, args.scenario)
    else:
        build_parser().print_help()
        return 1
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
