"""
Minimal trade entry point for Boop.fun and Heaven.

    launchpad-trade --market BOOP_FUN --direction buy --mint <MINT> \
        --amount 0.1 --slippage 5 --private-key <BASE58> \
        [--priority-fee 0.001] [--pool-address <ADDRESS>] [--quote] \
        [--estimate-fees] [--unit SOL|LAMPORTS] [--dry-run] [--rpc-url URL]

RPC_URL (and the rest of TraderConfig) can come from the environment.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from base58 import b58decode
from solders.keypair import Keypair

from amm_direct.errors import InvalidInput, TradeError
from amm_direct.models import Market, SwapDirection
from trade_config import TraderConfig
from trader import LaunchpadTrader

logger = logging.getLogger(__name__)


def parse_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() in {"true", "1", "yes", "y"}


def _flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    # accepts both `--quote` and `--quote true`
    parser.add_argument(name, nargs="?", const="true", default=None, type=str, help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="launchpad-trade", description="Quote and swap on Boop.fun / Heaven")
    parser.add_argument("--market", required=True, help="BOOP_FUN or HEAVEN")
    parser.add_argument("--direction", required=True, help="buy or sell")
    parser.add_argument("--mint", required=True)
    parser.add_argument("--amount", required=True, type=float, help="SOL for buys, tokens for sells")
    parser.add_argument("--slippage", required=True, type=float, help="percent, 0-100")
    parser.add_argument("--private-key", required=True, help="base58 secret key")
    parser.add_argument("--priority-fee", type=float, default=0.0, help="priority budget in SOL")
    parser.add_argument("--pool-address", default=None)
    parser.add_argument("--unit", default="SOL", help="SOL or LAMPORTS")
    parser.add_argument("--rpc-url", default=None)
    _flag(parser, "--quote", "print a price quote first")
    _flag(parser, "--estimate-fees", "print a fee estimate first")
    _flag(parser, "--dry-run", "build without sending")
    return parser


def load_keypair(secret: str) -> Keypair:
    try:
        return Keypair.from_bytes(b58decode(secret.strip()))
    except ValueError as e:
        raise InvalidInput(f"Invalid private key: {e}") from None


async def run(args: argparse.Namespace) -> int:
    market = Market.parse(args.market)
    direction = SwapDirection.parse(args.direction)
    wallet = load_keypair(args.private_key)
    unit = (args.unit or "SOL").upper()
    config = TraderConfig.from_env(rpc_url=args.rpc_url)

    async with LaunchpadTrader(config=config) as trader:
        # quote and estimate are informational; their failure does not block the trade
        if parse_bool(args.quote):
            try:
                price, curve = await trader.price(market, args.mint, unit=unit)
                print(json.dumps({
                    "mode": "price", "market": market.value, "mint": args.mint,
                    "unit": unit, "price": price, "bondingCurvePercent": curve,
                }))
            except TradeError as e:
                logger.error(f"Price quote failed: {e}")

        if parse_bool(args.estimate_fees):
            try:
                fees = await trader.estimate_fees(
                    market, direction, wallet, args.mint, args.amount, args.slippage,
                    priority_fee_sol=args.priority_fee,
                    pool_address=args.pool_address,
                )
                print(json.dumps({
                    "mode": "estimate-fees", "market": market.value,
                    "direction": direction.value, "fees": fees.to_dict(),
                }))
            except TradeError as e:
                logger.error(f"Fee estimate failed: {e}")

        dry_run = parse_bool(args.dry_run)
        result = await trader.trade(
            market, direction, wallet, args.mint, args.amount, args.slippage,
            priority_fee_sol=args.priority_fee,
            pool_address=args.pool_address,
            send=not dry_run,
        )
        if dry_run:
            print(json.dumps({
                "mode": "dry-run", "direction": direction.value,
                "built": result is not None, "instructions": len(result.instructions),
            }))
        else:
            print(result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=TraderConfig.from_env().log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    try:
        return asyncio.run(run(args))
    except TradeError as e:
        logger.error(f"[{e.stage}] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
