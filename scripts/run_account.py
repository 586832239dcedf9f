#!/usr/bin/env python3
"""
Signed account queries against Backpack Exchange.

Reads the secret from BPX_SECRET (base64 Ed25519 seed). The secret is never
printed or logged.

Usage:
    BPX_SECRET=... python -m scripts.run_account balances
    BPX_SECRET=... python -m scripts.run_account orders --symbol SOL_USDC
    BPX_SECRET=... python -m scripts.run_account fills --symbol SOL_USDC --limit 50
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

import orjson
from pydantic_core import to_jsonable_python

from bpxclient import BpxClient, BpxError, ClientConfig
from bpxclient.logging_config import setup_logging
from bpxclient.types import FillsHistoryParams

logger = logging.getLogger(__name__)


def _emit(value: Any) -> None:
    data = to_jsonable_python(value, by_alias=True)
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


async def run(args: argparse.Namespace) -> int:
    config = ClientConfig.from_env()
    if not config.is_authenticated:
        logger.error("BPX_SECRET is not set")
        return 2

    async with BpxClient.from_config(config) as client:
        logger.info("Using API key %s", client.verifying_key)
        try:
            if args.command == "balances":
                _emit(await client.get_balances())
            elif args.command == "collateral":
                _emit(await client.get_collateral())
            elif args.command == "account":
                _emit(await client.get_account())
            elif args.command == "orders":
                _emit(await client.get_open_orders(args.symbol))
            elif args.command == "positions":
                _emit(await client.get_open_future_positions())
            elif args.command == "borrow-lend":
                _emit(await client.get_borrow_lend_positions())
            elif args.command == "deposits":
                _emit(await client.get_deposits(args.limit, args.offset))
            elif args.command == "withdrawals":
                _emit(await client.get_withdrawals(args.limit, args.offset))
            elif args.command == "fills":
                params = FillsHistoryParams(
                    symbol=args.symbol, limit=args.limit, offset=args.offset
                )
                _emit(await client.get_historical_fills(params))
        except BpxError as e:
            logger.error("Query failed: %s", e)
            return 1
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Query a Backpack Exchange account.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=[
            "balances",
            "collateral",
            "account",
            "orders",
            "positions",
            "borrow-lend",
            "deposits",
            "withdrawals",
            "fills",
        ],
    )
    parser.add_argument("--symbol", type=str, default=None, help="Restrict to one market")
    parser.add_argument("--limit", type=int, default=None, help="Page size")
    parser.add_argument("--offset", type=int, default=None, help="Page offset")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, json_format=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
