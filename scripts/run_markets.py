#!/usr/bin/env python3
"""
Public market data from Backpack Exchange.

Prints one JSON document per query to stdout. No secret is needed.

Usage:
    python -m scripts.run_markets markets --market-type SPOT
    python -m scripts.run_markets ticker --symbol SOL_USDC
    python -m scripts.run_markets depth --symbol SOL_USDC --limit 20
    python -m scripts.run_markets klines --symbol SOL_USDC --interval 1h --start 1700000000
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
from bpxclient.types import MarketType

logger = logging.getLogger(__name__)


def _emit(value: Any) -> None:
    data = to_jsonable_python(value, by_alias=True)
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


async def run(args: argparse.Namespace) -> int:
    """
    Run one market data query.

    Returns:
        Exit code (0 = success).
    """
    config = ClientConfig.from_env()
    async with BpxClient.from_config(config) as client:
        try:
            if args.command == "markets":
                types = [MarketType(t) for t in args.market_type] if args.market_type else None
                _emit(await client.get_markets(types))
            elif args.command == "assets":
                _emit(await client.get_assets())
            elif args.command == "ticker":
                _emit(await client.get_ticker(args.symbol))
            elif args.command == "tickers":
                _emit(await client.get_tickers())
            elif args.command == "depth":
                _emit(await client.get_order_book_depth(args.symbol, args.limit))
            elif args.command == "klines":
                _emit(await client.get_k_lines(args.symbol, args.interval, args.start, args.end))
            elif args.command == "trades":
                _emit(await client.get_recent_trades(args.symbol, args.limit))
            elif args.command == "mark-prices":
                _emit(await client.get_all_mark_prices())
            elif args.command == "funding":
                _emit(await client.get_funding_interval_rates(args.symbol))
        except BpxError as e:
            logger.error("Query failed: %s", e)
            return 1
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Query Backpack Exchange public market data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=[
            "markets",
            "assets",
            "ticker",
            "tickers",
            "depth",
            "klines",
            "trades",
            "mark-prices",
            "funding",
        ],
    )
    parser.add_argument("--symbol", type=str, default="SOL_USDC", help="Market symbol")
    parser.add_argument(
        "--market-type",
        action="append",
        choices=[t.value for t in MarketType],
        help="Filter markets by type (repeatable)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Depth or trade limit")
    parser.add_argument("--interval", type=str, default="1h", help="Kline interval")
    parser.add_argument("--start", type=int, default=None, help="Kline start (unix seconds)")
    parser.add_argument("--end", type=int, default=None, help="Kline end (unix seconds)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    if args.command == "klines" and args.start is None:
        parser.error("klines requires --start")

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, json_format=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
