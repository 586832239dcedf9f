#!/usr/bin/env python3
"""
Place or cancel an order on Backpack Exchange.

--dry-run prints the body that would be signed and sent, without sending it.

Usage:
    BPX_SECRET=... python -m scripts.run_place_order place --symbol SOL_USDC \\
        --side Bid --type Limit --price 20.5 --quantity 1 --post-only
    BPX_SECRET=... python -m scripts.run_place_order cancel --symbol SOL_USDC --order-id 1234
    BPX_SECRET=... python -m scripts.run_place_order cancel-all --symbol SOL_USDC
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from typing import Any

import orjson
from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from bpxclient import BpxClient, BpxError, ClientConfig
from bpxclient.logging_config import setup_logging
from bpxclient.types import (
    CancelOpenOrdersPayload,
    ExecuteOrderPayload,
    OrderType,
    Side,
    TimeInForce,
)

logger = logging.getLogger(__name__)


def _emit(value: Any) -> None:
    data = to_jsonable_python(value, by_alias=True)
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


def build_payload(args: argparse.Namespace) -> ExecuteOrderPayload:
    """Build the order body from CLI arguments."""
    return ExecuteOrderPayload(
        symbol=args.symbol,
        side=Side(args.side),
        order_type=OrderType(args.type),
        price=args.price,
        quantity=args.quantity,
        quote_quantity=args.quote_quantity,
        post_only=True if args.post_only else None,
        time_in_force=TimeInForce(args.time_in_force) if args.time_in_force else None,
        client_id=args.client_id,
        reduce_only=True if args.reduce_only else None,
    )


async def run(args: argparse.Namespace) -> int:
    config = ClientConfig.from_env()

    payload: ExecuteOrderPayload | None = None
    if args.command == "place":
        try:
            payload = build_payload(args)
        except ValidationError as e:
            logger.error("Invalid order: %s", e)
            return 2
        if args.dry_run:
            _emit(payload.to_payload())
            return 0

    if not config.is_authenticated:
        logger.error("BPX_SECRET is not set")
        return 2

    async with BpxClient.from_config(config) as client:
        try:
            if payload is not None:
                _emit(await client.execute_order(payload))
            elif args.command == "cancel":
                _emit(await client.cancel_order(args.symbol, args.order_id, args.client_id))
            elif args.command == "cancel-all":
                payload_all = CancelOpenOrdersPayload(symbol=args.symbol)
                _emit(await client.cancel_open_orders(payload_all))
        except BpxError as e:
            logger.error("Request failed: %s", e)
            return 1
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Place or cancel Backpack Exchange orders.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", choices=["place", "cancel", "cancel-all"])
    parser.add_argument("--symbol", type=str, required=True, help="Market symbol")
    parser.add_argument("--side", choices=[s.value for s in Side], default=Side.BID.value)
    parser.add_argument("--type", choices=[t.value for t in OrderType], default="Limit")
    parser.add_argument("--price", type=Decimal, default=None)
    parser.add_argument("--quantity", type=Decimal, default=None)
    parser.add_argument("--quote-quantity", type=Decimal, default=None)
    parser.add_argument("--time-in-force", choices=[t.value for t in TimeInForce], default=None)
    parser.add_argument("--post-only", action="store_true")
    parser.add_argument("--reduce-only", action="store_true")
    parser.add_argument("--order-id", type=str, default=None, help="Exchange order id (cancel)")
    parser.add_argument("--client-id", type=int, default=None, help="Client order id")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the order body without sending it",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    if args.command == "cancel" and args.order_id is None and args.client_id is None:
        parser.error("cancel requires --order-id or --client-id")

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, json_format=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
