#!/usr/bin/env python3
"""
Stream Backpack Exchange websocket payloads to stdout as JSON lines.

Public streams need no secret. Streams under ``account.`` are signed with
BPX_SECRET; without it the subscription is refused before connecting.

Usage:
    python -m scripts.run_stream --streams bookTicker.SOL_USDC,trade.SOL_USDC
    python -m scripts.run_stream --streams depth.SOL_USDC --duration-s 30
    BPX_SECRET=... python -m scripts.run_stream --streams account.orderUpdate

Graceful shutdown via SIGINT/SIGTERM or --duration-s timeout.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Any

import orjson
from prometheus_client.registry import CollectorRegistry

from bpxclient import BpxClient, BpxError, ClientConfig, ClientMetrics, StreamChannel
from bpxclient.logging_config import setup_logging
from bpxclient.metrics import WS_OUTCOMES

logger = logging.getLogger(__name__)


async def consume(channel: StreamChannel[Any], max_messages: int | None) -> int:
    """Write payloads until the channel closes or max_messages is reached."""
    count = 0
    async for payload in channel:
        sys.stdout.write(orjson.dumps(payload).decode("utf-8") + "\n")
        sys.stdout.flush()
        count += 1
        if max_messages is not None and count >= max_messages:
            channel.close()
    return count


async def run(args: argparse.Namespace) -> int:
    """
    Subscribe and relay until shutdown.

    Returns:
        Exit code (0 = success).
    """
    config = ClientConfig.from_env()
    registry = CollectorRegistry()
    channel: StreamChannel[Any] = StreamChannel(
        args.buffer, drop_when_full=args.drop_when_full
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, channel.close)

    async with BpxClient.from_config(config, metrics=ClientMetrics(registry)) as client:
        try:
            task = client.start_subscription(args.streams, channel)
        except BpxError as e:
            logger.error("Cannot subscribe: %s", e)
            return 2

        if args.duration_s:
            loop.call_later(args.duration_s, channel.close)

        count = await consume(channel, args.max_messages)

        (result,) = await asyncio.gather(task, return_exceptions=True)
        if isinstance(result, BpxError):
            logger.error("Subscription failed: %s", result)
            return 1

    summary = {
        outcome: registry.get_sample_value("bpx_ws_messages_total", {"outcome": outcome}) or 0
        for outcome in sorted(WS_OUTCOMES)
    }
    logger.info("Stream ended after %d payloads", count, extra={"outcomes": summary})
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Relay Backpack Exchange websocket streams.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--streams",
        type=str,
        required=True,
        help="Comma-separated stream names (e.g., bookTicker.SOL_USDC,account.orderUpdate)",
    )
    parser.add_argument(
        "--duration-s",
        type=int,
        default=None,
        help="Run for N seconds then stop (default: run until SIGINT/SIGTERM)",
    )
    parser.add_argument(
        "--max-messages",
        type=int,
        default=None,
        help="Stop after N payloads",
    )
    parser.add_argument(
        "--buffer",
        type=int,
        default=1024,
        help="Channel capacity (default: 1024)",
    )
    parser.add_argument(
        "--drop-when-full",
        action="store_true",
        help="Drop payloads instead of waiting when the buffer is full",
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    args.streams = [s.strip() for s in args.streams.split(",") if s.strip()]

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_format=args.json_logs,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
