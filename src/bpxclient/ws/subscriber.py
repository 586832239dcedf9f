"""
Websocket stream subscriber for Backpack Exchange.

One StreamSubscriber.subscribe() call owns one socket:
- sends a single SUBSCRIBE frame (signed only when a private stream is asked for)
- decodes each ``{"data": ...}`` frame into the caller's payload type
- forwards it on a StreamChannel until the server closes, the socket fails,
  or the channel is closed

Malformed frames, payloads that fail validation and ``{"error": ...}`` frames
are logged and skipped. There is no reconnect; callers resubscribe.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable
from typing import Any

import aiohttp
import orjson
from pydantic import TypeAdapter, ValidationError

from bpxclient.config import DEFAULT_WINDOW_MS
from bpxclient.errors import InvalidRequestError, NotAuthenticatedError, TransportError
from bpxclient.metrics import ClientMetrics
from bpxclient.routes import PRIVATE_STREAM_PREFIX
from bpxclient.signing import KeyPair, build_subscribe_signee, now_millis
from bpxclient.ws.channel import ChannelClosedError, StreamChannel

logger = logging.getLogger(__name__)


def is_private_stream(name: str) -> bool:
    """Private (account-scoped) streams need a signed subscription."""
    return name.startswith(PRIVATE_STREAM_PREFIX)


def build_subscribe_frame(
    streams: Iterable[str],
    key_pair: KeyPair | None,
    window_ms: int = DEFAULT_WINDOW_MS,
    timestamp_ms: int | None = None,
) -> dict[str, Any]:
    """
    Build the SUBSCRIBE control frame.

    The ``signature`` entry is ``[verifying key, signature, timestamp, window]``
    and is only present when at least one stream is private.

    Args:
        streams: Stream names, e.g. ``["ticker.SOL_USDC", "account.orderUpdate"]``.
        key_pair: Signing keys, or None for an unauthenticated client.
        window_ms: Signature validity window.
        timestamp_ms: Signing time; defaults to now.

    Raises:
        InvalidRequestError: If no stream is given.
        NotAuthenticatedError: If a private stream is requested without keys.
    """
    params = list(streams)
    if not params:
        raise InvalidRequestError("at least one stream is required")

    frame: dict[str, Any] = {"method": "SUBSCRIBE", "params": params}

    private = [s for s in params if is_private_stream(s)]
    if not private:
        return frame

    if key_pair is None:
        raise NotAuthenticatedError(
            f"Client is not authenticated: private streams require a key: {', '.join(private)}"
        )

    timestamp = now_millis() if timestamp_ms is None else timestamp_ms
    signee = build_subscribe_signee(timestamp, window_ms)
    frame["signature"] = [
        key_pair.verifying_key_b64,
        key_pair.sign_b64(signee.encode("utf-8")),
        str(timestamp),
        str(window_ms),
    ]
    return frame


class StreamSubscriber:
    """Connects to the stream endpoint and relays decoded payloads to a channel."""

    def __init__(
        self,
        ws_url: str,
        key_pair: KeyPair | None = None,
        *,
        window_ms: int = DEFAULT_WINDOW_MS,
        session: aiohttp.ClientSession | None = None,
        metrics: ClientMetrics | None = None,
    ) -> None:
        """
        Args:
            ws_url: Websocket endpoint, e.g. ``wss://ws.backpack.exchange``.
            key_pair: Keys for private streams; None for public streams only.
            window_ms: Signature validity window for private subscriptions.
            session: Shared aiohttp session. If None, each subscribe() opens
                and closes its own.
            metrics: Optional frame counters.
        """
        self._ws_url = ws_url
        self._key_pair = key_pair
        self._window_ms = window_ms
        self._session = session
        self._metrics = metrics

    async def subscribe(
        self,
        streams: Iterable[str],
        channel: StreamChannel[Any],
        payload_type: Any = Any,
    ) -> None:
        """
        Subscribe and run the receive loop until the connection ends.

        The frame is built before connecting, so a missing key fails without
        opening a socket.

        Args:
            streams: Stream names to subscribe to.
            channel: Destination for decoded payloads. Closing it ends the loop.
            payload_type: Type each ``data`` payload is validated into.

        Raises:
            NotAuthenticatedError: Private stream requested without keys.
            TransportError: Connecting or sending the subscription failed.
        """
        streams = list(streams)
        frame = build_subscribe_frame(streams, self._key_pair, self._window_ms)
        adapter: TypeAdapter[Any] = TypeAdapter(payload_type)

        owns_session = self._session is None or self._session.closed
        session = aiohttp.ClientSession() if owns_session else self._session
        assert session is not None

        try:
            try:
                ws = await session.ws_connect(self._ws_url)
            except (aiohttp.ClientError, TimeoutError) as e:
                logger.error(
                    "Failed to connect",
                    extra={"url": self._ws_url, "error": str(e)},
                )
                raise TransportError(f"WebSocket connect failed: {e}") from e

            async with ws:
                try:
                    await ws.send_str(orjson.dumps(frame).decode("utf-8"))
                except (aiohttp.ClientError, ConnectionError) as e:
                    raise TransportError(f"WebSocket subscribe failed: {e}") from e

                logger.info(
                    "Subscribed",
                    extra={"streams": streams, "signed": "signature" in frame},
                )

                watcher = asyncio.create_task(self._close_on_channel_close(ws, channel))
                try:
                    await self._receive_loop(ws, channel, adapter)
                finally:
                    watcher.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await watcher
        finally:
            if owns_session:
                await session.close()

    async def _close_on_channel_close(
        self,
        ws: aiohttp.ClientWebSocketResponse,
        channel: StreamChannel[Any],
    ) -> None:
        await channel.wait_closed()
        logger.debug("Channel closed, closing socket")
        await ws.close()

    async def _receive_loop(
        self,
        ws: aiohttp.ClientWebSocketResponse,
        channel: StreamChannel[Any],
        adapter: TypeAdapter[Any],
    ) -> None:
        async for msg in ws:
            if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                if not await self._handle_frame(msg.data, channel, adapter):
                    break

            elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSED):
                logger.info("WebSocket closed by server")
                break

            elif msg.type == aiohttp.WSMsgType.ERROR:
                logger.error("WebSocket error", extra={"error": str(ws.exception())})
                break

        logger.info("Subscription ended", extra={"close_code": ws.close_code})

    async def _handle_frame(
        self,
        raw: str | bytes,
        channel: StreamChannel[Any],
        adapter: TypeAdapter[Any],
    ) -> bool:
        """Process one frame. Returns False when the loop should stop."""
        try:
            message = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Failed to parse frame")
            self._record("malformed")
            return True

        if not isinstance(message, dict):
            logger.warning("Unexpected frame shape", extra={"frame_type": type(message).__name__})
            self._record("malformed")
            return True

        if "data" in message:
            try:
                payload = adapter.validate_python(message["data"])
            except ValidationError as e:
                logger.warning(
                    "Failed to decode payload",
                    extra={"stream": message.get("stream"), "errors": e.error_count()},
                )
                self._record("decode_failed")
                return True

            try:
                forwarded = await channel.send(payload)
            except ChannelClosedError:
                logger.info("Channel closed, ending subscription")
                return False
            self._record("forwarded" if forwarded else "dropped")

        elif "error" in message:
            logger.error("Websocket error response", extra={"error": message["error"]})
            self._record("error_frame")

        return True

    def _record(self, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_ws(outcome)
