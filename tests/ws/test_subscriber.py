"""Tests for websocket subscription frames and the receive loop."""

from __future__ import annotations

import asyncio
import base64
from decimal import Decimal
from typing import Any

import aiohttp
import aiohttp.web
import orjson
import pytest
from prometheus_client.registry import CollectorRegistry

from bpxclient import BpxClient, routes
from bpxclient.errors import InvalidRequestError, NotAuthenticatedError, TransportError
from bpxclient.metrics import ClientMetrics
from bpxclient.signing import KeyPair
from bpxclient.types import TickerUpdate
from bpxclient.types.rfq import RfqActive
from bpxclient.ws import StreamChannel, StreamSubscriber, build_subscribe_frame, is_private_stream

SECRET = base64.b64encode(bytes(range(32))).decode("ascii")

BOOK_TICKER = {
    "e": "bookTicker",
    "E": 1694687692980000,
    "s": "SOL_USDC",
    "a": "18.70",
    "A": "1.000",
    "b": "18.67",
    "B": "2.000",
    "u": "111063070",
    "T": 1694687692989999,
}


def _data_frame(payload: Any, stream: str = "bookTicker.SOL_USDC") -> str:
    return orjson.dumps({"stream": stream, "data": payload}).decode("utf-8")


class FakeStreamServer:
    """WS server that records the subscribe frame, sends canned frames, then closes."""

    def __init__(self, frames: list[str], *, hold_open: bool = False) -> None:
        self.frames = frames
        self.hold_open = hold_open
        self.subscriptions: list[dict[str, Any]] = []
        self.connection_count = 0
        self._runner: aiohttp.web.AppRunner | None = None
        self.port: int = 0

    async def _ws_handler(self, request: aiohttp.web.Request) -> aiohttp.web.WebSocketResponse:
        ws = aiohttp.web.WebSocketResponse()
        await ws.prepare(request)
        self.connection_count += 1

        first = await ws.receive()
        self.subscriptions.append(orjson.loads(first.data))

        for frame in self.frames:
            await ws.send_str(frame)

        if self.hold_open:
            async for _msg in ws:
                pass
        else:
            await ws.close()
        return ws

    async def start(self) -> None:
        app = aiohttp.web.Application()
        app.router.add_get("/", self._ws_handler)
        self._runner = aiohttp.web.AppRunner(app)
        await self._runner.setup()
        site = aiohttp.web.TCPSite(self._runner, "127.0.0.1", 0)
        await site.start()
        assert self._runner.addresses
        self.port = self._runner.addresses[0][1]

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()

    @property
    def url(self) -> str:
        return f"ws://127.0.0.1:{self.port}"


def _drain(channel: StreamChannel[Any]) -> list[Any]:
    items = []
    while len(channel):
        items.append(channel._queue.get_nowait())
    return items


class TestSubscribeFrame:
    """build_subscribe_frame partitioning and signing."""

    def test_public_streams_unsigned(self) -> None:
        """Only public streams: no signature, even with a key."""
        frame = build_subscribe_frame(
            ["ticker.SOL_USDC", "depth.SOL_USDC"], KeyPair.from_secret(SECRET)
        )
        assert frame == {"method": "SUBSCRIBE", "params": ["ticker.SOL_USDC", "depth.SOL_USDC"]}

    def test_public_streams_without_key(self) -> None:
        """Unauthenticated clients may subscribe to public streams."""
        frame = build_subscribe_frame(["trade.SOL_USDC"], None)
        assert "signature" not in frame

    def test_private_stream_signed(self) -> None:
        """A private stream signs the whole frame."""
        kp = KeyPair.from_secret(SECRET)
        frame = build_subscribe_frame(
            ["ticker.SOL_USDC", "account.orderUpdate"], kp, 5000, timestamp_ms=1614550000000
        )

        assert frame["params"] == ["ticker.SOL_USDC", "account.orderUpdate"]
        verifying_key, signature, timestamp, window = frame["signature"]
        assert verifying_key == kp.verifying_key_b64
        assert timestamp == "1614550000000"
        assert window == "5000"
        signee = b"instruction=subscribe&timestamp=1614550000000&window=5000"
        assert kp.verify(base64.b64decode(signature), signee)

    def test_private_stream_without_key(self) -> None:
        """No key: NotAuthenticatedError naming the private streams."""
        with pytest.raises(NotAuthenticatedError, match="account.rfqUpdate"):
            build_subscribe_frame(["ticker.SOL_USDC", "account.rfqUpdate"], None)

    def test_empty_streams(self) -> None:
        """At least one stream is required."""
        with pytest.raises(InvalidRequestError):
            build_subscribe_frame([], None)

    @pytest.mark.parametrize(
        ("name", "private"),
        [
            ("account.orderUpdate", True),
            ("account.orderUpdate.SOL_USDC", True),
            ("account.positionUpdate", True),
            ("ticker.SOL_USDC", False),
            ("kline.1m.SOL_USDC", False),
            ("accountish", False),
        ],
    )
    def test_is_private_stream(self, name: str, private: bool) -> None:
        """Private streams are the account.* family."""
        assert is_private_stream(name) is private


class TestStreamSubscriber:
    """Receive loop against a local websocket server."""

    @pytest.mark.asyncio
    async def test_forwards_decoded_payloads(self) -> None:
        """data frames are decoded and forwarded in order."""
        second = {**BOOK_TICKER, "u": 111063071}
        server = FakeStreamServer([_data_frame(BOOK_TICKER), _data_frame(second)])
        await server.start()
        try:
            channel: StreamChannel[TickerUpdate] = StreamChannel()
            subscriber = StreamSubscriber(server.url)

            await asyncio.wait_for(
                subscriber.subscribe(
                    [routes.book_ticker_stream("SOL_USDC")], channel, TickerUpdate
                ),
                timeout=5,
            )

            items = _drain(channel)
            assert [item.update_id for item in items] == [111063070, 111063071]
            assert items[0].ask_price == Decimal("18.70")
            assert server.subscriptions == [
                {"method": "SUBSCRIBE", "params": ["bookTicker.SOL_USDC"]}
            ]
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_private_subscription_sends_signature(self) -> None:
        """The frame on the wire carries a verifiable signature."""
        server = FakeStreamServer([])
        await server.start()
        try:
            kp = KeyPair.from_secret(SECRET)
            subscriber = StreamSubscriber(server.url, kp, window_ms=10000)

            await asyncio.wait_for(
                subscriber.subscribe([routes.ORDER_UPDATE_STREAM], StreamChannel()), timeout=5
            )

            (frame,) = server.subscriptions
            verifying_key, signature, timestamp, window = frame["signature"]
            assert verifying_key == kp.verifying_key_b64
            assert window == "10000"
            signee = f"instruction=subscribe&timestamp={timestamp}&window={window}"
            assert kp.verify(base64.b64decode(signature), signee.encode("utf-8"))
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_private_without_key_never_connects(self) -> None:
        """Authentication fails before a socket is opened."""
        server = FakeStreamServer([])
        await server.start()
        try:
            subscriber = StreamSubscriber(server.url)
            with pytest.raises(NotAuthenticatedError):
                await subscriber.subscribe([routes.ORDER_UPDATE_STREAM], StreamChannel())
            assert server.connection_count == 0
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_bad_frames_skipped(self) -> None:
        """Malformed, undecodable and error frames are counted and skipped."""
        frames = [
            "not json",
            "[1, 2]",
            _data_frame({"unexpected": True}),
            '{"id": null, "error": {"code": 4006, "message": "Invalid stream"}}',
            _data_frame(BOOK_TICKER),
        ]
        server = FakeStreamServer(frames)
        await server.start()
        registry = CollectorRegistry()
        try:
            channel: StreamChannel[TickerUpdate] = StreamChannel()
            subscriber = StreamSubscriber(server.url, metrics=ClientMetrics(registry))

            await asyncio.wait_for(
                subscriber.subscribe(["bookTicker.SOL_USDC"], channel, TickerUpdate), timeout=5
            )

            items = _drain(channel)
            assert len(items) == 1
            assert items[0].symbol == "SOL_USDC"

            def count(outcome: str) -> float | None:
                return registry.get_sample_value("bpx_ws_messages_total", {"outcome": outcome})

            assert count("malformed") == 2.0
            assert count("decode_failed") == 1.0
            assert count("error_frame") == 1.0
            assert count("forwarded") == 1.0
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_full_channel_drops(self) -> None:
        """With the drop policy, overflow frames are counted as dropped."""
        frames = [_data_frame({**BOOK_TICKER, "u": i}) for i in range(3)]
        server = FakeStreamServer(frames)
        await server.start()
        registry = CollectorRegistry()
        try:
            channel: StreamChannel[Any] = StreamChannel(1, drop_when_full=True)
            subscriber = StreamSubscriber(server.url, metrics=ClientMetrics(registry))

            await asyncio.wait_for(
                subscriber.subscribe(["bookTicker.SOL_USDC"], channel), timeout=5
            )

            assert _drain(channel) == [{**BOOK_TICKER, "u": 0}]
            assert channel.dropped == 2
            assert registry.get_sample_value(
                "bpx_ws_messages_total", {"outcome": "dropped"}
            ) == 2.0
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_closing_channel_ends_subscription(self) -> None:
        """Closing the consumer side stops the loop while the server stays up."""
        server = FakeStreamServer([_data_frame(BOOK_TICKER)], hold_open=True)
        await server.start()
        try:
            channel: StreamChannel[Any] = StreamChannel()
            subscriber = StreamSubscriber(server.url)
            task = asyncio.create_task(subscriber.subscribe(["bookTicker.SOL_USDC"], channel))

            first = await asyncio.wait_for(channel.receive(), timeout=5)
            assert first["s"] == "SOL_USDC"

            channel.close()
            await asyncio.wait_for(task, timeout=5)
            assert task.exception() is None
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_connect_failure(self) -> None:
        """An unreachable endpoint raises TransportError."""
        subscriber = StreamSubscriber("ws://127.0.0.1:1")
        with pytest.raises(TransportError):
            await subscriber.subscribe(["ticker.SOL_USDC"], StreamChannel())

    @pytest.mark.asyncio
    async def test_shared_session_left_open(self) -> None:
        """An injected session is reused and not closed."""
        server = FakeStreamServer([])
        await server.start()
        session = aiohttp.ClientSession()
        try:
            subscriber = StreamSubscriber(server.url, session=session)
            await asyncio.wait_for(
                subscriber.subscribe(["ticker.SOL_USDC"], StreamChannel()), timeout=5
            )
            assert not session.closed
        finally:
            await session.close()
            await server.stop()


class TestClientSubscriptions:
    """BpxClient websocket entry points."""

    @pytest.mark.asyncio
    async def test_start_subscription_closes_channel(self) -> None:
        """The channel is closed when the server ends the stream."""
        server = FakeStreamServer([_data_frame(BOOK_TICKER), _data_frame(BOOK_TICKER)])
        await server.start()
        try:
            client = BpxClient.builder().ws_url(server.url).build()
            channel: StreamChannel[TickerUpdate] = StreamChannel()

            task = client.start_subscription(["bookTicker.SOL_USDC"], channel, TickerUpdate)
            items = [item async for item in channel]

            assert len(items) == 2
            await asyncio.wait_for(task, timeout=5)
            assert channel.closed
            await client.close()
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_start_subscription_checks_auth_first(self) -> None:
        """Private streams without a key fail before a task is created."""
        client = BpxClient.builder().build()
        with pytest.raises(NotAuthenticatedError):
            client.start_subscription([routes.RFQ_UPDATE_STREAM], StreamChannel())
        assert not client._subscriptions

    @pytest.mark.asyncio
    async def test_close_cancels_subscriptions(self) -> None:
        """close() stops running subscription tasks."""
        server = FakeStreamServer([], hold_open=True)
        await server.start()
        try:
            client = BpxClient.builder().ws_url(server.url).build()
            channel: StreamChannel[Any] = StreamChannel()
            task = client.start_subscription(["ticker.SOL_USDC"], channel)
            await asyncio.sleep(0.1)

            await client.close()

            assert task.done()
            assert channel.closed
        finally:
            await server.stop()

    @pytest.mark.asyncio
    async def test_subscribe_to_rfqs(self) -> None:
        """RFQ updates are decoded into their event variants."""
        event = {
            "e": "rfqActive",
            "E": 1730225420369829,
            "R": 113392053149171712,
            "s": "SOL_USDC_RFQ",
            "S": "Bid",
            "q": "10",
            "w": 1730225480368,
            "W": 1730225540368,
            "X": "New",
            "T": 1730225420368765,
        }
        server = FakeStreamServer([_data_frame(event, stream=routes.RFQ_UPDATE_STREAM)])
        await server.start()
        try:
            client = BpxClient.builder().ws_url(server.url).secret(SECRET).build()
            channel: StreamChannel[Any] = StreamChannel()

            await asyncio.wait_for(client.subscribe_to_rfqs(channel), timeout=5)

            (update,) = _drain(channel)
            assert isinstance(update, RfqActive)
            assert update.rfq_id == 113392053149171712
            assert update.quantity == Decimal("10")
            assert server.subscriptions[0]["params"] == ["account.rfqUpdate"]
            assert "signature" in server.subscriptions[0]
            await client.close()
        finally:
            await server.stop()
