"""Tests for the bounded stream channel."""

from __future__ import annotations

import asyncio

import pytest

from bpxclient.ws import ChannelClosedError, StreamChannel


class TestStreamChannel:
    """send/receive/close behavior."""

    def test_capacity_must_be_positive(self) -> None:
        """Zero capacity is rejected."""
        with pytest.raises(ValueError):
            StreamChannel(0)

    @pytest.mark.asyncio
    async def test_fifo(self) -> None:
        """Items come out in send order."""
        channel: StreamChannel[int] = StreamChannel(4)
        for i in range(3):
            assert await channel.send(i)

        assert len(channel) == 3
        assert [await channel.receive() for _ in range(3)] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_send_after_close_raises(self) -> None:
        """A closed channel refuses new items."""
        channel: StreamChannel[int] = StreamChannel()
        channel.close()
        channel.close()

        assert channel.closed
        with pytest.raises(ChannelClosedError):
            await channel.send(1)

    @pytest.mark.asyncio
    async def test_buffered_items_drain_after_close(self) -> None:
        """Readers get buffered items, then the iterator stops."""
        channel: StreamChannel[str] = StreamChannel()
        await channel.send("a")
        await channel.send("b")
        channel.close()

        assert [item async for item in channel] == ["a", "b"]
        with pytest.raises(ChannelClosedError):
            await channel.receive()

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_receiver(self) -> None:
        """A reader waiting on an empty channel is released by close()."""
        channel: StreamChannel[int] = StreamChannel()
        receiver = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)

        channel.close()

        with pytest.raises(ChannelClosedError):
            await asyncio.wait_for(receiver, timeout=1)

    @pytest.mark.asyncio
    async def test_full_channel_blocks_sender(self) -> None:
        """Without the drop policy, send() waits for the consumer."""
        channel: StreamChannel[int] = StreamChannel(1)
        await channel.send(1)
        sender = asyncio.create_task(channel.send(2))
        await asyncio.sleep(0)
        assert not sender.done()

        assert await channel.receive() == 1
        assert await asyncio.wait_for(sender, timeout=1) is True
        assert await channel.receive() == 2

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_sender(self) -> None:
        """A sender waiting on a full channel gets ChannelClosedError."""
        channel: StreamChannel[int] = StreamChannel(1)
        await channel.send(1)
        sender = asyncio.create_task(channel.send(2))
        await asyncio.sleep(0)

        channel.close()

        with pytest.raises(ChannelClosedError):
            await asyncio.wait_for(sender, timeout=1)

    @pytest.mark.asyncio
    async def test_drop_when_full(self) -> None:
        """With the drop policy, overflow is discarded and counted."""
        channel: StreamChannel[int] = StreamChannel(2, drop_when_full=True)

        results = [await channel.send(i) for i in range(4)]

        assert results == [True, True, False, False]
        assert channel.dropped == 2
        assert channel.capacity == 2
        assert [await channel.receive(), await channel.receive()] == [0, 1]

    @pytest.mark.asyncio
    async def test_wait_closed(self) -> None:
        """wait_closed() returns once close() is called."""
        channel: StreamChannel[int] = StreamChannel()
        waiter = asyncio.create_task(channel.wait_closed())
        await asyncio.sleep(0)
        assert not waiter.done()

        channel.close()
        await asyncio.wait_for(waiter, timeout=1)
