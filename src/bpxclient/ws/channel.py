"""
Bounded producer/consumer channel between a websocket task and caller code.

The subscriber pushes decoded payloads with send(); the caller reads with
receive() or ``async for``. Either side may close() the channel: once closed,
send() raises ChannelClosedError (which ends the subscriber loop) and readers
drain what is buffered, then stop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 1024


class ChannelClosedError(Exception):
    """Raised on send() to, or receive() from an empty, closed channel."""


class StreamChannel(Generic[T]):
    """
    asyncio.Queue with a close signal and a configurable full-buffer policy.

    When the buffer is full, send() waits for the consumer, or with
    drop_when_full=True discards the new item and returns False.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, *, drop_when_full: bool = False) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=capacity)
        self._drop_when_full = drop_when_full
        self._closed = asyncio.Event()
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def dropped(self) -> int:
        """Items discarded because the buffer was full."""
        return self._dropped

    def __len__(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Close the channel. Idempotent."""
        self._closed.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    async def send(self, item: T) -> bool:
        """
        Push an item to the consumer.

        Returns:
            True if buffered, False if dropped by the drop_when_full policy.

        Raises:
            ChannelClosedError: If the channel is (or becomes) closed.
        """
        if self.closed:
            raise ChannelClosedError("channel is closed")

        try:
            self._queue.put_nowait(item)
            return True
        except asyncio.QueueFull:
            if self._drop_when_full:
                self._dropped += 1
                logger.debug("Channel full, dropping item", extra={"dropped": self._dropped})
                return False

        await self._until_closed(self._queue.put(item))
        return True

    async def receive(self) -> T:
        """
        Wait for the next item.

        Raises:
            ChannelClosedError: If the channel is closed and drained.
        """
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            if self.closed:
                raise ChannelClosedError("channel is closed") from None

        result: T = await self._until_closed(self._queue.get())
        return result

    async def _until_closed(self, operation: Awaitable[Any]) -> Any:
        op = asyncio.ensure_future(operation)
        closed = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({op, closed}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            op.cancel()
            raise
        finally:
            closed.cancel()

        if op.done():
            return op.result()
        op.cancel()
        raise ChannelClosedError("channel is closed")

    def __aiter__(self) -> StreamChannel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
