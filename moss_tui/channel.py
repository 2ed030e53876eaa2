"""
Channel - bounded multi-producer/single-consumer queue with close semantics.

Senders suspend while the channel is full. Once closed, sends are discarded,
including sends that were already suspended waiting for space.
"""

import asyncio
from typing import Generic, TypeVar

from moss_tui.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """
    Bounded asyncio channel.

    Usage:
        channel = Channel(capacity=10)
        delivered = await channel.send(item)   # False once closed
        item = await channel.receive()
        channel.close()
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Channel capacity must be at least 1, got {capacity}")
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=capacity)
        self._closed = asyncio.Event()

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def pending(self) -> int:
        """Number of items enqueued and not yet received."""
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def send(self, item: T) -> bool:
        """
        Enqueue an item, suspending while the channel is full.

        Returns:
            True if the item was enqueued, False if the channel is closed
        """
        if self._closed.is_set():
            return False
        if not self._queue.full():
            self._queue.put_nowait(item)
            return True

        put = asyncio.ensure_future(self._queue.put(item))
        closed = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({put, closed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (put, closed):
                if not waiter.done():
                    waiter.cancel()

        if self._closed.is_set():
            return False
        return put.done() and not put.cancelled()

    async def receive(self) -> T:
        """Wait for and return the next item."""
        return await self._queue.get()

    def receive_nowait(self) -> T | None:
        """Return the next item, or None if nothing is queued."""
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def close(self) -> None:
        """Close the channel, releasing suspended senders."""
        if self._closed.is_set():
            return
        self._closed.set()
        logger.debug(f"Channel closed | undelivered={self._queue.qsize()}")
