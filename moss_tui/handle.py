"""Handle - cloneable proxy for pushing events into a running driver."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from moss_tui.events import Event, MessageEvent, PrintEvent
from moss_tui.logging_config import get_logger

if TYPE_CHECKING:
    from moss_tui.channel import Channel

logger = get_logger(__name__)

M = TypeVar("M")


class Handle(Generic[M]):
    """
    Sends messages and scrollback text to the driver.

    Every clone shares the driver's bounded channel, so all clones see the
    same backpressure and FIFO ordering. Sends made after the run has ended
    are silently dropped.

    Usage:
        async def task(handle: Handle[int]) -> str:
            await handle.print("starting")
            await handle.update(1)
            worker = handle.clone()
            ...
            return "done"
    """

    def __init__(self, channel: Channel[Event]):
        self._channel = channel

    def clone(self) -> Handle[M]:
        """Return a new handle sharing the same channel."""
        return Handle(self._channel)

    def __copy__(self) -> Handle[M]:
        return self.clone()

    async def print(self, content: str) -> None:
        """Insert text above the viewport. Suspends while the channel is full."""
        await self._send(PrintEvent(content=content))

    async def update(self, message: M) -> None:
        """Send a message to Program.update. Suspends while the channel is full."""
        await self._send(MessageEvent(message=message))

    async def _send(self, event: Event) -> None:
        delivered = await self._channel.send(event)
        if not delivered:
            logger.debug(f"Dropped {event.type} event, driver is no longer running")
