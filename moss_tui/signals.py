"""
Interrupt watcher - delivers interrupt notifications into the event loop.

Signal handlers are registered with loop.add_signal_handler so a notification
is just another awaitable source for the driver to merge, rather than a
KeyboardInterrupt raised at an arbitrary point.
"""

import asyncio
import signal
from typing import Iterable, Protocol, runtime_checkable

from moss_tui.errors import SetupError
from moss_tui.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class InterruptSource(Protocol):
    """Capability the driver consumes to learn about interrupts."""

    def start(self) -> None:
        """Begin watching. Must be called from inside the running loop."""
        ...

    async def wait(self) -> int:
        """Wait for the next interrupt and return its signal number."""
        ...

    def stop(self) -> None:
        """Stop watching and release any registrations."""
        ...


class InterruptWatcher:
    """Watches process signals (SIGINT by default) on the running loop."""

    def __init__(self, signals: Iterable[int] = (signal.SIGINT,)):
        self._signals = tuple(signals)
        self._notifications: asyncio.Queue[int] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._registered: list[int] = []

    @property
    def signals(self) -> tuple[int, ...]:
        return self._signals

    def start(self) -> None:
        """
        Register handlers for the watched signals.

        Raises:
            SetupError: If a handler cannot be registered (unsupported
                platform, not the main thread, invalid signal)
        """
        if self._loop is not None:
            logger.warning("Interrupt watcher already started")
            return

        loop = asyncio.get_running_loop()
        for signum in self._signals:
            try:
                loop.add_signal_handler(signum, self.deliver, signum)
            except (NotImplementedError, RuntimeError, ValueError, OSError) as e:
                self._remove_handlers(loop)
                raise SetupError(stage="signals", original_error=e) from e
            self._registered.append(signum)

        self._loop = loop
        logger.debug(f"Watching signals {[signal.Signals(s).name for s in self._signals]}")

    def deliver(self, signum: int) -> None:
        """Record an interrupt notification."""
        logger.info(f"Interrupt received | signal={signum}")
        self._notifications.put_nowait(signum)

    async def wait(self) -> int:
        return await self._notifications.get()

    def stop(self) -> None:
        if self._loop is None:
            return
        self._remove_handlers(self._loop)
        self._loop = None
        logger.debug("Interrupt watcher stopped")

    def _remove_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for signum in self._registered:
            loop.remove_signal_handler(signum)
        self._registered.clear()
