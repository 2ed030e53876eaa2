"""
moss_tui - an MVU driver loop for inline terminal programs.

A Program is redrawn into a fixed-height viewport at the bottom of the
terminal while a task runs. The task talks to the program through a Handle:
- handle.update(message): apply a message to the program, then redraw
- handle.print(text): add text to the scrollback above the viewport

Main entry points:
- run: blocking entry point (owns its event loop)
- run_async: for callers already inside an event loop

Example usage:
    from moss_tui import Frame, Handle, run

    class Spinner:
        LINES = 1

        def __init__(self):
            self.done = 0

        def update(self, message: int) -> None:
            self.done += message

        def draw(self, frame: Frame) -> None:
            frame.render(f"{self.done} files fetched")

    async def fetch(handle: Handle[int]) -> int:
        for name in ("a", "b"):
            await handle.print(f"fetched {name}")
            await handle.update(1)
        return 2

    fetched = run(Spinner(), fetch)
"""

__version__ = "0.1.0"

from .channel import Channel
from .config import DriverOptions
from .driver import Driver, InputStream, run, run_async
from .errors import RenderError, SetupError, TuiError
from .events import Event, MessageEvent, PrintEvent
from .handle import Handle
from .logging_config import setup_logging
from .program import Program
from .signals import InterruptSource, InterruptWatcher
from .terminal import Frame, Rect, Surface, Terminal

__all__ = [
    "Channel",
    "Driver",
    "DriverOptions",
    "Event",
    "Frame",
    "Handle",
    "InputStream",
    "InterruptSource",
    "InterruptWatcher",
    "MessageEvent",
    "PrintEvent",
    "Program",
    "Rect",
    "RenderError",
    "SetupError",
    "Surface",
    "Terminal",
    "TuiError",
    "run",
    "run_async",
    "setup_logging",
]
