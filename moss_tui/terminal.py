"""
Render surface - the single terminal viewport owned by the driver.

The driver talks to the surface only through the Surface protocol:
- start(): take over the terminal
- draw(render): redraw the viewport from a render callback
- insert_before(height, render): add scrollback rows above the viewport
- show_cursor() / clear(): restore the terminal at the end of a run

Terminal is the rich-backed implementation. It drives an inline rich Live
display with auto refresh disabled, so the viewport only changes when the
driver asks it to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol, runtime_checkable

from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.live import Live
from rich.segment import Segment

from moss_tui.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Rect:
    """A rectangular area of the terminal, in cells."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


class Frame:
    """
    Draw target handed to render callbacks.

    Renderables are stacked top to bottom and the result is cropped or padded
    to exactly area.height rows of area.width cells.
    """

    def __init__(self, area: Rect):
        self._area = area
        self._renderables: list[RenderableType] = []

    @property
    def area(self) -> Rect:
        return self._area

    @property
    def renderables(self) -> tuple[RenderableType, ...]:
        return tuple(self._renderables)

    def render(self, renderable: RenderableType) -> None:
        """Add a renderable below whatever has been rendered so far."""
        self._renderables.append(renderable)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width, height = self._area.width, self._area.height
        if height <= 0:
            return
        render_options = options.update(width=width, height=height)
        lines = console.render_lines(Group(*self._renderables), render_options, pad=True)
        new_line = Segment.line()
        for line in Segment.set_shape(lines, width, height):
            yield from line
            yield new_line


RenderCallback = Callable[[Frame], None]


@runtime_checkable
class Surface(Protocol):
    """Capability the driver consumes to render the viewport."""

    def start(self) -> None:
        ...

    def draw(self, render: RenderCallback) -> None:
        ...

    def insert_before(self, height: int, render: RenderCallback) -> None:
        ...

    def show_cursor(self) -> None:
        ...

    def clear(self) -> None:
        ...


class Terminal:
    """
    Inline viewport of fixed height on a rich Console.

    Usage:
        terminal = Terminal(lines=3)
        terminal.start()
        terminal.draw(lambda frame: frame.render("hello"))
        terminal.insert_before(1, lambda frame: frame.render("scrollback"))
        terminal.show_cursor()
        terminal.clear()
    """

    def __init__(
        self,
        lines: int,
        console: Console | None = None,
        vertical_overflow: Literal["crop", "visible"] = "crop",
    ):
        self._lines = lines
        self._console = console or Console()
        self._live = Live(
            console=self._console,
            auto_refresh=False,
            transient=True,
            redirect_stdout=False,
            redirect_stderr=False,
            vertical_overflow=vertical_overflow,
        )

    @property
    def lines(self) -> int:
        return self._lines

    @property
    def console(self) -> Console:
        return self._console

    @property
    def is_started(self) -> bool:
        return self._live.is_started

    def viewport(self) -> Rect:
        """Area of the viewport at the current terminal width."""
        return Rect(0, 0, self._console.width, self._lines)

    def start(self) -> None:
        """Begin the inline live display. Hides the cursor."""
        self._live.start(refresh=False)
        logger.debug(f"Inline viewport started | lines={self._lines} | width={self._console.width}")

    def draw(self, render: RenderCallback) -> None:
        frame = Frame(self.viewport())
        render(frame)
        self._live.update(frame, refresh=True)

    def insert_before(self, height: int, render: RenderCallback) -> None:
        """Print `height` rows above the viewport; they become scrollback."""
        if height <= 0:
            return
        frame = Frame(Rect(0, 0, self._console.width, height))
        render(frame)
        # Printing while the live display is active goes through its render
        # hook, which places the output above the viewport.
        self._console.print(frame, end="")

    def show_cursor(self) -> None:
        self._console.show_cursor(True)

    def clear(self) -> None:
        """Stop the live display and erase the viewport region."""
        self._live.stop()
