"""
Program - the capability contract a caller's state machine satisfies.

A program is an MVU state machine:
- LINES: fixed height of the inline viewport, read once before the surface exists
- update(message): mutate state, nothing else
- draw(frame): render current state into the frame, never mutate state

draw must be idempotent; the driver may call it any number of times between
updates (after every scrollback insertion, for instance).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from moss_tui.errors import SetupError

if TYPE_CHECKING:
    from moss_tui.terminal import Frame


@runtime_checkable
class Program(Protocol):
    """Protocol for programs run by the driver."""

    LINES: ClassVar[int]

    def update(self, message: Any) -> None:
        """Apply a message to the program state."""
        ...

    def draw(self, frame: Frame) -> None:
        """Render the current state into the frame."""
        ...


def viewport_height(program: Program) -> int:
    """
    Return the validated viewport height of a program.

    Raises:
        SetupError: If LINES is missing, not an int, or negative
    """
    lines = getattr(type(program), "LINES", None)
    if isinstance(lines, bool) or not isinstance(lines, int):
        raise SetupError(
            stage="program",
            original_error=TypeError(f"{type(program).__name__}.LINES must be an int, got {lines!r}"),
        )
    if lines < 0:
        raise SetupError(
            stage="program",
            original_error=ValueError(f"{type(program).__name__}.LINES must not be negative, got {lines}"),
        )
    return lines
