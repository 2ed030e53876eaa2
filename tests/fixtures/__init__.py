"""Test doubles shared across the moss_tui test suite."""

from .doubles import CounterProgram, ManualInterrupts, RecordingSurface, plain_lines

__all__ = [
    "CounterProgram",
    "ManualInterrupts",
    "RecordingSurface",
    "plain_lines",
]
