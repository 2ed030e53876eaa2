"""Shared pytest fixtures for moss_tui tests."""

import pytest

from tests.fixtures import CounterProgram, ManualInterrupts, RecordingSurface


@pytest.fixture
def program() -> CounterProgram:
    """A fresh counter program."""
    return CounterProgram()


@pytest.fixture
def surface() -> RecordingSurface:
    """A recording surface sized for CounterProgram."""
    return RecordingSurface(lines=CounterProgram.LINES)


@pytest.fixture
def interrupts() -> ManualInterrupts:
    """An interrupt source the test triggers by hand."""
    return ManualInterrupts()
