"""Exceptions raised by the driver loop."""

from dataclasses import dataclass


class TuiError(Exception):
    """Base exception for moss_tui errors."""


@dataclass
class SetupError(TuiError):
    """The run could not be started (surface, signals, or program contract)."""

    stage: str
    original_error: Exception

    def __str__(self) -> str:
        return f"Setup stage '{self.stage}' failed: {self.original_error}"


@dataclass
class RenderError(TuiError):
    """A surface operation failed while the run was in progress."""

    operation: str
    original_error: Exception

    def __str__(self) -> str:
        return f"Surface operation '{self.operation}' failed: {self.original_error}"
