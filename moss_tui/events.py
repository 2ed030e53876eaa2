"""Events carried from handles to the driver, and the driver's merged inputs."""

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator


# --- Events (produced by Handle) ---

class MessageEvent(BaseModel):
    """An application message for Program.update."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
    type: Literal["message"] = "message"

    message: Any


class PrintEvent(BaseModel):
    """Text to insert above the viewport as scrollback."""
    model_config = ConfigDict(frozen=True)
    type: Literal["print"] = "print"

    content: str


Event = Annotated[
    Union[MessageEvent, PrintEvent],
    Discriminator("type"),
]


# --- Inputs (internal to the driver loop) ---

@dataclass(frozen=True)
class EventInput:
    """An event dequeued from the handle channel."""

    event: Event


@dataclass(frozen=True)
class FinishedInput:
    """The caller task completed with a result."""

    result: Any


@dataclass(frozen=True)
class TermInput:
    """An interrupt signal was received."""

    signum: int


Input = Union[EventInput, FinishedInput, TermInput]
