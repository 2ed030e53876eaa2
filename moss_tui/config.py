"""Driver configuration.

Values have sensible defaults and can be overridden from the environment:

    MOSS_TUI_QUEUE_CAPACITY     bound of the handle channel (default: 10)
    MOSS_TUI_EXIT_STATUS        process status used on interrupt (default: 0)
    MOSS_TUI_VERTICAL_OVERFLOW  "crop" or "visible" (default: crop)
"""

import os
import signal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_QUEUE_CAPACITY = 10
ENV_PREFIX = "MOSS_TUI_"


class DriverOptions(BaseModel):
    """Tunables for a single run of the driver."""
    model_config = ConfigDict(frozen=True)

    queue_capacity: int = Field(default=DEFAULT_QUEUE_CAPACITY, ge=1)
    interrupt_signals: tuple[int, ...] = (signal.SIGINT,)
    exit_status: int = 0
    vertical_overflow: Literal["crop", "visible"] = "crop"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "DriverOptions":
        """Build options from MOSS_TUI_* environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field_name in ("queue_capacity", "exit_status", "vertical_overflow"):
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw:
                values[field_name] = raw.strip()
        return cls.model_validate(values)
