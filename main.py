#!/usr/bin/env python3
"""
moss-tui demo - fetch a list of packages with a live progress viewport.

Each finished package is printed into the scrollback above the viewport, and
the viewport itself shows overall progress. Press Ctrl-C to abort.
"""

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from moss_tui import DriverOptions, Frame, Handle, run
from moss_tui.logging_config import setup_logging


PACKAGES = [
    "glibc", "zlib", "openssl", "python", "rust", "llvm",
    "mesa", "wayland", "gtk", "firefox", "vim", "git",
]


@dataclass(frozen=True)
class Started:
    package: str


@dataclass(frozen=True)
class Fetched:
    package: str
    size_kb: int


class FetchProgram:
    """Two-line viewport: a progress bar and the package in flight."""

    LINES = 2

    def __init__(self, total: int):
        self.total = total
        self.fetched = 0
        self.downloaded_kb = 0
        self.current: str | None = None

    def update(self, message: Started | Fetched) -> None:
        match message:
            case Started(package=package):
                self.current = package
            case Fetched(size_kb=size_kb):
                self.fetched += 1
                self.downloaded_kb += size_kb
                self.current = None

    def draw(self, frame: Frame) -> None:
        bar = Table.grid(padding=(0, 1))
        bar.add_column(no_wrap=True)
        bar.add_column(ratio=1)
        bar.add_row(
            Text(f"{self.fetched}/{self.total}", style="bold"),
            ProgressBar(total=self.total, completed=self.fetched),
        )
        frame.render(bar)
        if self.current is not None:
            frame.render(Text(f"fetching {self.current}...", style="dim"))
        else:
            frame.render(Text(f"{self.downloaded_kb} KiB downloaded", style="dim"))


def fetch_all(packages: list[str], delay: float):
    """Build the task run alongside the viewport."""

    async def fetch_one(handle: Handle, package: str) -> int:
        await handle.update(Started(package))
        await asyncio.sleep(delay * random.uniform(0.5, 1.5))
        size_kb = random.randint(100, 5000)
        await handle.print(f"fetched {package} ({size_kb} KiB)")
        await handle.update(Fetched(package, size_kb))
        return size_kb

    async def task(handle: Handle) -> int:
        total = 0
        for package in packages:
            total += await fetch_one(handle.clone(), package)
        return total

    return task


def main() -> int:
    """Main entry point for the demo."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="moss-tui demo - fetch packages with a live viewport",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=len(PACKAGES),
        help=f"Number of packages to fetch (default: {len(PACKAGES)})",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.3,
        help="Average seconds per package (default: 0.3)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for debug.log (default: ./logs)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to stderr",
    )

    args = parser.parse_args()

    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.log_dir, console_level=console_level)

    packages = [PACKAGES[i % len(PACKAGES)] for i in range(max(args.steps, 0))]
    total_kb = run(
        FetchProgram(total=len(packages)),
        fetch_all(packages, args.delay),
        options=DriverOptions.from_env(),
    )
    print(f"Fetched {len(packages)} packages, {total_kb} KiB total")
    return 0


if __name__ == "__main__":
    sys.exit(main())
