"""
Driver - runs a Program against the terminal until its task completes.

The driver merges three sources into a single stream of inputs:
- the caller's task, which finishes once with a result
- the handle channel, carrying MessageEvent / PrintEvent from any Handle clone
- the interrupt watcher, carrying SIGINT notifications

Each input is applied to the Program and followed by a full redraw. The
render surface is touched by the driver only, so every producer goes through
a Handle.

Termination is one of exactly two outcomes:
- the task finishes: the surface is restored and its result returned
- an interrupt arrives: the surface is restored and the process exits
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Awaitable, Callable, Generic, NoReturn, TypeVar

from moss_tui.channel import Channel
from moss_tui.config import DriverOptions
from moss_tui.errors import RenderError, SetupError
from moss_tui.events import (
    Event,
    EventInput,
    FinishedInput,
    Input,
    MessageEvent,
    PrintEvent,
    TermInput,
)
from moss_tui.handle import Handle
from moss_tui.logging_config import get_logger, log_input, log_surface
from moss_tui.program import Program, viewport_height
from moss_tui.signals import InterruptSource, InterruptWatcher
from moss_tui.terminal import Surface, Terminal
from moss_tui.widget import paragraph, split_lines

logger = get_logger(__name__)

M = TypeVar("M")
T = TypeVar("T")

TaskFactory = Callable[[Handle[M]], Awaitable[T]]


async def _cancel(task: asyncio.Future) -> None:
    """Cancel a task and wait for it to unwind."""
    if task.done():
        return
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


def hard_exit(status: int) -> NoReturn:
    """
    End the process right away with the given status.

    Buffered output and log handlers are flushed first. Nothing else
    unwinds: pending tasks, finally blocks and atexit hooks are skipped.
    """
    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            # Closed or broken stream; exit regardless
            continue
    logging.shutdown()
    os._exit(status)


class InputStream:
    """
    Merges the caller task, the channel and the interrupt source.

    One waiter task is kept pending per source and asyncio.wait picks up
    whichever completes first. When several are ready at once they are taken
    in a fixed order: interrupt, then queued events, then task completion.
    Events already queued when the task completes are delivered before its
    FinishedInput; later sends are not waited for.
    """

    def __init__(
        self,
        task: asyncio.Future,
        channel: Channel[Event],
        interrupts: InterruptSource,
    ):
        self._task = task
        self._channel = channel
        self._interrupts = interrupts
        self._receive: asyncio.Task | None = None
        self._interrupt: asyncio.Task | None = None
        self._backlog: int | None = None

    async def next(self) -> Input:
        """
        Wait for the next input.

        Raises:
            Exception: Whatever the caller task raised, once it is reached
        """
        if self._interrupt is None:
            self._interrupt = asyncio.ensure_future(self._interrupts.wait())
        if self._receive is None and not self._task.done():
            self._receive = asyncio.ensure_future(self._channel.receive())

        waiting = {self._interrupt, self._task}
        if self._receive is not None:
            waiting.add(self._receive)
        await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

        if self._interrupt.done():
            return TermInput(signum=self._interrupt.result())

        if self._receive is not None and self._receive.done():
            receive, self._receive = self._receive, None
            return EventInput(event=receive.result())

        return await self._finish()

    async def _finish(self) -> Input:
        if self._backlog is None:
            if self._receive is not None:
                await _cancel(self._receive)
                self._receive = None
            self._backlog = self._channel.pending
            if self._backlog:
                logger.debug(f"Task finished with {self._backlog} queued events")

        if self._backlog > 0:
            event = self._channel.receive_nowait()
            if event is not None:
                self._backlog -= 1
                return EventInput(event=event)
            self._backlog = 0

        return FinishedInput(result=self._task.result())

    async def aclose(self) -> None:
        """Cancel the pending waiters."""
        for waiter in (self._receive, self._interrupt):
            if waiter is not None:
                await _cancel(waiter)
        self._receive = None
        self._interrupt = None

    def abandon(self) -> None:
        """Cancel the pending waiters without waiting for them."""
        for waiter in (self._receive, self._interrupt):
            if waiter is not None:
                waiter.cancel()
        self._receive = None
        self._interrupt = None


class Driver(Generic[M, T]):
    """
    Runs a single Program on a single render surface.

    Usage:
        driver = Driver(program)
        result = await driver.run(task_factory)

    The surface and interrupt source default to a rich-backed Terminal and
    a SIGINT InterruptWatcher; both can be swapped for anything satisfying
    the Surface / InterruptSource protocols.
    """

    def __init__(
        self,
        program: Program,
        options: DriverOptions | None = None,
        surface: Surface | None = None,
        interrupts: InterruptSource | None = None,
        exit_process: Callable[[int], NoReturn] = hard_exit,
    ):
        self._program = program
        self._options = options or DriverOptions()
        self._surface = surface
        self._interrupts = interrupts
        self._exit_process = exit_process

    @property
    def program(self) -> Program:
        return self._program

    @property
    def options(self) -> DriverOptions:
        return self._options

    async def run(self, task_factory: TaskFactory[M, T]) -> T:
        """
        Run the program until the task finishes.

        Args:
            task_factory: Called once with a Handle; returns the awaitable
                whose result is returned from run()

        Returns:
            The task's result

        Raises:
            SetupError: If the surface or interrupt watcher cannot be set up
            RenderError: If drawing or restoring the surface fails
        """
        surface, interrupts = self._setup()
        try:
            self._redraw(surface)
        except BaseException:
            self._restore_after_failure(surface)
            interrupts.stop()
            raise

        channel: Channel[Event] = Channel(self._options.queue_capacity)
        task: asyncio.Future | None = None
        inputs: InputStream | None = None
        interrupted = False
        logger.info(f"Driver running | program={type(self._program).__name__}")

        try:
            task = asyncio.ensure_future(task_factory(Handle(channel)))
            inputs = InputStream(task, channel, interrupts)
            while True:
                item = await inputs.next()
                match item:
                    case EventInput(event=MessageEvent(message=message)):
                        log_input(logger, "message", type(message).__name__)
                        self._program.update(message)
                        self._redraw(surface)
                    case EventInput(event=PrintEvent(content=content)):
                        self._print(surface, content)
                        self._redraw(surface)
                    case FinishedInput(result=result):
                        log_input(logger, "finished")
                        self._restore(surface)
                        logger.info("Driver finished | surface restored")
                        return result
                    case TermInput(signum=signum):
                        log_input(logger, "term", f"signal={signum}")
                        self._restore(surface)
                        interrupted = True
                        status = self._options.exit_status
                        logger.info(f"Driver interrupted | exiting with status {status}")
                        self._exit_process(status)
                        # Only reached when an injected exit hook returns
                        raise SystemExit(status)
        except (Exception, asyncio.CancelledError):
            if not interrupted:
                self._restore_after_failure(surface)
            raise
        finally:
            channel.close()
            if interrupted:
                # The caller's task is abandoned, never awaited
                if inputs is not None:
                    inputs.abandon()
                if task is not None:
                    task.cancel()
            else:
                if inputs is not None:
                    await inputs.aclose()
                if task is not None:
                    await _cancel(task)
            interrupts.stop()

    def _setup(self) -> tuple[Surface, InterruptSource]:
        lines = viewport_height(self._program)

        interrupts = self._interrupts
        if interrupts is None:
            interrupts = InterruptWatcher(self._options.interrupt_signals)
        try:
            interrupts.start()
        except SetupError:
            raise
        except Exception as e:
            raise SetupError(stage="signals", original_error=e) from e

        surface = self._surface
        try:
            if surface is None:
                surface = Terminal(lines, vertical_overflow=self._options.vertical_overflow)
            surface.start()
        except Exception as e:
            interrupts.stop()
            raise SetupError(stage="surface", original_error=e) from e

        log_surface(logger, "start", details=f"lines={lines}")
        return surface, interrupts

    def _redraw(self, surface: Surface) -> None:
        try:
            surface.draw(self._program.draw)
        except Exception as e:
            log_surface(logger, "draw", success=False, details=str(e))
            raise RenderError(operation="draw", original_error=e) from e

    def _print(self, surface: Surface, content: str) -> None:
        lines = split_lines(content)
        log_input(logger, "print", f"lines={len(lines)}")
        text = paragraph(lines)
        try:
            surface.insert_before(len(lines), lambda frame: frame.render(text))
        except Exception as e:
            log_surface(logger, "insert_before", success=False, details=str(e))
            raise RenderError(operation="insert_before", original_error=e) from e

    def _restore(self, surface: Surface) -> None:
        """Show the cursor and clear the viewport region."""
        try:
            surface.show_cursor()
            surface.clear()
        except Exception as e:
            log_surface(logger, "restore", success=False, details=str(e))
            raise RenderError(operation="restore", original_error=e) from e
        log_surface(logger, "restore")

    def _restore_after_failure(self, surface: Surface) -> None:
        try:
            self._restore(surface)
        except RenderError as e:
            logger.error(f"Could not restore surface after failure: {e}", exc_info=True)


async def run_async(
    program: Program,
    task_factory: TaskFactory[M, T],
    *,
    options: DriverOptions | None = None,
    surface: Surface | None = None,
    interrupts: InterruptSource | None = None,
    exit_process: Callable[[int], NoReturn] = hard_exit,
) -> T:
    """Run a program from inside an already running event loop."""
    driver: Driver[M, T] = Driver(
        program,
        options=options,
        surface=surface,
        interrupts=interrupts,
        exit_process=exit_process,
    )
    return await driver.run(task_factory)


def run(
    program: Program,
    task_factory: TaskFactory[M, T],
    *,
    options: DriverOptions | None = None,
    surface: Surface | None = None,
    interrupts: InterruptSource | None = None,
    exit_process: Callable[[int], NoReturn] = hard_exit,
) -> T:
    """
    Run a program to completion, blocking the calling thread.

    Returns the task's result. If an interrupt arrives first the process
    exits instead and this function never returns.

    Example:
        class Counter:
            LINES = 1

            def __init__(self):
                self.count = 0

            def update(self, message: int) -> None:
                self.count += message

            def draw(self, frame: Frame) -> None:
                frame.render(f"count: {self.count}")

        async def work(handle: Handle[int]) -> str:
            for _ in range(3):
                await handle.update(1)
            await handle.print("counted to three")
            return "done"

        result = run(Counter(), work)
    """
    return asyncio.run(
        run_async(
            program,
            task_factory,
            options=options,
            surface=surface,
            interrupts=interrupts,
            exit_process=exit_process,
        )
    )
