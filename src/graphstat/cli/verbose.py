"""Verbose stage logging for CLI commands.

Prints a timestamped line when an analysis stage starts, completes or
fails, with its duration, so long runs on large edge lists show where the
time goes. Everything goes to stderr and stdout stays parseable.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import click
from rich.console import Console
from rich.markup import escape

_verbose_console = Console(stderr=True, highlight=False)


class VerboseLogger:
    """Stage timer that reports on stderr when enabled.

    Attributes:
        enabled: Whether anything is printed.
        timings: Durations in seconds of the stages that completed, in the
            order they finished.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self.timings: dict[str, float] = {}
        self._started: dict[str, float] = {}
        self._console = _verbose_console

    def log(self, message: str) -> None:
        """Log a verbose message with timestamp."""
        if not self.enabled:
            return
        timestamp = datetime.now(UTC).strftime("%H:%M:%S")
        self._console.print(f"[dim][{timestamp}][/dim] {message}")

    def _elapsed(self, name: str) -> float | None:
        started = self._started.pop(name, None)
        if started is None:
            return None
        return time.perf_counter() - started

    def start_stage(self, name: str) -> None:
        self._started[name] = time.perf_counter()
        self.log(f"Starting: {escape(name)}")

    def end_stage(self, name: str, result: str | None = None) -> None:
        """Record a stage as completed and log its duration.

        Args:
            name: Stage name passed to start_stage().
            result: Optional result summary appended to the line.
        """
        elapsed = self._elapsed(name)
        message = f"Completed: {escape(name)}"
        if elapsed is not None:
            self.timings[name] = elapsed
            message += f" ({elapsed:.2f}s)"
        if result:
            message += f" - {escape(result)}"
        self.log(message)

    def fail_stage(self, name: str, error: BaseException) -> None:
        """Log that a stage ended with an exception."""
        elapsed = self._elapsed(name)
        duration = f" ({elapsed:.2f}s)" if elapsed is not None else ""
        self.log(f"[red]Failed:[/red] {escape(name)}{duration} - {type(error).__name__}")

    @contextmanager
    def stage(self, name: str) -> Iterator["VerboseLogger"]:
        """Time a stage for the duration of the block.

        The stage is reported as completed on a clean exit and as failed
        when the block raises; the exception propagates either way.
        """
        self.start_stage(name)
        try:
            yield self
        except BaseException as e:
            self.fail_stage(name, e)
            raise
        self.end_stage(name)

    def summary(self) -> None:
        """Log the total time of all completed stages."""
        if self.timings:
            total = sum(self.timings.values())
            self.log(f"Total: {total:.2f}s over {len(self.timings)} stages")


def get_verbose_logger(ctx: click.Context) -> VerboseLogger:
    """Build a VerboseLogger from the `verbose` flag in ctx.obj."""
    if ctx.obj is None:
        return VerboseLogger(enabled=False)
    return VerboseLogger(enabled=ctx.obj.get("verbose", False))
