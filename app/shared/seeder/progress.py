"""Terminal progress bars for seeding runs."""

from __future__ import annotations

import sys
import time
from typing import TextIO


def format_duration(seconds: float) -> str:
    """Render a duration as ``1h 2m 3s`` / ``2m 3s`` / ``3s``."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class ProgressTracker:
    """Single progress bar with elapsed time and ETA.

    Redraws are throttled to ``update_interval`` seconds. A disabled tracker
    keeps counting (so callers can still read ``percentage``) but writes
    nothing.
    """

    def __init__(
        self,
        total: int = 0,
        description: str = "Progress",
        stream: TextIO | None = None,
        bar_width: int = 50,
        update_interval: float = 0.1,
        enabled: bool = True,
    ) -> None:
        """Initialize the tracker.

        Args:
            total: Expected number of items.
            description: Label printed before the bar.
            stream: Output stream (defaults to stdout).
            bar_width: Bar width in characters.
            update_interval: Minimum seconds between redraws.
            enabled: Whether anything is written.
        """
        self.total = total
        self.current = 0
        self.description = description
        self.stream = stream or sys.stdout
        self.bar_width = bar_width
        self.update_interval = update_interval
        self.enabled = enabled
        self.start_time = time.monotonic()
        self._last_draw = 0.0

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(100.0, self.current / self.total * 100)

    @property
    def elapsed(self) -> float:
        """Seconds since start (or the last reset)."""
        return time.monotonic() - self.start_time

    @property
    def eta(self) -> float | None:
        """Estimated seconds remaining, or None before the first item."""
        if self.current <= 0 or self.total <= 0:
            return None
        return max(0.0, self.elapsed / self.current * self.total - self.elapsed)

    def render(self, message: str = "") -> str:
        """Build the progress line without writing it."""
        filled = round(self.percentage / 100 * self.bar_width)
        bar = "█" * filled + "░" * (self.bar_width - filled)
        line = (
            f"{self.description}: [{bar}] {self.percentage:.1f}% "
            f"({self.current}/{self.total}) | {format_duration(self.elapsed)}"
        )
        eta = self.eta
        if eta is not None:
            line += f" | ETA: {format_duration(eta)}"
        if message:
            line += f" | {message}"
        return line

    def _draw(self, message: str = "", force: bool = False) -> None:
        if not self.enabled:
            return
        now = time.monotonic()
        if not force and now - self._last_draw < self.update_interval:
            return
        self._last_draw = now
        self.stream.write("\r" + self.render(message))
        self.stream.flush()

    def update(self, current: int, message: str = "") -> None:
        """Set the absolute item count."""
        self.current = current
        self._draw(message)

    def increment(self, amount: int = 1, message: str = "") -> None:
        self.current += amount
        self._draw(message)

    def complete(self, message: str = "") -> None:
        """Finish at 100%, re-synced to the actual item count."""
        if self.current > self.total or self.total <= 0:
            self.total = max(self.current, 1)
        self.current = self.total
        self._draw(message, force=True)
        if self.enabled:
            self.stream.write("\n")
            self.stream.flush()

    def reset(self, total: int | None = None, description: str | None = None) -> None:
        if total is not None:
            self.total = total
        if description is not None:
            self.description = description
        self.current = 0
        self.start_time = time.monotonic()
        self._last_draw = 0.0

    def log(self, message: str) -> None:
        """Print a line without corrupting the bar: clear, print, redraw."""
        if not self.enabled:
            return
        self.stream.write("\r\033[K")
        self.stream.write(message + "\n")
        self._draw(force=True)

    def info(self, message: str) -> None:
        self.log(f"ℹ️  {message}")

    def success(self, message: str) -> None:
        self.log(f"✅ {message}")

    def warn(self, message: str) -> None:
        self.log(f"⚠️  {message}")

    def error(self, message: str) -> None:
        self.log(f"❌ {message}")


class MultiStepProgressTracker:
    """Overall step counter plus a tracker for the active step."""

    def __init__(
        self,
        steps: list[str],
        stream: TextIO | None = None,
        enabled: bool = True,
        bar_width: int = 50,
        update_interval: float = 0.1,
    ) -> None:
        self.steps = steps
        self.stream = stream or sys.stdout
        self.enabled = enabled
        self.bar_width = bar_width
        self.update_interval = update_interval
        self.current_step = -1
        self.completed_steps: list[str] = []
        self.failed_steps: list[str] = []
        self.step_progress: ProgressTracker | None = None
        self.overall = ProgressTracker(
            len(steps),
            "Overall Progress",
            stream=self.stream,
            bar_width=bar_width,
            update_interval=update_interval,
            enabled=enabled,
        )

    @property
    def step_name(self) -> str:
        if 0 <= self.current_step < len(self.steps):
            return self.steps[self.current_step]
        return f"Step {self.current_step + 1}"

    def start_step(self, index: int, total: int = 0) -> ProgressTracker:
        """Begin a step and return its tracker."""
        self.current_step = index
        self.overall.current = index
        if self.enabled:
            self.stream.write(f"\n🚀 Starting: {self.step_name} ({index + 1}/{len(self.steps)})\n")
        self.step_progress = ProgressTracker(
            total,
            self.step_name,
            stream=self.stream,
            bar_width=self.bar_width,
            update_interval=self.update_interval,
            enabled=self.enabled,
        )
        return self.step_progress

    def set_step_total(self, total: int) -> None:
        if self.step_progress is not None:
            self.step_progress.total = total

    def update_step(self, amount: int = 1, message: str = "") -> None:
        if self.step_progress is not None:
            self.step_progress.increment(amount, message)

    def complete_step(self, message: str = "") -> None:
        if self.step_progress is not None:
            self.step_progress.complete(message)
        self.completed_steps.append(self.step_name)
        self.overall.increment()

    def fail_step(self, message: str) -> None:
        self.failed_steps.append(self.step_name)
        self.error(f"{self.step_name} failed: {message}")

    def complete(self, message: str = "") -> None:
        self.overall.complete(message)

    def _target(self) -> ProgressTracker:
        return self.step_progress or self.overall

    def log(self, message: str) -> None:
        self._target().log(message)

    def info(self, message: str) -> None:
        self._target().info(message)

    def success(self, message: str) -> None:
        self._target().success(message)

    def warn(self, message: str) -> None:
        self._target().warn(message)

    def error(self, message: str) -> None:
        self._target().error(message)
