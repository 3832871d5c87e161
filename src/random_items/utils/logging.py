"""Structured logging and rich live status display."""

from __future__ import annotations

import logging
import time

from rich.console import Console
from rich.live import Live
from rich.panel import Panel

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quiet noisy libs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class LiveStatus:
    """Rich live display showing the trigger loop state."""

    def __init__(self, interval_seconds: float) -> None:
        self.interval_seconds = interval_seconds
        self.start_time = 0.0
        self.running = False
        self.pool_size = 0
        self.draws = 0
        self.failures = 0
        self.elapsed = 0.0
        self.last_title = ""
        self._live: Live | None = None

    def start(self) -> None:
        self.start_time = time.monotonic()
        self._live = Live(self._render(), console=console, refresh_per_second=4)
        self._live.start()

    def update(
        self,
        running: bool,
        pool_size: int,
        draws: int,
        failures: int,
        elapsed: float,
        last_title: str = "",
    ) -> None:
        self.running = running
        self.pool_size = pool_size
        self.draws = draws
        self.failures = failures
        self.elapsed = elapsed
        if last_title:
            self.last_title = last_title
        if self._live:
            self._live.update(self._render())

    def stop(self) -> None:
        if self._live:
            self._live.stop()

    def _render(self) -> Panel:
        uptime = time.monotonic() - self.start_time if self.start_time else 0
        up_m, up_s = divmod(int(uptime), 60)

        pct = min(self.elapsed / self.interval_seconds, 1.0) if self.interval_seconds else 0
        bar_width = 30
        filled = int(bar_width * pct)
        bar = "█" * filled + "░" * (bar_width - filled)

        state = "[green]running[/green]" if self.running else "[yellow]stopped[/yellow]"
        lines = [
            f" State: {state}  |  Pool: {self.pool_size:,} items  |  Uptime: {up_m}:{up_s:02d}",
            f" Draws: {self.draws:,}  |  Failures: {self.failures}",
            f" {bar}  {self.elapsed:.1f}s / {self.interval_seconds:.1f}s",
        ]
        if self.last_title:
            lines.append(f" Last: {self.last_title}")

        return Panel(
            "\n".join(lines),
            title="[bold magenta]random-items[/bold magenta]",
            border_style="magenta",
        )
