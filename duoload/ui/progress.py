"""Per-page progress lines rendered with Rich."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TextIO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from ..orchestrator import TransferSummary


@dataclass(frozen=True, slots=True)
class PageProgress:
    """Snapshot emitted once per processed page."""

    page: int
    records: int
    admitted: int
    duplicates: int
    fetched_total: int
    admitted_total: int
    duplicates_total: int
    has_next: bool
    total_pages: int | None = None
    page_limit: int | None = None


class ProgressObserver(Protocol):
    def start(self, label: str, page_limit: int | None = None) -> None: ...

    def page_done(self, progress: PageProgress) -> None: ...

    def finish(self, summary: "TransferSummary") -> None: ...


class ProgressReporter:
    """Write human-readable progress to a chosen stream.

    File exports report on stdout; exports piped to stdout report on stderr
    so the JSON stream stays clean.
    """

    def __init__(self, stream: TextIO | None = None, enabled: bool = True) -> None:
        self.enabled = enabled
        self.console = Console(file=stream, highlight=False, soft_wrap=True)
        self.pages: list[PageProgress] = []

    def start(self, label: str, page_limit: int | None = None) -> None:
        if not self.enabled:
            return
        suffix = f" (limited to {page_limit} pages)" if page_limit else ""
        self.console.print(f"Exporting to {escape(label)}{suffix}...")

    def page_done(self, progress: PageProgress) -> None:
        self.pages.append(progress)
        if not self.enabled:
            return
        if progress.total_pages:
            position = f"{progress.page}/{progress.total_pages}"
        elif progress.page_limit:
            position = f"{progress.page}/{progress.page_limit} (limit)"
        else:
            position = str(progress.page)
        line = (
            f"[bold blue]Page {position}[/]: {progress.records} cards, "
            f"[green]{progress.admitted} added[/]"
        )
        if progress.duplicates:
            line += f", [yellow]{progress.duplicates} duplicates[/]"
        line += f" [dim](total {progress.admitted_total}/{progress.fetched_total})[/]"
        self.console.print(line)

    def finish(self, summary: "TransferSummary") -> None:
        if not self.enabled:
            return
        table = Table(title="Transfer summary", box=box.SIMPLE_HEAD)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_row("Pages", str(summary.pages))
        table.add_row("Fetched", str(summary.fetched))
        table.add_row("Added", str(summary.admitted))
        table.add_row("Duplicates skipped", str(summary.duplicates_skipped))
        table.add_row("Elapsed", f"{summary.elapsed:.1f}s")
        self.console.print(table)


__all__ = ["PageProgress", "ProgressObserver", "ProgressReporter"]
