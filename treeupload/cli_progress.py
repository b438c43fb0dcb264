"""Console rendering and progress helpers for the treeupload CLI."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import UploadResult
from .utils.events import BATCH_COMPLETE, FILE_COMPLETE, FILE_FAIL, SCAN_COMPLETE, EventEmitter

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def render_configuration_summary(config: Dict[str, Any], target: Optional[Console] = None) -> None:
    """Render startup configuration summary."""
    target = target or console
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, Text(rendered))

    panel = Panel(
        table,
        title="[bold red]treeupload[/bold red]",
        subtitle="[dim]directory to portal[/dim]",
        border_style="red",
    )
    target.print(panel)


def render_start(directory: Path, portal: str, target: Optional[Console] = None) -> None:
    target = target or console
    target.print(
        f"\nUploading contents of directory [bold red]{escape(str(directory))}[/bold red] "
        f"to [bold red]{escape(portal)}[/bold red]\n"
    )


def render_error(message: str, target: Optional[Console] = None) -> None:
    target = target or err_console
    target.print(f"[red]ERROR:[/red] {escape(message)}")


def render_address(address: str, target: Optional[Console] = None) -> None:
    """Print where the uploaded index can be found; the address is the last line."""
    target = target or console
    target.print("[white]You can find your files at[/white]\n")
    target.print(Text(address, style="bold red"), soft_wrap=True)


class BatchProgressDisplay:
    """
    Event-based console display for a batch upload.

    Terse mode prints one dot per settled upload (``x`` for a failure);
    verbose mode prints one line per file.
    """

    def __init__(self, verbose: bool = False, target: Optional[Console] = None):
        self._verbose = verbose
        self._console = target or console
        self._markers_pending = False
        self.total = 0
        self.completed = 0
        self.failed = 0

    @property
    def summary(self) -> str:
        return f"{self.completed} uploaded, {self.failed} failed of {self.total}"

    def on_scan_complete(self, directory: Path, total: int) -> None:
        self.total = total
        self._console.print(f"Found {total} files to upload")

    def on_file_complete(self, file_path: Path, result: UploadResult) -> None:
        self.completed += 1
        if self._verbose:
            self._console.print(f"[green]Done[/green] {escape(Path(file_path).name)}")
            return
        self._console.print(".", end="")
        self._markers_pending = True

    def on_file_fail(self, file_path: Path, result: UploadResult) -> None:
        self.failed += 1
        if self._verbose:
            self._console.print(
                f"[red]Failed[/red] {escape(Path(file_path).name)} - {escape(result.error or '')}"
            )
            return
        self._console.print("[red]x[/red]", end="")
        self._markers_pending = True

    def on_batch_complete(self, uploaded: int) -> None:
        self.end_marker_line()
        self._console.print(f"[green]Upload complete[/green] ({self.summary})\n")
        self._console.print("Building html")

    def end_marker_line(self) -> None:
        if self._markers_pending:
            self._console.print()
            self._markers_pending = False

    def attach(self, events: EventEmitter) -> None:
        events.on(SCAN_COMPLETE, self.on_scan_complete)
        events.on(FILE_COMPLETE, self.on_file_complete)
        events.on(FILE_FAIL, self.on_file_fail)
        events.on(BATCH_COMPLETE, self.on_batch_complete)
