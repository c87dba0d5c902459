#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Progress display for the command line.

Progress goes to stderr, either as a rich progress bar or as one plain line
per file. It is never written into the report.
"""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from csvpreview.progress import ProgressCallback, ProgressEvent


class ProgressContext:
    """Progress context for rich or plain output.

    The total is taken from the runner's ``started`` event, so the context
    can be entered before the number of files is known.

    Parameters
    ----------
    use_rich : bool
        Whether to draw a rich progress bar
    description : str
        Description for the progress bar
    stream : TextIO, optional
        Destination for plain output, defaults to stderr

    Examples
    --------
    >>> with ProgressContext(use_rich=True, description="Previewing") as progress:
    ...     generate_preview(config, progress_callback=create_progress_callback(progress))

    """

    def __init__(self, use_rich: bool, description: str = "Previewing files", stream: Optional[TextIO] = None):
        """Initialize progress context."""
        self.use_rich = use_rich
        self.description = description
        self.stream = stream

        self._progress_obj: Optional[Progress] = None
        self._task_id: Any = None
        self._console: Optional[Console] = None
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def __enter__(self) -> ProgressContext:
        """Enter context manager and initialize progress tracking."""
        if self.use_rich:
            self._console = Console(file=self.stream or sys.stderr)
            self._progress_obj = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=self._console,
                transient=True,
            )
            self._progress_obj.__enter__()
            self._task_id = self._progress_obj.add_task(f"[cyan]{self.description}...", total=None)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager and cleanup progress tracking."""
        if self._progress_obj is not None:
            self._progress_obj.__exit__(exc_type, exc_val, exc_tb)
            self._progress_obj = None

    def start(self, total: int) -> None:
        """Set the number of items once it is known."""
        if self._progress_obj is not None:
            self._progress_obj.update(self._task_id, total=total)

    def update(self, advance: int = 1) -> None:
        """Advance the progress by ``advance`` items."""
        self._current += advance
        if self._progress_obj is not None:
            self._progress_obj.update(self._task_id, advance=advance)

    def log(self, message: str, level: str = "info") -> None:
        """Print a message (color-coded when using rich).

        Parameters
        ----------
        message : str
            Message to print
        level : str, default='info'
            One of 'info', 'success', 'warning', 'error'

        """
        if self._console is not None:
            styles = {"success": "green", "error": "red", "warning": "yellow"}
            style = styles.get(level)
            # File names may contain square brackets
            text = escape(message)
            self._console.print(f"[{style}]{text}[/{style}]" if style else text, markup=True, highlight=False)
        else:
            print(message, file=self.stream or sys.stderr)


def create_progress_callback(progress: ProgressContext) -> ProgressCallback:
    """Create a callback that feeds runner events into a ProgressContext.

    Plain mode prints the per-file "Processing file i of N" lines; rich mode
    advances the bar and only prints the names of skipped files.
    """

    def callback(event: ProgressEvent) -> None:
        """Handle progress event and log to context."""
        if event.event_type == "started":
            progress.start(event.total)
        elif event.event_type == "item_done":
            progress.update()
            if not progress.use_rich:
                progress.log(event.message)
        elif event.event_type == "error" and progress.use_rich:
            progress.log(event.message, level="warning")

    return callback
