#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/csvpreview/progress.py
"""Progress callback system for preview runs.

The job runner reports per-file progress through a callback so the command
line (or any embedder) can show it on a side channel. Progress never becomes
part of the generated report.

Examples
--------
    >>> from csvpreview import generate_preview
    >>> from csvpreview.progress import ProgressEvent
    >>>
    >>> def handler(event: ProgressEvent):
    ...     print(event)
    >>>
    >>> result = generate_preview(config, progress_callback=handler)

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

EventType = Literal["started", "item_done", "finished", "error"]


@dataclass
class ProgressEvent:
    """Progress event emitted while files are processed.

    Parameters
    ----------
    event_type : EventType
        Type of progress event:

        - "started": processing has begun; ``total`` holds the file count
        - "item_done": one file has been rendered; ``metadata["item_type"]``
          is ``"file"`` and ``metadata["path"]`` names it
        - "finished": every file has been rendered
        - "error": a file was skipped; ``metadata["error"]`` holds the reason

    message : str
        Human-readable description of the event
    current : int, default 0
        Number of files completed so far
    total : int, default 0
        Total number of files. Set to 0 if unknown.
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def percent(self) -> int:
        """Completed share of the run as an integer percentage."""
        if self.total <= 0:
            return 0
        return self.current * 100 // self.total

    def __str__(self) -> str:
        """Return human-readable string representation."""
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


ProgressCallback = Callable[[ProgressEvent], None]
"""Type alias for progress callback functions.

Callbacks should not raise exceptions as this may interrupt the run.
"""
