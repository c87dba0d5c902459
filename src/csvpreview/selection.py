#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Candidate file discovery.

Expands the configured glob pattern, optionally narrows the list through the
interactive chooser, and returns the candidates in byte-wise name order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from csvpreview.config import RunConfig
from csvpreview.constants import ANCHOR_PREFIX
from csvpreview.tools import FileChooser

logger = logging.getLogger(__name__)

_ANCHOR_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def make_anchor(name: str) -> str:
    """Derive the heading anchor for a file name."""
    return ANCHOR_PREFIX + _ANCHOR_UNSAFE.sub("-", name)


@dataclass(frozen=True)
class FileCandidate:
    """A file selected for the report.

    ``display_name`` is the name as matched by the pattern; it is used in
    headings, anchors and ordering. ``path`` is where the file lives.
    """

    path: Path
    display_name: str

    @property
    def anchor(self) -> str:
        return make_anchor(self.display_name)

    @property
    def toc_entry(self) -> str:
        """Markdown list item linking to this file's section."""
        return f"- [{self.display_name}](#{self.anchor})"


def expand_pattern(pattern: str, working_dir: Path) -> list[str]:
    """Return the names matching ``pattern`` relative to ``working_dir``.

    Like the shell, wildcards do not match names starting with a dot unless
    the pattern itself names a hidden path.
    """
    if not pattern:
        return []
    pattern_path = Path(pattern)
    if pattern_path.is_absolute():
        base = Path(pattern_path.anchor)
        relative_pattern = str(pattern_path.relative_to(base))
    else:
        base = working_dir
        relative_pattern = pattern
    show_hidden = any(part.startswith(".") for part in pattern_path.parts)

    names = []
    for match in base.glob(relative_pattern):
        relative = match.relative_to(base)
        if not show_hidden and any(part.startswith(".") for part in relative.parts):
            continue
        names.append(str(match) if pattern_path.is_absolute() else str(relative))
    return names


def build_candidates(names: Iterable[str], working_dir: Path) -> list[FileCandidate]:
    """Create candidates sorted by name, dropping duplicates."""
    return [FileCandidate(working_dir / name, name) for name in sorted(set(names))]


def select_files(config: RunConfig, chooser: Optional[FileChooser] = None) -> list[FileCandidate]:
    """Discover the files to preview.

    Returns an empty list when nothing matches the pattern or when the user
    selects nothing interactively; the reason is logged.
    """
    names = expand_pattern(config.pattern, config.working_dir)
    if not names:
        logger.error("No CSV files found matching pattern '%s' in %s.", config.pattern, config.working_dir)
        return []

    if config.interactive:
        if chooser is None:
            raise ValueError("Interactive selection requires a file chooser")
        offered = set(names)
        names = [name for name in chooser.choose(sorted(names)) if name in offered]
        if not names:
            logger.error("No files selected.")
            return []

    candidates = build_candidates(names, config.working_dir)
    logger.debug("Selected %d file(s): %s", len(candidates), ", ".join(c.display_name for c in candidates))
    return candidates
