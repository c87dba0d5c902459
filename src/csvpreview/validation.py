#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Per-file input checks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from csvpreview.exceptions import EmptyFileError, NotRegularFileError, UnreadableFileError


def validate_file(path: Path, display_name: Optional[str] = None) -> None:
    """Confirm that ``path`` is a regular, readable, non-empty file.

    Parameters
    ----------
    path : Path
        File to check
    display_name : str, optional
        Name used in error messages, defaults to ``path``

    Raises
    ------
    NotRegularFileError
        If the path is missing or not a plain file
    UnreadableFileError
        If read permission is absent
    EmptyFileError
        If the file has zero bytes

    """
    name = display_name or str(path)
    if not path.is_file():
        raise NotRegularFileError(name)
    if not os.access(path, os.R_OK):
        raise UnreadableFileError(name)
    if path.stat().st_size == 0:
        raise EmptyFileError(name)
