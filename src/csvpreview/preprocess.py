#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/csvpreview/preprocess.py
"""Input preparation: decompression and delimiter normalization.

Both steps write to scratch files owned by a :class:`ScratchSpace`, which
belongs to a single file's processing unit and is removed when that unit
finishes, whether or not rendering succeeded.

Delimiter normalization splits every line on the exact delimiter sequence
and rejoins the pieces with a comma. Quoted fields are not treated
specially, so a delimiter-like sequence inside quotes is rewritten as well.
"""

from __future__ import annotations

import gzip
import logging
import shutil
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from csvpreview.constants import COMPRESSED_SUFFIXES, NORMALIZED_DELIMITER
from csvpreview.exceptions import DecompressionError

logger = logging.getLogger(__name__)


class ScratchSpace:
    """Private temporary directory for one file's processing unit.

    Examples
    --------
    >>> with ScratchSpace() as scratch:
    ...     work_file = scratch.new_file("data.csv")

    """

    def __init__(self, prefix: str = "csvpreview-"):
        self.prefix = prefix
        self._tmpdir: Optional[tempfile.TemporaryDirectory[str]] = None
        self._count = 0

    @property
    def path(self) -> Path:
        if self._tmpdir is None:
            raise RuntimeError("ScratchSpace is not active")
        return Path(self._tmpdir.name)

    def __enter__(self) -> "ScratchSpace":
        self._tmpdir = tempfile.TemporaryDirectory(prefix=self.prefix)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None

    def new_file(self, name: str) -> Path:
        """Reserve a unique path inside the scratch directory."""
        self._count += 1
        return self.path / f"{self._count}-{Path(name).name}"


@dataclass(frozen=True)
class PreparedFile:
    """The file to render and the delimiter that is valid for it."""

    path: Path
    delimiter: str


def is_compressed(path: Path) -> bool:
    return path.name.lower().endswith(COMPRESSED_SUFFIXES)


def decompress_if_needed(path: Path, scratch: ScratchSpace, display_name: Optional[str] = None) -> Path:
    """Expand a gzip-compressed input into the scratch space.

    Returns ``path`` unchanged when the name has no compressed suffix.

    Raises
    ------
    DecompressionError
        If the file is not valid gzip data or cannot be read.

    """
    if not is_compressed(path):
        return path

    target = scratch.new_file(path.stem)
    try:
        with gzip.open(path, "rb") as source, open(target, "wb") as destination:
            shutil.copyfileobj(source, destination)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(display_name or str(path), original_error=exc) from exc

    logger.debug("Decompressed %s to %s", path, target)
    return target


def normalize_delimiter(path: Path, delimiter: str, scratch: ScratchSpace) -> Path:
    """Rewrite a multi-character delimiter as a comma.

    Returns ``path`` unchanged for single-character delimiters.
    """
    if len(delimiter) <= 1:
        return path

    target = scratch.new_file(path.name)
    # surrogateescape keeps undecodable bytes intact through the rewrite
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as source, open(
        target, "w", encoding="utf-8", errors="surrogateescape", newline=""
    ) as destination:
        for line in source:
            body = line.rstrip("\r\n")
            ending = line[len(body):]
            destination.write(NORMALIZED_DELIMITER.join(body.split(delimiter)) + ending)

    logger.debug("Normalized delimiter %r in %s", delimiter, path)
    return target


def preprocess(path: Path, delimiter: str, scratch: ScratchSpace, display_name: Optional[str] = None) -> PreparedFile:
    """Apply decompression and delimiter normalization as needed."""
    effective = decompress_if_needed(path, scratch, display_name)
    normalized = normalize_delimiter(effective, delimiter, scratch)
    if normalized != effective:
        return PreparedFile(normalized, NORMALIZED_DELIMITER)
    return PreparedFile(effective, delimiter)
