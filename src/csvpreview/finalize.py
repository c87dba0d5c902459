#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Optional compression of the final artifact."""

from __future__ import annotations

import logging
from pathlib import Path

from csvpreview.tools import Compressor

logger = logging.getLogger(__name__)


def finalize_output(path: Path, compress: bool, compressor: Compressor) -> Path:
    """Compress ``path`` when requested and return the artifact's final path.

    A missing compressor only produces a warning and leaves the uncompressed
    artifact in place. A compressor that is present but fails raises
    :class:`~csvpreview.exceptions.CompressionError`.
    """
    if not compress:
        return path

    if not compressor.is_available():
        logger.warning("gzip not found. Output file not compressed.")
        return path

    compressed = compressor.compress(path)
    logger.info("Compressed output written to %s", compressed)
    return compressed
