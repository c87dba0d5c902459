#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/csvpreview/sections.py
"""Per-file report sections.

A section consists of a heading followed by up to three fenced blocks, in
this order: file metadata, headers, and preview lines. Each block can be
switched off independently.

When csvkit formatting is enabled, headers and preview lines go through a
three-tier fallback: the column-filtered table, then the unfiltered table,
then the raw text of the file. Tool failures are logged and never skip the
file; only validation and decompression failures do.

Example section::

    ## File: sales.csv {#file-sales-csv}

    ### File Metadata:
    ```
    Size: 2048 bytes
    Last Modified: Oct 18 20:56:00 2026
    ```

    ### Headers:
    ```
    id,name,amount
    ```

    ### First 10 Lines:
    ```
    id,name,amount
    1,apple,3
    ```

"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from csvpreview.config import ColumnSelector, RunConfig
from csvpreview.constants import (
    CODE_FENCE,
    SKIPPED_SUFFIX,
    SUPPORTED_METADATA_FIELDS,
    TABLE_HEADER_LINES,
    TABLE_TOOL_LABEL,
)
from csvpreview.exceptions import DecompressionError, EmptyFileError, FileError
from csvpreview.preprocess import PreparedFile, ScratchSpace, preprocess
from csvpreview.selection import FileCandidate
from csvpreview.tools import TableTool, Toolkit, ToolResult
from csvpreview.validation import validate_file

logger = logging.getLogger(__name__)


class SectionStatus(str, Enum):
    """Whether a file was rendered or replaced by a placeholder."""

    VALID = "valid"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FileSection:
    """Rendered Markdown for one file."""

    candidate: FileCandidate
    text: str
    status: SectionStatus = SectionStatus.VALID
    reason: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status is SectionStatus.VALID


def fenced_block(title: str, body: str) -> str:
    """Wrap ``body`` in a literal code fence under a level-3 heading."""
    lines = [f"### {title}", CODE_FENCE]
    if body:
        lines.append(body)
    lines.append(CODE_FENCE)
    return "\n".join(lines) + "\n\n"


def render_heading(candidate: FileCandidate, include_anchor: bool) -> str:
    if include_anchor:
        return f"## File: {candidate.display_name} {{#{candidate.anchor}}}\n\n"
    return f"## File: {candidate.display_name}\n\n"


def skipped_section(candidate: FileCandidate, reason: str) -> FileSection:
    """Placeholder section for a file that could not be rendered."""
    text = f"## File: {candidate.display_name} {SKIPPED_SUFFIX}\n\n"
    return FileSection(candidate, text, SectionStatus.SKIPPED, reason)


def read_leading_lines(path: Path, count: int) -> list[str]:
    """Return the first ``count`` lines of a text file without line endings."""
    lines: list[str] = []
    if count <= 0:
        return lines
    with open(path, encoding="utf-8", errors="replace", newline="") as handle:
        for line in handle:
            lines.append(line.rstrip("\r\n"))
            if len(lines) >= count:
                break
    return lines


def _head(text: str, count: int) -> str:
    return "\n".join(text.splitlines()[:count])


def _format_mtime(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp)
    return f"{moment:%b} {moment.day:2d} {moment:%H:%M:%S %Y}"


def _owner_name(path: Path, st: os.stat_result) -> str:
    try:
        return path.owner()
    except (KeyError, NotImplementedError, OSError):
        return str(st.st_uid)


def format_metadata_line(path: Path, st: os.stat_result, field_name: str) -> Optional[str]:
    """Format one metadata line, or return None for an unsupported field."""
    if field_name == "size":
        return f"Size: {st.st_size} bytes"
    if field_name == "modified":
        return f"Last Modified: {_format_mtime(st.st_mtime)}"
    if field_name == "permissions":
        return f"Permissions: {stat.filemode(st.st_mode)}"
    if field_name == "owner":
        return f"Owner: {_owner_name(path, st)}"
    return None


def render_metadata(path: Path, fields: Iterable[str], display_name: Optional[str] = None) -> str:
    """Metadata block for the original (not preprocessed) file."""
    st = path.stat()
    lines = []
    for field_name in fields:
        line = format_metadata_line(path, st, field_name)
        if line is None:
            logger.warning(
                "Unknown metadata field '%s' for %s. Supported fields: %s.",
                field_name,
                display_name or path,
                ", ".join(SUPPORTED_METADATA_FIELDS),
            )
            continue
        lines.append(line)
    return fenced_block("File Metadata:", "\n".join(lines))


def headers_via_table_tool(
    prepared: PreparedFile, columns: Optional[ColumnSelector], table_tool: TableTool, display_name: str
) -> ToolResult:
    """Resolve the header block through the three fallback tiers.

    Returns a success result for the preferred tier and a degraded result
    (with the reason) when a simpler tier produced the text.
    """
    reason = ""
    if columns is not None:
        selected = table_tool.select_columns(prepared.path, prepared.delimiter, columns.to_csvkit())
        if selected.ok:
            return ToolResult.success(_head(selected.text, 1))
        reason = selected.reason
        logger.error(
            "Could not parse headers with csvkit for specified columns: %s. Reason: %s", columns, selected.reason
        )

    listing = table_tool.column_names(prepared.path, prepared.delimiter)
    if listing.ok:
        text = listing.text.rstrip("\n")
        if columns is None:
            return ToolResult.success(text)
        logger.warning("Available columns in %s:\n%s\nFalling back to all headers.", display_name, text)
        return ToolResult.degraded(text, reason)

    logger.error("Could not parse headers with csvkit. Falling back to raw output.")
    raw = "\n".join(read_leading_lines(prepared.path, 1))
    return ToolResult.degraded(raw, listing.reason)


def lines_via_table_tool(
    prepared: PreparedFile, lines: int, columns: Optional[ColumnSelector], table_tool: TableTool
) -> ToolResult:
    """Resolve the preview block through the three fallback tiers."""
    limit = lines + TABLE_HEADER_LINES
    reason = ""
    if columns is not None:
        selected = table_tool.select_columns(prepared.path, prepared.delimiter, columns.to_csvkit())
        looked = table_tool.look_text(selected.text) if selected.ok else selected
        if looked.ok:
            return ToolResult.success(_head(looked.text, limit))
        reason = looked.reason
        logger.error("Could not parse file with csvkit for specified columns. Falling back to all columns.")

    looked = table_tool.look(prepared.path, prepared.delimiter)
    if looked.ok:
        text = _head(looked.text, limit)
        return ToolResult.success(text) if columns is None else ToolResult.degraded(text, reason)

    logger.error("Could not parse file with csvkit. Falling back to raw output.")
    raw = "\n".join(read_leading_lines(prepared.path, lines))
    return ToolResult.degraded(raw, looked.reason)


def render_headers(prepared: PreparedFile, config: RunConfig, table_tool: TableTool, display_name: str) -> str:
    if config.use_table_tool:
        result = headers_via_table_tool(prepared, config.columns, table_tool, display_name)
        return fenced_block(f"Headers ({TABLE_TOOL_LABEL}):", result.text)
    return fenced_block("Headers:", "\n".join(read_leading_lines(prepared.path, 1)))


def render_preview_lines(prepared: PreparedFile, config: RunConfig, table_tool: TableTool) -> str:
    if config.use_table_tool:
        result = lines_via_table_tool(prepared, config.lines, config.columns, table_tool)
        return fenced_block(f"First {config.lines} Lines ({TABLE_TOOL_LABEL}):", result.text)
    return fenced_block(f"First {config.lines} Lines:", "\n".join(read_leading_lines(prepared.path, config.lines)))


def render_file_section(
    candidate: FileCandidate, config: RunConfig, toolkit: Optional[Toolkit] = None
) -> FileSection:
    """Validate, preprocess and render one file.

    Per-file problems produce a skipped section instead of an exception, so
    one bad file never aborts the run. This function is also the unit of
    work submitted to the process pool in parallel mode.
    """
    toolkit = toolkit or Toolkit.default()
    name = candidate.display_name

    try:
        validate_file(candidate.path, name)
    except EmptyFileError as exc:
        logger.warning(exc.message)
        return skipped_section(candidate, exc.message)
    except FileError as exc:
        logger.error(exc.message)
        return skipped_section(candidate, exc.message)

    with ScratchSpace() as scratch:
        try:
            prepared = preprocess(candidate.path, config.delimiter, scratch, name)
            parts = [render_heading(candidate, config.include_toc)]
            if config.show_metadata:
                parts.append(render_metadata(candidate.path, config.metadata_fields, name))
            if config.show_headers:
                parts.append(render_headers(prepared, config, toolkit.table_tool, name))
            if config.show_lines:
                parts.append(render_preview_lines(prepared, config, toolkit.table_tool))
        except DecompressionError as exc:
            logger.error(exc.message)
            return skipped_section(candidate, exc.message)
        except OSError as exc:
            message = f"Could not read '{name}': {exc}"
            logger.error(message)
            return skipped_section(candidate, message)

    return FileSection(candidate, "".join(parts))
