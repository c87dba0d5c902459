#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Report assembly.

Sections are concatenated in candidate order. When the generated table of
contents is enabled, a marker is written once near the top of the document
and replaced, after all sections exist, by one link per rendered file.
Skipped files keep their placeholder heading in the body but get no entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Union

from csvpreview.config import RunConfig
from csvpreview.constants import TOC_HEADING, TOC_MARKER
from csvpreview.sections import FileSection

logger = logging.getLogger(__name__)

GeneratedOn = Union[datetime, str]


@dataclass(frozen=True)
class Report:
    """The assembled Markdown document."""

    text: str
    sections: tuple[FileSection, ...]
    toc_entries: tuple[str, ...] = ()

    @property
    def skipped(self) -> tuple[FileSection, ...]:
        return tuple(section for section in self.sections if not section.is_valid)


def build_toc_entries(sections: Sequence[FileSection]) -> list[str]:
    """Return one link per rendered (non-skipped) section, in section order."""
    return [section.candidate.toc_entry for section in sections if section.is_valid]


def format_generated_on(value: GeneratedOn) -> str:
    if isinstance(value, datetime):
        return value.strftime("%a %b %d %H:%M:%S %Y")
    return value


def render_preamble(config: RunConfig, generated_on: Optional[GeneratedOn] = None) -> str:
    """Title, timestamp and table-of-contents marker, each only when configured."""
    parts = []
    if config.title:
        parts.append(f"# {config.title}\n\n")
    if generated_on is not None:
        parts.append(f"Generated on: {format_generated_on(generated_on)}\n\n")
    if config.uses_marker_toc:
        parts.append(f"{TOC_HEADING}\n\n{TOC_MARKER}\n\n")
    return "".join(parts)


def insert_toc(document: str, entries: Sequence[str]) -> str:
    """Replace the single table-of-contents marker with ``entries``."""
    if TOC_MARKER not in document:
        logger.debug("No table of contents marker in document")
        return document
    return document.replace(TOC_MARKER, "\n".join(entries), 1)


def assemble_report(
    sections: Sequence[FileSection],
    config: RunConfig,
    generated_on: Optional[GeneratedOn] = None,
) -> Report:
    """Concatenate sections and splice in the table of contents.

    Parameters
    ----------
    sections : sequence of FileSection
        Rendered sections, already in final order
    config : RunConfig
        Run configuration (title, table-of-contents mode)
    generated_on : datetime or str, optional
        Value for the "Generated on" line; omitted when None

    Returns
    -------
    Report
        The frozen document

    """
    document = render_preamble(config, generated_on) + "".join(section.text for section in sections)

    entries: list[str] = []
    if config.uses_marker_toc:
        entries = build_toc_entries(sections)
        document = insert_toc(document, entries)

    return Report(text=document, sections=tuple(sections), toc_entries=tuple(entries))
