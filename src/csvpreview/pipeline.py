#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end preview generation.

:func:`generate_preview` drives the whole run: configuration checks, tool
availability, file selection, rendering, assembly, conversion and optional
compression. Fatal problems are raised as :class:`CsvPreviewError`
subclasses; per-file problems only produce skipped sections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from csvpreview.config import RunConfig, check_config
from csvpreview.convert import write_output
from csvpreview.finalize import finalize_output
from csvpreview.progress import ProgressCallback
from csvpreview.report import GeneratedOn, Report, assemble_report
from csvpreview.runner import run_jobs
from csvpreview.sections import FileSection
from csvpreview.selection import select_files
from csvpreview.tools import Toolkit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewResult:
    """Outcome of a preview run.

    ``output_path`` is None when no files were selected; nothing is written
    in that case.
    """

    output_path: Optional[Path]
    sections: tuple[FileSection, ...] = field(default_factory=tuple)
    report: Optional[Report] = None

    @property
    def skipped_count(self) -> int:
        return sum(1 for section in self.sections if not section.is_valid)


def generate_preview(
    config: RunConfig,
    toolkit: Optional[Toolkit] = None,
    progress_callback: Optional[ProgressCallback] = None,
    generated_on: Optional[GeneratedOn] = None,
) -> PreviewResult:
    """Build the preview report described by ``config``.

    Parameters
    ----------
    config : RunConfig
        Run configuration
    toolkit : Toolkit, optional
        External tools; the csvkit/pandoc/fzf/gzip defaults when omitted
    progress_callback : ProgressCallback, optional
        Receives per-file progress events
    generated_on : datetime or str, optional
        Timestamp for the "Generated on" line. When omitted and the
        configuration asks for a timestamp, the current time is used.

    Returns
    -------
    PreviewResult
        The artifact path together with the sections and assembled report

    Raises
    ------
    ConfigurationError
        If the configuration is invalid
    DependencyError
        If a requested feature needs a tool that is not installed
    OutputWriteError
        If the report cannot be written
    ConversionError
        If the report cannot be converted
    CompressionError
        If compression was requested and failed

    """
    config = check_config(config, logger=logger)
    toolkit = toolkit or Toolkit.default()
    toolkit.require(config)

    candidates = select_files(config, toolkit.chooser if config.interactive else None)
    if not candidates:
        return PreviewResult(output_path=None)

    sections = run_jobs(candidates, config, toolkit, progress_callback)
    logger.info("Processing complete.")

    stamp = (generated_on or datetime.now()) if config.include_timestamp else None
    report = assemble_report(sections, config, stamp)

    output_path = write_output(report, config, toolkit.converter)
    output_path = finalize_output(output_path, config.compress, toolkit.compressor)

    return PreviewResult(output_path=output_path, sections=tuple(sections), report=report)
