#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Writing the report in the requested output format.

Markdown reports are written verbatim. HTML and PDF reports are handed to
the document converter; a default stylesheet or LaTeX template is generated
in the working directory the first time one is needed and reused afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from csvpreview.config import OutputFormat, RunConfig
from csvpreview.constants import (
    DEFAULT_CSS,
    DEFAULT_CSS_FILENAME,
    DEFAULT_DOCUMENT_TITLE,
    DEFAULT_LATEX_TEMPLATE,
    DEFAULT_TEMPLATE_FILENAME,
)
from csvpreview.exceptions import OutputWriteError
from csvpreview.report import Report
from csvpreview.tools import DocumentConverter

logger = logging.getLogger(__name__)


def _materialize(path: Path, content: str, description: str) -> Path:
    if not path.exists():
        logger.warning("Default %s '%s' not found. Creating a default one.", description, path.name)
        path.write_text(content, encoding="utf-8")
    return path


def ensure_default_stylesheet(directory: Path) -> Path:
    """Return the default stylesheet in ``directory``, creating it if missing."""
    return _materialize(directory / DEFAULT_CSS_FILENAME, DEFAULT_CSS, "CSS file")


def ensure_default_template(directory: Path) -> Path:
    """Return the default LaTeX template in ``directory``, creating it if missing."""
    return _materialize(directory / DEFAULT_TEMPLATE_FILENAME, DEFAULT_LATEX_TEMPLATE, "LaTeX template")


def resolve_stylesheet(config: RunConfig) -> Optional[str]:
    """Stylesheet reference for html output, as passed to the converter."""
    if config.output_format is not OutputFormat.HTML:
        return None
    if config.css_path:
        return config.css_path
    ensure_default_stylesheet(config.working_dir)
    return DEFAULT_CSS_FILENAME


def resolve_template(config: RunConfig) -> Optional[str]:
    """Template reference for pdf output, as passed to the converter."""
    if config.output_format is not OutputFormat.PDF:
        return None
    if config.template_path:
        return config.template_path
    ensure_default_template(config.working_dir)
    return DEFAULT_TEMPLATE_FILENAME


def write_output(report: Report, config: RunConfig, converter: DocumentConverter) -> Path:
    """Produce the output artifact and return its path.

    Raises
    ------
    OutputWriteError
        If the Markdown file cannot be written
    ConversionError
        If the converter fails; no artifact exists in that case

    """
    destination = config.final_output_path()
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(str(destination), config.output_format.value, original_error=exc) from exc

    if config.output_format is OutputFormat.MARKDOWN:
        try:
            destination.write_text(report.text, encoding="utf-8")
        except OSError as exc:
            raise OutputWriteError(str(destination), config.output_format.value, original_error=exc) from exc
    else:
        converter.convert(
            report.text,
            destination,
            config.output_format,
            toc=config.uses_native_toc,
            css_path=resolve_stylesheet(config),
            template_path=resolve_template(config),
            title=config.title or DEFAULT_DOCUMENT_TITLE,
            cwd=config.working_dir,
        )

    logger.info("%s output written to %s", config.output_format.label, destination)
    return destination
