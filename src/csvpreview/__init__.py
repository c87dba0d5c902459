"""csvpreview - Markdown, HTML and PDF previews of delimited text files.

csvpreview collects the CSV files matching a glob pattern and writes a
single report with one section per file: file metadata, the header row and
the first lines of data. Headers and lines can be rendered as aligned tables
through csvkit, and the Markdown report can be converted to HTML or PDF with
pandoc.

Examples
--------
Generate the default Markdown report for the current directory:

    >>> from csvpreview import RunConfig, generate_preview
    >>> result = generate_preview(RunConfig())
    >>> result.output_path
    PosixPath('.../csv_preview.md')

Render tables with csvkit and add a table of contents:

    >>> config = RunConfig(use_table_tool=True, include_toc=True, lines=5)
    >>> result = generate_preview(config)

Requirements
------------
- Python 3.10+
- csvkit for table formatting (``-c``), pandoc for HTML/PDF output, and
  fzf for interactive selection; each is only needed for its feature

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from csvpreview.config import ColumnSelector, OutputFormat, RunConfig
from csvpreview.exceptions import (
    CompressionError,
    ConfigurationError,
    ConversionError,
    CsvPreviewError,
    DependencyError,
    FileError,
)
from csvpreview.pipeline import PreviewResult, generate_preview
from csvpreview.progress import ProgressCallback, ProgressEvent
from csvpreview.tools import Toolkit

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "ColumnSelector",
    "CompressionError",
    "ConfigurationError",
    "ConversionError",
    "CsvPreviewError",
    "DependencyError",
    "FileError",
    "OutputFormat",
    "PreviewResult",
    "ProgressCallback",
    "ProgressEvent",
    "RunConfig",
    "Toolkit",
    "generate_preview",
]
