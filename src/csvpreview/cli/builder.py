#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Argument parser and settings resolution for the csvpreview CLI.

Every run setting can come from four places. Highest priority first:

1. command-line flags
2. environment variables ``CSVPREVIEW_<SETTING>`` (e.g. ``CSVPREVIEW_LINES``)
3. a configuration file (see :mod:`csvpreview.cli.config`)
4. the built-in defaults of :class:`~csvpreview.config.RunConfig`

Flags therefore default to ``None`` so that an unset flag does not mask a
value from a lower layer.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, NoReturn, Optional

from csvpreview.config import ColumnSelector, OutputFormat, RunConfig, parse_metadata_fields
from csvpreview.constants import (
    DEFAULT_DELIMITER,
    DEFAULT_LINES,
    DEFAULT_METADATA_FIELDS,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PATTERN,
    ENV_PREFIX,
    SUPPORTED_METADATA_FIELDS,
)
from csvpreview.exceptions import EXIT_ERROR, ConfigurationError

logger = logging.getLogger(__name__)

SETTING_NAMES: tuple[str, ...] = tuple(f.name for f in dataclasses.fields(RunConfig) if f.name != "working_dir")

BOOLEAN_SETTINGS = frozenset(
    {
        "use_table_tool",
        "include_toc",
        "interactive",
        "parallel",
        "compress",
        "show_metadata",
        "show_headers",
        "show_lines",
        "native_toc",
        "include_timestamp",
    }
)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")

DESCRIPTION = """\
Generate a preview report of CSV files.

For every file matching PATTERN in the current directory, csvpreview writes
a section with the file's metadata, its header row and its first lines to a
single Markdown document. The document can be converted to HTML or PDF with
pandoc, and headers and lines can be rendered as aligned tables with csvkit.

Files that are missing, unreadable, empty, or cannot be decompressed appear
as "(Skipped due to errors)" and do not stop the run. Files ending in .gz are
decompressed before they are rendered.
"""

EPILOG = f"""\
Configuration:
  Settings may also be given as environment variables {ENV_PREFIX}<SETTING>
  (e.g. {ENV_PREFIX}LINES=20, {ENV_PREFIX}USE_TABLE_TOOL=true) or in a
  .csvpreview.toml/.yaml/.json file or the [tool.csvpreview] table of a
  pyproject.toml. Command-line flags take precedence.

Exit status:
  0 on success, 1 on any fatal error (invalid options, missing tool for a
  requested feature, no matching files, conversion or compression failure).

Examples:
  # Markdown preview of every CSV file in the current directory
  csvpreview

  # Semicolon separated files, 5 lines each, as a table via csvkit
  csvpreview -d ';' -l 5 -c

  # HTML report with a table of contents and a custom stylesheet
  csvpreview -f html -t -s custom.css -o report.html

  # PDF report of selected columns, rendered in parallel and gzipped
  csvpreview -f pdf -c -k id,name,3 -P -z

  # Pick files interactively and show extra metadata
  csvpreview -i -e size,modified,permissions,owner

  # Only headers, no metadata or preview lines, errors logged to a file
  csvpreview -M -N -L errors.log
"""


class PreviewArgumentParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_ERROR, f"{self.prog}: error: {message}\n")


def _get_version() -> str:
    from csvpreview import __version__

    return __version__


def create_parser() -> PreviewArgumentParser:
    """Build the command-line parser.

    Returns
    -------
    PreviewArgumentParser
        Configured parser; run settings default to None

    """
    parser = PreviewArgumentParser(
        prog="csvpreview",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    inputs = parser.add_argument_group("Input")
    inputs.add_argument(
        "-p",
        "--pattern",
        dest="pattern",
        metavar="PATTERN",
        help=f"Glob pattern of files to preview (default: {DEFAULT_PATTERN})",
    )
    inputs.add_argument(
        "-d",
        "--delimiter",
        dest="delimiter",
        metavar="DELIM",
        help=f"Field delimiter (default: '{DEFAULT_DELIMITER}'). "
        "Multi-character delimiters are converted to commas before rendering.",
    )
    inputs.add_argument(
        "-i",
        "--interactive",
        dest="interactive",
        action="store_const",
        const=True,
        help="Select files interactively with fzf",
    )

    content = parser.add_argument_group("Content")
    content.add_argument(
        "-l", "--lines", dest="lines", metavar="N", help=f"Number of preview lines per file (default: {DEFAULT_LINES})"
    )
    content.add_argument(
        "-c",
        "--csvkit",
        dest="use_table_tool",
        action="store_const",
        const=True,
        help="Render headers and lines as tables with csvkit",
    )
    content.add_argument(
        "-k",
        "--columns",
        dest="columns",
        metavar="COLS",
        help="Comma-separated column names or 1-based indices to show (requires -c)",
    )
    content.add_argument(
        "-e",
        "--metadata-fields",
        dest="metadata_fields",
        metavar="FIELDS",
        help=f"Comma-separated metadata fields: {', '.join(SUPPORTED_METADATA_FIELDS)} "
        f"(default: {DEFAULT_METADATA_FIELDS})",
    )
    content.add_argument(
        "-M", "--no-metadata", dest="show_metadata", action="store_const", const=False, help="Omit file metadata"
    )
    content.add_argument(
        "-H", "--no-headers", dest="show_headers", action="store_const", const=False, help="Omit the headers block"
    )
    content.add_argument(
        "-N", "--no-lines", dest="show_lines", action="store_const", const=False, help="Omit the preview lines block"
    )

    output = parser.add_argument_group("Output")
    output.add_argument(
        "-o",
        "--output",
        dest="output_path",
        metavar="FILE",
        help=f"Output file (default: {DEFAULT_OUTPUT_FILE}). The extension is replaced for html and pdf.",
    )
    output.add_argument(
        "-f", "--format", dest="output_format", metavar="FORMAT", help="Output format: md, html or pdf (default: md)"
    )
    output.add_argument(
        "-t",
        "--toc",
        dest="include_toc",
        action="store_const",
        const=True,
        help="Add a table of contents linking to each file",
    )
    output.add_argument(
        "--native-toc",
        dest="native_toc",
        action="store_const",
        const=True,
        help="With -t and html/pdf output, let pandoc build the table of contents",
    )
    output.add_argument(
        "-s", "--css", dest="css_path", metavar="CSS", help="Stylesheet for html output (default: generated style.css)"
    )
    output.add_argument(
        "-m",
        "--template",
        dest="template_path",
        metavar="TEMPLATE",
        help="LaTeX template for pdf output (default: generated custom_template.tex)",
    )
    output.add_argument("--title", dest="title", metavar="TITLE", help="Title placed at the top of the report")
    output.add_argument(
        "--timestamp",
        dest="include_timestamp",
        action="store_const",
        const=True,
        help="Add a 'Generated on' line to the report",
    )
    output.add_argument(
        "-z", "--compress", dest="compress", action="store_const", const=True, help="Compress the output with gzip"
    )

    execution = parser.add_argument_group("Execution")
    execution.add_argument(
        "-P", "--parallel", dest="parallel", action="store_const", const=True, help="Process files in parallel"
    )
    execution.add_argument(
        "--workers", dest="workers", metavar="N", help="Number of parallel workers (default: number of CPUs)"
    )

    general = parser.add_argument_group("Configuration and logging")
    general.add_argument("--config", metavar="FILE", help="Configuration file (TOML, YAML or JSON)")
    general.add_argument(
        "--no-config",
        dest="no_config",
        action="store_true",
        default=False,
        help="Ignore configuration files, including CSVPREVIEW_CONFIG and --config",
    )
    general.add_argument(
        "-L", "--error-log", dest="error_log", metavar="FILE", help="Append diagnostics to FILE instead of stderr"
    )
    general.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    general.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="Verbose output (equivalent to --log-level DEBUG)"
    )
    general.add_argument(
        "--trace", action="store_true", default=False, help="Debug logging with timestamps and logger names"
    )
    general.add_argument(
        "--rich", action="store_true", default=False, help="Show a progress bar when stderr is a terminal"
    )
    general.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")

    return parser


def cli_settings(parsed_args: argparse.Namespace) -> dict[str, Any]:
    """Return the run settings explicitly given on the command line."""
    return {name: getattr(parsed_args, name) for name in SETTING_NAMES if getattr(parsed_args, name, None) is not None}


def collect_env_settings(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect run settings from ``CSVPREVIEW_<SETTING>`` environment variables."""
    environ = os.environ if environ is None else environ
    settings: dict[str, Any] = {}
    for name in SETTING_NAMES:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            settings[name] = value
    return settings


def merge_settings(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge setting layers given from lowest to highest priority."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid value '{value}' for {name}: expected true or false.", parameter_name=name, parameter_value=value
    )


def _to_int(name: str, value: Any, message: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(message, parameter_name=name, parameter_value=value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(message, parameter_name=name, parameter_value=value) from None


def _to_list_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def coerce_setting(name: str, value: Any) -> Any:
    """Convert a raw setting (string, or a native value from a config file) to its RunConfig type.

    Raises
    ------
    ConfigurationError
        If the value cannot be converted

    """
    if name in BOOLEAN_SETTINGS:
        return _to_bool(name, value)
    if name == "lines":
        return _to_int(name, value, f"Lines value must be a positive integer, got '{value}'.")
    if name == "workers":
        return _to_int(name, value, f"Workers value must be a positive integer, got '{value}'.")
    if name == "output_format":
        return OutputFormat.parse(value)
    if name == "columns":
        return ColumnSelector.parse(_to_list_text(value))
    if name == "metadata_fields":
        return parse_metadata_fields(_to_list_text(value))
    return str(value)


def build_run_config(settings: Mapping[str, Any], working_dir: Optional[Path] = None) -> RunConfig:
    """Create a RunConfig from merged settings.

    Parameters
    ----------
    settings : mapping
        Setting name to raw value
    working_dir : Path, optional
        Directory the run operates in, defaults to the current directory

    Returns
    -------
    RunConfig
        Configuration with unspecified settings at their defaults

    """
    values = {name: coerce_setting(name, value) for name, value in settings.items() if name in SETTING_NAMES}
    return RunConfig(working_dir=working_dir or Path.cwd(), **values)
