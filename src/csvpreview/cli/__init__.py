"""Command-line interface for csvpreview.

This module provides the ``csvpreview`` command, which writes a preview
report of the CSV files in the current directory.

Environment Variable Support
----------------------------
Every run setting can be given as CSVPREVIEW_<SETTING> where the setting
name is upper-cased (CSVPREVIEW_LINES, CSVPREVIEW_OUTPUT_FORMAT,
CSVPREVIEW_USE_TABLE_TOOL ...). CLI arguments always override environment
variables, which override configuration files.

Examples
--------
Basic preview::

    $ csvpreview

Tables via csvkit, 5 lines, tab separated::

    $ csvpreview -c -l 5 -d $'\\t'

HTML report with table of contents::

    $ csvpreview -f html -t -o report.html

Use environment variables for defaults::

    $ export CSVPREVIEW_LINES=20
    $ export CSVPREVIEW_USE_TABLE_TOOL=true
    $ csvpreview -p 'data/*.csv'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from csvpreview.cli.builder import (
    SETTING_NAMES,
    build_run_config,
    cli_settings,
    collect_env_settings,
    create_parser,
    merge_settings,
)
from csvpreview.cli.config import load_config_with_priority, normalize_config_keys
from csvpreview.cli.progress import ProgressContext, create_progress_callback
from csvpreview.constants import CONFIG_ENV_VAR
from csvpreview.exceptions import EXIT_ERROR, EXIT_SUCCESS, CsvPreviewError
from csvpreview.logging_utils import configure_logging
from csvpreview.pipeline import generate_preview

logger = logging.getLogger(__name__)


def _setup_logging_level(parsed_args: argparse.Namespace, log_file: Optional[str]) -> None:
    """Set up logging level based on command-line arguments."""
    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace or parsed_args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=log_file, trace_mode=parsed_args.trace)


def _load_file_settings(parsed_args: argparse.Namespace, working_dir: Path) -> Dict[str, Any]:
    """Load settings from the configuration file unless --no-config is given."""
    if parsed_args.no_config:
        return {}
    config = load_config_with_priority(
        explicit_path=parsed_args.config,
        env_var_path=os.environ.get(CONFIG_ENV_VAR),
        start_dir=working_dir,
    )
    return normalize_config_keys(config, SETTING_NAMES)


def _use_rich(parsed_args: argparse.Namespace) -> bool:
    return parsed_args.rich and sys.stderr.isatty()


def main(args: list[str] | None = None) -> int:
    """Execute the csvpreview command and return its exit status."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    working_dir = Path.cwd()

    try:
        file_settings = _load_file_settings(parsed_args, working_dir)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    settings = merge_settings(file_settings, collect_env_settings(), cli_settings(parsed_args))
    _setup_logging_level(parsed_args, settings.get("error_log"))

    try:
        config = build_run_config(settings, working_dir)
        with ProgressContext(use_rich=_use_rich(parsed_args), description="Previewing CSV files") as progress:
            result = generate_preview(config, progress_callback=create_progress_callback(progress))
    except CsvPreviewError as e:
        logger.error(e.message)
        return EXIT_ERROR

    if result.output_path is None:
        return EXIT_ERROR
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
