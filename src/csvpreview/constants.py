#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for csvpreview.

This module centralizes the default option values, marker strings and the
bodies of the generated side artifacts (stylesheet and LaTeX template) used
across the package.

Constants are organized by category:
1. Type Definitions - Literal types
2. Run Defaults - Values used when an option is not supplied
3. Report Layout - Heading text, markers and fences
4. Generated Assets - Default stylesheet and template
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

OutputFormatName = Literal["markdown", "html", "pdf"]
MetadataField = Literal["size", "modified", "permissions", "owner"]

# =============================================================================
# Run Defaults
# =============================================================================

DEFAULT_DELIMITER = ","
DEFAULT_LINES = 10
DEFAULT_OUTPUT_FILE = "csv_preview.md"
DEFAULT_PATTERN = "*.csv"
DEFAULT_OUTPUT_FORMAT: OutputFormatName = "markdown"
DEFAULT_METADATA_FIELDS = "size,modified"

SUPPORTED_METADATA_FIELDS: tuple[MetadataField, ...] = ("size", "modified", "permissions", "owner")

# Inputs carrying one of these suffixes are decompressed before rendering
COMPRESSED_SUFFIXES = (".gz",)
COMPRESSED_OUTPUT_SUFFIX = ".gz"

# Single-character delimiter multi-character delimiters are rewritten to
NORMALIZED_DELIMITER = ","

# csvlook prints a header row and a rule before the data rows
TABLE_HEADER_LINES = 2

ENV_PREFIX = "CSVPREVIEW_"
CONFIG_ENV_VAR = "CSVPREVIEW_CONFIG"
CONFIG_FILENAMES = [".csvpreview.toml", ".csvpreview.yaml", ".csvpreview.yml", ".csvpreview.json"]
PYPROJECT_SECTION = "csvpreview"

# =============================================================================
# Report Layout
# =============================================================================

ANCHOR_PREFIX = "file-"
TOC_HEADING = "## Table of Contents"
TOC_MARKER = "<!-- TOC will be inserted here -->"
SKIPPED_SUFFIX = "(Skipped due to errors)"
CODE_FENCE = "```"
TABLE_TOOL_LABEL = "via csvkit"
DEFAULT_DOCUMENT_TITLE = "CSV Preview"

FZF_PROMPT = "Select CSV files (use TAB to select multiple): "

# =============================================================================
# Generated Assets
# =============================================================================

DEFAULT_CSS_FILENAME = "style.css"
DEFAULT_TEMPLATE_FILENAME = "custom_template.tex"

DEFAULT_CSS = """\
body {
    font-family: Arial, sans-serif;
    line-height: 1.6;
    margin: 0 auto;
    max-width: 800px;
    padding: 20px;
}
h1, h2, h3 {
    color: #333;
}
table {
    border-collapse: collapse;
    width: 100%;
    margin-bottom: 20px;
}
th, td {
    border: 1px solid #ddd;
    padding: 8px;
    text-align: left;
}
th {
    background-color: #f2f2f2;
}
pre {
    background-color: #f8f8f8;
    padding: 10px;
    border-radius: 5px;
    overflow-x: auto;
}
code {
    font-family: Consolas, Monaco, 'Andale Mono', monospace;
}
"""

DEFAULT_LATEX_TEMPLATE = r"""\documentclass[a4paper,12pt]{article}
\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{lmodern}
\usepackage{geometry}
\geometry{margin=1in}
\usepackage{fancyhdr}
\pagestyle{fancy}
\fancyhf{}
\fancyhead[C]{CSV Preview}
\fancyfoot[C]{\thepage}
\usepackage{longtable}
\usepackage{booktabs}
\usepackage{hyperref}
\hypersetup{colorlinks=true,linkcolor=blue}
\begin{document}
$if(toc)$
\tableofcontents
\newpage
$endif$
$body$
\end{document}
"""
