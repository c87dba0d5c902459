#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Run configuration for csvpreview.

A :class:`RunConfig` is resolved once per run from command-line flags,
environment variables and configuration files, and is then passed read-only
into every stage of the pipeline (including parallel workers).
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from csvpreview.constants import (
    DEFAULT_DELIMITER,
    DEFAULT_LINES,
    DEFAULT_METADATA_FIELDS,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PATTERN,
    SUPPORTED_METADATA_FIELDS,
)
from csvpreview.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Report output formats."""

    MARKDOWN = "markdown"
    HTML = "html"
    PDF = "pdf"

    @classmethod
    def parse(cls, value: Union[str, "OutputFormat"]) -> "OutputFormat":
        """Parse a format name, accepting ``md`` as an alias for markdown."""
        if isinstance(value, OutputFormat):
            return value
        normalized = str(value).strip().lower()
        if normalized == "md":
            return cls.MARKDOWN
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(
                f"Invalid output format '{value}'. Use 'md', 'html', or 'pdf'.",
                parameter_name="format",
                parameter_value=value,
            ) from None

    @property
    def extension(self) -> str:
        """File extension of artifacts in this format."""
        return {"markdown": ".md", "html": ".html", "pdf": ".pdf"}[self.value]

    @property
    def label(self) -> str:
        """Display name used in log messages."""
        return {"markdown": "Markdown", "html": "HTML", "pdf": "PDF"}[self.value]


ColumnToken = Union[str, int]


@dataclass(frozen=True)
class ColumnSelector:
    """Column projection requested with ``-k``.

    Each token is either a column name or a 1-based column index.
    """

    tokens: tuple[ColumnToken, ...]

    @classmethod
    def parse(cls, spec: str) -> "ColumnSelector":
        """Parse a comma-separated list of column names or indices.

        Raises
        ------
        ConfigurationError
            If the list is empty, contains an empty entry, or an index below 1.

        """
        raw_tokens = [token.strip() for token in spec.split(",")]
        if not spec.strip() or any(not token for token in raw_tokens):
            raise ConfigurationError(
                f"Invalid column list '{spec}': entries must be non-empty names or indices.",
                parameter_name="columns",
                parameter_value=spec,
            )

        tokens: list[ColumnToken] = []
        for token in raw_tokens:
            if token.isdigit():
                index = int(token)
                if index < 1:
                    raise ConfigurationError(
                        f"Invalid column index '{token}': column indices start at 1.",
                        parameter_name="columns",
                        parameter_value=spec,
                    )
                tokens.append(index)
            else:
                tokens.append(token)
        return cls(tuple(tokens))

    def to_csvkit(self) -> str:
        """Render the selector in csvcut ``-c`` syntax."""
        return ",".join(str(token) for token in self.tokens)

    def __str__(self) -> str:
        return self.to_csvkit()


def parse_metadata_fields(spec: Union[str, Iterable[str]]) -> tuple[str, ...]:
    """Parse metadata field names into an ordered, de-duplicated tuple.

    Unknown names are kept so they can be reported; see
    :meth:`RunConfig.validate`.
    """
    items = spec.split(",") if isinstance(spec, str) else list(spec)
    fields: list[str] = []
    for item in items:
        name = item.strip().lower()
        if name and name not in fields:
            fields.append(name)
    return tuple(fields)


class ValidationSeverity(str, Enum):
    """Severity levels for configuration problems."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ValidationProblem:
    """A configuration issue discovered before the run starts."""

    message: str
    severity: ValidationSeverity

    def log(self, logger: logging.Logger) -> None:
        """Emit the problem using the appropriate log level."""
        if self.severity is ValidationSeverity.ERROR:
            logger.error(self.message)
        else:
            logger.warning(self.message)


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one preview run.

    Parameters
    ----------
    delimiter : str, default ","
        Field delimiter of the input files. Delimiters longer than one
        character are normalized to a comma before rendering.
    lines : int, default 10
        Number of preview lines per file.
    output_path : str, default "csv_preview.md"
        Requested output path. Its extension is replaced for html and pdf.
    output_format : OutputFormat, default OutputFormat.MARKDOWN
        Format of the final artifact.
    pattern : str, default "*.csv"
        Glob pattern selecting the input files.
    use_table_tool : bool, default False
        Format headers and preview lines with csvkit.
    include_toc : bool, default False
        Add a table of contents and heading anchors.
    interactive : bool, default False
        Let the user pick files with fzf.
    parallel : bool, default False
        Render files in a process pool.
    compress : bool, default False
        Gzip the final artifact.
    columns : ColumnSelector, optional
        Column projection for the csvkit path.
    metadata_fields : tuple[str, ...], default ("size", "modified")
        Metadata lines to show, in order.
    css_path : str, optional
        Stylesheet for html output. A default one is generated when absent.
    template_path : str, optional
        LaTeX template for pdf output. A default one is generated when absent.
    error_log : str, optional
        File that receives diagnostics instead of stderr.
    show_metadata, show_headers, show_lines : bool, default True
        Toggle the individual blocks of each file section.
    native_toc : bool, default False
        Use the document converter's own table of contents instead of the
        generated one (html and pdf only).
    title : str, optional
        Top-level report title.
    include_timestamp : bool, default False
        Add a "Generated on" line below the title.
    workers : int, optional
        Process pool size for parallel mode. Defaults to the CPU count.
    working_dir : Path, default current directory
        Directory the pattern and relative paths are resolved against.

    """

    delimiter: str = DEFAULT_DELIMITER
    lines: int = DEFAULT_LINES
    output_path: str = DEFAULT_OUTPUT_FILE
    output_format: OutputFormat = OutputFormat.MARKDOWN
    pattern: str = DEFAULT_PATTERN
    use_table_tool: bool = False
    include_toc: bool = False
    interactive: bool = False
    parallel: bool = False
    compress: bool = False
    columns: Optional[ColumnSelector] = None
    metadata_fields: tuple[str, ...] = field(default_factory=lambda: parse_metadata_fields(DEFAULT_METADATA_FIELDS))
    css_path: Optional[str] = None
    template_path: Optional[str] = None
    error_log: Optional[str] = None
    show_metadata: bool = True
    show_headers: bool = True
    show_lines: bool = True
    native_toc: bool = False
    title: Optional[str] = None
    include_timestamp: bool = False
    workers: Optional[int] = None
    working_dir: Path = field(default_factory=Path.cwd)

    @property
    def uses_native_toc(self) -> bool:
        """Whether the converter renders the table of contents."""
        return self.include_toc and self.native_toc and self.output_format is not OutputFormat.MARKDOWN

    @property
    def uses_marker_toc(self) -> bool:
        """Whether the assembler splices in the generated table of contents."""
        return self.include_toc and not self.uses_native_toc

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve a possibly relative path against the working directory."""
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.working_dir / candidate

    def final_output_path(self) -> Path:
        """Path of the artifact before optional compression.

        Markdown output keeps the requested name; html and pdf output replace
        any extension with the format's own.
        """
        requested = self.resolve_path(self.output_path)
        if self.output_format is OutputFormat.MARKDOWN:
            return requested
        return requested.with_suffix(self.output_format.extension)

    def validate(self) -> list[ValidationProblem]:
        """Collect configuration problems without raising."""
        problems: list[ValidationProblem] = []

        if not self.delimiter:
            problems.append(ValidationProblem("Delimiter cannot be empty.", ValidationSeverity.ERROR))

        if self.lines <= 0:
            problems.append(ValidationProblem("Lines value must be a positive integer.", ValidationSeverity.ERROR))

        if self.workers is not None and self.workers <= 0:
            problems.append(ValidationProblem("Workers value must be a positive integer.", ValidationSeverity.ERROR))

        if self.css_path:
            if self.output_format is not OutputFormat.HTML:
                problems.append(
                    ValidationProblem(
                        "CSS file specified but output format is not HTML. Ignoring -s.",
                        ValidationSeverity.WARNING,
                    )
                )
            elif not self.resolve_path(self.css_path).is_file():
                problems.append(
                    ValidationProblem(f"CSS file '{self.css_path}' does not exist.", ValidationSeverity.ERROR)
                )

        if self.template_path:
            if self.output_format is not OutputFormat.PDF:
                problems.append(
                    ValidationProblem(
                        "LaTeX template specified but output format is not PDF. Ignoring -m.",
                        ValidationSeverity.WARNING,
                    )
                )
            elif not self.resolve_path(self.template_path).is_file():
                problems.append(
                    ValidationProblem(
                        f"LaTeX template '{self.template_path}' does not exist.", ValidationSeverity.ERROR
                    )
                )

        if self.columns is not None and not self.use_table_tool:
            problems.append(
                ValidationProblem(
                    "Column selection requires csvkit formatting (-c). Ignoring -k.", ValidationSeverity.WARNING
                )
            )

        if self.show_metadata:
            for name in self.metadata_fields:
                if name not in SUPPORTED_METADATA_FIELDS:
                    problems.append(
                        ValidationProblem(
                            f"Unknown metadata field '{name}'. "
                            f"Supported fields: {', '.join(SUPPORTED_METADATA_FIELDS)}.",
                            ValidationSeverity.WARNING,
                        )
                    )

        if self.native_toc and not self.include_toc:
            problems.append(ValidationProblem("--native-toc has no effect without -t.", ValidationSeverity.WARNING))
        elif self.native_toc and self.output_format is OutputFormat.MARKDOWN:
            problems.append(
                ValidationProblem(
                    "--native-toc only applies to html and pdf output. Using the generated table of contents.",
                    ValidationSeverity.WARNING,
                )
            )

        return problems

    def resolved(self) -> "RunConfig":
        """Return a copy with options that do not apply to this run dropped."""
        changes: dict[str, object] = {}
        if self.css_path and self.output_format is not OutputFormat.HTML:
            changes["css_path"] = None
        if self.template_path and self.output_format is not OutputFormat.PDF:
            changes["template_path"] = None
        if self.columns is not None and not self.use_table_tool:
            changes["columns"] = None
        if self.native_toc and not self.uses_native_toc:
            changes["native_toc"] = False
        return dataclasses.replace(self, **changes) if changes else self


def report_validation_problems(
    problems: Iterable[ValidationProblem],
    *,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """Report validation problems via logging.

    Returns True when any errors were encountered.
    """
    logger = logger or logging.getLogger(__name__)
    has_errors = False

    for problem in problems:
        problem.log(logger)
        if problem.severity is ValidationSeverity.ERROR:
            has_errors = True

    return has_errors


def check_config(config: RunConfig, *, logger: Optional[logging.Logger] = None) -> RunConfig:
    """Validate a configuration, log advisories and return the resolved copy.

    Errors are not logged here; they are carried by the raised exception.

    Raises
    ------
    ConfigurationError
        If any problem has error severity. The message joins all errors.

    """
    problems = config.validate()
    warnings = [problem for problem in problems if problem.severity is ValidationSeverity.WARNING]
    report_validation_problems(warnings, logger=logger)
    errors = [problem.message for problem in problems if problem.severity is ValidationSeverity.ERROR]
    if errors:
        raise ConfigurationError(" ".join(errors))
    return config.resolved()
