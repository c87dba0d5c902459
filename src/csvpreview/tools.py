#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/csvpreview/tools.py
"""Interfaces to the external tools csvpreview delegates to.

Each collaborator sits behind a narrow protocol so the pipeline can be
exercised with fakes:

- :class:`TableTool` parses delimited text into aligned tables and projects
  columns (default: csvkit's ``csvcut`` and ``csvlook``)
- :class:`DocumentConverter` turns the Markdown report into HTML or PDF
  (default: pandoc)
- :class:`FileChooser` lets the user pick a subset of files (default: fzf)
- :class:`Compressor` gzips the final artifact (default: the ``gzip`` module)

Table tool calls never raise; they return a :class:`ToolResult` so the
section renderer can choose the next fallback tier itself.
"""

from __future__ import annotations

import gzip
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from csvpreview.config import OutputFormat, RunConfig
from csvpreview.constants import COMPRESSED_OUTPUT_SUFFIX, DEFAULT_DOCUMENT_TITLE, FZF_PROMPT
from csvpreview.exceptions import CompressionError, ConversionError, DependencyError

logger = logging.getLogger(__name__)


class ToolStatus(str, Enum):
    """Outcome of a tool invocation or fallback chain."""

    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolResult:
    """Tagged result of a tool call.

    ``SUCCESS`` carries the requested text, ``DEGRADED`` carries text from a
    simpler method plus the reason the preferred one failed, and ``FAILED``
    only carries the reason.
    """

    status: ToolStatus
    text: str = ""
    reason: str = ""

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(ToolStatus.SUCCESS, text=text)

    @classmethod
    def degraded(cls, text: str, reason: str) -> "ToolResult":
        return cls(ToolStatus.DEGRADED, text=text, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "ToolResult":
        return cls(ToolStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        """True unless the call failed outright."""
        return self.status is not ToolStatus.FAILED


def run_tool(args: Sequence[str], input_text: Optional[str] = None, cwd: Optional[Path] = None) -> ToolResult:
    """Run an external command and capture its standard output.

    A non-zero exit status or a launch failure yields a failed result whose
    reason is the command's stderr (or the OS error).
    """
    logger.debug("Running %s", " ".join(args))
    try:
        completed = subprocess.run(
            list(args),
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
            check=False,
        )
    except OSError as exc:
        return ToolResult.failed(f"{args[0]}: {exc}")

    if completed.returncode != 0:
        reason = completed.stderr.strip() or f"{args[0]} exited with status {completed.returncode}"
        return ToolResult.failed(reason)
    return ToolResult.success(completed.stdout)


@runtime_checkable
class TableTool(Protocol):
    """Formats delimited text as aligned tables and projects columns."""

    def is_available(self) -> bool: ...

    def column_names(self, path: Path, delimiter: str) -> ToolResult: ...

    def select_columns(self, path: Path, delimiter: str, columns: str) -> ToolResult: ...

    def look(self, path: Path, delimiter: str) -> ToolResult: ...

    def look_text(self, csv_text: str) -> ToolResult: ...


@runtime_checkable
class DocumentConverter(Protocol):
    """Converts a Markdown document to another format, writing ``output_path``."""

    def is_available(self) -> bool: ...

    def convert(
        self,
        markdown: str,
        output_path: Path,
        output_format: OutputFormat,
        *,
        toc: bool = False,
        css_path: Optional[str] = None,
        template_path: Optional[str] = None,
        title: str = DEFAULT_DOCUMENT_TITLE,
        cwd: Optional[Path] = None,
    ) -> None: ...


@runtime_checkable
class FileChooser(Protocol):
    """Interactive multi-select over a list of candidate names."""

    def is_available(self) -> bool: ...

    def choose(self, candidates: Sequence[str]) -> list[str]: ...


@runtime_checkable
class Compressor(Protocol):
    """Compresses a file in place, returning the path of the compressed sibling."""

    def is_available(self) -> bool: ...

    def compress(self, path: Path) -> Path: ...


class CsvkitTableTool:
    """Table tool backed by csvkit's ``csvcut`` and ``csvlook`` commands."""

    install_hint = "pip install csvkit"

    def __init__(self, csvcut: str = "csvcut", csvlook: str = "csvlook"):
        self.csvcut = csvcut
        self.csvlook = csvlook

    def is_available(self) -> bool:
        return shutil.which(self.csvcut) is not None and shutil.which(self.csvlook) is not None

    def column_names(self, path: Path, delimiter: str) -> ToolResult:
        """List column names with their 1-based indices (``csvcut -n``)."""
        return run_tool([self.csvcut, "-d", delimiter, "-n", str(path)])

    def select_columns(self, path: Path, delimiter: str, columns: str) -> ToolResult:
        """Return the projected columns as comma-separated text (``csvcut -c``)."""
        return run_tool([self.csvcut, "-d", delimiter, "-c", columns, str(path)])

    def look(self, path: Path, delimiter: str) -> ToolResult:
        """Render a file as an aligned table."""
        return run_tool([self.csvlook, "-d", delimiter, str(path)])

    def look_text(self, csv_text: str) -> ToolResult:
        """Render comma-separated text (e.g. ``csvcut`` output) as an aligned table."""
        return run_tool([self.csvlook], input_text=csv_text)


class PandocConverter:
    """Document converter backed by pandoc."""

    install_hint = "brew install pandoc"

    def __init__(self, executable: str = "pandoc"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def build_command(
        self,
        output_path: Path,
        output_format: OutputFormat,
        *,
        toc: bool = False,
        css_path: Optional[str] = None,
        template_path: Optional[str] = None,
        title: str = DEFAULT_DOCUMENT_TITLE,
    ) -> list[str]:
        """Assemble the pandoc command line; the document is read from stdin."""
        command = [self.executable, "--from", "markdown", "--output", str(output_path)]
        if output_format is OutputFormat.HTML:
            # Stylesheets are only linked into standalone documents
            command += ["--standalone", "--metadata", f"pagetitle={title}"]
        if toc:
            command.append("--toc")
        if output_format is OutputFormat.HTML and css_path:
            command += ["--css", css_path]
        if output_format is OutputFormat.PDF and template_path:
            command += ["--template", template_path]
        return command

    def convert(
        self,
        markdown: str,
        output_path: Path,
        output_format: OutputFormat,
        *,
        toc: bool = False,
        css_path: Optional[str] = None,
        template_path: Optional[str] = None,
        title: str = DEFAULT_DOCUMENT_TITLE,
        cwd: Optional[Path] = None,
    ) -> None:
        command = self.build_command(
            output_path, output_format, toc=toc, css_path=css_path, template_path=template_path, title=title
        )
        result = run_tool(command, input_text=markdown, cwd=cwd)
        if not result.ok:
            raise ConversionError(
                output_format.value,
                message=f"Failed to convert Markdown to {output_format.value} using pandoc: {result.reason}",
            )


class FzfChooser:
    """File chooser backed by fzf in multi-select mode."""

    install_hint = "brew install fzf"

    # fzf exits with 1 when nothing matched and 130 when the user aborted
    NO_SELECTION_CODES = (1, 130)

    def __init__(self, executable: str = "fzf", prompt: str = FZF_PROMPT):
        self.executable = executable
        self.prompt = prompt

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def choose(self, candidates: Sequence[str]) -> list[str]:
        # Only stdout is captured: fzf draws its interface on the terminal
        completed = subprocess.run(
            [self.executable, "-m", f"--prompt={self.prompt}"],
            input="\n".join(candidates),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
        if completed.returncode in self.NO_SELECTION_CODES:
            return []
        if completed.returncode != 0:
            logger.error("fzf exited with status %d", completed.returncode)
            return []
        return [line for line in completed.stdout.splitlines() if line]


class GzipCompressor:
    """Compressor producing ``<name>.gz`` next to the original, like ``gzip -f``."""

    def is_available(self) -> bool:
        return True

    def compress(self, path: Path) -> Path:
        target = path.with_name(path.name + COMPRESSED_OUTPUT_SUFFIX)
        try:
            with open(path, "rb") as source, gzip.open(target, "wb") as destination:
                shutil.copyfileobj(source, destination)
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise CompressionError(str(path), original_error=exc) from exc
        path.unlink()
        return target


@dataclass
class Toolkit:
    """The set of external collaborators used by one run."""

    table_tool: TableTool = field(default_factory=CsvkitTableTool)
    converter: DocumentConverter = field(default_factory=PandocConverter)
    chooser: FileChooser = field(default_factory=FzfChooser)
    compressor: Compressor = field(default_factory=GzipCompressor)

    @classmethod
    def default(cls) -> "Toolkit":
        return cls()

    def require(self, config: RunConfig) -> None:
        """Check that every tool needed by the requested features is installed.

        Raises
        ------
        DependencyError
            For the first requested feature whose tool is missing.

        """
        if config.use_table_tool and not self.table_tool.is_available():
            raise DependencyError("csvkit", "table formatting (-c)", _install_hint(self.table_tool))
        if config.output_format is not OutputFormat.MARKDOWN and not self.converter.is_available():
            fmt = config.output_format.value
            raise DependencyError("pandoc", f"{fmt} output (-f {fmt})", _install_hint(self.converter))
        if config.interactive and not self.chooser.is_available():
            raise DependencyError("fzf", "interactive selection (-i)", _install_hint(self.chooser))


def _install_hint(tool: object) -> str:
    return getattr(tool, "install_hint", "")
