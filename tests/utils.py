"""Test utilities for the csvpreview test suite.

Fake implementations of the external tool interfaces let the pipeline run
without csvkit, pandoc or fzf installed. The fakes are module-level classes
so they can also be handed to executors.
"""

import gzip
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from csvpreview.config import OutputFormat
from csvpreview.constants import COMPRESSED_OUTPUT_SUFFIX
from csvpreview.exceptions import CompressionError, ConversionError
from csvpreview.tools import Toolkit, ToolResult


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    import shutil

    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def write_csv(directory: Path, name: str, content: str) -> Path:
    """Write a CSV file with exact content (no newline translation)."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


def write_gzip_csv(directory: Path, name: str, content: str) -> Path:
    """Write gzip-compressed CSV content."""
    path = directory / name
    with gzip.open(path, "wt", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


@dataclass
class FakeTableTool:
    """Table tool that renders CSV text deterministically.

    ``look`` output is a header line, a rule line, then one line per row, all
    joined with `` | `` so tests can recognize it. Individual operations can
    be switched to fail.
    """

    available: bool = True
    fail_column_names: bool = False
    fail_select: bool = False
    fail_look: bool = False
    calls: list = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    @staticmethod
    def _rows(text: str, delimiter: str) -> list[list[str]]:
        return [line.split(delimiter) for line in text.splitlines() if line]

    @staticmethod
    def _table(rows: list[list[str]]) -> str:
        if not rows:
            return ""
        lines = ["| " + " | ".join(rows[0]) + " |", "| " + " | ".join("---" for _ in rows[0]) + " |"]
        lines += ["| " + " | ".join(row) + " |" for row in rows[1:]]
        return "\n".join(lines) + "\n"

    def column_names(self, path: Path, delimiter: str) -> ToolResult:
        self.calls.append(("column_names", path.name, delimiter))
        if self.fail_column_names:
            return ToolResult.failed("csvcut: column listing failed")
        header = self._rows(_read(path), delimiter)[0]
        return ToolResult.success("".join(f"{i:3d}: {name}\n" for i, name in enumerate(header, start=1)))

    def select_columns(self, path: Path, delimiter: str, columns: str) -> ToolResult:
        self.calls.append(("select_columns", path.name, delimiter, columns))
        if self.fail_select:
            return ToolResult.failed(f"Column '{columns}' is invalid.")
        rows = self._rows(_read(path), delimiter)
        header = rows[0]
        indices = []
        for token in columns.split(","):
            if token.isdigit():
                indices.append(int(token) - 1)
            elif token in header:
                indices.append(header.index(token))
            else:
                return ToolResult.failed(f"Column '{token}' is invalid.")
        return ToolResult.success("".join(",".join(row[i] for i in indices) + "\n" for row in rows))

    def look(self, path: Path, delimiter: str) -> ToolResult:
        self.calls.append(("look", path.name, delimiter))
        if self.fail_look:
            return ToolResult.failed("csvlook: could not parse")
        return ToolResult.success(self._table(self._rows(_read(path), delimiter)))

    def look_text(self, csv_text: str) -> ToolResult:
        self.calls.append(("look_text",))
        if self.fail_look:
            return ToolResult.failed("csvlook: could not parse")
        return ToolResult.success(self._table(self._rows(csv_text, ",")))


@dataclass
class FakeConverter:
    """Document converter that writes the Markdown it receives, tagged with the format."""

    available: bool = True
    fail: bool = False
    calls: list = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    def convert(
        self,
        markdown: str,
        output_path: Path,
        output_format: OutputFormat,
        *,
        toc: bool = False,
        css_path: Optional[str] = None,
        template_path: Optional[str] = None,
        title: str = "CSV Preview",
        cwd: Optional[Path] = None,
    ) -> None:
        self.calls.append(
            {
                "markdown": markdown,
                "output_path": output_path,
                "output_format": output_format,
                "toc": toc,
                "css_path": css_path,
                "template_path": template_path,
                "title": title,
                "cwd": cwd,
            }
        )
        if self.fail:
            raise ConversionError(output_format.value, message="pandoc: conversion failed")
        output_path.write_text(f"<!-- {output_format.value} -->\n{markdown}", encoding="utf-8")


@dataclass
class FakeChooser:
    """File chooser returning a fixed selection."""

    selection: Sequence[str] = ()
    available: bool = True
    offered: list = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    def choose(self, candidates: Sequence[str]) -> list[str]:
        self.offered.extend(candidates)
        return list(self.selection)


@dataclass
class FakeCompressor:
    """Compressor that can be unavailable or fail."""

    available: bool = True
    fail: bool = False

    def is_available(self) -> bool:
        return self.available

    def compress(self, path: Path) -> Path:
        if self.fail:
            raise CompressionError(str(path))
        target = path.with_name(path.name + COMPRESSED_OUTPUT_SUFFIX)
        with open(path, "rb") as source, gzip.open(target, "wb") as destination:
            destination.write(source.read())
        path.unlink()
        return target


def fake_toolkit(**overrides) -> Toolkit:
    """Toolkit made entirely of fakes, with optional replacements."""
    tools = {
        "table_tool": FakeTableTool(),
        "converter": FakeConverter(),
        "chooser": FakeChooser(),
        "compressor": FakeCompressor(),
    }
    tools.update(overrides)
    return Toolkit(**tools)
