"""Integration tests for complete preview runs across modules."""

import gzip
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from utils import FakeConverter, FakeTableTool, fake_toolkit, write_csv, write_gzip_csv

from csvpreview.config import ColumnSelector, OutputFormat, RunConfig
from csvpreview.pipeline import generate_preview
from csvpreview.runner import run_jobs as real_run_jobs

STAMP = "Mon Jan  1 00:00:00 2024"


def _mixed_directory(directory):
    write_csv(directory, "a.csv", "")
    write_csv(directory, "b.csv", "id,name\n1,apple\n2,banana\n3,cherry\n")
    write_csv(directory, "c.csv", "x;y\n1;2\n")
    write_gzip_csv(directory, "d.csv.gz", "k,v\n1,one\n")
    (directory / "e.csv.gz").write_bytes(b"not gzip data")
    write_csv(directory, "notes.txt", "ignored\n")


@pytest.mark.integration
class TestPreviewPipeline:
    """Test whole runs through generate_preview."""

    def test_mixed_directory(self, temp_dir):
        """Test that valid, empty, compressed and corrupt files all get a section in order."""
        _mixed_directory(temp_dir)

        config = RunConfig(working_dir=temp_dir, pattern="*.csv*", show_metadata=False)

        result = generate_preview(config, fake_toolkit())

        text = result.output_path.read_text(encoding="utf-8")
        headings = [line for line in text.splitlines() if line.startswith("## ")]
        assert headings == [
            "## File: a.csv (Skipped due to errors)",
            "## File: b.csv",
            "## File: c.csv",
            "## File: d.csv.gz",
            "## File: e.csv.gz (Skipped due to errors)",
        ]
        assert "### First 10 Lines:\n```\nk,v\n1,one\n```" in text
        assert "notes.txt" not in text
        assert result.skipped_count == 2

    def test_rerun_is_identical(self, sample_csv_dir):
        """Test that two runs over unchanged input produce the same bytes."""
        config = RunConfig(working_dir=sample_csv_dir, include_toc=True, include_timestamp=True, title="Data")

        first = generate_preview(config, fake_toolkit(), generated_on=STAMP).output_path.read_bytes()
        second = generate_preview(config, fake_toolkit(), generated_on=STAMP).output_path.read_bytes()

        assert first == second
        assert first.startswith(f"# Data\n\nGenerated on: {STAMP}\n\n## Table of Contents\n\n".encode())

    def test_formats_share_section_text(self, sample_csv_dir):
        """Test that html and markdown runs render the same sections."""
        converter = FakeConverter()
        markdown = generate_preview(RunConfig(working_dir=sample_csv_dir), fake_toolkit())
        html = generate_preview(
            RunConfig(working_dir=sample_csv_dir, output_format=OutputFormat.HTML), fake_toolkit(converter=converter)
        )

        assert [s.text for s in markdown.sections] == [s.text for s in html.sections]
        assert converter.calls[0]["markdown"] == markdown.report.text
        assert html.output_path.read_text(encoding="utf-8").startswith("<!-- html -->\n")

    def test_parallel_matches_sequential(self, temp_dir):
        """Test that a parallel run writes the same report as a sequential one."""
        for i in range(12):
            write_csv(temp_dir, f"f{i:02d}.csv", f"n\n{i}\n")
        sequential = generate_preview(RunConfig(working_dir=temp_dir, output_path="seq.md"), fake_toolkit())

        def threaded(candidates, config, toolkit, progress_callback=None):
            return real_run_jobs(candidates, config, toolkit, progress_callback, executor_factory=ThreadPoolExecutor)

        with patch("csvpreview.pipeline.run_jobs", side_effect=threaded):
            parallel = generate_preview(
                RunConfig(working_dir=temp_dir, output_path="par.md", parallel=True, workers=4), fake_toolkit()
            )

        assert parallel.report.text == sequential.report.text

    def test_column_selection_with_table_tool(self, sample_csv_dir):
        """Test -c -k id rendering of the example file."""
        table_tool = FakeTableTool()
        config = RunConfig(
            working_dir=sample_csv_dir,
            use_table_tool=True,
            columns=ColumnSelector(("id",)),
            lines=2,
            show_metadata=False,
        )

        result = generate_preview(config, fake_toolkit(table_tool=table_tool))

        text = result.report.text
        assert "### Headers (via csvkit):\n```\nid\n```" in text
        assert "### First 2 Lines (via csvkit):\n```\n| id |\n| --- |\n| 1 |\n| 2 |\n```" in text
        assert ("select_columns", "b.csv", ",", "id") in table_tool.calls

    def test_unknown_column_falls_back(self, sample_csv_dir, caplog):
        """Test that an invalid -k column degrades to all columns."""
        config = RunConfig(
            working_dir=sample_csv_dir, use_table_tool=True, columns=ColumnSelector(("price",)), show_metadata=False
        )

        result = generate_preview(config, fake_toolkit(table_tool=FakeTableTool()))

        text = result.report.text
        assert "### Headers (via csvkit):\n```\n  1: id\n  2: name\n```" in text
        assert "| id | name |" in text
        assert "Available columns in b.csv" in caplog.text

    def test_multi_character_delimiter_with_compression(self, temp_dir):
        """Test normalization of a '||' delimiter followed by gzip output."""
        write_csv(temp_dir, "p.csv", "a||b\n1||2\n")

        result = generate_preview(
            RunConfig(working_dir=temp_dir, delimiter="||", compress=True, show_metadata=False), fake_toolkit()
        )

        assert result.output_path == temp_dir / "csv_preview.md.gz"
        text = gzip.decompress(result.output_path.read_bytes()).decode("utf-8")
        assert "### Headers:\n```\na,b\n```" in text
        assert (temp_dir / "p.csv").read_text(encoding="utf-8") == "a||b\n1||2\n"
