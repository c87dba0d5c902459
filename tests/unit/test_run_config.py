"""Unit tests for csvpreview.config: formats, column selectors and RunConfig."""

import logging
from pathlib import Path

import pytest

from csvpreview.config import (
    ColumnSelector,
    OutputFormat,
    RunConfig,
    ValidationProblem,
    ValidationSeverity,
    check_config,
    parse_metadata_fields,
    report_validation_problems,
)
from csvpreview.exceptions import ConfigurationError


@pytest.mark.unit
class TestOutputFormat:
    """Test output format parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("md", OutputFormat.MARKDOWN),
            ("markdown", OutputFormat.MARKDOWN),
            ("HTML", OutputFormat.HTML),
            (" pdf ", OutputFormat.PDF),
        ],
    )
    def test_parse_accepts_aliases(self, value, expected):
        """Test that md, markdown, html and pdf are accepted case-insensitively."""
        assert OutputFormat.parse(value) is expected

    def test_parse_passes_enum_through(self):
        """Test that an OutputFormat value is returned unchanged."""
        assert OutputFormat.parse(OutputFormat.HTML) is OutputFormat.HTML

    def test_parse_rejects_unknown_format(self):
        """Test that an unsupported format raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            OutputFormat.parse("docx")

        assert "Invalid output format 'docx'" in str(exc_info.value)
        assert exc_info.value.parameter_name == "format"

    def test_extension_and_label(self):
        """Test per-format extension and display label."""
        assert OutputFormat.MARKDOWN.extension == ".md"
        assert OutputFormat.HTML.extension == ".html"
        assert OutputFormat.PDF.extension == ".pdf"
        assert OutputFormat.PDF.label == "PDF"


@pytest.mark.unit
class TestColumnSelector:
    """Test column selector parsing."""

    def test_names_and_indices(self):
        """Test that digit tokens become indices and others stay names."""
        selector = ColumnSelector.parse("id, name,3")

        assert selector.tokens == ("id", "name", 3)
        assert selector.to_csvkit() == "id,name,3"
        assert str(selector) == "id,name,3"

    @pytest.mark.parametrize("spec", ["", "  ", "id,,name", "id,"])
    def test_empty_entries_rejected(self, spec):
        """Test that empty lists and empty entries are rejected."""
        with pytest.raises(ConfigurationError):
            ColumnSelector.parse(spec)

    def test_zero_index_rejected(self):
        """Test that column indices start at 1."""
        with pytest.raises(ConfigurationError, match="start at 1"):
            ColumnSelector.parse("0,name")


@pytest.mark.unit
class TestMetadataFields:
    """Test metadata field list parsing."""

    def test_order_preserved_and_duplicates_dropped(self):
        """Test parsing keeps first occurrence order."""
        assert parse_metadata_fields("Size,modified,size, owner") == ("size", "modified", "owner")

    def test_iterable_input(self):
        """Test that lists are accepted (e.g. from config files)."""
        assert parse_metadata_fields(["permissions", "size"]) == ("permissions", "size")

    def test_unknown_names_kept(self):
        """Test that unknown names are kept for later reporting."""
        assert parse_metadata_fields("size,color") == ("size", "color")


@pytest.mark.unit
class TestRunConfigPaths:
    """Test output path naming."""

    def test_markdown_keeps_requested_name(self, temp_dir):
        """Test that markdown output keeps the user's extension."""
        config = RunConfig(output_path="notes.txt", working_dir=temp_dir)
        assert config.final_output_path() == temp_dir / "notes.txt"

    @pytest.mark.parametrize(
        "fmt,requested,expected",
        [
            (OutputFormat.HTML, "report.md", "report.html"),
            (OutputFormat.PDF, "report.md", "report.pdf"),
            (OutputFormat.HTML, "report", "report.html"),
        ],
    )
    def test_html_and_pdf_replace_extension(self, temp_dir, fmt, requested, expected):
        """Test that html and pdf output force their own extension."""
        config = RunConfig(output_path=requested, output_format=fmt, working_dir=temp_dir)
        assert config.final_output_path() == temp_dir / expected

    def test_absolute_path_not_rebased(self, temp_dir):
        """Test that absolute output paths are used as given."""
        target = temp_dir / "sub" / "out.md"
        config = RunConfig(output_path=str(target), working_dir=Path("/nonexistent"))
        assert config.final_output_path() == target


@pytest.mark.unit
class TestRunConfigValidation:
    """Test configuration validation and resolution."""

    def _messages(self, config, severity):
        return [p.message for p in config.validate() if p.severity is severity]

    def test_defaults_are_valid(self, temp_dir):
        """Test that the default configuration has no problems."""
        assert RunConfig(working_dir=temp_dir).validate() == []

    def test_empty_delimiter_is_error(self, temp_dir):
        """Test that an empty delimiter is an error."""
        errors = self._messages(RunConfig(delimiter="", working_dir=temp_dir), ValidationSeverity.ERROR)
        assert errors == ["Delimiter cannot be empty."]

    @pytest.mark.parametrize("lines", [0, -3])
    def test_non_positive_lines_is_error(self, temp_dir, lines):
        """Test that the line count must be positive."""
        errors = self._messages(RunConfig(lines=lines, working_dir=temp_dir), ValidationSeverity.ERROR)
        assert errors == ["Lines value must be a positive integer."]

    def test_css_without_html_is_warning_and_dropped(self, temp_dir):
        """Test that -s without html output is ignored with a warning."""
        config = RunConfig(css_path="custom.css", working_dir=temp_dir)

        warnings = self._messages(config, ValidationSeverity.WARNING)
        assert "CSS file specified but output format is not HTML. Ignoring -s." in warnings
        assert config.resolved().css_path is None

    def test_missing_css_for_html_is_error(self, temp_dir):
        """Test that a user-supplied stylesheet must exist."""
        config = RunConfig(css_path="missing.css", output_format=OutputFormat.HTML, working_dir=temp_dir)
        errors = self._messages(config, ValidationSeverity.ERROR)
        assert errors == ["CSS file 'missing.css' does not exist."]

    def test_existing_template_for_pdf_is_valid(self, temp_dir):
        """Test that an existing template is accepted for pdf output."""
        (temp_dir / "tpl.tex").write_text("x")
        config = RunConfig(template_path="tpl.tex", output_format=OutputFormat.PDF, working_dir=temp_dir)
        assert config.validate() == []
        assert config.resolved().template_path == "tpl.tex"

    def test_template_without_pdf_is_warning(self, temp_dir):
        """Test that -m without pdf output is ignored with a warning."""
        config = RunConfig(template_path="tpl.tex", output_format=OutputFormat.HTML, working_dir=temp_dir)
        assert self._messages(config, ValidationSeverity.ERROR) == []
        assert config.resolved().template_path is None

    def test_columns_without_table_tool_is_warning(self, temp_dir):
        """Test that -k without -c is ignored with a warning."""
        config = RunConfig(columns=ColumnSelector.parse("id"), working_dir=temp_dir)

        warnings = self._messages(config, ValidationSeverity.WARNING)
        assert "Column selection requires csvkit formatting (-c). Ignoring -k." in warnings
        assert config.resolved().columns is None

    def test_unknown_metadata_field_is_warning(self, temp_dir):
        """Test that unknown metadata fields only warn."""
        config = RunConfig(metadata_fields=("size", "color"), working_dir=temp_dir)
        warnings = self._messages(config, ValidationSeverity.WARNING)
        assert len(warnings) == 1
        assert "Unknown metadata field 'color'" in warnings[0]

    def test_native_toc_with_markdown_falls_back(self, temp_dir):
        """Test that the native TOC is only used for html and pdf."""
        config = RunConfig(include_toc=True, native_toc=True, working_dir=temp_dir)

        assert not config.uses_native_toc
        assert config.uses_marker_toc
        assert config.resolved().native_toc is False

    def test_native_toc_with_html(self, temp_dir):
        """Test that exactly one TOC mechanism is active for html with --native-toc."""
        config = RunConfig(include_toc=True, native_toc=True, output_format=OutputFormat.HTML, working_dir=temp_dir)

        assert config.uses_native_toc
        assert not config.uses_marker_toc


@pytest.mark.unit
class TestCheckConfig:
    """Test check_config and problem reporting."""

    def test_raises_with_all_errors(self, temp_dir):
        """Test that all error messages are joined into the exception."""
        config = RunConfig(delimiter="", lines=0, working_dir=temp_dir)

        with pytest.raises(ConfigurationError) as exc_info:
            check_config(config)

        assert "Delimiter cannot be empty." in exc_info.value.message
        assert "Lines value must be a positive integer." in exc_info.value.message

    def test_logs_warnings_and_returns_resolved(self, temp_dir, caplog):
        """Test that warnings are logged and mismatched options dropped."""
        config = RunConfig(css_path="a.css", working_dir=temp_dir)

        with caplog.at_level(logging.WARNING):
            resolved = check_config(config)

        assert resolved.css_path is None
        assert "Ignoring -s." in caplog.text

    def test_report_validation_problems_detects_errors(self, caplog):
        """Test that report_validation_problems returns True on errors."""
        problems = [
            ValidationProblem("careful", ValidationSeverity.WARNING),
            ValidationProblem("broken", ValidationSeverity.ERROR),
        ]

        with caplog.at_level(logging.WARNING):
            assert report_validation_problems(problems) is True

        assert "careful" in caplog.text
        assert "broken" in caplog.text
        assert report_validation_problems(problems[:1]) is False
