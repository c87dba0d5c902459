#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the csvpreview package.

Exception Hierarchy
-------------------
- CsvPreviewError (base exception)

  - ConfigurationError (invalid option values, fatal)

  - FileError (per-file input problems, recoverable)
    - NotRegularFileError (missing path or not a plain file)
    - UnreadableFileError (read permission absent)
    - EmptyFileError (zero-byte file)
    - DecompressionError (compressed input could not be expanded)

  - ConversionError (document converter failure, fatal)
    - OutputWriteError (report could not be written, fatal)

  - CompressionError (compressor present but failed, fatal)

  - DependencyError (external tool required by a requested feature is absent)

Per-file errors never unwind a run: the section renderer turns them into a
placeholder section. Everything else propagates to the command line and
becomes exit status 1.
"""

from __future__ import annotations

from typing import Any

EXIT_SUCCESS = 0
EXIT_ERROR = 1


class CsvPreviewError(Exception):
    """Base exception class for all csvpreview-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(CsvPreviewError):
    """Exception raised for invalid configuration values.

    Parameters
    ----------
    message : str
        Description of the problem
    parameter_name : str, optional
        Name of the offending option
    parameter_value : any, optional
        The value that was rejected

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the configuration error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(CsvPreviewError):
    """Base exception for problems with a single input file.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class NotRegularFileError(FileError):
    """Exception raised when a path is missing or is not a plain file."""

    def __init__(self, file_path: str, message: str | None = None):
        """Initialize the error with a default message."""
        if message is None:
            message = f"File '{file_path}' does not exist or is not a regular file."
        super().__init__(message, file_path=file_path)


class UnreadableFileError(FileError):
    """Exception raised when a file cannot be read."""

    def __init__(self, file_path: str, message: str | None = None):
        """Initialize the error with a default message."""
        if message is None:
            message = f"File '{file_path}' is not readable."
        super().__init__(message, file_path=file_path)


class EmptyFileError(FileError):
    """Exception raised when a file has zero bytes."""

    def __init__(self, file_path: str, message: str | None = None):
        """Initialize the error with a default message."""
        if message is None:
            message = f"File '{file_path}' is empty."
        super().__init__(message, file_path=file_path)


class DecompressionError(FileError):
    """Exception raised when a compressed input cannot be decompressed."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the error with a default message."""
        if message is None:
            message = f"Failed to decompress '{file_path}'."
            if original_error is not None:
                message += f" Reason: {original_error}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ConversionError(CsvPreviewError):
    """Exception raised when the document converter fails.

    Parameters
    ----------
    output_format : str
        Target format of the failed conversion
    message : str, optional
        Custom error message

    """

    def __init__(self, output_format: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the conversion error."""
        if message is None:
            message = f"Failed to convert Markdown to {output_format} using pandoc."
        super().__init__(message, original_error=original_error)
        self.output_format = output_format


class OutputWriteError(ConversionError):
    """Exception raised when writing the report file fails."""

    def __init__(self, file_path: str, output_format: str, original_error: Exception | None = None):
        """Initialize the output write error."""
        message = f"Failed to write output file: {file_path}"
        if original_error is not None:
            message += f" ({original_error})"
        super().__init__(output_format, message=message, original_error=original_error)
        self.file_path = file_path


class CompressionError(CsvPreviewError):
    """Exception raised when compressing the output artifact fails."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the compression error."""
        if message is None:
            message = f"Failed to compress output file '{file_path}'."
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class DependencyError(CsvPreviewError):
    """Exception raised when an external tool needed for a requested feature is missing.

    Parameters
    ----------
    tool_name : str
        Executable that could not be found
    feature : str
        The option or feature that needs it
    install_hint : str, optional
        How to install the tool

    """

    def __init__(self, tool_name: str, feature: str, install_hint: str = "", message: str | None = None):
        """Initialize the dependency error with tool details."""
        if message is None:
            message = f"{tool_name} is not installed but is required for {feature}."
            if install_hint:
                message += f" Install it with '{install_hint}'."
        super().__init__(message)
        self.tool_name = tool_name
        self.feature = feature
        self.install_hint = install_hint

