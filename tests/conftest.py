"""Pytest configuration and shared fixtures for the csvpreview test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
from pathlib import Path
from typing import Generator

import pytest
from utils import cleanup_test_dir, create_test_temp_dir, fake_toolkit, write_csv

from csvpreview.tools import Toolkit


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def toolkit() -> Toolkit:
    """Provide a toolkit of fake external tools."""
    return fake_toolkit()


@pytest.fixture
def sample_csv_dir(temp_dir: Path) -> Path:
    """Directory with an empty ``a.csv`` and a three-row ``b.csv``.

    Returns
    -------
    Path
        Directory containing the sample files.

    """
    write_csv(temp_dir, "a.csv", "")
    write_csv(temp_dir, "b.csv", "id,name\n1,apple\n2,banana\n3,cherry\n")
    return temp_dir


@pytest.fixture(autouse=True)
def _reset_root_logging() -> Generator[None, None, None]:
    """Restore root logger handlers changed by configure_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
