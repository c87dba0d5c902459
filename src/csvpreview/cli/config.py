#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the csvpreview CLI.

Configuration files hold the same settings as the command-line options,
keyed by option name (``lines``, ``use-table-tool`` / ``use_table_tool``,
``metadata-fields`` ...). Supported formats are TOML, YAML, JSON and the
``[tool.csvpreview]`` table of a ``pyproject.toml``.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Iterable, Optional

import yaml

from csvpreview.constants import CONFIG_FILENAMES, PYPROJECT_SECTION

logger = logging.getLogger(__name__)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.csvpreview] table from a pyproject.toml file.

    Returns an empty dict when the table is absent.

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get(PYPROJECT_SECTION)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_SECTION}] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by walking up from ``start_dir``.

    Each directory is checked for the dedicated config files first, then
    for a ``pyproject.toml`` that has a ``[tool.csvpreview]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for the search, defaults to the current directory

    Returns
    -------
    Path or None
        Path to the first config file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError:
                # Unparseable pyproject.toml files are skipped during discovery
                logger.debug("Skipping unreadable %s", pyproject_path)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Searches ``start_dir`` and its parents first, then the user's home
    directory (dedicated config files only).
    """
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def _read_toml(config_path: Path) -> Any:
    with open(config_path, "rb") as f:
        return tomllib.load(f)


def _read_yaml(config_path: Path) -> Any:
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _read_json(config_path: Path) -> Any:
    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    The format is chosen from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration mapping loaded from the file

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read or parsed, or does not hold a mapping

    Examples
    --------
    >>> config = load_config_file(".csvpreview.toml")
    >>> config.get("lines")
    20

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(config_path)

    readers = {".toml": _read_toml, ".yaml": _read_yaml, ".yml": _read_yaml, ".json": _read_json}
    ext = config_path.suffix.lower()
    reader = readers.get(ext)
    if reader is None:
        raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")

    try:
        config = reader(config_path)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Invalid config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"Config file {config_path} must contain a mapping, got {type(config).__name__}"
        )
    return config


def load_config_with_priority(
    explicit_path: Optional[str] = None,
    env_var_path: Optional[str] = None,
    start_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (--config flag)
    2. Environment variable config path (CSVPREVIEW_CONFIG)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration (empty dict if no config found)

    """
    if explicit_path:
        return load_config_file(explicit_path)

    if env_var_path:
        return load_config_file(env_var_path)

    discovered_path = discover_config_file(start_dir)
    if discovered_path:
        logger.debug("Using configuration file %s", discovered_path)
        return load_config_file(discovered_path)

    return {}


def normalize_config_keys(config: Dict[str, Any], known_keys: Iterable[str]) -> Dict[str, Any]:
    """Map kebab-case keys to setting names and drop unknown keys with a warning."""
    known = set(known_keys)
    normalized: Dict[str, Any] = {}
    for key, value in config.items():
        name = str(key).replace("-", "_")
        if name not in known:
            logger.warning("Ignoring unknown configuration key '%s'.", key)
            continue
        normalized[name] = value
    return normalized
