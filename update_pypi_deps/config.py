"""Configuration file loader for update-pypi-deps.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``update-pypi-deps.toml``: settings under ``[update-pypi-deps]`` table
- ``pyproject.toml``: settings under ``[tool.update-pypi-deps]`` table

Discovery order:

1. Explicit path from ``--config`` or ``UPDATE_PYPI_DEPS_CONFIG``
2. ``update-pypi-deps.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.update-pypi-deps]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``pyproject.toml``)::

    [tool.update-pypi-deps]
    requests = 20
    timeout = 15.0
    max_retries = 2
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from update_pypi_deps.exceptions import ConfigError, FileOperationError
from update_pypi_deps.utils.filesystem import safe_read_bytes
from update_pypi_deps.utils.logger import get_logger
from update_pypi_deps.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_LOOKUP_TIMEOUT,
    DEFAULT_MAX_RETRIES,
)

logger = get_logger("config")

CONFIG_SECTION = "update-pypi-deps"
CONFIG_FILENAME = f"{CONFIG_SECTION}.toml"


@dataclass
class Config:
    """Parsed and validated update-pypi-deps configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        requests: Maximum number of concurrent registry lookups.
        timeout: Per-lookup timeout in seconds, or ``None`` for no limit.
        max_retries: Retries of the HTTP layer for transient failures.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    requests: int = DEFAULT_CONCURRENCY
    timeout: Optional[float] = DEFAULT_LOOKUP_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "requests": self.requests,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    dedicated = cwd / CONFIG_FILENAME
    if dedicated.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, dedicated)
        return dedicated

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.%s] in pyproject.toml", CONFIG_SECTION)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.update-pypi-deps]`` table.

    A broken pyproject.toml is not a configuration problem; it is reported
    later, when the manifest itself is loaded.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and CONFIG_SECTION in tool


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load and validate configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`Config` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(CONFIG_SECTION, {})
    else:
        section = raw.get(CONFIG_SECTION, {})

    if not section:
        logger.debug("Config file found but no %s section, using defaults", CONFIG_SECTION)
        return Config(source_path=resolved)

    if not isinstance(section, dict):
        raise ConfigError(
            f"[{CONFIG_SECTION}] must be a table",
            config_path=str(resolved),
        )

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        return tomllib.loads(safe_read_bytes(path).decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except FileOperationError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc.message}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> Config:
    """Parse and validate the configuration table.

    Rejects unknown keys and type mismatches. Booleans are rejected for
    numeric options even though ``bool`` subclasses ``int``.

    Raises:
        ConfigError: Unknown keys, incorrect types or out-of-range values.
    """
    config = Config()

    known_top = {"requests", "timeout", "max_retries"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "requests" in section:
        val = section["requests"]
        if isinstance(val, bool) or not isinstance(val, int):
            raise ConfigError(
                f"requests must be an integer, got {type(val).__name__}",
                config_path=config_path,
                option="requests",
            )
        if val < 1:
            raise ConfigError(
                f"requests must be at least 1, got {val}",
                config_path=config_path,
                option="requests",
            )
        config.requests = val

    if "timeout" in section:
        val = section["timeout"]
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            raise ConfigError(
                f"timeout must be a number, got {type(val).__name__}",
                config_path=config_path,
                option="timeout",
            )
        if val <= 0:
            raise ConfigError(
                f"timeout must be positive, got {val}",
                config_path=config_path,
                option="timeout",
            )
        config.timeout = float(val)

    if "max_retries" in section:
        val = section["max_retries"]
        if isinstance(val, bool) or not isinstance(val, int) or val < 0:
            raise ConfigError(
                "max_retries must be a non-negative integer",
                config_path=config_path,
                option="max_retries",
            )
        config.max_retries = val

    return config
