"""
Centralized constants for update-pypi-deps.

This module defines immutable configuration values used across the tool,
including registry endpoints, network settings, the version-operator
grammar, output formatting, and logging formats. All values are intended
to be treated as read-only.
"""

from typing import Final, Optional, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "update-pypi-deps/{version}"

# ---------------------------------------------------------------------------
# PyPI endpoints
# ---------------------------------------------------------------------------

#: Per-package endpoint of the PyPI JSON API.
PYPI_JSON_API: Final[str] = "https://pypi.org/pypi/{package}/json"

# ---------------------------------------------------------------------------
# HTTP and resolution configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds for a single HTTP request.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Default number of registry lookups allowed in flight at once.
DEFAULT_CONCURRENCY: Final[int] = 10

#: Default per-lookup timeout applied by the resolver (``None`` = no limit).
DEFAULT_LOOKUP_TIMEOUT: Final[Optional[float]] = None

# ---------------------------------------------------------------------------
# Manifest layout
# ---------------------------------------------------------------------------

#: Default manifest read when ``--input`` is not given.
DEFAULT_MANIFEST: Final[str] = "pyproject.toml"

#: Table holding the dependency arrays.
PROJECT_TABLE: Final[str] = "project"

#: Key of the required dependency array.
DEPENDENCIES_KEY: Final[str] = "dependencies"

#: Key of the optional dependency group table.
OPTIONAL_DEPENDENCIES_KEY: Final[str] = "optional-dependencies"

# ---------------------------------------------------------------------------
# Version specifier grammar
# ---------------------------------------------------------------------------

#: Comparison operators in match priority order. The first one found
#: anywhere in a specifier wins, so longer operators must precede their
#: prefixes (``===`` before ``==``, ``<=`` before ``<``).
VERSION_OPERATORS: Final[Sequence[str]] = (
    "===",
    "~=",
    "==",
    "!=",
    "<=",
    ">=",
    "<",
    ">",
)

#: Operator installed on specifiers that had no constraint.
DEFAULT_PIN_OPERATOR: Final[str] = "=="

#: Separator between a requirement and its environment marker.
MARKER_SEPARATOR: Final[str] = ";"

#: Quote characters stripped from the edges of a raw specifier.
SPECIFIER_QUOTES: Final[str] = "\"'"

# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

#: Banner printed before the rendered dependency arrays.
OUTPUT_BANNER: Final[str] = "# Dependencies pinned to the latest versions on PyPI"

#: Indentation of array items in rendered output.
OUTPUT_INDENT: Final[str] = "    "

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
