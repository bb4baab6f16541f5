"""
Utility helpers for update-pypi-deps.

This package provides reusable utilities used across the tool, including:

- Console output helpers (Rich-based, stderr)
- Logging configuration and retrieval
- Size-limited file reading
- Async HTTP client utilities
- Version change classification

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from update_pypi_deps.utils.filesystem import safe_read_bytes

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from update_pypi_deps.utils.logger import (
    get_logger,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from update_pypi_deps.utils.console import (
    colorize_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from update_pypi_deps.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from update_pypi_deps.utils.version_utils import get_update_type

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    # Filesystem
    "safe_read_bytes",
    # HTTP
    "HTTPClient",
    # Version utilities
    "get_update_type",
]
