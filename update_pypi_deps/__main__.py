"""
Executable module for update-pypi-deps.

Running:
    python -m update_pypi_deps

is equivalent to:
    update-pypi-deps

This module simply forwards execution to the CLI entrypoint defined in
`update_pypi_deps.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("update-pypi-deps failed to start.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from update_pypi_deps.__version__ import __version__

        sys.stderr.write(f"update-pypi-deps version: {__version__}\n")
    except ImportError:
        sys.stderr.write("update-pypi-deps version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m update_pypi_deps`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from update_pypi_deps.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
