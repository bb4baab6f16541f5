"""
Rich console for status messages on stderr.

stdout is reserved for the rendered dependency arrays, so every message
printed here (status lines and the optional change summary) goes to
stderr. The rendered manifest itself never passes through Rich: its
``[project.optional-dependencies]`` header would be read as markup.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Mapping, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

UPDATE_PYPI_DEPS_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
    }
)

#: Summary label colours, keyed by :func:`get_update_type` result.
UPDATE_TYPE_COLORS: Mapping[str, str] = {
    "major": "red",
    "downgrade": "red",
    "minor": "yellow",
    "update": "yellow",
    "patch": "green",
    "new": "cyan",
}

_console: Optional[Console] = None


def _should_use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared stderr console, creating it on first use."""
    global _console

    if _console is None:
        use_color = _should_use_color()
        _console = Console(
            stderr=True,
            theme=UPDATE_PYPI_DEPS_THEME,
            no_color=not use_color,
            highlight=use_color,
        )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next message re-reads ``NO_COLOR``."""
    global _console
    _console = None


def _print_status(prefix: str, message: str, style: str) -> None:
    _get_console().print(f"{prefix} {message}", style=style, markup=False)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _print_status(prefix, message, "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _print_status(prefix, message, "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _print_status(prefix, message, "warning")


def print_table(
    rows: List[Dict[str, Any]],
    *,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Print ``rows`` as a table; columns follow the keys of the first row.

    Args:
        rows: One mapping per row. Nothing is printed when empty.
        title: Optional table title.
        column_styles: Per-column ``style``, ``justify`` and ``no_wrap``.
    """
    if not rows:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    columns = list(rows[0])
    styles = column_styles or {}

    for column in columns:
        options = styles.get(column, {})
        table.add_column(
            column,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
        )

    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))

    _get_console().print(table)


def colorize_update_type(update_type: str) -> str:
    """Wrap an update type label in Rich markup for its colour."""
    color = UPDATE_TYPE_COLORS.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type
