from __future__ import annotations

import sys
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console
from rich.table import Table

from update_pypi_deps.utils.console import (
    UPDATE_PYPI_DEPS_THEME,
    _get_console,
    _should_use_color,
    colorize_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_console() -> Generator[None, None, None]:
    """Reset the console singleton before and after each test."""
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("CI", raising=False)


@pytest.fixture
def mock_console() -> Generator[MagicMock, None, None]:
    console = MagicMock(spec=Console)
    with patch("update_pypi_deps.utils.console._get_console", return_value=console):
        yield console


# ==============================================================================
# Console lifecycle
# ==============================================================================


@pytest.mark.unit
class TestConsoleLifecycle:
    """Tests for the stderr console singleton."""

    def test_theme_has_required_styles(self) -> None:
        for style in ("success", "error", "warning"):
            assert style in UPDATE_PYPI_DEPS_THEME.styles

    def test_singleton(self) -> None:
        assert _get_console() is _get_console()

    def test_bound_to_stderr(self) -> None:
        assert _get_console().stderr is True

    def test_reconfigure_creates_new_instance(self) -> None:
        first = _get_console()
        reconfigure_console()

        assert _get_console() is not first

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        assert _should_use_color() is False

    def test_tty_enables_color(self, clean_env: None) -> None:
        with patch.object(sys.stderr, "isatty", return_value=True):
            assert _should_use_color() is True

    def test_non_tty_disables_color(self, clean_env: None) -> None:
        with patch.object(sys.stderr, "isatty", return_value=False):
            assert _should_use_color() is False


# ==============================================================================
# Status messages
# ==============================================================================


@pytest.mark.unit
class TestStatusMessages:
    """Tests for print_success, print_error and print_warning."""

    @pytest.mark.parametrize(
        "func,prefix,style",
        [
            (print_success, "[OK]", "success"),
            (print_error, "[ERROR]", "error"),
            (print_warning, "[WARNING]", "warning"),
        ],
    )
    def test_prefix_and_style(self, mock_console: MagicMock, func, prefix, style) -> None:
        func("done")

        mock_console.print.assert_called_once_with(
            f"{prefix} done", style=style, markup=False
        )

    def test_brackets_are_not_markup(self, mock_console: MagicMock) -> None:
        print_error("No such section: [project.optional-dependencies]")

        assert mock_console.print.call_args.kwargs["markup"] is False

    def test_custom_prefix(self, mock_console: MagicMock) -> None:
        print_success("done", prefix=">>")

        assert mock_console.print.call_args.args[0] == ">> done"


# ==============================================================================
# Tables
# ==============================================================================


@pytest.mark.unit
class TestPrintTable:
    """Tests for print_table."""

    def test_empty_data_prints_nothing(self, mock_console: MagicMock) -> None:
        print_table([])

        mock_console.print.assert_not_called()

    def test_renders_table(self, mock_console: MagicMock) -> None:
        print_table(
            [{"Package": "black", "New": "== 24.1.0"}],
            title="Pinned Versions",
            column_styles={"Package": {"style": "bold cyan"}},
        )

        table = mock_console.print.call_args.args[0]
        assert isinstance(table, Table)
        assert table.title == "Pinned Versions"
        assert [c.header for c in table.columns] == ["Package", "New"]
        assert table.row_count == 1


@pytest.mark.unit
class TestColorizeUpdateType:
    """Tests for colorize_update_type."""

    @pytest.mark.parametrize(
        "update_type,expected",
        [
            ("major", "[red]major[/red]"),
            ("minor", "[yellow]minor[/yellow]"),
            ("patch", "[green]patch[/green]"),
            ("new", "[cyan]new[/cyan]"),
            ("same", "same"),
        ],
    )
    def test_markup(self, update_type: str, expected: str) -> None:
        assert colorize_update_type(update_type) == expected
