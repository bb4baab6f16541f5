"""
Command-line interface for update-pypi-deps.

This module provides the CLI entry point: it loads configuration, reads
the manifest, resolves the latest versions concurrently, pins them, and
prints the rendered dependency arrays on stdout. Status messages, warnings
and logs go to stderr.
"""

from __future__ import annotations

import os
import sys
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import click

from update_pypi_deps.config import Config, load_config
from update_pypi_deps.__version__ import __version__
from update_pypi_deps.constants import DEFAULT_MANIFEST, OUTPUT_BANNER
from update_pypi_deps.exceptions import UpdatePypiDepsError
from update_pypi_deps.core import (
    PyPIRegistry,
    Resolution,
    Resolver,
    SpecifierChange,
    apply_resolutions,
    load_manifest,
    render_manifest,
)
from update_pypi_deps.models import Manifest
from update_pypi_deps.utils import (
    HTTPClient,
    colorize_update_type,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
    setup_logging,
)

logger = get_logger("cli")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST,
    show_default=True,
    help="File from which to parse dependencies.",
)
@click.option(
    "--requests",
    "-r",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of concurrent PyPI requests [default: 10].",
)
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up on a single package lookup after this many seconds.",
)
@click.option(
    "--group",
    "-g",
    "groups",
    multiple=True,
    help="Only include this optional dependency group (can be repeated).",
)
@click.option(
    "--summary",
    is_flag=True,
    help="Print a table of version changes to stderr.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="UPDATE_PYPI_DEPS_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="UPDATE_PYPI_DEPS_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="update-pypi-deps",
    message="%(prog)s %(version)s",
)
def cli(
    input_path: Path,
    requests: Optional[int],
    timeout: Optional[float],
    groups: Tuple[str, ...],
    summary: bool,
    config_path: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Pin pyproject.toml dependencies to their latest PyPI versions.

    Reads ``project.dependencies`` and ``project.optional-dependencies``,
    looks up the newest release of every package, and prints the arrays
    with each version pinned. Existing operators are kept; unconstrained
    entries are pinned with ``==``.

    \b
    Examples:
      update-pypi-deps
      update-pypi-deps -i path/to/pyproject.toml -r 20
      update-pypi-deps -g test -g dev --summary
    """
    _configure_logging(verbose)
    _configure_color(color)

    config = load_config(config_path)
    if config.source_path:
        logger.debug("Loaded configuration: %s", config.to_log_dict())

    concurrency = requests if requests is not None else config.requests
    lookup_timeout = timeout if timeout is not None else config.timeout
    logger.debug(
        "Input: %s | Requests: %d | Timeout: %s",
        input_path,
        concurrency,
        lookup_timeout,
    )

    manifest = load_manifest(input_path, groups=groups or None)

    resolution = asyncio.run(
        _resolve_async(
            manifest,
            concurrency=concurrency,
            timeout=lookup_timeout,
            config=config,
        )
    )

    if resolution.failures:
        print_warning(
            f"{len(resolution.failures)} package(s) could not be resolved: "
            f"{', '.join(resolution.failed_names)}"
        )

    changes = apply_resolutions(manifest, resolution.versions)

    click.echo(OUTPUT_BANNER)
    click.echo()
    click.echo(render_manifest(manifest), nl=False)

    if summary:
        _display_summary(changes)
    print_success(f"Pinned {len(changes)} dependency specifier(s) to latest versions")


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


def _configure_color(color: bool) -> None:
    """Propagate the color choice to Rich and downstream libraries."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


async def _resolve_async(
    manifest: Manifest,
    *,
    concurrency: int,
    timeout: Optional[float],
    config: Config,
) -> Resolution:
    """Look up every package of ``manifest`` on PyPI."""
    async with HTTPClient(max_retries=config.max_retries) as http:
        registry = PyPIRegistry(http)
        resolver = Resolver(
            registry.lookup_latest_version,
            concurrency=concurrency,
            timeout=timeout,
        )
        return await resolver.resolve(manifest)


def _display_summary(changes: List[SpecifierChange]) -> None:
    """Show every rewritten specifier as a Rich table."""
    data = [
        {
            "Group": change.group,
            "Package": change.name,
            "Old": f"{change.operator} {change.old_version}" if change.old_version else "-",
            "New": f"{change.operator} {change.new_version}",
            "Change": colorize_update_type(change.update_type),
        }
        for change in changes
    ]

    column_styles = {
        "Group": {"style": "dim"},
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Old": {"justify": "center", "style": "dim"},
        "New": {"justify": "center", "style": "bold green"},
        "Change": {"justify": "center"},
    }

    print_table(data, title="Pinned Versions", column_styles=column_styles)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the update-pypi-deps CLI.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``.

    Returns:
        Exit code:
            0   Success (including ``--help`` and ``--version``)
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli.main(
            args=list(argv) if argv is not None else None,
            prog_name="update-pypi-deps",
            standalone_mode=False,
        )
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except UpdatePypiDepsError as exc:
        print_error(str(exc))
        logger.debug(
            "UpdatePypiDepsError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (click.Abort, KeyboardInterrupt):
        print_warning("Operation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
