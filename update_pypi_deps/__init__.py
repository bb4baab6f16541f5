"""
update-pypi-deps: pin a project's dependencies to their latest PyPI releases.

Reads the ``[project]`` dependency arrays of a ``pyproject.toml``, asks PyPI
for the newest published version of every package, and prints the same
arrays with each version pinned to that release. Version operators written
by the author (``~=``, ``>=``, ...) are kept; unconstrained entries are
pinned with ``==``.

Typical usage::

    $ update-pypi-deps --input pyproject.toml --requests 10
"""

from __future__ import annotations

from update_pypi_deps.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "update-pypi-deps Contributors"
__license__ = "MIT"
__description__ = "Pin pyproject.toml dependencies to their latest PyPI versions."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from update_pypi_deps.models import Constraint, Manifest, Specifier
from update_pypi_deps.core import (
    Resolver,
    apply_resolutions,
    build_manifest,
    load_manifest,
    parse_specifier,
    render_manifest,
)

__all__ = [
    "__version__",
    "Constraint",
    "Manifest",
    "Specifier",
    "Resolver",
    "apply_resolutions",
    "build_manifest",
    "load_manifest",
    "parse_specifier",
    "render_manifest",
]
