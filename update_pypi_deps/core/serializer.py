"""Render a manifest back into TOML dependency arrays.

The output is meant to be pasted into (or diffed against) the
``[project]`` section it came from::

    dependencies = [
        "cryptography ~= 42.0.1",
        "black == 24.1.0",
    ]

    [project.optional-dependencies]
    test = [
        "pytest == 8.0.0",
    ]

Empty groups are omitted. Optional groups appear in mapping order, which
for a manifest loaded from a file is file order.
"""

from __future__ import annotations

import re
from typing import List

from update_pypi_deps.constants import (
    DEPENDENCIES_KEY,
    OPTIONAL_DEPENDENCIES_KEY,
    OUTPUT_INDENT,
    PROJECT_TABLE,
)
from update_pypi_deps.models import DependencyGroup, Manifest, Specifier

__all__ = ["render_group", "render_manifest", "render_specifier"]

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def render_specifier(spec: Specifier) -> str:
    """Render one specifier as a quoted TOML string."""
    return _quote(spec.to_string())


def render_group(key: str, group: DependencyGroup) -> str:
    """Render ``key = [...]`` with one specifier per line."""
    lines = [f"{_key(key)} = ["]
    lines.extend(f"{OUTPUT_INDENT}{render_specifier(spec)}," for spec in group)
    lines.append("]")
    return "\n".join(lines)


def render_manifest(manifest: Manifest) -> str:
    """Render the non-empty groups of ``manifest``.

    Returns:
        Blocks separated by blank lines, with a trailing newline, or an
        empty string when every group is empty.
    """
    blocks: List[str] = []

    if manifest.dependencies:
        blocks.append(render_group(DEPENDENCIES_KEY, manifest.dependencies))

    optional = [
        render_group(name, group)
        for name, group in manifest.optional_dependencies.items()
        if group
    ]
    if optional:
        header = f"[{PROJECT_TABLE}.{OPTIONAL_DEPENDENCIES_KEY}]"
        optional[0] = f"{header}\n{optional[0]}"
        blocks.extend(optional)

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _quote(text: str) -> str:
    """Quote ``text`` as a TOML basic string."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _key(name: str) -> str:
    return name if _BARE_KEY_RE.match(name) else _quote(name)
