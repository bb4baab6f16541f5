"""Dependency specifier and manifest parser.

Turns the dependency arrays of a ``pyproject.toml`` into a
:class:`~update_pypi_deps.models.Manifest`.

The specifier grammar is small: an optional environment
marker after ``;``, then a package name optionally followed by **one**
comparison operator and a version. The operator is found by testing the
candidates of :data:`~update_pypi_deps.constants.VERSION_OPERATORS` in
order and taking the first one that occurs anywhere in the text; the text
is then split on the first occurrence of that operator only. Ordering the
candidates longest-first keeps ``===`` from being read as ``==`` and
``<=`` from being read as ``<``.

Typical usage::

    from update_pypi_deps.core.parser import load_manifest, parse_specifier

    spec = parse_specifier("cryptography~=41.0")
    spec.name, spec.operator, spec.version
    # ('cryptography', '~=', '41.0')

    manifest = load_manifest("pyproject.toml", groups=["test"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import tomli as tomllib

from update_pypi_deps.models import Constraint, DependencyGroup, Manifest, Specifier
from update_pypi_deps.utils import get_logger, safe_read_bytes
from update_pypi_deps.exceptions import (
    MalformedManifestError,
    MalformedSpecifierError,
    MissingSectionError,
)
from update_pypi_deps.constants import (
    DEPENDENCIES_KEY,
    MARKER_SEPARATOR,
    OPTIONAL_DEPENDENCIES_KEY,
    PROJECT_TABLE,
    SPECIFIER_QUOTES,
    VERSION_OPERATORS,
)

logger = get_logger("parser")

__all__ = ["parse_specifier", "build_manifest", "load_manifest"]

_DEPENDENCIES_SECTION = f"{PROJECT_TABLE}.{DEPENDENCIES_KEY}"
_OPTIONAL_SECTION = f"{PROJECT_TABLE}.{OPTIONAL_DEPENDENCIES_KEY}"


# ---------------------------------------------------------------------------
# Specifier parsing
# ---------------------------------------------------------------------------


def parse_specifier(raw: str) -> Specifier:
    """Parse one dependency string into a :class:`Specifier`.

    Args:
        raw: A single entry of a dependency array, e.g. ``"requests>=2.0"``.
            Wrapping quotes and surrounding whitespace are ignored.

    Returns:
        The parsed specifier. A string containing no operator yields a bare
        name with ``constraint=None``.

    Raises:
        MalformedSpecifierError: The name is empty (``missing package
            name``) or an operator is present with nothing after it
            (``missing version``).

    Example::

        >>> parse_specifier("pkg===1.0").operator
        '==='
        >>> parse_specifier("black").constraint is None
        True
    """
    text = _unquote(raw.strip())

    marker: Optional[str] = None
    if MARKER_SEPARATOR in text:
        text, _, marker_text = text.partition(MARKER_SEPARATOR)
        text = text.strip()
        marker = marker_text.strip() or None

    operator = _find_operator(text)

    if operator is None:
        if not text:
            raise MalformedSpecifierError("missing package name", specifier=raw)
        return Specifier(name=text, marker=marker)

    name, _, version = text.partition(operator)
    name = name.strip()
    version = version.strip()

    if not name:
        raise MalformedSpecifierError("missing package name", specifier=raw)
    if not version:
        raise MalformedSpecifierError("missing version", specifier=raw)

    return Specifier(
        name=name,
        constraint=Constraint(operator, version),
        marker=marker,
    )


def _unquote(text: str) -> str:
    """Remove one matching pair of wrapping quotes, if present."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in SPECIFIER_QUOTES:
        return text[1:-1].strip()
    return text


def _find_operator(text: str) -> Optional[str]:
    """Return the highest-priority operator occurring in ``text``."""
    for operator in VERSION_OPERATORS:
        if operator in text:
            return operator
    return None


# ---------------------------------------------------------------------------
# Manifest building
# ---------------------------------------------------------------------------


def build_manifest(
    dependencies: Any,
    optional_dependencies: Any = None,
    *,
    groups: Optional[Iterable[str]] = None,
) -> Manifest:
    """Build a :class:`Manifest` from already-parsed TOML values.

    Args:
        dependencies: Value of ``project.dependencies``; ``None`` when the
            key is absent.
        optional_dependencies: Value of ``project.optional-dependencies``;
            ``None`` (or omitted) when the table is absent.
        groups: Optional group names to keep. Requested groups that do not
            exist are skipped, not created. ``None`` keeps every group.

    Returns:
        The manifest, with groups and entries in input order.

    Raises:
        MissingSectionError: ``dependencies`` is ``None``.
        MalformedManifestError: A section has the wrong TOML type.
        MalformedSpecifierError: Any single entry fails to parse; the whole
            build is abandoned.
    """
    if dependencies is None:
        raise MissingSectionError(_DEPENDENCIES_SECTION)

    manifest = Manifest(
        dependencies=_parse_group(dependencies, DEPENDENCIES_KEY, _DEPENDENCIES_SECTION)
    )

    if optional_dependencies is None:
        return manifest

    if not isinstance(optional_dependencies, Mapping):
        raise MalformedManifestError(
            "Optional dependencies must be a table of arrays",
            section=_OPTIONAL_SECTION,
        )

    wanted = set(groups) if groups is not None else None

    for group_name, values in optional_dependencies.items():
        if wanted is not None and group_name not in wanted:
            logger.debug("Skipping optional group '%s' (not requested)", group_name)
            continue
        manifest.optional_dependencies[group_name] = _parse_group(
            values,
            group_name,
            f"{_OPTIONAL_SECTION}.{group_name}",
        )

    if wanted is not None:
        for missing in sorted(wanted - set(manifest.optional_dependencies)):
            logger.info("Optional group '%s' not present in manifest", missing)

    return manifest


def _parse_group(values: Any, group_name: str, section: str) -> DependencyGroup:
    """Parse every entry of one dependency array."""
    if not isinstance(values, list):
        raise MalformedManifestError(
            f"Expected an array of strings, got {type(values).__name__}",
            section=section,
        )

    group: DependencyGroup = []
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise MalformedSpecifierError(
                f"expected a string, got {type(value).__name__}",
                group=group_name,
                index=index,
            )
        try:
            group.append(parse_specifier(value))
        except MalformedSpecifierError as exc:
            # Attach location; the caller only sees the first failure
            exc.group = group_name
            exc.index = index
            exc.details["group"] = group_name
            exc.details["index"] = index
            raise

    logger.debug("Parsed %d specifier(s) from %s", len(group), section)
    return group


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def load_manifest(
    path: Union[str, Path],
    *,
    groups: Optional[Iterable[str]] = None,
) -> Manifest:
    """Read a ``pyproject.toml`` and build its :class:`Manifest`.

    Args:
        path: Manifest file path.
        groups: Optional dependency groups to keep (see
            :func:`build_manifest`).

    Returns:
        The parsed manifest.

    Raises:
        FileOperationError: The file cannot be read.
        MalformedManifestError: The file is not valid TOML or a section
            has the wrong type.
        MissingSectionError: ``[project]`` or ``project.dependencies`` is
            absent.
        MalformedSpecifierError: A dependency entry fails to parse.
    """
    path = Path(path)
    document = _parse_toml(safe_read_bytes(path), path)

    project = document.get(PROJECT_TABLE)
    if project is None:
        raise MissingSectionError(_DEPENDENCIES_SECTION, file_path=str(path))
    if not isinstance(project, dict):
        raise MalformedManifestError(
            "Expected [project] to be a table",
            file_path=str(path),
            section=PROJECT_TABLE,
        )

    try:
        manifest = build_manifest(
            project.get(DEPENDENCIES_KEY),
            project.get(OPTIONAL_DEPENDENCIES_KEY),
            groups=groups,
        )
    except (MissingSectionError, MalformedManifestError) as exc:
        exc.file_path = str(path)
        exc.details["file"] = str(path)
        raise

    logger.info(
        "Loaded %d dependency specifier(s) in %d optional group(s) from %s",
        len(manifest),
        len(manifest.optional_dependencies),
        path,
    )
    return manifest


def _parse_toml(data: bytes, path: Path) -> Dict[str, Any]:
    """Decode TOML bytes, mapping decoder failures to our error type."""
    try:
        return tomllib.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise MalformedManifestError(
            f"Manifest is not valid UTF-8: {exc}",
            file_path=str(path),
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise MalformedManifestError(
            f"Invalid TOML in {path.name}: {exc}",
            file_path=str(path),
        ) from exc
