"""
Version comparison utilities for update-pypi-deps.

Used only for reporting: classifies how far a pinned version moved so the
change summary can flag major bumps. PEP 440 parsing comes from
``packaging``.
"""

from __future__ import annotations

from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version


def get_update_type(
    old_version: Optional[str],
    new_version: Optional[str],
) -> str:
    """Classify the change from ``old_version`` to ``new_version``.

    Args:
        old_version: Version previously written in the manifest, or
            ``None`` if the dependency was unconstrained.
        new_version: Version it was pinned to.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"``, ``"update"`` or ``"unknown"``.

    Examples:
        >>> get_update_type("41.0", "42.0.1")
        'major'
        >>> get_update_type(None, "24.1.0")
        'new'
    """
    if new_version is None:
        return "unknown"

    if old_version is None:
        return "new"

    try:
        old = Version(old_version)
        new = Version(new_version)
    except InvalidVersion:
        return "unknown"

    if new == old:
        return "same"

    if new < old:
        return "downgrade"

    old_release = _release_triple(old)
    new_release = _release_triple(new)

    for kind, before, after in zip(("major", "minor", "patch"), old_release, new_release):
        if before != after:
            return kind

    # Pre-release → release, post releases, local versions
    return "update"


def _release_triple(version: Version) -> Tuple[int, int, int]:
    """Pad a release segment to ``(major, minor, patch)``."""
    release = tuple(version.release) + (0, 0, 0)
    return release[0], release[1], release[2]
