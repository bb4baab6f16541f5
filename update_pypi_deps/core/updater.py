"""Merge resolved versions back into a manifest.

:func:`apply_resolutions` is the strict half of the resolve/update pair:
every specifier in the manifest must have a resolved version, otherwise
:class:`~update_pypi_deps.exceptions.UnresolvedDependencyError` is raised
and the manifest is left untouched. Output that silently dropped a
dependency would be wrong, so there is no partial update.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from update_pypi_deps.constants import DEFAULT_PIN_OPERATOR
from update_pypi_deps.exceptions import UnresolvedDependencyError
from update_pypi_deps.models import Constraint, Manifest
from update_pypi_deps.utils import get_logger, get_update_type

logger = get_logger("updater")

__all__ = ["SpecifierChange", "apply_resolutions"]


@dataclass(frozen=True)
class SpecifierChange:
    """Record of one rewritten specifier."""

    group: str
    name: str
    operator: str
    old_version: Optional[str]
    new_version: str

    @property
    def update_type(self) -> str:
        """Classification such as ``"major"`` or ``"new"``."""
        return get_update_type(self.old_version, self.new_version)


def apply_resolutions(
    manifest: Manifest,
    versions: Mapping[str, str],
) -> List[SpecifierChange]:
    """Pin every specifier in ``manifest`` to its resolved version.

    The original operator is kept; specifiers without a constraint get
    ``==``. The manifest is modified in place.

    Args:
        manifest: Manifest to update.
        versions: Package name (as authored) → latest version.

    Returns:
        One :class:`SpecifierChange` per specifier, in manifest order.

    Raises:
        UnresolvedDependencyError: The first name (in manifest order) with
            no entry in ``versions``. Nothing is modified in that case.
    """
    for group_name, spec in manifest.iter_specifiers():
        if spec.name not in versions:
            raise UnresolvedDependencyError(spec.name, group=group_name)

    changes: List[SpecifierChange] = []
    for group_name, spec in manifest.iter_specifiers():
        operator = spec.operator or DEFAULT_PIN_OPERATOR
        change = SpecifierChange(
            group=group_name,
            name=spec.name,
            operator=operator,
            old_version=spec.version,
            new_version=versions[spec.name],
        )
        spec.constraint = Constraint(operator, change.new_version)
        changes.append(change)

        logger.debug(
            "%s: %s %s -> %s",
            spec.name,
            operator,
            change.old_version or "*",
            change.new_version,
        )

    return changes
