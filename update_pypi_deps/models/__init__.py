"""
Unified data model exports for update-pypi-deps.

Example:
    >>> from update_pypi_deps.models import Manifest, Specifier, Constraint
"""

from __future__ import annotations

from update_pypi_deps.models.specifier import Constraint, Specifier
from update_pypi_deps.models.manifest import DependencyGroup, Manifest

__all__ = [
    "Constraint",
    "Specifier",
    "DependencyGroup",
    "Manifest",
]
