"""
Manifest data model for update-pypi-deps.

A :class:`Manifest` holds the required dependency group and any optional
dependency groups of one project. Groups keep the order of the input file,
and so do the specifiers inside each group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from update_pypi_deps.constants import DEPENDENCIES_KEY
from update_pypi_deps.models.specifier import Specifier

#: Ordered sequence of specifiers; output order equals input order.
DependencyGroup = List[Specifier]


@dataclass
class Manifest:
    """In-memory dependency lists of a project.

    Attributes:
        dependencies: The required ``project.dependencies`` group.
        optional_dependencies: ``project.optional-dependencies`` groups by
            name, in the order they were read.
    """

    dependencies: DependencyGroup = field(default_factory=list)
    optional_dependencies: Dict[str, DependencyGroup] = field(default_factory=dict)

    def iter_groups(self) -> Iterator[Tuple[str, DependencyGroup]]:
        """Yield ``(group_name, group)`` pairs, required group first.

        The required group is reported under the name ``"dependencies"``.
        """
        yield DEPENDENCIES_KEY, self.dependencies
        yield from self.optional_dependencies.items()

    def iter_specifiers(self) -> Iterator[Tuple[str, Specifier]]:
        """Yield ``(group_name, specifier)`` for every entry in stable order."""
        for group_name, group in self.iter_groups():
            for spec in group:
                yield group_name, spec

    def unique_names(self) -> List[str]:
        """Return every distinct package name, in first-seen order."""
        return list(dict.fromkeys(spec.name for _, spec in self.iter_specifiers()))

    def __len__(self) -> int:
        return sum(len(group) for _, group in self.iter_groups())
