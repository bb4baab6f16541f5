"""
Specifier data model for update-pypi-deps.

A :class:`Specifier` is one entry of a ``pyproject.toml`` dependency array:
a package name, an optional single version :class:`Constraint`, and an
optional environment marker that is carried through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from update_pypi_deps.constants import MARKER_SEPARATOR, VERSION_OPERATORS


@dataclass(frozen=True)
class Constraint:
    """An ``(operator, version)`` pair such as ``(">=", "2.0")``.

    Attributes:
        operator: One of :data:`~update_pypi_deps.constants.VERSION_OPERATORS`.
        version: Non-empty version text, kept exactly as written.

    Raises:
        ValueError: Unknown operator or empty version.
    """

    operator: str
    version: str

    def __post_init__(self) -> None:
        if self.operator not in VERSION_OPERATORS:
            raise ValueError(f"Unknown version operator: {self.operator!r}")
        if not self.version:
            raise ValueError("Constraint version must not be empty")

    def __str__(self) -> str:
        return f"{self.operator} {self.version}"


@dataclass
class Specifier:
    """A single dependency entry.

    Attributes:
        name: Package name exactly as authored (case preserved, extras
            included). This is also the key used for resolved versions.
        constraint: Version constraint, or ``None`` for "any version".
        marker: Environment marker text after ``;``, if any.
    """

    name: str
    constraint: Optional[Constraint] = None
    marker: Optional[str] = None

    @property
    def operator(self) -> Optional[str]:
        """Operator of the constraint, or ``None`` when unconstrained."""
        return self.constraint.operator if self.constraint else None

    @property
    def version(self) -> Optional[str]:
        """Version of the constraint, or ``None`` when unconstrained."""
        return self.constraint.version if self.constraint else None

    def to_string(self) -> str:
        """Render as it appears inside a dependency array (unquoted).

        Returns:
            ``"<name> <operator> <version>"``, or the bare name when
            unconstrained, followed by ``"; <marker>"`` when a marker exists.
        """
        result = self.name
        if self.constraint is not None:
            result = f"{result} {self.constraint}"
        if self.marker:
            result = f"{result}{MARKER_SEPARATOR} {self.marker}"
        return result

    def __str__(self) -> str:
        return self.to_string()
