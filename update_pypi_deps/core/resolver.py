"""Bounded-concurrency version resolution for update-pypi-deps.

:class:`Resolver` asks the registry for the latest version of every
distinct package name in a :class:`~update_pypi_deps.models.Manifest`.

Resolution is tolerant: a lookup that raises any exception, or times
out, is logged as a warning and the name is left out of the result.
Deciding whether a missing name is acceptable is the updater's job.

Each lookup task returns a :class:`LookupOutcome` instead of raising, so
the aggregation step sees every success and failure explicitly. An
:class:`asyncio.Semaphore` held with ``async with`` admits at most
``concurrency`` lookups at a time and is released on every exit path.

Typical usage::

    async with HTTPClient() as http:
        registry = PyPIRegistry(http)
        resolver = Resolver(registry.lookup_latest_version, concurrency=10)
        resolution = await resolver.resolve(manifest)

    resolution.versions     # {"requests": "2.32.3", ...}
    resolution.failures     # [LookupOutcome(name="nope", error=...)]
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from update_pypi_deps.constants import DEFAULT_CONCURRENCY, DEFAULT_LOOKUP_TIMEOUT
from update_pypi_deps.exceptions import RegistryError
from update_pypi_deps.models import Manifest
from update_pypi_deps.utils.logger import get_logger

__all__ = ["LookupFn", "LookupOutcome", "Resolution", "Resolver"]

#: Async callable returning the latest version for a package name.
LookupFn = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class LookupOutcome:
    """Result of one registry lookup.

    Exactly one of ``version`` and ``error`` is set.
    """

    name: str
    version: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Resolution:
    """Aggregated outcome of a resolution run.

    Attributes:
        versions: Package name (as authored) → latest version, for every
            successful lookup.
        failures: Outcomes of failed lookups, in request order.
    """

    versions: Dict[str, str] = field(default_factory=dict)
    failures: List[LookupOutcome] = field(default_factory=list)

    @property
    def failed_names(self) -> List[str]:
        return [outcome.name for outcome in self.failures]

    def __len__(self) -> int:
        return len(self.versions)


class Resolver:
    """Resolve package names to their latest registry versions.

    Args:
        lookup: Async callable ``lookup(name) -> version``; typically
            :meth:`PyPIRegistry.lookup_latest_version`.
        concurrency: Maximum number of lookups in flight. Must be >= 1.
        timeout: Optional per-lookup timeout in seconds. A lookup that
            exceeds it counts as a failed lookup.
        logger: Logger receiving per-lookup observations. Defaults to the
            package's ``resolver`` logger.

    Raises:
        ValueError: ``concurrency`` is below 1 or ``timeout`` is not
            positive.
    """

    def __init__(
        self,
        lookup: LookupFn,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout: Optional[float] = DEFAULT_LOOKUP_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.lookup = lookup
        self.concurrency = concurrency
        self.timeout = timeout
        self.logger = logger or get_logger("resolver")

    async def resolve(self, manifest: Manifest) -> Resolution:
        """Resolve every distinct name in ``manifest``.

        Names shared by several groups are looked up once.
        """
        return await self.resolve_names(manifest.unique_names())

    async def resolve_names(self, names: Iterable[str]) -> Resolution:
        """Resolve an iterable of package names.

        Duplicates are dropped (first occurrence kept). Completion order
        does not matter; the result is assembled after every task is done.

        Args:
            names: Package names as written in the manifest.

        Returns:
            A :class:`Resolution` with one entry per successful lookup and
            one failure record per failed lookup.
        """
        unique = list(dict.fromkeys(names))
        if not unique:
            return Resolution()

        self.logger.info(
            "Resolving %d package(s) with up to %d concurrent request(s)",
            len(unique),
            self.concurrency,
        )

        # Created per run so it binds to the running event loop
        semaphore = asyncio.Semaphore(self.concurrency)
        outcomes = await asyncio.gather(
            *(self._lookup_one(name, semaphore) for name in unique)
        )

        resolution = Resolution()
        for outcome in outcomes:
            if outcome.ok:
                resolution.versions[outcome.name] = outcome.version
            else:
                resolution.failures.append(outcome)

        self.logger.info(
            "Resolved %d of %d package(s)",
            len(resolution.versions),
            len(unique),
        )
        return resolution

    async def _lookup_one(
        self,
        name: str,
        semaphore: asyncio.Semaphore,
    ) -> LookupOutcome:
        """Run one lookup under the admission gate and tag its result."""
        async with semaphore:
            try:
                version = await self._call_lookup(name)
            except Exception as exc:
                return self._failed(name, exc)

        if not isinstance(version, str) or not version:
            return self._failed(
                name,
                RegistryError(
                    f"Registry returned no version for '{name}'",
                    package_name=name,
                ),
            )

        self.logger.debug("Latest version of %s is %s", name, version)
        return LookupOutcome(name=name, version=version)

    async def _call_lookup(self, name: str) -> str:
        """Invoke the lookup, applying the per-call timeout if configured."""
        if self.timeout is None:
            return await self.lookup(name)

        try:
            return await asyncio.wait_for(self.lookup(name), self.timeout)
        except asyncio.TimeoutError as exc:
            raise RegistryError(
                f"Lookup for '{name}' timed out after {self.timeout}s",
                package_name=name,
            ) from exc

    def _failed(self, name: str, error: Exception) -> LookupOutcome:
        self.logger.warning("Failed to resolve %s: %s", name, error)
        return LookupOutcome(name=name, error=error)
