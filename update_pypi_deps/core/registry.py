"""PyPI registry client for update-pypi-deps.

The resolver only needs one thing from the registry: the version PyPI
currently reports for a name (``info.version`` of
``/pypi/{name}/json``). :class:`PyPIRegistry` provides exactly that as
:meth:`~PyPIRegistry.lookup_latest_version`, on top of the retrying
:class:`~update_pypi_deps.utils.http.HTTPClient`.

Typical usage::

    async with HTTPClient() as http:
        registry = PyPIRegistry(http)
        await registry.lookup_latest_version("requests")   # e.g. "2.32.3"
"""

from __future__ import annotations

import re
from typing import Any, Dict
from urllib.parse import quote

from update_pypi_deps.constants import PYPI_JSON_API
from update_pypi_deps.exceptions import NetworkError, RegistryError
from update_pypi_deps.utils.http import HTTPClient
from update_pypi_deps.utils.logger import get_logger

logger = get_logger("registry")

__all__ = ["PyPIRegistry", "project_name"]

_EXTRAS_RE = re.compile(r"\[[^\]]*\]")


def project_name(name: str) -> str:
    """Return the registry project name for a manifest name.

    Extras are not part of the project name: ``"requests[socks]"`` is
    looked up as ``"requests"``.

    Example::

        >>> project_name("uvicorn[standard]")
        'uvicorn'
    """
    return _EXTRAS_RE.sub("", name).strip()


class PyPIRegistry:
    """Looks up the newest published version of packages on PyPI.

    Args:
        http_client: Open :class:`HTTPClient`; the registry does not own
            or close it.
        api_url: URL template with a ``{package}`` placeholder.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        *,
        api_url: str = PYPI_JSON_API,
    ) -> None:
        self.http_client = http_client
        self.api_url = api_url

    def url_for(self, name: str) -> str:
        """Build the JSON API URL for a manifest name."""
        return self.api_url.format(package=quote(project_name(name), safe=""))

    async def lookup_latest_version(self, name: str) -> str:
        """Return the version PyPI reports as current for ``name``.

        Args:
            name: Package name as written in the manifest.

        Returns:
            The ``info.version`` string of the package.

        Raises:
            RegistryError: Package not found, transport failure after
                retries, or a response without a usable version.
        """
        url = self.url_for(name)
        logger.debug("Sending request to %s", url)

        try:
            data = await self.http_client.get_json(url)
        except RegistryError as exc:
            if exc.status_code == 404:
                raise RegistryError(
                    f"Package '{name}' not found on PyPI",
                    package_name=name,
                    url=url,
                    status_code=404,
                ) from exc
            raise
        except NetworkError as exc:
            raise RegistryError(
                f"Could not reach PyPI for '{name}': {exc.message}",
                package_name=name,
                url=url,
                status_code=exc.status_code,
            ) from exc

        return _extract_version(name, url, data)


def _extract_version(name: str, url: str, data: Dict[str, Any]) -> str:
    """Pull ``info.version`` out of a JSON API response."""
    info = data.get("info")
    version = info.get("version") if isinstance(info, dict) else None

    if not isinstance(version, str) or not version.strip():
        raise RegistryError(
            f"Malformed PyPI response for '{name}': missing info.version",
            package_name=name,
            url=url,
        )

    return version.strip()
