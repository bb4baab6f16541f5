"""
Async HTTP access to the package registry.

:class:`HTTPClient` is the only place that talks to httpx. Everything it
raises is an :class:`~update_pypi_deps.exceptions.NetworkError` (or its
:class:`~update_pypi_deps.exceptions.RegistryError` subclass for 404), so
callers never have to know about httpx exception types.

Transient failures are retried here with exponential backoff:

- transport errors (timeouts, dropped connections, protocol errors)
- 5xx responses
- 429 responses, after waiting for ``Retry-After``

Other 4xx responses and non-transport request errors (too many redirects,
undecodable content) fail on the first attempt. The resolver above this
layer never retries.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional, cast

from update_pypi_deps.utils.logger import get_logger
from update_pypi_deps.__version__ import __version__
from update_pypi_deps.exceptions import NetworkError, RegistryError
from update_pypi_deps.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

#: Upper bound on consecutive 429 responses before giving up.
MAX_RATE_LIMIT_RETRIES = 5


class HTTPClient:
    """Retrying async client for JSON registry endpoints.

    Concurrency is not limited here; the resolver decides how many
    requests are in flight.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Retries after the first attempt for transient failures.

    Example:
        >>> async with HTTPClient(max_retries=2) as client:
        ...     data = await client.get_json("https://pypi.org/pypi/requests/json")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_rate_limit_retries = MAX_RATE_LIMIT_RETRIES
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                follow_redirects=True,
                headers={
                    "User-Agent": USER_AGENT_TEMPLATE.format(version=__version__),
                    "Accept": "application/json",
                },
            )

    async def close(self) -> None:
        """Close the underlying connection pool. Safe to call twice."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str) -> httpx.Response:
        """GET ``url``, retrying transient failures.

        Raises:
            RegistryError: The server answered 404.
            NetworkError: Any other failure, after retries where they apply.
        """
        await self._ensure_client()
        assert self._client is not None

        url = url.strip()
        rate_limited = 0
        attempt = 0
        last_error: Optional[Exception] = None

        while True:
            try:
                response = await self._client.get(url)
            except httpx.TransportError as exc:
                last_error = exc
                reason = f"{type(exc).__name__}: {exc}"
            except httpx.HTTPError as exc:
                raise NetworkError(
                    f"Request to {url} failed: {type(exc).__name__}: {exc}",
                    url=url,
                ) from exc
            else:
                status = response.status_code

                if status == 429:
                    rate_limited += 1
                    if rate_limited > self.max_rate_limit_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self.max_rate_limit_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    delay = _retry_after_seconds(response)
                    logger.warning("Rate limited by %s, waiting %ds", url, delay)
                    await asyncio.sleep(delay)
                    continue

                if status == 404:
                    raise RegistryError(
                        f"Resource not found: {url}",
                        url=url,
                        status_code=404,
                    )

                if status < 400:
                    return response

                if status < 500:
                    raise NetworkError(
                        f"HTTP {status} error for {url}",
                        url=url,
                        status_code=status,
                        response_body=response.text,
                    )

                last_error = None
                reason = f"HTTP {status}"

            attempt += 1
            if attempt > self.max_retries:
                raise NetworkError(
                    f"Request failed after {attempt} attempts: {url} ({reason})",
                    url=url,
                ) from last_error

            delay = (2 ** (attempt - 1)) + random.uniform(0.0, 0.3)
            logger.warning(
                "%s for %s, retry %d/%d in %.1fs",
                reason,
                url,
                attempt,
                self.max_retries,
                delay,
            )
            await asyncio.sleep(delay)

    async def get_json(self, url: str) -> Dict[str, Any]:
        """GET ``url`` and decode a JSON object body.

        Raises:
            NetworkError: The request failed or the body is not a JSON object.
        """
        response = await self.get(url)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)


def _retry_after_seconds(response: httpx.Response) -> int:
    """Read ``Retry-After`` as whole seconds, defaulting to 1."""
    try:
        return max(int(response.headers.get("Retry-After", "1")), 0)
    except ValueError:
        # HTTP-date form
        return 1
