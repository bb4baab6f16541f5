from __future__ import annotations

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from update_pypi_deps.core.registry import PyPIRegistry, project_name
from update_pypi_deps.exceptions import NetworkError, RegistryError
from update_pypi_deps.utils.http import HTTPClient


@pytest.fixture
def mock_http_client() -> MagicMock:
    """Mock HTTPClient whose get_json is awaitable."""
    client = MagicMock(spec=HTTPClient)
    client.get_json = AsyncMock()
    return client


@pytest.fixture
def keyring_response() -> Dict[str, Any]:
    """Trimmed PyPI JSON API response."""
    return {
        "info": {"name": "keyring", "version": "25.2.0", "requires_python": ">=3.8"},
        "releases": {"25.2.0": [], "25.1.0": []},
    }


@pytest.mark.unit
class TestProjectName:
    """Tests for mapping manifest names to registry project names."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("requests", "requests"),
            ("uvicorn[standard]", "uvicorn"),
            ("httpx[http2,socks]", "httpx"),
            ("PyYAML", "PyYAML"),
        ],
    )
    def test_strips_extras(self, name: str, expected: str) -> None:
        assert project_name(name) == expected


@pytest.mark.unit
class TestPyPIRegistry:
    """Tests for PyPIRegistry.lookup_latest_version."""

    def test_url_for(self, mock_http_client: MagicMock) -> None:
        registry = PyPIRegistry(mock_http_client)

        assert registry.url_for("uvicorn[standard]") == "https://pypi.org/pypi/uvicorn/json"

    def test_custom_api_url(self, mock_http_client: MagicMock) -> None:
        registry = PyPIRegistry(mock_http_client, api_url="https://mirror.test/{package}.json")

        assert registry.url_for("black") == "https://mirror.test/black.json"

    @pytest.mark.asyncio
    async def test_returns_info_version(
        self, mock_http_client: MagicMock, keyring_response: Dict[str, Any]
    ) -> None:
        mock_http_client.get_json.return_value = keyring_response
        registry = PyPIRegistry(mock_http_client)

        version = await registry.lookup_latest_version("keyring")

        assert version == "25.2.0"
        mock_http_client.get_json.assert_awaited_once_with(
            "https://pypi.org/pypi/keyring/json"
        )

    @pytest.mark.asyncio
    async def test_not_found(self, mock_http_client: MagicMock) -> None:
        mock_http_client.get_json.side_effect = RegistryError(
            "Resource not found", status_code=404
        )
        registry = PyPIRegistry(mock_http_client)

        with pytest.raises(RegistryError) as exc_info:
            await registry.lookup_latest_version("no-such-package")

        assert exc_info.value.package_name == "no-such-package"
        assert exc_info.value.status_code == 404
        assert "not found on PyPI" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error_becomes_registry_error(
        self, mock_http_client: MagicMock
    ) -> None:
        mock_http_client.get_json.side_effect = NetworkError(
            "Request failed after 4 attempts", url="https://pypi.org/pypi/x/json"
        )
        registry = PyPIRegistry(mock_http_client)

        with pytest.raises(RegistryError) as exc_info:
            await registry.lookup_latest_version("x")

        assert exc_info.value.package_name == "x"
        assert isinstance(exc_info.value.__cause__, NetworkError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"info": None},
            {"info": {}},
            {"info": {"version": ""}},
            {"info": {"version": 3}},
        ],
        ids=["no-info", "null-info", "no-version", "empty-version", "non-string"],
    )
    async def test_malformed_response(
        self, mock_http_client: MagicMock, payload: Dict[str, Any]
    ) -> None:
        mock_http_client.get_json.return_value = payload
        registry = PyPIRegistry(mock_http_client)

        with pytest.raises(RegistryError, match="Malformed PyPI response"):
            await registry.lookup_latest_version("pkg")
