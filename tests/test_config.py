from __future__ import annotations

from pathlib import Path

import pytest

from update_pypi_deps.config import (
    CONFIG_FILENAME,
    Config,
    _parse_section,
    _pyproject_has_section,
    _read_toml,
    discover_config_file,
    load_config,
)
from update_pypi_deps.exceptions import ConfigError


@pytest.fixture
def in_tmp_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with ``tmp_path`` as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.mark.unit
class TestConfig:
    """Tests for the Config dataclass."""

    def test_defaults(self) -> None:
        config = Config()

        assert config.requests == 10
        assert config.timeout is None
        assert config.max_retries == 3
        assert config.source_path is None

    def test_to_log_dict_excludes_metadata(self) -> None:
        config = Config(requests=4, timeout=2.5, source_path=Path("/x.toml"))

        assert config.to_log_dict() == {
            "requests": 4,
            "timeout": 2.5,
            "max_retries": 3,
        }


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for configuration discovery."""

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("", encoding="utf-8")

        assert discover_config_file(path) == path.resolve()

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            discover_config_file(tmp_path / "missing.toml")

    def test_dedicated_file_preferred(self, in_tmp_dir: Path) -> None:
        (in_tmp_dir / CONFIG_FILENAME).write_text("", encoding="utf-8")
        (in_tmp_dir / "pyproject.toml").write_text(
            "[tool.update-pypi-deps]\nrequests = 2\n", encoding="utf-8"
        )

        assert discover_config_file() == (in_tmp_dir / CONFIG_FILENAME).resolve()

    def test_pyproject_with_section(self, in_tmp_dir: Path) -> None:
        (in_tmp_dir / "pyproject.toml").write_text(
            "[tool.update-pypi-deps]\nrequests = 2\n", encoding="utf-8"
        )

        assert discover_config_file() == (in_tmp_dir / "pyproject.toml").resolve()

    def test_pyproject_without_section(self, in_tmp_dir: Path) -> None:
        (in_tmp_dir / "pyproject.toml").write_text(
            '[project]\ndependencies = ["black"]\n', encoding="utf-8"
        )

        assert discover_config_file() is None

    def test_nothing_found(self, in_tmp_dir: Path) -> None:
        assert discover_config_file() is None


@pytest.mark.unit
class TestPyprojectHasSection:
    """Tests for _pyproject_has_section."""

    def test_broken_toml_is_not_a_config(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool\n", encoding="utf-8")

        assert _pyproject_has_section(path) is False

    def test_tool_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('tool = "x"\n', encoding="utf-8")

        assert _pyproject_has_section(path) is False


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_when_nothing_found(self, in_tmp_dir: Path) -> None:
        assert load_config() == Config()

    def test_from_pyproject(self, in_tmp_dir: Path) -> None:
        path = in_tmp_dir / "pyproject.toml"
        path.write_text(
            "[tool.update-pypi-deps]\nrequests = 20\ntimeout = 15\nmax_retries = 0\n",
            encoding="utf-8",
        )

        config = load_config()

        assert config.requests == 20
        assert config.timeout == 15.0
        assert config.max_retries == 0
        assert config.source_path == path.resolve()

    def test_from_dedicated_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[update-pypi-deps]\nrequests = 3\n", encoding="utf-8")

        config = load_config(path)

        assert config.requests == 3
        assert config.source_path == path.resolve()

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("", encoding="utf-8")

        config = load_config(path)

        assert config.requests == 10
        assert config.source_path == path.resolve()

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('update-pypi-deps = "fast"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="must be a table"):
            load_config(path)


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml."""

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("requests = [", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML") as exc_info:
            _read_toml(path)

        assert exc_info.value.config_path == str(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            _read_toml(tmp_path)


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            _parse_section({"colour": True}, config_path="x")

    @pytest.mark.parametrize(
        "section,option",
        [
            ({"requests": "10"}, "requests"),
            ({"requests": True}, "requests"),
            ({"requests": 0}, "requests"),
            ({"timeout": "1"}, "timeout"),
            ({"timeout": 0}, "timeout"),
            ({"timeout": False}, "timeout"),
            ({"max_retries": -1}, "max_retries"),
            ({"max_retries": 1.5}, "max_retries"),
        ],
    )
    def test_invalid_values(self, section: dict, option: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="x")

        assert exc_info.value.option == option

    def test_timeout_is_float(self) -> None:
        config = _parse_section({"timeout": 5}, config_path="x")

        assert isinstance(config.timeout, float)
