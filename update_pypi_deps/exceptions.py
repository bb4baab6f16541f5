"""
Custom exception hierarchy for update-pypi-deps.

This module defines structured exception types used across the tool.
All exceptions inherit from :class:`UpdatePypiDepsError` and support
optional structured metadata via the ``details`` attribute to improve
diagnostics and logging.

Registry failures (:class:`NetworkError` and :class:`RegistryError`) are the
only errors recovered from locally: the resolver records them per package.
Every other error aborts the run.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class UpdatePypiDepsError(Exception):
    """Base exception for all update-pypi-deps errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class MalformedManifestError(UpdatePypiDepsError):
    """Raised when the manifest is not valid TOML or has the wrong shape.

    Args:
        message: Error description.
        file_path: Path to the manifest, if read from disk.
        section: Dotted name of the offending section.
    """

    __slots__ = ("file_path", "section")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        section: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        _add_if(details, "section", section)

        super().__init__(message, details)

        self.file_path = file_path
        self.section = section


class MissingSectionError(UpdatePypiDepsError):
    """Raised when a required manifest section is absent.

    Args:
        section: Dotted name of the missing section,
            e.g. ``project.dependencies``.
        file_path: Path to the manifest, if read from disk.
    """

    __slots__ = ("section", "file_path")

    def __init__(
        self,
        section: str,
        *,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)

        super().__init__(f"No such section: {section}", details)

        self.section = section
        self.file_path = file_path


class MalformedSpecifierError(UpdatePypiDepsError):
    """Raised when a single dependency string cannot be parsed.

    Args:
        reason: What is wrong with the specifier, e.g. ``missing version``.
        specifier: Raw specifier text, truncated for safety.
        group: Dependency group the specifier belongs to.
        index: Position of the specifier within its group.
    """

    __slots__ = ("reason", "specifier", "group", "index")

    def __init__(
        self,
        reason: str,
        *,
        specifier: Optional[str] = None,
        group: Optional[str] = None,
        index: Optional[int] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        if specifier is not None:
            details["specifier"] = repr(_truncate(specifier))
        _add_if(details, "group", group)
        _add_if(details, "index", index)

        super().__init__(f"Malformed dependency specifier: {reason}", details)

        self.reason = reason
        self.specifier = specifier
        self.group = group
        self.index = index


class NetworkError(UpdatePypiDepsError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RegistryError(NetworkError):
    """Raised for failures looking a package up on the registry.

    Args:
        message: Error description.
        package_name: Name of the package involved.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class UnresolvedDependencyError(UpdatePypiDepsError):
    """Raised when a dependency has no resolved version at update time.

    Args:
        name: Package name as written in the manifest.
        group: Dependency group the package was found in.
    """

    __slots__ = ("name", "group")

    def __init__(self, name: str, *, group: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "group", group)

        super().__init__(f"No resolved version for '{name}'", details)

        self.name = name
        self.group = group


class FileOperationError(UpdatePypiDepsError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/validate).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(UpdatePypiDepsError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
