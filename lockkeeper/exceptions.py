"""
Custom exception hierarchy for lockkeeper.

This module defines structured exception types used across lockkeeper.
All exceptions inherit from :class:`LockKeeperError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Only failures that stop an extraction run are modelled here. Expected
conditions (untrackable requirements, unresolved versions, flat manifests)
are handled by leaving the dependency out of the result.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class LockKeeperError(Exception):
    """Base exception for all lockkeeper errors.

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


class MissingRequiredFile(LockKeeperError):
    """Raised when no manifest is available to extract from.

    Args:
        file_name: Name of the file that was expected.
    """

    __slots__ = ("file_name",)

    def __init__(self, file_name: str) -> None:
        super().__init__(f"No {file_name}!", {"file": file_name})
        self.file_name = file_name


class DependencyFileNotParseable(LockKeeperError):
    """Raised when a manifest or lockfile is not valid structured data.

    Args:
        file_name: Name of the offending dependency file.
        message: Optional description of the decoding failure.
    """

    __slots__ = ("file_name",)

    def __init__(self, file_name: str, message: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {"file": file_name}
        _add_if(details, "reason", _truncate(message) if message else None)
        super().__init__(f"Dependency file not parseable: {file_name}", details)
        self.file_name = file_name


class DependencyFileNotEvaluatable(LockKeeperError):
    """Raised when dependency files are well formed but cannot be resolved.

    Typical cause: a yarn workspace depends on private packages that the
    lockfile helper cannot reach.
    """


class HelperSubprocessFailed(LockKeeperError):
    """Raised when the external lockfile helper reports a failure.

    Args:
        message: Error message reported by the helper. Callers compare it
            against known sentinel values, so it is kept verbatim.
        error_context: Command, function and arguments of the failed call.
    """

    __slots__ = ("error_context",)

    def __init__(
        self,
        message: str,
        *,
        error_context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message, error_context)
        self.error_context = dict(error_context) if error_context else {}


class FileOperationError(LockKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/collect).
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


class ConfigError(LockKeeperError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
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
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
