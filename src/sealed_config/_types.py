"""Foundation types for sealed-config.

Provides the ``UNSET`` sentinel, the exception hierarchy shared by every
layer, and the ``PersistenceMode`` flag used by ``ConfigManager``.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Unset:
    """Sentinel for an attribute that does not exist (distinct from ``None``)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


class PersistenceMode(str, Enum):
    """How a configuration document is protected on disk."""

    plain = "plain"
    whole_document = "whole_document"
    selective = "selective"

    @property
    def encrypts(self) -> bool:
        return self is not PersistenceMode.plain


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base exception for sealed-config errors."""


class ConfigInputError(ConfigError, ValueError):
    """Raised for invalid arguments (empty path, ``None`` instance, ...)."""


class ConfigReadError(ConfigError):
    """Raised when a configuration file cannot be read."""

    def __init__(self, path: str | None, message: str) -> None:
        self.path = path
        super().__init__(f"Error reading config file '{path}': {message}")


class ConfigWriteError(ConfigError):
    """Raised when a configuration file cannot be written."""

    def __init__(self, path: str | None, message: str) -> None:
        self.path = path
        super().__init__(f"Error writing config file '{path}': {message}")


class ConfigParseError(ConfigError):
    """Raised when a document is malformed or does not fit the model."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        self.detail = message
        if path is None:
            super().__init__(f"Invalid configuration document: {message}")
        else:
            super().__init__(f"Invalid configuration document '{path}': {message}")

    def with_path(self, path: str) -> "ConfigParseError":
        """Return a copy of this error that names *path*."""
        if self.path is not None:
            return self
        return ConfigParseError(self.detail, path=path)


class EncryptionError(ConfigError):
    """Raised when encryption or decryption fails.

    Wrong passwords and corrupted packets are deliberately indistinguishable.
    """

    def __init__(self, operation: str, message: str, field: str | None = None) -> None:
        self.operation = operation
        self.field = field
        if field is None:
            super().__init__(f"Error during {operation}: {message}")
        else:
            super().__init__(f"Error during {operation} of field '{field}': {message}")


class ConfigValidationError(ConfigError):
    """Raised when a required field is not populated."""

    def __init__(self, field: str, message: str = "required value is missing") -> None:
        self.field = field
        super().__init__(f"Validation error for field '{field}': {message}")


class PolicyError(ConfigError):
    """Raised when a field policy cannot be applied to the document."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid policy for field '{field}': {message}")
