"""Exception hierarchy for nostradiffmus collaborators."""

from __future__ import annotations


class NostradiffmusError(RuntimeError):
    """Base class for failures surfaced to the CLI and service."""


class ConfigError(NostradiffmusError):
    """Raised when a configuration file cannot be parsed or is invalid."""


class DiffUnavailableError(NostradiffmusError):
    """Raised when no diff text could be obtained from git."""


class DiffTooLargeError(NostradiffmusError):
    """Raised when the diff exceeds the configured hard size limit."""


class CommandTimeoutError(NostradiffmusError):
    """Raised when an external command is killed after its timeout."""


class HookError(NostradiffmusError):
    """Raised when a git hook cannot be installed or removed."""


__all__ = [
    "CommandTimeoutError",
    "ConfigError",
    "DiffTooLargeError",
    "DiffUnavailableError",
    "HookError",
    "NostradiffmusError",
]
