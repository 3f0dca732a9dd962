"""Zeno exception hierarchy.

All Zeno-specific exceptions inherit from ZenoError.
"""


class ZenoError(Exception):
    """Base exception for all Zeno errors."""


class ConfigError(ZenoError):
    """Raised when no usable configuration is available (e.g., no API key)."""


class StorageError(ZenoError):
    """Raised when a config or transcript file cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class TranscriptError(ZenoError):
    """Raised when a persisted transcript cannot be loaded.

    The file is left untouched so history is never silently overwritten.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid transcript file {path}: {reason}")


class OrchestratorError(ZenoError):
    """Raised when the orchestrator encounters an unrecoverable error."""
