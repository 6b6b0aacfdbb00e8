"""Exception taxonomy for the documentation pipeline.

Only :class:`NotFound` and :class:`ConfigError` escape the orchestrator.
:class:`ParseError` is turned into a per-file warning, and
:class:`MalformedInput` never leaves the route normalizer.
"""

from __future__ import annotations

from pathlib import Path


class StorydocError(Exception):
    """Base class for all storydoc errors."""


class NotFound(StorydocError, FileNotFoundError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path: Path | str) -> None:
        self.path = str(path)
        super().__init__(f"Scan root not found or not a directory: {self.path}")


class ParseError(StorydocError):
    """A single source file could not be parsed or read."""

    def __init__(self, path: Path | str, cause: str) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")

    @classmethod
    def timeout(cls, path: Path | str, seconds: float) -> "ParseError":
        return cls(path, f"timeout: extraction exceeded {seconds:g}s")


class MalformedInput(StorydocError, ValueError):
    """A path did not have the shape the route normalizer expects."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigError(StorydocError):
    """The configuration file is unreadable or invalid."""
