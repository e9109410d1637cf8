"""
Error taxonomy — every failure the core can raise.

The core never formats human-facing text beyond a one-line message;
the CLI layer maps these types to guidance and exit codes.
"""

from __future__ import annotations

import errno
from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all axum-app-create errors."""


# ── Configuration ───────────────────────────────────────────────


class ConfigError(ScaffoldError):
    """Raised when input to a resolution/update operation is invalid or missing."""


class TemplateDirError(ConfigError):
    """The custom template directory does not exist or is not a directory."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class MetadataNotFoundError(ConfigError):
    """The project has no metadata record — it was not generated by this tool."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"No generation metadata at {path}: this project was not generated by axum-app-create"
        )
        self.path = path


class MetadataCorruptError(ConfigError):
    """The metadata record exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt generation metadata at {path}: {reason}")
        self.path = path
        self.reason = reason


# ── Templates ───────────────────────────────────────────────────


class TemplateError(ScaffoldError):
    """Structural problem in template content."""

    def __init__(self, message: str, child: str | None = None, base: str | None = None) -> None:
        super().__init__(message)
        self.child = child
        self.base = base


# ── Filesystem ──────────────────────────────────────────────────


class FileOperationError(ScaffoldError):
    """A filesystem read/write/hash failed. Carries the offending path."""

    def __init__(self, path: Path | str, operation: str, cause: OSError) -> None:
        self.path = str(path)
        self.operation = operation
        self.kind = _error_kind(cause)
        super().__init__(f"Cannot {operation} {self.path} ({self.kind}): {cause.strerror or cause}")
        self.__cause__ = cause


def _error_kind(exc: OSError) -> str:
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return "missing"
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return "permission"
    return "other"


# ── Generation ──────────────────────────────────────────────────


class GenerationError(ScaffoldError):
    """Project generation cannot proceed (e.g. target directory exists)."""
