"""
Checksums — SHA-256 fingerprints of generated files.

A cryptographic hash rather than a cheap one: the stored digest is
what tells an untouched generated file from a user-edited one.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from pathlib import Path

from axum_app_create.core.errors import FileOperationError


def calculate(content: bytes) -> str:
    """Lowercase hex SHA-256 of ``content``."""
    return hashlib.sha256(content).hexdigest()


def calculate_file(path: Path) -> str:
    """Checksum of a file's full content."""
    try:
        return calculate(path.read_bytes())
    except OSError as e:
        raise FileOperationError(path, "read", e) from e


def calculate_all(root: Path, relative_paths: Iterable[str]) -> dict[str, str]:
    """Checksum every listed file under ``root``.

    Raises:
        FileOperationError: If any listed file is missing or unreadable.
            Nothing is skipped silently.
    """
    return {rel: calculate_file(root / rel) for rel in sorted(relative_paths)}
