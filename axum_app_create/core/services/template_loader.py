"""
Custom template loader — read a user's template directory into memory.

Every regular ``*.tmpl`` file below the directory becomes one entry,
keyed by its forward-slash path relative to the directory.  Keys keep
the ``.tmpl`` suffix so they line up with the built-in catalog keys.

The walk itself is behind a tiny ``FileProvider`` protocol so tests
can feed a dict instead of a real directory tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Protocol

from axum_app_create.core.errors import FileOperationError, TemplateDirError, TemplateError
from axum_app_create.core.models.template import TEMPLATE_SUFFIX

logger = logging.getLogger(__name__)


class FileProvider(Protocol):
    """Anything that can enumerate (relative_path, text) pairs."""

    def walk(self) -> Iterator[tuple[str, str]]: ...


class DirectoryProvider:
    """FileProvider over a real directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def walk(self) -> Iterator[tuple[str, str]]:
        for path in sorted(self.root.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(self.root).as_posix()
            if not is_template_file(relative):
                logger.debug("Ignoring non-template file %s", relative)
                continue
            try:
                # bytes → str without newline translation: export/reload is byte-exact
                text = path.read_bytes().decode("utf-8")
            except OSError as e:
                raise FileOperationError(path, "read", e) from e
            except UnicodeDecodeError as e:
                raise TemplateError(f"Template is not valid UTF-8: {path}", child=relative) from e
            yield relative, text


class MemoryProvider:
    """FileProvider over an in-memory mapping (tests, previews)."""

    def __init__(self, files: Mapping[str, str]) -> None:
        self.files = dict(files)

    def walk(self) -> Iterator[tuple[str, str]]:
        for relative in sorted(self.files):
            yield relative.replace("\\", "/"), self.files[relative]


def is_template_file(relative_path: str) -> bool:
    return relative_path.endswith(TEMPLATE_SUFFIX) and len(relative_path) > len(TEMPLATE_SUFFIX)


def load_from(provider: FileProvider) -> dict[str, str]:
    """Collect template entries from a provider, ordered by key."""
    templates: dict[str, str] = {}
    for relative, text in provider.walk():
        if not is_template_file(relative):
            continue
        templates[relative] = text
    return {key: templates[key] for key in sorted(templates)}


def load(directory: Path) -> dict[str, str]:
    """Load custom templates from ``directory``.

    Returns:
        Mapping of relative template key → raw template text. An empty
        directory yields an empty mapping.

    Raises:
        TemplateDirError: If the directory doesn't exist or is a file.
    """
    if not directory.exists():
        raise TemplateDirError(f"Custom template directory does not exist: {directory}", directory)
    if not directory.is_dir():
        raise TemplateDirError(f"Custom template path is not a directory: {directory}", directory)

    templates = load_from(DirectoryProvider(directory))
    logger.info("Loaded %d custom templates from %s", len(templates), directory)
    return templates
