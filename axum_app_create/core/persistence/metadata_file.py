"""
Generation metadata persistence — atomic read/write of the project record.

The record lives at ``<project>/.axum-app-create.json``.  Writes are
atomic (write to a temp file in the same directory, then rename) so a
crash mid-write never leaves a half-written record behind.

Unlike tool state, a missing or corrupt record is an error: without it
the update engine cannot tell generated files from user files.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import ValidationError

from axum_app_create.core.errors import (
    ConfigError,
    FileOperationError,
    MetadataCorruptError,
    MetadataNotFoundError,
)
from axum_app_create.core.models.metadata import GenerationMetadata
from axum_app_create.core.models.project import ProjectConfig

logger = logging.getLogger(__name__)

METADATA_FILE = ".axum-app-create.json"


def metadata_path(project_dir: Path) -> Path:
    return project_dir / METADATA_FILE


def serialize(metadata: GenerationMetadata) -> str:
    """Pretty-printed JSON, stable across round trips."""
    data = metadata.model_dump(mode="json")
    data["file_checksums"] = dict(sorted(data["file_checksums"].items()))
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def deserialize(text: str, path: Path | None = None) -> GenerationMetadata:
    """Parse a metadata record.

    Raises:
        MetadataCorruptError: Not JSON, or fails validation.
    """
    where = path or Path(METADATA_FILE)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataCorruptError(where, f"invalid JSON ({e})") from e
    try:
        return GenerationMetadata.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MetadataCorruptError(where, problems) from e


def _write_atomic(path: Path, content: str) -> None:
    try:
        _fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".aac_meta_",
            suffix=".tmp",
        )
    except OSError as e:
        raise FileOperationError(path, "write", e) from e

    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Metadata saved to %s", path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save metadata to %s: %s", path, e)
        raise FileOperationError(path, "write", e) from e


class MetadataManager:
    """Create, read and refresh a project's generation record."""

    @staticmethod
    def create(
        project_dir: Path,
        config: ProjectConfig,
        checksums: dict[str, str],
    ) -> GenerationMetadata:
        """Write the initial record for a freshly generated project.

        Raises:
            ConfigError: A record already exists.
        """
        path = metadata_path(project_dir)
        if path.exists():
            raise ConfigError(f"Generation metadata already exists: {path}")
        metadata = GenerationMetadata(config=config, file_checksums=dict(checksums))
        _write_atomic(path, serialize(metadata))
        logger.info("Created metadata for %s (%d files)", config.project_name, len(checksums))
        return metadata

    @staticmethod
    def read(project_dir: Path) -> GenerationMetadata:
        """Load the record.

        Raises:
            MetadataNotFoundError: No record.
            MetadataCorruptError: Record cannot be parsed.
        """
        path = metadata_path(project_dir)
        if not path.is_file():
            raise MetadataNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FileOperationError(path, "read", e) from e
        except UnicodeDecodeError as e:
            raise MetadataCorruptError(path, "not UTF-8 text") from e
        metadata = deserialize(text, path)
        logger.debug("Loaded metadata from %s (version=%s)", path, metadata.version)
        return metadata

    @classmethod
    def update(
        cls,
        project_dir: Path,
        checksums: dict[str, str],
        config: ProjectConfig | None = None,
    ) -> GenerationMetadata:
        """Replace checksums and stamp version/time; keep config unless given."""
        metadata = cls.read(project_dir)
        metadata.file_checksums = dict(checksums)
        if config is not None:
            metadata.config = config
        metadata.touch()
        _write_atomic(metadata_path(project_dir), serialize(metadata))
        logger.info("Updated metadata (%d files tracked)", len(checksums))
        return metadata
