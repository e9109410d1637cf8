"""
GenerationMetadata — the per-project bookkeeping record.

Serialized to ``.axum-app-create.json`` in the generated project root.
It records which tool version produced the project, with which
configuration, and the SHA-256 of every file it wrote.  The update
engine compares those checksums against the files on disk to tell
untouched files from user-edited ones.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from axum_app_create import __version__
from axum_app_create.core.models.project import ProjectConfig


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GenerationMetadata(BaseModel):
    """Root metadata model.

    Either the whole record is valid or the project is treated as not
    generated by this tool — there is no partial state.
    """

    version: str = __version__
    generated_at: datetime = Field(default_factory=_utcnow)
    config: ProjectConfig
    file_checksums: dict[str, str] = Field(default_factory=dict)

    def touch(self) -> None:
        """Stamp the current tool version and time."""
        self.version = __version__
        self.generated_at = _utcnow()
