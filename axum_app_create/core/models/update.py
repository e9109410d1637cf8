"""
Update models — per-file classification and the run summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileClassification(str, Enum):
    """How a single file relates to the freshly rendered templates.

    Classification depends only on file contents and stored checksums,
    never on the dry-run/force flags — those decide the action.
    """

    CREATE = "create"            # not on disk, not tracked
    RECREATE = "recreate"        # tracked, but deleted by the user
    SKIP = "skip"                # disk content already equals the new content
    AUTO_UPDATE = "auto_update"  # differs, but the user never touched it
    CONFLICT = "conflict"        # differs, and the user edited it (or it's untracked)


class ConflictChoice(str, Enum):
    OVERWRITE = "overwrite"
    SKIP = "skip"
    VIEW_DIFF = "diff"


@dataclass
class UpdateReport:
    """Summary of one update run.

    Every considered path lands in exactly one of created / updated /
    skipped / conflicted / failed.
    """

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    conflicted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    notices: list[str] = field(default_factory=list)
    dry_run: bool = False
    metadata_updated: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def written(self) -> list[str]:
        """Paths whose bytes were (or in dry-run, would be) replaced."""
        return sorted(self.created + self.updated)

    @property
    def total(self) -> int:
        return (
            len(self.created)
            + len(self.updated)
            + len(self.skipped)
            + len(self.conflicted)
            + len(self.failed)
        )

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "conflicted": self.conflicted,
            "failed": self.failed,
            "notices": self.notices,
            "dry_run": self.dry_run,
            "metadata_updated": self.metadata_updated,
            "ok": self.ok,
        }
