"""
Update engine — re-apply current templates to an existing project.

For every path the templates produce (plus every path the metadata
tracks) the engine compares three things:

    current   what's on disk now
    new       what the templates render to today
    stored    the checksum recorded when the file was last written

and classifies the file::

    absent,  untracked          → CREATE
    absent,  tracked            → RECREATE     (user deleted it)
    current == new              → SKIP
    sha256(current) == stored   → AUTO_UPDATE  (user never touched it)
    anything else               → CONFLICT     (user edited it)

Classification is pure.  What happens next depends on the run mode:
``dry_run`` writes nothing, ``force`` overwrites conflicts, and an
interactive ``ConflictResolver`` lets the user decide per file.
"""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Protocol

from axum_app_create.core.errors import FileOperationError
from axum_app_create.core.models.update import ConflictChoice, FileClassification, UpdateReport
from axum_app_create.core.persistence.metadata_file import MetadataManager
from axum_app_create.core.services import checksum
from axum_app_create.core.services.generator import RenderedFile, render_set, write_file
from axum_app_create.core.services.template_resolver import TemplateResolver

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Classification
# ═══════════════════════════════════════════════════════════════════


def classify_file(
    current: bytes | None,
    new: bytes,
    stored_checksum: str | None,
    tracked: bool | None = None,
) -> FileClassification:
    """Classify one file.

    Args:
        current: Bytes on disk, or None if the file doesn't exist.
        new: Freshly rendered bytes.
        stored_checksum: Checksum from the metadata record, if tracked.
        tracked: Whether the metadata lists the path.  Defaults to
            ``stored_checksum is not None``.
    """
    if tracked is None:
        tracked = stored_checksum is not None
    if current is None:
        return FileClassification.RECREATE if tracked else FileClassification.CREATE
    if current == new:
        return FileClassification.SKIP
    if stored_checksum is not None and checksum.calculate(current) == stored_checksum:
        return FileClassification.AUTO_UPDATE
    return FileClassification.CONFLICT


def unified_diff(path: str, current: str, new: str) -> str:
    """Unified diff from the on-disk file to the template output."""
    return "".join(difflib.unified_diff(
        current.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=f"{path} (current)",
        tofile=f"{path} (template)",
    ))


class ConflictResolver(Protocol):
    """Interactive decisions during an update (the CLI implements this)."""

    def choose(self, path: str) -> ConflictChoice: ...

    def show_diff(self, path: str, diff: str) -> None: ...

    def notify(self, message: str) -> None: ...


# ═══════════════════════════════════════════════════════════════════
#  Engine
# ═══════════════════════════════════════════════════════════════════


class UpdateEngine:
    """Reconcile a generated project with the current templates.

    Args:
        project_dir: Root of a project generated by this tool.
        dry_run: Report what would happen; write nothing.
        force: Overwrite conflicting files.
        template_dir: Custom template directory.
        resolver: Template resolver (defaults to one over ``template_dir``).
        conflict_resolver: Interactive conflict handler; None means
            non-interactive (conflicts are reported, not touched).
    """

    def __init__(
        self,
        project_dir: Path,
        dry_run: bool = False,
        force: bool = False,
        template_dir: Path | None = None,
        resolver: TemplateResolver | None = None,
        conflict_resolver: ConflictResolver | None = None,
    ) -> None:
        self.project_dir = project_dir
        self.dry_run = dry_run
        self.force = force
        self.resolver = resolver or TemplateResolver(custom_dir=template_dir)
        self.conflict_resolver = conflict_resolver

    @property
    def interactive(self) -> bool:
        return self.conflict_resolver is not None and not self.dry_run

    def run(self) -> UpdateReport:
        """Run the update.

        Raises:
            MetadataNotFoundError / MetadataCorruptError: No usable record.
            TemplateDirError / TemplateError: Resolution or rendering failed.
            FileOperationError: The metadata could not be rewritten.
        """
        metadata = MetadataManager.read(self.project_dir)
        config = metadata.config

        resolved = self.resolver.resolve(config.mode, ci_enabled=config.ci)
        files, empty = render_set(resolved, config)
        rendered: dict[str, RenderedFile] = {f.path: f for f in files}

        report = UpdateReport(dry_run=self.dry_run)
        report.notices.extend(resolved.warnings)
        stored = metadata.file_checksums

        for path in sorted(set(rendered) | set(stored)):
            if path not in rendered:
                # Tracked, but no longer produced (feature off or template removed)
                report.skipped.append(path)
                logger.debug("%s is no longer produced by the templates%s", path,
                             " (renders empty)" if path in empty else "")
                continue
            try:
                self._process(path, rendered[path], stored.get(path), path in stored, report)
            except FileOperationError as e:
                logger.error("Update of %s failed: %s", path, e)
                report.failed[path] = str(e)

        written = report.written
        if written and not self.dry_run:
            checksums = dict(stored)
            for path in written:
                checksums[path] = checksum.calculate(rendered[path].content.encode("utf-8"))
            MetadataManager.update(self.project_dir, checksums)
            report.metadata_updated = True

        logger.info(
            "Update %s: %d created, %d updated, %d skipped, %d conflicted, %d failed",
            "preview" if self.dry_run else "done",
            len(report.created), len(report.updated), len(report.skipped),
            len(report.conflicted), len(report.failed),
        )
        return report

    # ── Per-file handling ───────────────────────────────────────

    def _read_current(self, path: str) -> bytes | None:
        target = self.project_dir / path
        if not target.exists():
            return None
        try:
            return target.read_bytes()
        except OSError as e:
            raise FileOperationError(target, "read", e) from e

    def _write(self, rendered: RenderedFile) -> None:
        if self.dry_run:
            return
        write_file(self.project_dir, rendered.path, rendered.content, rendered.executable)

    def _process(
        self,
        path: str,
        rendered: RenderedFile,
        stored_checksum: str | None,
        tracked: bool,
        report: UpdateReport,
    ) -> None:
        current = self._read_current(path)
        new = rendered.content.encode("utf-8")
        kind = classify_file(current, new, stored_checksum, tracked)
        logger.debug("%s → %s", path, kind.value)

        if kind in (FileClassification.CREATE, FileClassification.RECREATE):
            self._write(rendered)
            report.created.append(path)
            if kind is FileClassification.RECREATE:
                message = f"Recreated deleted file: {path}"
                report.notices.append(message)
                if self.interactive:
                    self.conflict_resolver.notify(message)
        elif kind is FileClassification.SKIP:
            report.skipped.append(path)
        elif kind is FileClassification.AUTO_UPDATE:
            self._write(rendered)
            report.updated.append(path)
        elif self.force:
            self._write(rendered)
            report.updated.append(path)
        elif self.interactive:
            if self._ask(path, current, rendered.content) is ConflictChoice.OVERWRITE:
                self._write(rendered)
                report.updated.append(path)
            else:
                report.skipped.append(path)
        else:
            report.conflicted.append(path)

    def _ask(self, path: str, current: bytes | None, new: str) -> ConflictChoice:
        """Ask until the user picks overwrite or skip."""
        while True:
            choice = self.conflict_resolver.choose(path)
            if choice is not ConflictChoice.VIEW_DIFF:
                return choice
            old = (current or b"").decode("utf-8", errors="replace")
            self.conflict_resolver.show_diff(path, unified_diff(path, old, new))

