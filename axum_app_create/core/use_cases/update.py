"""
Update use case — reconcile an existing project with the current templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from axum_app_create.core.config.loader import load_user_config, resolve_template_dir
from axum_app_create.core.errors import ScaffoldError
from axum_app_create.core.models.update import UpdateReport
from axum_app_create.core.services.update_engine import ConflictResolver, UpdateEngine


@dataclass
class UpdateResult:
    """Result of an update run."""

    project_dir: Path | None = None
    template_dir: Path | None = None
    report: UpdateReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and (self.report is None or self.report.ok)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "project_dir": str(self.project_dir) if self.project_dir else None,
            "template_dir": str(self.template_dir) if self.template_dir else None,
            "report": self.report.to_dict() if self.report else None,
            "error": self.error,
        }


def run_update(
    project_dir: Path | None = None,
    dry_run: bool = False,
    force: bool = False,
    template_dir: Path | None = None,
    conflict_resolver: ConflictResolver | None = None,
) -> UpdateResult:
    """Update the project at ``project_dir`` (default: cwd).

    Args:
        conflict_resolver: Interactive handler; None runs non-interactively.
    """
    result = UpdateResult(project_dir=(project_dir or Path.cwd()).resolve())
    result.template_dir = resolve_template_dir(template_dir, load_user_config())

    engine = UpdateEngine(
        result.project_dir,
        dry_run=dry_run,
        force=force,
        template_dir=result.template_dir,
        conflict_resolver=conflict_resolver,
    )
    try:
        result.report = engine.run()
    except ScaffoldError as e:
        result.error = str(e)
    return result
