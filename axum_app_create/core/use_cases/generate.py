"""
Generate use case — create a new project from CLI-level options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from axum_app_create.core.config.loader import load_user_config, resolve_template_dir
from axum_app_create.core.errors import ScaffoldError
from axum_app_create.core.models.project import FeatureSet, LoggingConfig, ProjectConfig
from axum_app_create.core.services.generator import generate_project
from axum_app_create.core.services.git_ops import git_user_name
from axum_app_create.core.services.renderer import DEFAULT_AUTHOR


@dataclass
class GenerateResult:
    """Result of project generation."""

    project_dir: Path | None = None
    config: ProjectConfig | None = None
    template_dir: Path | None = None
    files: list[str] = field(default_factory=list)
    skipped_empty: list[str] = field(default_factory=list)
    git_initialized: bool = False
    warnings: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "project_dir": str(self.project_dir) if self.project_dir else None,
            "config": self.config.model_dump(mode="json") if self.config else None,
            "template_dir": str(self.template_dir) if self.template_dir else None,
            "files": self.files,
            "file_count": len(self.files),
            "skipped_empty": self.skipped_empty,
            "git_initialized": self.git_initialized,
            "warnings": self.warnings,
            "error": self.error,
        }


def build_config(
    name: str,
    mode: str = "single",
    ci: bool = False,
    database: str = "none",
    auth: bool = False,
    biz_error: bool = False,
    log_level: str | None = "info",
    author: str | None = None,
    description: str | None = None,
) -> ProjectConfig:
    """Assemble a ProjectConfig from CLI options.

    ``log_level=None`` turns logging off.  A missing author falls back
    to git's ``user.name``, then to a placeholder, and is stored so
    later updates render the same text.

    Raises:
        ValidationError: Invalid name or option value.
    """
    features = FeatureSet(
        database=database,
        authentication=auth,
        logging=log_level is not None,
        biz_error=biz_error,
    )
    data: dict = {
        "project_name": name,
        "mode": mode,
        "ci": ci,
        "features": features,
        "author_name": author or git_user_name() or DEFAULT_AUTHOR,
    }
    if description:
        data["description"] = description
    if log_level is not None:
        data["logging"] = LoggingConfig(default_level=log_level)
    return ProjectConfig.model_validate(data)


def run_generate(
    name: str,
    parent_dir: Path | None = None,
    force: bool = False,
    template_dir: Path | None = None,
    init_git: bool = True,
    **options,
) -> GenerateResult:
    """Create project ``name`` under ``parent_dir`` (default: cwd).

    Args:
        name: Project (crate) name; also the directory name.
        parent_dir: Where to create the project.
        force: Replace an existing directory.
        template_dir: Custom template directory (overrides the user config).
        init_git: Run ``git init`` in the new project.
        **options: Forwarded to ``build_config``.
    """
    result = GenerateResult()

    try:
        config = build_config(name, **options)
    except ValidationError as e:
        result.error = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        return result
    result.config = config

    result.template_dir = resolve_template_dir(template_dir, load_user_config())
    project_dir = (parent_dir or Path.cwd()) / name
    result.project_dir = project_dir

    try:
        generated = generate_project(
            project_dir,
            config,
            force=force,
            template_dir=result.template_dir,
            init_git=init_git,
        )
    except ScaffoldError as e:
        result.error = str(e)
        return result

    result.files = generated.files
    result.skipped_empty = generated.skipped_empty
    result.git_initialized = generated.git_initialized
    result.warnings = generated.warnings
    return result
