"""
Project generator — render a resolved template set into a new project.

Steps:
    1. Refuse an existing target (unless forced)
    2. Resolve built-in + custom templates
    3. Render every template; empty output means "feature off, no file"
    4. Replace a forced target, write files in path order, set the
       execute bit where required
    5. ``git init`` (optional, never fatal)
    6. Checksum every written file and record the generation metadata

Rendering happens entirely before the first write, so a template error
never leaves a half-generated project behind.
"""

from __future__ import annotations

import logging
import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path

from axum_app_create.core.errors import FileOperationError, GenerationError
from axum_app_create.core.models.project import ProjectConfig
from axum_app_create.core.models.template import TemplateSet
from axum_app_create.core.persistence.metadata_file import MetadataManager
from axum_app_create.core.services import checksum
from axum_app_create.core.services.git_ops import init_git_repo
from axum_app_create.core.services.renderer import TemplateContext, TemplateRenderer
from axum_app_create.core.services.template_resolver import TemplateResolver

logger = logging.getLogger(__name__)


@dataclass
class RenderedFile:
    path: str
    content: str
    executable: bool = False


@dataclass
class GenerationResult:
    project_dir: Path
    files: list[str] = field(default_factory=list)
    skipped_empty: list[str] = field(default_factory=list)
    git_initialized: bool = False
    warnings: list[str] = field(default_factory=list)


def render_set(templates: TemplateSet, config: ProjectConfig) -> tuple[list[RenderedFile], list[str]]:
    """Render a template set with ``config``.

    Returns:
        (files with non-empty output in path order, output paths that rendered empty)
    """
    renderer = TemplateRenderer()
    context = TemplateContext.from_config(config).as_dict()
    files: list[RenderedFile] = []
    empty: list[str] = []
    for key in templates:
        template = templates[key]
        content = renderer.render(key, template.content, context)
        if not content.strip():
            empty.append(template.path)
            continue
        files.append(RenderedFile(template.path, content, template.executable))
    files.sort(key=lambda f: f.path)
    return files, sorted(empty)


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def write_file(project_dir: Path, relative: str, content: str, executable: bool = False) -> None:
    """Write one generated file (creating parents).

    Raises:
        FileOperationError: The write or chmod failed.
    """
    target = project_dir / relative
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content.encode("utf-8"))
        if executable:
            make_executable(target)
    except OSError as e:
        raise FileOperationError(target, "write", e) from e


def generate_project(
    project_dir: Path,
    config: ProjectConfig,
    force: bool = False,
    template_dir: Path | None = None,
    init_git: bool = True,
) -> GenerationResult:
    """Generate a new project at ``project_dir``.

    Raises:
        GenerationError: Target exists and ``force`` is off.
        TemplateDirError / TemplateError: Template resolution or rendering failed.
        FileOperationError: A write failed.
    """
    if project_dir.exists() and not force:
        raise GenerationError(
            f"Directory already exists: {project_dir} (use --force to overwrite)"
        )

    resolved = TemplateResolver(custom_dir=template_dir).resolve(config.mode, ci_enabled=config.ci)
    files, empty = render_set(resolved, config)

    result = GenerationResult(project_dir=project_dir, warnings=list(resolved.warnings))
    result.skipped_empty = empty

    try:
        if project_dir.exists():
            logger.info("Removing existing %s (forced)", project_dir)
            if project_dir.is_dir():
                shutil.rmtree(project_dir)
            else:
                project_dir.unlink()
        project_dir.mkdir(parents=True)
    except OSError as e:
        raise FileOperationError(project_dir, "create", e) from e
    for f in files:
        write_file(project_dir, f.path, f.content, f.executable)
        result.files.append(f.path)
    logger.info("Wrote %d files to %s", len(result.files), project_dir)

    if init_git:
        result.git_initialized = init_git_repo(project_dir)

    checksums = checksum.calculate_all(project_dir, result.files)
    MetadataManager.create(project_dir, config, checksums)
    return result
