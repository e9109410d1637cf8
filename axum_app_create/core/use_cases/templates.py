"""
Template use cases — export the built-ins, list a resolved set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from axum_app_create.core.config.loader import load_user_config, resolve_template_dir
from axum_app_create.core.errors import ScaffoldError
from axum_app_create.core.models.template import TemplateSet
from axum_app_create.core.services import template_export
from axum_app_create.core.services.template_resolver import TemplateResolver


@dataclass
class ExportResult:
    output_dir: Path | None = None
    mode: str = "single"
    files: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "mode": self.mode,
            "files": self.files,
            "error": self.error,
        }


@dataclass
class ListResult:
    mode: str = "single"
    ci: bool = False
    template_dir: Path | None = None
    templates: TemplateSet | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "mode": self.mode,
            "ci": self.ci,
            "template_dir": str(self.template_dir) if self.template_dir else None,
            "error": self.error,
        }
        if self.templates is not None:
            data.update(self.templates.to_dict())
        return data


def run_export(
    output_dir: Path,
    mode: str = "single",
    include_ci: bool = True,
    overwrite: bool = False,
) -> ExportResult:
    """Export raw built-in templates for ``mode`` to ``output_dir``."""
    result = ExportResult(output_dir=output_dir, mode=mode)
    try:
        result.files = template_export.export(
            mode, output_dir, include_ci=include_ci, overwrite=overwrite,
        )
    except ScaffoldError as e:
        result.error = str(e)
    return result


def list_templates(
    mode: str = "single",
    ci: bool = False,
    template_dir: Path | None = None,
) -> ListResult:
    """Resolve (without rendering) and report where each template comes from."""
    result = ListResult(mode=mode, ci=ci)
    result.template_dir = resolve_template_dir(template_dir, load_user_config())
    try:
        result.templates = TemplateResolver(custom_dir=result.template_dir).resolve(mode, ci_enabled=ci)
    except ScaffoldError as e:
        result.error = str(e)
    return result
