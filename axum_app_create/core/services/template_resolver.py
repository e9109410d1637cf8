"""
Template resolver — build the final template set for one generation.

Resolution order:

    1. Built-in templates for the mode (+ CI addenda when enabled)
    2. Custom templates overlaid on top: same key replaces, new key adds
    3. Custom entries that ``extends`` a built-in are merged block-wise

Bases are always looked up in the built-in set, so a custom template
can never extend another custom template.  Every error surfaces before
anything is written to disk.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from axum_app_create.core.data import TemplateCatalog, get_catalog
from axum_app_create.core.errors import TemplateError
from axum_app_create.core.models.template import ResolvedTemplate, TemplateSet, output_path
from axum_app_create.core.services import inheritance, template_loader

logger = logging.getLogger(__name__)


def merge_template_sets(builtin: Mapping[str, str], custom: Mapping[str, str]) -> dict[str, str]:
    """Union of two raw template maps; custom wins on a shared key."""
    merged = dict(builtin)
    merged.update(custom)
    return {key: merged[key] for key in sorted(merged)}


class TemplateResolver:
    """Resolve built-in + custom templates into a ``TemplateSet``.

    Args:
        custom_dir: Optional user template directory.
        catalog: Built-in catalog (defaults to the process-level one).
    """

    def __init__(
        self,
        custom_dir: Path | None = None,
        catalog: TemplateCatalog | None = None,
    ) -> None:
        self.custom_dir = custom_dir
        self.catalog = catalog or get_catalog()

    def load_custom(self) -> dict[str, str]:
        if self.custom_dir is None:
            return {}
        return template_loader.load(self.custom_dir)

    def resolve(self, mode: str, ci_enabled: bool = False) -> TemplateSet:
        """Resolve the template set for ``mode``.

        Raises:
            TemplateDirError: The custom directory is missing.
            TemplateError: A custom template extends a base that doesn't exist.
            ValueError: Unknown mode.
        """
        builtin = self.catalog.builtin(mode, ci_enabled=ci_enabled)
        custom = self.load_custom()
        merged = merge_template_sets(builtin, custom)

        warnings: list[str] = []
        resolved: dict[str, ResolvedTemplate] = {}

        for key, raw in merged.items():
            if key not in custom:
                resolved[key] = ResolvedTemplate(
                    path=output_path(key),
                    content=raw,
                    executable=self.catalog.is_executable(key),
                    source="builtin",
                )
                continue

            directive = inheritance.parse_directive(raw)
            if directive.extends:
                base = builtin.get(directive.base_path)
                if base is None:
                    raise TemplateError(
                        f"Template '{key}' extends '{directive.base_path}', "
                        "which is not a built-in template",
                        child=key,
                        base=directive.base_path,
                    )
                before = len(warnings)
                content = inheritance.apply_inheritance(base, directive.overrides, warnings)
                for i in range(before, len(warnings)):
                    warnings[i] = f"{key}: {warnings[i]}"
                source = "inherited"
            else:
                content = raw
                source = "custom"

            if key in builtin:
                logger.debug("Custom template overrides built-in %s", key)
            resolved[key] = ResolvedTemplate(
                path=output_path(key),
                content=content,
                executable=self.catalog.is_executable(key),
                source=source,
            )

        logger.info(
            "Resolved %d templates for mode=%s ci=%s (%d custom)",
            len(resolved), mode, ci_enabled, len(custom),
        )
        return TemplateSet(resolved, warnings)
