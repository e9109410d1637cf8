"""
Built-in template catalog — the templates shipped with the tool.

Template files live under ``core/data/templates/``:

    shared/     files every mode gets (.gitignore, README, ...)
    single/     single-crate layout
    workspace/  multi-crate workspace layout
    ci/         cross-mode CI addenda (only when CI is enabled)

A mode's set is ``shared`` overlaid with the mode directory.  Each
directory is read once, on first access, and cached as a read-only
mapping for the process lifetime.

Usage::

    from axum_app_create.core.data import get_catalog

    catalog = get_catalog()
    templates = catalog.builtin("single", ci_enabled=True)  # key → raw text
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import cached_property
from pathlib import Path
from types import MappingProxyType

from axum_app_create.core.models.project import PROJECT_MODES
from axum_app_create.core.models.template import TEMPLATE_SUFFIX

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"

# Generated files that must carry the execute bit
EXECUTABLE_TEMPLATES = frozenset({
    "scripts/dev.sh.tmpl",
})


def _load_dir(directory: Path) -> Mapping[str, str]:
    """Read every template under ``directory`` into a read-only mapping."""
    if not directory.is_dir():
        logger.warning("Built-in template directory missing: %s", directory)
        return MappingProxyType({})
    templates: dict[str, str] = {}
    for path in sorted(directory.rglob(f"*{TEMPLATE_SUFFIX}")):
        if path.is_file():
            key = path.relative_to(directory).as_posix()
            templates[key] = path.read_bytes().decode("utf-8")
    return MappingProxyType(templates)


class TemplateCatalog:
    """Lazily loaded, immutable view of the built-in templates."""

    def __init__(self, root: Path = _TEMPLATES_DIR) -> None:
        self.root = root

    @cached_property
    def shared(self) -> Mapping[str, str]:
        data = _load_dir(self.root / "shared")
        logger.debug("Loaded %d shared templates", len(data))
        return data

    @cached_property
    def ci(self) -> Mapping[str, str]:
        data = _load_dir(self.root / "ci")
        logger.debug("Loaded %d CI templates", len(data))
        return data

    @cached_property
    def _modes(self) -> Mapping[str, Mapping[str, str]]:
        modes: dict[str, Mapping[str, str]] = {}
        for mode in PROJECT_MODES:
            merged = {**self.shared, **_load_dir(self.root / mode)}
            modes[mode] = MappingProxyType(dict(sorted(merged.items())))
            logger.debug("Loaded %d templates for mode '%s'", len(merged), mode)
        return MappingProxyType(modes)

    def mode_templates(self, mode: str) -> Mapping[str, str]:
        """All built-in templates for a project mode (without CI)."""
        try:
            return self._modes[mode]
        except KeyError:
            raise ValueError(
                f"Unknown project mode '{mode}'. Valid: {', '.join(PROJECT_MODES)}"
            ) from None

    def builtin(self, mode: str, ci_enabled: bool = False) -> dict[str, str]:
        """Mode templates, plus the CI addenda when enabled.

        CI keys live under their own directories (``.github/``) so the
        union never collides with mode keys.
        """
        templates = dict(self.mode_templates(mode))
        if ci_enabled:
            clashes = set(templates) & set(self.ci)
            if clashes:
                logger.warning("CI templates shadow mode templates: %s", ", ".join(sorted(clashes)))
            templates.update(self.ci)
        return templates

    def export_set(self, mode: str, include_ci: bool = True) -> dict[str, str]:
        """Raw templates as written by ``templates export``."""
        return self.builtin(mode, ci_enabled=include_ci)

    @staticmethod
    def is_executable(key: str) -> bool:
        return key in EXECUTABLE_TEMPLATES


# ── Module-level singleton ───────────────────────────────────────

_catalog: TemplateCatalog | None = None


def get_catalog() -> TemplateCatalog:
    """Return the process-level TemplateCatalog, creating it on first call."""
    global _catalog  # noqa: PLW0603
    if _catalog is None:
        _catalog = TemplateCatalog()
    return _catalog
