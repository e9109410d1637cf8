"""
Template exporter — dump the raw built-in templates to a directory.

The exported tree is a ready-made starting point for a custom template
directory: each file is written under its template key, byte-for-byte,
so loading it back yields exactly the built-in set.
"""

from __future__ import annotations

import logging
from pathlib import Path

from axum_app_create.core.data import TemplateCatalog, get_catalog
from axum_app_create.core.errors import ConfigError, FileOperationError

logger = logging.getLogger(__name__)


def is_empty_dir(path: Path) -> bool:
    return path.is_dir() and not any(path.iterdir())


def export(
    mode: str,
    output_dir: Path,
    include_ci: bool = True,
    overwrite: bool = False,
    catalog: TemplateCatalog | None = None,
) -> list[str]:
    """Write every raw built-in template for ``mode`` under ``output_dir``.

    Args:
        mode: Project mode to export.
        output_dir: Target directory (created if missing).
        include_ci: Also export the CI addenda.
        overwrite: Allow writing into a non-empty directory.

    Returns:
        Sorted list of written template keys.

    Raises:
        ConfigError: ``output_dir`` is a file, or non-empty without ``overwrite``.
        FileOperationError: A write failed.
    """
    catalog = catalog or get_catalog()
    templates = catalog.export_set(mode, include_ci=include_ci)

    if output_dir.exists() and not output_dir.is_dir():
        raise ConfigError(f"Export target is not a directory: {output_dir}")
    if output_dir.is_dir() and not is_empty_dir(output_dir) and not overwrite:
        raise ConfigError(f"Export directory is not empty: {output_dir}")

    written: list[str] = []
    for key in sorted(templates):
        target = output_dir / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(templates[key].encode("utf-8"))
        except OSError as e:
            raise FileOperationError(target, "write", e) from e
        written.append(key)

    logger.info("Exported %d %s templates to %s", len(written), mode, output_dir)
    return written
