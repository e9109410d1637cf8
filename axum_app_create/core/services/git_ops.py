"""
Git operations — the few git calls a freshly generated project needs.

Git is optional: when the binary is missing or a command fails the
project is still usable, so every failure here is a warning.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def run_git(
    *args: str,
    cwd: Path,
    timeout: int = 15,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
        check=check,
    )


def git_available() -> bool:
    return shutil.which("git") is not None


def init_git_repo(project_dir: Path) -> bool:
    """``git init`` in ``project_dir``. Returns True on success."""
    if not git_available():
        logger.warning("git not found on PATH — skipping repository initialization")
        return False
    try:
        r = run_git("init", cwd=project_dir)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("git init failed in %s: %s", project_dir, e)
        return False
    if r.returncode != 0:
        logger.warning("git init failed in %s: %s", project_dir, r.stderr.strip())
        return False
    logger.info("Initialized git repository in %s", project_dir)
    return True


def git_user_name(cwd: Path | None = None) -> str | None:
    """Configured ``user.name``, or None."""
    if not git_available():
        return None
    try:
        r = run_git("config", "user.name", cwd=cwd or Path.cwd())
    except (OSError, subprocess.TimeoutExpired):
        return None
    name = r.stdout.strip()
    return name if r.returncode == 0 and name else None
