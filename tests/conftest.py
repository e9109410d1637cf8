"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from axum_app_create.core.models.project import FeatureSet, ProjectConfig
from axum_app_create.core.services.generator import generate_project


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config at a file that doesn't exist (unless a test writes it)."""
    path = tmp_path / "home" / ".axum-app-create.yml"
    monkeypatch.setenv("AAC_USER_CONFIG", str(path))
    return path


def _make_config(name: str = "demo", **kwargs) -> ProjectConfig:
    features = kwargs.pop("features", None) or FeatureSet()
    kwargs.setdefault("author_name", "Test Author")
    kwargs.setdefault("year", 2024)
    return ProjectConfig(project_name=name, features=features, **kwargs)


def _write_templates(root: Path, files: dict[str, str]) -> Path:
    for key, text in files.items():
        path = root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
    return root


@pytest.fixture
def make_config() -> Callable[..., ProjectConfig]:
    """Factory for ProjectConfig with a fixed author and year, so renders are stable."""
    return _make_config


@pytest.fixture
def write_templates() -> Callable[[Path, dict[str, str]], Path]:
    """Factory that creates a template directory from a key → text mapping."""
    return _write_templates


@pytest.fixture
def demo_config() -> ProjectConfig:
    return _make_config()


@pytest.fixture
def generated_project(tmp_path: Path, demo_config: ProjectConfig) -> Path:
    """A freshly generated single-crate project (no git)."""
    project_dir = tmp_path / "demo"
    generate_project(project_dir, demo_config, init_git=False)
    return project_dir
