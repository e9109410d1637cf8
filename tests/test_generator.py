"""
Tests for project generation.
"""

import os
from pathlib import Path

import pytest

from axum_app_create.core.errors import GenerationError, TemplateError
from axum_app_create.core.models.project import FeatureSet
from axum_app_create.core.persistence.metadata_file import METADATA_FILE, MetadataManager
from axum_app_create.core.services import checksum
from axum_app_create.core.services.generator import generate_project


def _files_on_disk(root: Path) -> set[str]:
    return {
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file() and ".git" not in p.relative_to(root).parts
    }


class TestGenerateProject:
    def test_single_project_layout(self, generated_project: Path):
        for rel in ("Cargo.toml", "src/main.rs", "src/lib.rs", "src/health.rs", ".gitignore",
                    "README.md", ".env.example", "scripts/dev.sh"):
            assert (generated_project / rel).is_file(), rel

    def test_disabled_features_produce_no_files(self, generated_project: Path):
        assert not (generated_project / "src" / "db.rs").exists()
        assert not (generated_project / "src" / "auth.rs").exists()
        assert not (generated_project / "migrations").exists()
        assert not (generated_project / ".github").exists()

    def test_empty_renders_reported(self, tmp_path: Path, demo_config):
        result = generate_project(tmp_path / "demo", demo_config, init_git=False)
        assert {"src/auth.rs", "src/db.rs"} <= set(result.skipped_empty)
        assert not set(result.skipped_empty) & set(result.files)

    def test_rendered_content(self, generated_project: Path):
        cargo = (generated_project / "Cargo.toml").read_text()
        assert 'name = "demo"' in cargo
        assert 'authors = ["Test Author"]' in cargo
        assert "sqlx" not in cargo
        main = (generated_project / "src" / "main.rs").read_text()
        assert "use demo::{config::Config, health};" in main

    def test_metadata_completeness(self, generated_project: Path):
        metadata = MetadataManager.read(generated_project)
        on_disk = _files_on_disk(generated_project) - {METADATA_FILE}
        assert set(metadata.file_checksums) == on_disk
        for rel, digest in metadata.file_checksums.items():
            assert checksum.calculate_file(generated_project / rel) == digest

    def test_gitignore_excludes_metadata(self, generated_project: Path):
        lines = (generated_project / ".gitignore").read_text().splitlines()
        assert METADATA_FILE in lines

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_executable_bit(self, generated_project: Path):
        assert os.access(generated_project / "scripts" / "dev.sh", os.X_OK)
        assert not os.access(generated_project / "README.md", os.X_OK)

    def test_workspace_with_features(self, tmp_path: Path, make_config):
        config = make_config(
            "shop",
            mode="workspace",
            ci=True,
            features=FeatureSet(database="postgresql", authentication=True),
        )
        result = generate_project(tmp_path / "shop", config, init_git=False)
        root = tmp_path / "shop"
        assert "api/src/main.rs" in result.files
        assert (root / ".github" / "workflows" / "ci.yml").is_file()
        assert "pub mod db" in (root / "infrastructure" / "src" / "lib.rs").read_text()
        env = (root / ".env.example").read_text()
        assert "DATABASE_URL=postgresql://" in env
        assert "JWT_SECRET=" in env
        assert MetadataManager.read(root).config.mode == "workspace"

    def test_existing_directory_refused(self, generated_project: Path, demo_config):
        (generated_project / "keep.txt").write_text("mine")
        with pytest.raises(GenerationError):
            generate_project(generated_project, demo_config, init_git=False)
        assert (generated_project / "keep.txt").read_text() == "mine"

    def test_force_replaces_directory(self, generated_project: Path, demo_config):
        (generated_project / "keep.txt").write_text("mine")
        generate_project(generated_project, demo_config, force=True, init_git=False)
        assert not (generated_project / "keep.txt").exists()
        assert (generated_project / "Cargo.toml").is_file()

    def test_custom_template_dir(self, tmp_path: Path, demo_config, write_templates):
        custom = write_templates(tmp_path / "custom", {
            "src/health.rs.tmpl": "// health for {{ project_name }}\n",
            "docs/NOTES.md.tmpl": "Notes for {{ project_name_pascal }}\n",
        })
        result = generate_project(tmp_path / "demo", demo_config, template_dir=custom, init_git=False)
        assert (tmp_path / "demo" / "src" / "health.rs").read_text() == "// health for demo\n"
        assert (tmp_path / "demo" / "docs" / "NOTES.md").read_text() == "Notes for Demo\n"
        assert "docs/NOTES.md" in result.files

    def test_template_error_writes_nothing(self, tmp_path: Path, demo_config, write_templates):
        custom = write_templates(tmp_path / "custom", {"broken.txt.tmpl": "{{ nope }}"})
        with pytest.raises(TemplateError):
            generate_project(tmp_path / "demo", demo_config, template_dir=custom, init_git=False)
        assert not (tmp_path / "demo").exists()

    def test_git_init_failure_is_not_fatal(self, tmp_path: Path, demo_config, monkeypatch):
        monkeypatch.setattr(
            "axum_app_create.core.services.git_ops.git_available", lambda: False,
        )
        result = generate_project(tmp_path / "demo", demo_config)
        assert result.git_initialized is False
        assert (tmp_path / "demo" / METADATA_FILE).is_file()
