"""
Tests for CLI commands — new, update, templates, and global options.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from axum_app_create import __version__
from axum_app_create.core.persistence.metadata_file import METADATA_FILE, MetadataManager
from axum_app_create.main import cli


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


def _new(runner: CliRunner, *args: str):
    return runner.invoke(cli, ["new", *args, "--no-git", "--author", "CLI Tester"])


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "scaffold and update Axum web services" in result.output
        for command in ("new", "update", "templates"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestNewCommand:
    def test_creates_project(self, workdir: Path):
        result = _new(CliRunner(), "demo")
        assert result.exit_code == 0, result.output
        assert "Created demo" in result.output
        assert (workdir / "demo" / "Cargo.toml").is_file()
        assert MetadataManager.read(workdir / "demo").config.author_name == "CLI Tester"

    def test_options_stored(self, workdir: Path):
        result = _new(
            CliRunner(), "shop", "--mode", "workspace", "--ci", "--database", "sqlite",
            "--auth", "--biz-error", "--log-level", "debug", "--description", "A shop",
        )
        assert result.exit_code == 0, result.output
        config = MetadataManager.read(workdir / "shop").config
        assert config.mode == "workspace"
        assert config.ci is True
        assert config.features.database == "sqlite"
        assert config.features.authentication and config.features.biz_error
        assert config.logging.default_level == "debug"
        assert config.description == "A shop"
        assert (workdir / "shop" / ".github" / "workflows" / "ci.yml").is_file()

    def test_log_level_off(self, workdir: Path):
        result = _new(CliRunner(), "quiet-app", "--log-level", "off")
        assert result.exit_code == 0, result.output
        assert "tracing" not in (workdir / "quiet-app" / "Cargo.toml").read_text()

    def test_json_output(self, workdir: Path):
        result = _new(CliRunner(), "demo", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert "src/main.rs" in data["files"]
        assert "src/db.rs" in data["skipped_empty"]
        assert data["config"]["project_name"] == "demo"

    def test_invalid_name(self, workdir: Path):
        result = _new(CliRunner(), "1bad")
        assert result.exit_code == 1
        assert "cannot start with a digit" in result.output
        assert not (workdir / "1bad").exists()

    def test_existing_directory(self, workdir: Path):
        (workdir / "demo").mkdir()
        result = _new(CliRunner(), "demo")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_missing_template_dir(self, workdir: Path):
        result = _new(CliRunner(), "demo", "--template-dir", str(workdir / "nope"))
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_template_dir_from_user_config(self, workdir: Path, isolated_user_config: Path):
        custom = workdir.parent / "tpl"
        (custom / "src").mkdir(parents=True)
        (custom / "src" / "health.rs.tmpl").write_text("// custom health\n")
        isolated_user_config.parent.mkdir(parents=True)
        isolated_user_config.write_text(f"template_dir: {custom}\n")

        result = _new(CliRunner(), "demo")
        assert result.exit_code == 0, result.output
        assert (workdir / "demo" / "src" / "health.rs").read_text() == "// custom health\n"


class TestUpdateCommand:
    def test_up_to_date(self, workdir: Path):
        runner = CliRunner()
        _new(runner, "demo")
        result = runner.invoke(cli, ["update", "demo", "--non-interactive"])
        assert result.exit_code == 0, result.output
        assert "0 created, 0 updated" in result.output

    def test_conflict_reported(self, workdir: Path):
        runner = CliRunner()
        _new(runner, "demo")
        (workdir / "demo" / "README.md").write_text("mine\n")

        result = runner.invoke(cli, ["update", "demo", "--non-interactive"])
        assert result.exit_code == 0
        assert "Conflict: README.md" in result.output
        assert (workdir / "demo" / "README.md").read_text() == "mine\n"

    def test_force(self, workdir: Path):
        runner = CliRunner()
        _new(runner, "demo")
        (workdir / "demo" / "README.md").write_text("mine\n")

        result = runner.invoke(cli, ["update", "demo", "--force", "--json"])
        assert result.exit_code == 0
        report = json.loads(result.output)["report"]
        assert report["updated"] == ["README.md"]
        assert report["conflicted"] == []

    def test_dry_run(self, workdir: Path):
        runner = CliRunner()
        _new(runner, "demo")
        (workdir / "demo" / "src" / "health.rs").unlink()
        meta_before = (workdir / "demo" / METADATA_FILE).read_bytes()

        result = runner.invoke(cli, ["update", "demo", "--dry-run", "--non-interactive"])
        assert result.exit_code == 0
        assert "Would create: src/health.rs" in result.output
        assert not (workdir / "demo" / "src" / "health.rs").exists()
        assert (workdir / "demo" / METADATA_FILE).read_bytes() == meta_before

    def test_defaults_to_current_directory(self, workdir: Path, monkeypatch: pytest.MonkeyPatch):
        runner = CliRunner()
        _new(runner, "demo")
        monkeypatch.chdir(workdir / "demo")
        result = runner.invoke(cli, ["update", "--non-interactive"])
        assert result.exit_code == 0, result.output

    def test_not_a_generated_project(self, workdir: Path):
        result = CliRunner().invoke(cli, ["update", str(workdir), "--non-interactive"])
        assert result.exit_code == 1
        assert "not generated by axum-app-create" in result.output


class TestTemplatesCommands:
    def test_export(self, workdir: Path):
        result = CliRunner().invoke(cli, ["templates", "export", "out", "--mode", "workspace"])
        assert result.exit_code == 0, result.output
        assert (workdir / "out" / "api" / "src" / "main.rs.tmpl").is_file()
        assert (workdir / "out" / ".github" / "workflows" / "ci.yml.tmpl").is_file()

    def test_export_non_empty_declined(self, workdir: Path):
        (workdir / "out").mkdir()
        (workdir / "out" / "x.txt").write_text("x")
        result = CliRunner().invoke(cli, ["templates", "export", "out"], input="n\n")
        assert result.exit_code == 1
        assert not (workdir / "out" / "Cargo.toml.tmpl").exists()

    def test_export_non_empty_confirmed(self, workdir: Path):
        (workdir / "out").mkdir()
        (workdir / "out" / "x.txt").write_text("x")
        result = CliRunner().invoke(cli, ["templates", "export", "out"], input="y\n")
        assert result.exit_code == 0, result.output
        assert (workdir / "out" / "Cargo.toml.tmpl").is_file()

    def test_export_yes_flag(self, workdir: Path):
        (workdir / "out").mkdir()
        (workdir / "out" / "x.txt").write_text("x")
        result = CliRunner().invoke(cli, ["templates", "export", "out", "--yes", "--no-ci"])
        assert result.exit_code == 0
        assert not (workdir / "out" / ".github").exists()

    def test_list(self):
        result = CliRunner().invoke(cli, ["templates", "list", "--ci"])
        assert result.exit_code == 0
        assert "src/main.rs" in result.output
        assert ".github/workflows/ci.yml" in result.output

    def test_list_json_with_custom(self, workdir: Path):
        (workdir / "tpl").mkdir()
        (workdir / "tpl" / "README.md.tmpl").write_text("# custom\n")
        result = CliRunner().invoke(cli, ["templates", "list", "--template-dir", "tpl", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        sources = {t["key"]: t["source"] for t in data["templates"]}
        assert sources["README.md.tmpl"] == "custom"
        assert sources["Cargo.toml.tmpl"] == "builtin"
