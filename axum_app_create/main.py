"""
axum-app-create — CLI entrypoint.

Usage:
    axum-app-create new my-service --database postgresql --ci
    axum-app-create update --dry-run
    axum-app-create templates export ./my-templates
    python -m axum_app_create.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from axum_app_create import __version__
from axum_app_create.core.models.project import DATABASE_OPTIONS, LOG_LEVELS, PROJECT_MODES
from axum_app_create.core.models.update import ConflictChoice
from axum_app_create.core.observability.logging_config import level_from_flags, setup_from_env


@click.group()
@click.version_option(version=__version__, prog_name="axum-app-create")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """axum-app-create — scaffold and update Axum web services."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(level_from_flags(verbose=verbose, quiet=quiet, debug=debug))


# ── new ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option("--mode", type=click.Choice(PROJECT_MODES), default="single", show_default=True,
              help="Single crate or multi-crate workspace.")
@click.option("--ci", is_flag=True, help="Add a GitHub Actions workflow.")
@click.option("--database", type=click.Choice(DATABASE_OPTIONS), default="none", show_default=True,
              help="Database support (sqlx).")
@click.option("--auth", is_flag=True, help="Add JWT authentication.")
@click.option("--biz-error", is_flag=True, help="Add business error codes to the error type.")
@click.option("--log-level", type=click.Choice((*LOG_LEVELS, "off")), default="info", show_default=True,
              help="Default tracing level ('off' disables logging support).")
@click.option("--author", default=None, help="Author name (default: git user.name).")
@click.option("--description", default=None, help="One-line project description.")
@click.option("--template-dir", type=click.Path(path_type=Path), default=None,
              help="Custom template directory (overrides the user config).")
@click.option("--force", is_flag=True, help="Replace an existing directory.")
@click.option("--no-git", is_flag=True, help="Don't run 'git init'.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def new(
    ctx: click.Context,
    name: str,
    mode: str,
    ci: bool,
    database: str,
    auth: bool,
    biz_error: bool,
    log_level: str,
    author: str | None,
    description: str | None,
    template_dir: Path | None,
    force: bool,
    no_git: bool,
    as_json: bool,
) -> None:
    """Create a new Axum project in ./NAME."""
    from axum_app_create.core.use_cases.generate import run_generate

    result = run_generate(
        name,
        force=force,
        template_dir=template_dir,
        init_git=not no_git,
        mode=mode,
        ci=ci,
        database=database,
        auth=auth,
        biz_error=biz_error,
        log_level=None if log_level == "off" else log_level,
        author=author,
        description=description,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)
    click.secho(f"✅ Created {name} ({mode})", fg="green", bold=True)
    if not quiet:
        if result.template_dir:
            click.echo(f"   Templates: {result.template_dir}")
        click.echo(f"   Files: {len(result.files)}")
        for path in result.files:
            click.echo(f"     • {path}")
        if result.skipped_empty:
            click.echo(f"   Not generated (feature off): {', '.join(result.skipped_empty)}")
        if not no_git and not result.git_initialized:
            click.secho("   ⚠️  git init failed or git is not installed", fg="yellow")

    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow")

    if not quiet:
        click.echo()
        click.echo(f"   cd {name} && cargo run")
        click.echo()


# ── update ──────────────────────────────────────────────────────


class PromptConflictResolver:
    """Ask on the terminal what to do with each conflicting file."""

    _KEYS = {"o": ConflictChoice.OVERWRITE, "s": ConflictChoice.SKIP, "d": ConflictChoice.VIEW_DIFF}

    def choose(self, path: str) -> ConflictChoice:
        click.secho(f"⚠️  {path} was modified since generation.", fg="yellow")
        key = click.prompt(
            "   [o]verwrite, [s]kip, view [d]iff?",
            type=click.Choice(list(self._KEYS)),
            default="s",
            show_choices=False,
        )
        return self._KEYS[key]

    def show_diff(self, path: str, diff: str) -> None:
        if not diff:
            click.echo("   (no textual difference)")
            return
        for line in diff.splitlines():
            if line.startswith("+") and not line.startswith("+++"):
                click.secho(line, fg="green")
            elif line.startswith("-") and not line.startswith("---"):
                click.secho(line, fg="red")
            else:
                click.echo(line)

    def notify(self, message: str) -> None:
        click.secho(f"ℹ️  {message}", fg="cyan")


def _is_interactive(non_interactive: bool) -> bool:
    if non_interactive or os.environ.get("CI"):
        return False
    return sys.stdin.isatty()


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), default=".", required=False)
@click.option("--dry-run", is_flag=True, help="Show what would change; write nothing.")
@click.option("--force", is_flag=True, help="Overwrite files you modified.")
@click.option("--non-interactive", is_flag=True, help="Never prompt; report conflicts instead.")
@click.option("--template-dir", type=click.Path(path_type=Path), default=None,
              help="Custom template directory (overrides the user config).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(
    ctx: click.Context,
    path: Path,
    dry_run: bool,
    force: bool,
    non_interactive: bool,
    template_dir: Path | None,
    as_json: bool,
) -> None:
    """Re-apply the current templates to a generated project."""
    from axum_app_create.core.use_cases.update import run_update

    interactive = not as_json and _is_interactive(non_interactive)
    result = run_update(
        path,
        dry_run=dry_run,
        force=force,
        template_dir=template_dir,
        conflict_resolver=PromptConflictResolver() if interactive else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None  # guaranteed after error check above

    if dry_run:
        click.secho("🔍 Dry run — no files were written", fg="cyan", bold=True)

    verb = "Would create" if dry_run else "Created"
    for p in report.created:
        click.secho(f"   + {verb}: {p}", fg="green")
    verb = "Would update" if dry_run else "Updated"
    for p in report.updated:
        click.secho(f"   ~ {verb}: {p}", fg="blue")
    for p in report.conflicted:
        click.secho(f"   ! Conflict: {p}", fg="yellow")
    for p, err in report.failed.items():
        click.secho(f"   ✗ Failed: {p} — {err}", fg="red")

    if not ctx.obj.get("quiet", False):
        for notice in report.notices:
            click.secho(f"ℹ️  {notice}", fg="cyan")

    click.echo()
    click.echo(
        f"   {len(report.created)} created, {len(report.updated)} updated, "
        f"{len(report.skipped)} unchanged, {len(report.conflicted)} conflicts"
    )
    if report.conflicted:
        click.secho(
            "   Conflicting files were left untouched. Re-run with --force to overwrite them.",
            fg="yellow",
        )
    click.echo()

    if not report.ok:
        sys.exit(1)


# ── Register sub-command groups from axum_app_create/ui/cli/ ─────

from axum_app_create.ui.cli.templates import templates  # noqa: E402

cli.add_command(templates)


if __name__ == "__main__":
    cli()
