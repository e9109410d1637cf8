"""
CLI commands for the template catalog.

Thin wrappers over ``axum_app_create.core.use_cases.templates``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from axum_app_create.core.models.project import PROJECT_MODES


@click.group()
def templates() -> None:
    """Templates — export the built-ins, inspect a resolved set."""


@templates.command("export")
@click.argument("output_dir", type=click.Path(path_type=Path))
@click.option("--mode", type=click.Choice(PROJECT_MODES), default="single", show_default=True)
@click.option("--no-ci", is_flag=True, help="Leave out the CI workflow templates.")
@click.option("--yes", "-y", is_flag=True, help="Write into a non-empty directory without asking.")
def export_cmd(output_dir: Path, mode: str, no_ci: bool, yes: bool) -> None:
    """Export the raw built-in templates to OUTPUT_DIR."""
    from axum_app_create.core.services.template_export import is_empty_dir
    from axum_app_create.core.use_cases.templates import run_export

    overwrite = yes
    if output_dir.is_dir() and not is_empty_dir(output_dir) and not yes:
        overwrite = click.confirm(
            f"{output_dir} is not empty. Existing templates will be overwritten. Continue?",
            default=False,
        )
        if not overwrite:
            click.secho("Aborted.", fg="yellow")
            sys.exit(1)

    result = run_export(output_dir, mode=mode, include_ci=not no_ci, overwrite=overwrite)
    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Exported {len(result.files)} {mode} templates to {output_dir}", fg="green", bold=True)
    click.echo(f"   Use them with: axum-app-create new NAME --template-dir {output_dir}")


@templates.command("list")
@click.option("--mode", type=click.Choice(PROJECT_MODES), default="single", show_default=True)
@click.option("--ci", is_flag=True, help="Include the CI templates.")
@click.option("--template-dir", type=click.Path(path_type=Path), default=None,
              help="Custom template directory (overrides the user config).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_cmd(mode: str, ci: bool, template_dir: Path | None, as_json: bool) -> None:
    """List the templates a project would be generated from."""
    from axum_app_create.core.use_cases.templates import list_templates

    result = list_templates(mode=mode, ci=ci, template_dir=template_dir)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    resolved = result.templates
    assert resolved is not None  # guaranteed after error check above

    click.secho(f"\n📄 Templates ({mode}{', ci' if ci else ''}): {len(resolved)}", fg="cyan", bold=True)
    colors = {"builtin": "white", "custom": "magenta", "inherited": "blue"}
    for key in resolved:
        t = resolved[key]
        flag = " (x)" if t.executable else ""
        click.echo(f"   • {t.path}{flag}  ", nl=False)
        click.secho(f"[{t.source}]", fg=colors[t.source])

    if resolved.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warning in resolved.warnings:
            click.echo(f"   • {warning}")
    click.echo()
