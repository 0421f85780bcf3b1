"""
CLI command for checking an existing setup.

Thin wrapper over ``ghworkflow.core.use_cases.validate``.
"""

from __future__ import annotations

import json
import sys

import click

from ghworkflow.ui.cli import context as cli_context


@click.command("validate")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(ctx: click.Context, as_json: bool) -> None:
    """Check workflow files, agents, labels and secret in this repository."""
    from ghworkflow.core.use_cases.validate import run_validate

    report = run_validate(
        cli_context.project_root(ctx),
        cli_context.control_plane(ctx),
        cli_context.settings(ctx),
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.passed else 1)

    click.secho("\n🔍 Validating workflow setup", fg="blue", bold=True)

    # Preflight
    if report.preflight:
        click.secho("\n   ❌ Prerequisites:", fg="red", bold=True)
        for problem in report.preflight:
            click.echo(f"     • {problem['error']}")
            if problem.get("hint"):
                click.secho(f"       {problem['hint']}", fg="yellow")
    else:
        click.secho("\n   ✓ Prerequisites", fg="green")

    # Workflow files
    color = "green" if report.files_valid == report.workflows_expected else "red"
    click.secho(
        f"   Workflow files: {report.files_valid}/{report.workflows_expected} valid",
        fg=color,
    )
    for name in report.missing_files:
        click.secho(f"     ✗ {name} (missing)", fg="red")
    for entry in report.invalid_files:
        click.secho(f"     ✗ {entry}", fg="red")

    # Agents
    if report.missing_agents:
        click.secho(f"   Agent files: {len(report.missing_agents)} missing", fg="red")
        for name in report.missing_agents:
            click.secho(f"     ✗ {name}", fg="red")
    else:
        click.secho("   Agent files: all present", fg="green")

    # Labels
    existing = report.labels_total - len(report.missing_labels)
    label_color = "green" if not report.missing_labels else "yellow"
    click.secho(f"   Labels: {existing}/{report.labels_total} present", fg=label_color)
    if ctx.obj.get("verbose"):
        for name in report.missing_labels:
            click.echo(f"     • {name}")

    # Secret
    if report.has_secret:
        click.secho(f"   Secret: {report.secret_name} configured", fg="green")
    else:
        click.secho(f"   Secret: {report.secret_name} not found", fg="yellow")

    if report.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in report.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not report.passed:
        click.secho("❌ Validation failed", fg="red", bold=True)
        click.echo("   Run 'ghworkflow init' to fix the missing pieces.")
        click.echo()
        sys.exit(1)

    click.secho("✅ Workflow setup is valid", fg="green", bold=True)
    click.echo()
