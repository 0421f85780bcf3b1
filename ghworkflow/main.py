"""
ghworkflow — CLI entrypoint.

Usage:
    python -m ghworkflow --help
    python -m ghworkflow init
    python -m ghworkflow validate
    python -m ghworkflow labels --setup
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from ghworkflow import __version__
from ghworkflow.core.observability.logging_config import resolve_level, setup_logging


class WorkflowGroup(click.Group):
    """Top-level group; an unknown subcommand exits with status 1."""

    def resolve_command(self, ctx: click.Context, args: list[str]):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.group(cls=WorkflowGroup)
@click.version_option(version=__version__, prog_name="ghworkflow")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--root",
    "-C",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository root (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    root: Path | None,
) -> None:
    """Set up the AI-driven GitHub issue workflow in a repository."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    if root is not None:
        ctx.obj["root"] = root

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("GHW_LOG_FILE"),
        log_file_level=os.environ.get("GHW_LOG_FILE_LEVEL"),
    )


@cli.command("help")
@click.pass_context
def help_(ctx: click.Context) -> None:
    """Show the workflow setup guide."""
    from ghworkflow.ui.cli.context import settings

    handle = f"@{settings(ctx).collaborator}"
    secret = settings(ctx).secret_name

    click.secho("\n🚀 GitHub issue workflow setup guide", fg="blue", bold=True)
    click.echo("=" * 37)
    click.echo()

    click.secho("Prerequisites:", bold=True)
    click.echo("• GitHub repository with Issues enabled")
    click.echo("• GitHub CLI (gh) installed and authenticated")
    click.echo(f"• {secret} secret configured in the repository")
    click.echo(f"• {handle} added as repository collaborator")
    click.echo()

    click.secho("Quick Start:", bold=True)
    click.secho("ghworkflow init", fg="cyan", nl=False)
    click.echo("            - Initialize the workflow in the current repo")
    click.secho("ghworkflow validate", fg="cyan", nl=False)
    click.echo("        - Check the current setup")
    click.secho("ghworkflow labels --setup", fg="cyan", nl=False)
    click.echo("  - Create the required labels")
    click.echo()

    click.secho("Workflow Stages:", bold=True)
    click.secho("📝 Specify", fg="magenta", nl=False)
    click.echo("  - Writes the feature specification")
    click.secho("🏗️  Plan", fg="yellow", nl=False)
    click.echo("     - Designs the implementation plan and task list")
    click.secho("💻 Develop", fg="green", nl=False)
    click.echo("  - Implements the code with full testing")
    click.echo()

    click.secho("Human Control:", bold=True)
    click.echo(f"• Approve: check the boxes and mention {handle}")
    click.echo("• Changes: describe the revisions and mention the bot")
    click.echo(f'• Skip:    "{handle} skip to develop"')
    click.echo(f'• Stop:    "{handle} stop"')
    click.echo()

    click.secho("Getting Started:", bold=True)
    click.secho("1. Run: ", nl=False)
    click.secho("ghworkflow init", fg="cyan")
    click.echo("2. Create an issue describing a feature or bug")
    click.echo(f"3. Comment: {handle}")
    click.echo("4. Follow the AI-guided workflow!")
    click.echo()


# ── Register sub-commands from ghworkflow/ui/cli/ ──────────────────

from ghworkflow.ui.cli.init import init
from ghworkflow.ui.cli.labels import labels
from ghworkflow.ui.cli.validate import validate

cli.add_command(init)
cli.add_command(validate)
cli.add_command(labels)


if __name__ == "__main__":
    cli()
