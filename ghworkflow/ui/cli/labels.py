"""
CLI command for the workflow label catalogue.

Thin wrapper over ``ghworkflow.core.use_cases.labels``.
"""

from __future__ import annotations

import json

import click

from ghworkflow.core.engine.executor import ExecutionListener
from ghworkflow.core.models.operation import OperationResult, OperationStatus
from ghworkflow.core.models.state import LabelCategory
from ghworkflow.ui.cli import context as cli_context

_CATEGORY_HEADINGS: dict[LabelCategory, tuple[str, str]] = {
    LabelCategory.NEEDS: ("🔵 needs:* (AI working):", "blue"),
    LabelCategory.REVIEW: ("🟢 review:* (human review):", "green"),
    LabelCategory.ERROR: ("🔴 error:* (needs help):", "red"),
}

_RESULT_LINES: dict[OperationStatus, tuple[str, str, str]] = {
    OperationStatus.APPLIED: ("✓", "green", "Done"),
    OperationStatus.UPDATED: ("✓", "green", "Updated"),
    OperationStatus.SKIPPED: ("⊘", "yellow", "Not found"),
    OperationStatus.FAILED: ("✗", "red", "Failed"),
}


class _LabelListener(ExecutionListener):
    """One line per label as the batch runs."""

    def __init__(self, applied_word: str) -> None:
        self._applied_word = applied_word

    def finished(self, index: int, total: int, result: OperationResult) -> None:
        marker, color, word = _RESULT_LINES.get(
            result.status, ("⚠", "yellow", result.status.value)
        )
        if result.status is OperationStatus.APPLIED:
            word = self._applied_word
        click.secho(f"   {marker} ", fg=color, nl=False)
        click.echo(f"[{index}/{total}] {word}: {result.operation.target}")


def _list_labels(as_json: bool) -> None:
    from ghworkflow.core.use_cases.labels import grouped_catalogue

    grouped = grouped_catalogue()

    if as_json:
        click.echo(json.dumps(
            {
                category.value: [label.model_dump(mode="json") for label in labels]
                for category, labels in grouped.items()
            },
            indent=2,
        ))
        return

    click.secho("\n🏷️  Workflow labels", fg="blue", bold=True)
    for category, labels in grouped.items():
        heading, color = _CATEGORY_HEADINGS[category]
        click.echo()
        click.secho(f"   {heading}", fg=color, bold=True)
        for label in labels:
            click.secho(f"     • {label.name}", fg=color, nl=False)
            click.echo(f" - {label.description}")

    click.echo()
    click.secho("⚠️  Only one workflow label should be active per issue at a time", fg="yellow")
    click.echo()
    click.secho("Commands:", fg="cyan")
    click.echo("   ghworkflow labels --setup   (create all labels)")
    click.echo("   ghworkflow labels --clean   (remove all labels)")
    click.echo()


@click.command("labels")
@click.option("--setup", "do_setup", is_flag=True, help="Create or update all workflow labels.")
@click.option("--list", "do_list", is_flag=True, help="List all workflow labels (default).")
@click.option("--clean", "do_clean", is_flag=True, help="Remove all workflow labels.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def labels(
    ctx: click.Context,
    do_setup: bool,
    do_list: bool,
    do_clean: bool,
    as_json: bool,
) -> None:
    """Manage the workflow labels on GitHub.

    With several flags, only the first of --setup, --list, --clean runs.

    Examples:

        ghworkflow labels

        ghworkflow labels --setup

        ghworkflow labels --clean
    """
    if not do_setup and (do_list or not do_clean):
        _list_labels(as_json)
        return

    from ghworkflow.core.use_cases.labels import clean_labels, setup_labels

    project_root = cli_context.project_root(ctx)
    client = cli_context.control_plane(ctx)
    interaction = cli_context.interaction(ctx)

    if do_setup:
        if not as_json:
            click.secho("\n🏷️  Setting up workflow labels\n", fg="blue", bold=True)
        result = setup_labels(
            project_root, client, interaction,
            listener=None if as_json else _LabelListener("Created"),
        )
    else:
        if not as_json:
            click.secho("\n⚠️  Removing all workflow labels\n", fg="yellow", bold=True)
        result = clean_labels(
            project_root, client, interaction,
            listener=None if as_json else _LabelListener("Removed"),
        )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    summary = result.summary
    if result.action == "setup":
        click.secho("\n✅ Label setup complete!", fg="green", bold=True)
        click.echo(
            f"📊 Results: {summary.created} created, {summary.updated} updated, "
            f"{summary.failed} errors"
        )
        if not summary.failed:
            settings = cli_context.settings(ctx)
            click.echo()
            click.secho("Next steps:", fg="blue")
            click.echo("1. Create an issue describing your feature or bug")
            click.echo(f"2. Comment: @{settings.collaborator}")
            click.echo("3. The workflow starts with the 'needs:specify' label")
    else:
        click.secho("\n🧹 Cleanup complete!", fg="yellow", bold=True)
        click.echo(f"📊 Results: {summary.removed} removed, {summary.not_found} not found")
        if summary.failed:
            click.secho(f"   {summary.failed} errors", fg="red")
    click.echo()
