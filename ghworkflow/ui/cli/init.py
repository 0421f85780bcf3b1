"""
CLI command for repository setup.

Thin wrapper over ``ghworkflow.core.use_cases.init``.
"""

from __future__ import annotations

import json
import sys
import time

import click

from ghworkflow.core.engine.executor import ExecutionListener, ExecutionResult
from ghworkflow.core.engine.planner import Plan
from ghworkflow.core.models.operation import (
    Operation,
    OperationCategory,
    OperationResult,
    OperationStatus,
    RunStatus,
)
from ghworkflow.core.models.state import InstallMode
from ghworkflow.ui.cli import context as cli_context

CATEGORY_TITLES: dict[OperationCategory, str] = {
    OperationCategory.APP: "🤖 GitHub App installation",
    OperationCategory.FILES: "📁 Workflow files",
    OperationCategory.AGENTS: "🧠 Agent files",
    OperationCategory.LABELS: "🏷️  Workflow labels",
    OperationCategory.COLLABORATOR: "👤 Collaborator",
    OperationCategory.SECRET: "🔑 API key secret",
    OperationCategory.ISSUE: "📋 Sample issue",
}

STATUS_STYLE: dict[OperationStatus, tuple[str, str]] = {
    OperationStatus.APPLIED: ("✓", "green"),
    OperationStatus.UPDATED: ("✓", "green"),
    OperationStatus.SKIPPED: ("⊘", "cyan"),
    OperationStatus.WARNED: ("⚠", "yellow"),
    OperationStatus.FAILED: ("✗", "red"),
    OperationStatus.FATAL: ("✗", "red"),
}


class ConsoleListener(ExecutionListener):
    """Prints a block header on category change and one line per operation."""

    def __init__(self) -> None:
        self._category: OperationCategory | None = None
        self._block = 0

    def started(self, index: int, total: int, operation: Operation) -> None:
        if operation.category is not self._category:
            self._category = operation.category
            self._block += 1
            click.echo()
            click.secho(
                f"Step {self._block}: {CATEGORY_TITLES[operation.category]}",
                fg="cyan",
                bold=True,
            )

    def finished(self, index: int, total: int, result: OperationResult) -> None:
        marker, color = STATUS_STYLE[result.status]
        text = result.message or result.error or result.operation.describe()
        click.secho(f"   {marker} ", fg=color, nl=False)
        click.echo(f"[{index}/{total}] {text}")


def render_plan(plan: Plan) -> None:
    """Human-readable plan preview."""
    if plan.is_empty:
        click.echo("   Nothing to do.")
        return
    for step, (category, ops) in enumerate(plan.by_category().items(), start=1):
        click.secho(f"\n   {step}. {CATEGORY_TITLES[category]}", bold=True)
        for op in ops:
            click.echo(f"      • {op.describe()}")


def render_summary(execution: ExecutionResult) -> None:
    click.echo()
    status_color = {
        RunStatus.SUCCEEDED: "green",
        RunStatus.PARTIALLY_WARNED: "yellow",
        RunStatus.ABORTED: "red",
    }.get(execution.status, "white")
    click.secho(f"📊 Result: {execution.status.value}", fg=status_color, bold=True)

    for category, counts in execution.category_counts().items():
        parts = ", ".join(f"{n} {status}" for status, n in counts.items())
        click.echo(f"   {CATEGORY_TITLES[OperationCategory(category)]}: {parts}")

    labels = execution.labels
    if labels.total:
        click.echo(
            f"   Labels: {labels.created} created, {labels.updated} updated, "
            f"{labels.failed} errors"
        )
    if execution.not_run:
        click.secho(f"   {execution.not_run} operation(s) not run", fg="yellow")


@click.command("init")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip prompts and use defaults.")
@click.option("--dry-run", is_flag=True, help="Show what would be done without making changes.")
@click.option(
    "--base-branch",
    default=None,
    help="Branch written into workflow files (default: current branch).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init(
    ctx: click.Context,
    assume_yes: bool,
    dry_run: bool,
    base_branch: str | None,
    as_json: bool,
) -> None:
    """Initialize or upgrade the issue workflow in the current repository.

    Examples:

        ghworkflow init

        ghworkflow init --yes --base-branch develop

        ghworkflow init --dry-run
    """
    from ghworkflow.core.use_cases.init import run_init

    if not as_json:
        click.secho("\n🚀 GitHub issue workflow setup", fg="blue", bold=True)

    result = run_init(
        cli_context.project_root(ctx),
        cli_context.control_plane(ctx),
        cli_context.interaction(ctx),
        cli_context.settings(ctx),
        assume_yes=assume_yes or as_json,
        dry_run=dry_run,
        branch_override=base_branch,
        listener=None if as_json else ConsoleListener(),
        sleep=ctx.obj.get("sleep", time.sleep),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"\n❌ Setup failed: {result.error}", fg="red")
        if result.hint:
            click.secho(f"   {result.hint}", fg="yellow")
        sys.exit(1)

    if result.plan is None or result.observed is None:
        click.secho("\n❌ Setup failed: no plan was produced", fg="red")
        sys.exit(1)

    if result.mode is InstallMode.UPDATE:
        version = result.observed.detected_version
        click.secho(
            f"🔄 Existing installation detected ({version.value if version else '?'}) "
            "— updating workflow and agent files only",
            fg="yellow",
        )

    if dry_run:
        click.secho("\n🔍 Dry Run - Changes that would be made:", fg="yellow")
        render_plan(result.plan)
        click.echo()
        return

    execution = result.execution
    if execution is None:
        click.secho("\n❌ Setup failed: the plan was not executed", fg="red")
        sys.exit(1)
    render_summary(execution)

    fatal = execution.fatal_result
    if fatal is not None:
        click.secho(f"\n❌ Setup failed: {fatal.error}", fg="red")
        if fatal.hint:
            click.secho(f"   {fatal.hint}", fg="yellow")
        sys.exit(1)

    settings = cli_context.settings(ctx)
    click.secho("\n✅ Workflow initialized successfully!", fg="green", bold=True)
    click.secho("\n🚀 Next Steps:", fg="blue")
    click.echo("1. Create an issue describing a feature or bug")
    click.echo(f"2. Comment: @{settings.collaborator}")
    click.echo("3. The workflow starts at the specify stage")
    click.echo()
