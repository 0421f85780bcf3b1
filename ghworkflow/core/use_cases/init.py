"""
Init use case — bootstrap or upgrade the repository's workflow setup.

The full vertical slice: preflight, inspect, pick the mode, resolve
toggles, plan, then either preview (dry run) or execute.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.core.catalogue import CURRENT_VERSION
from ghworkflow.core.config.loader import Settings, settings_for
from ghworkflow.core.engine.desired import compute_desired, mode_for
from ghworkflow.core.engine.executor import (
    ExecutionContext,
    ExecutionListener,
    ExecutionResult,
    execute_plan,
)
from ghworkflow.core.engine.inspector import inspect_state
from ghworkflow.core.engine.planner import Plan, build_plan
from ghworkflow.core.errors import ConfigError, PlanningError, PreflightError
from ghworkflow.core.models.remote import RepoInfo
from ghworkflow.core.models.state import DesiredState, InstallMode, ObservedState
from ghworkflow.core.preflight import run_preflight

logger = logging.getLogger(__name__)

# (toggle, question, default) asked in a fresh interactive install
TOGGLE_QUESTIONS: tuple[tuple[str, str, bool], ...] = (
    ("install_app", "Install the {app} GitHub App? (will open your browser)", True),
    ("copy_files", "Copy workflow files to {workflows_dir}/?", True),
    ("copy_agents", "Copy agent files to {agents_dir}/?", True),
    ("setup_labels", "Create required GitHub labels?", True),
    ("add_collaborator", "Add @{collaborator} as collaborator?", True),
    ("configure_secret", "Configure {secret} secret?", True),
    ("create_sample_issue", "Create a sample issue to test the workflow?", False),
)


@dataclass
class InitResult:
    """Result of an init run."""

    repo: RepoInfo | None = None
    observed: ObservedState | None = None
    desired: DesiredState | None = None
    plan: Plan | None = None
    execution: ExecutionResult | None = None
    dry_run: bool = False
    error: str | None = None
    hint: str | None = None

    @property
    def mode(self) -> InstallMode | None:
        return self.desired.mode if self.desired else None

    @property
    def ok(self) -> bool:
        if self.error:
            return False
        return self.execution is None or not self.execution.aborted

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok, "dry_run": self.dry_run}
        if self.error:
            result["error"] = self.error
            if self.hint:
                result["hint"] = self.hint
            return result

        result["repository"] = self.repo.full_name if self.repo else None
        result["mode"] = self.mode.value if self.mode else None
        if self.observed:
            result["observed"] = self.observed.model_dump(mode="json")
        if self.plan:
            result["plan"] = self.plan.to_dict()
        if self.execution:
            result["execution"] = self.execution.to_dict()
        return result


def ask_toggles(
    interaction: UserInteraction,
    settings: Settings,
    *,
    secret_exists: bool,
) -> dict[str, bool]:
    """Ask the fresh-install questions. The secret question is skipped if it exists."""
    answers: dict[str, bool] = {}
    for key, question, default in TOGGLE_QUESTIONS:
        if key == "configure_secret" and secret_exists:
            continue
        prompt = question.format(
            app=settings.app_slug,
            workflows_dir=settings.workflows_dir,
            agents_dir=settings.agents_dir,
            collaborator=settings.collaborator,
            secret=settings.secret_name,
        )
        answers[key] = interaction.confirm(prompt, default=default)
    return answers


def run_init(
    project_root: Path,
    client: ControlPlane,
    interaction: UserInteraction,
    settings: Settings | None = None,
    *,
    assume_yes: bool = False,
    dry_run: bool = False,
    branch_override: str | None = None,
    templates_dir: Path | None = None,
    listener: ExecutionListener | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> InitResult:
    """Bring the repository to the current workflow configuration.

    Args:
        project_root: Working tree of the target repository.
        client: Control plane for remote reads and writes.
        interaction: Prompts and browser launch.
        settings: Locations and timings; loaded from ghworkflow.yml when None.
        assume_yes: Skip the questions and use the defaults.
        dry_run: Plan and return without executing anything.
        branch_override: Base branch written into workflow files.
        templates_dir: Override for the packaged templates.
        listener: Progress hooks forwarded to the executor.
        sleep: Used while waiting for the app installation to propagate.

    Returns:
        InitResult. ``error``/``hint`` are set for preflight, config
        and planning failures; a FATAL operation shows up as an aborted
        ``execution``.
    """
    result = InitResult(dry_run=dry_run)

    # ── Settings ─────────────────────────────────────────────────
    if settings is None:
        try:
            settings = settings_for(project_root)
        except ConfigError as e:
            result.error = str(e)
            return result

    # ── Preflight ────────────────────────────────────────────────
    try:
        result.repo = run_preflight(client)
    except PreflightError as e:
        result.error = str(e)
        result.hint = e.hint
        return result

    # ── Inspect ──────────────────────────────────────────────────
    observed = inspect_state(project_root, client, settings)
    result.observed = observed
    mode = mode_for(observed)

    # ── Desired ──────────────────────────────────────────────────
    user_toggles: dict[str, bool] | None = None
    if mode is InstallMode.FRESH and not assume_yes:
        user_toggles = ask_toggles(interaction, settings, secret_exists=observed.has_secret)

    desired = compute_desired(
        mode,
        CURRENT_VERSION,
        user_toggles,
        lambda: observed.has_secret,
        settings,
        templates_dir=templates_dir,
        branch_override=branch_override,
    )
    result.desired = desired

    # ── Plan ─────────────────────────────────────────────────────
    try:
        plan = build_plan(observed, desired)
    except PlanningError as e:
        result.error = str(e)
        result.hint = "Reinstall ghworkflow; its packaged templates are incomplete."
        return result
    result.plan = plan

    if dry_run:
        return result

    # ── Execute ──────────────────────────────────────────────────
    context = ExecutionContext(
        project_root=project_root,
        client=client,
        interaction=interaction,
        app_verify_delay=settings.app_verify_delay,
        sleep=sleep,
    )
    result.execution = execute_plan(plan, context, listener)
    return result
