"""
Engine executor — applies a Plan, one operation at a time.

Strictly sequential: every control-plane call and every prompt blocks
the run. Failures are classified per operation kind:

    COPY_FILE / REMOVE_FILE   filesystem or missing source → FATAL
    UPSERT_LABEL / DELETE     failure → FAILED, continue
    ADD_COLLABORATOR          failure → WARNED, continue
    ENSURE_APP_INSTALLED      unverified after confirm → WARNED; declined → FATAL
    PROMPT_SECRET             never fails
    CREATE_SAMPLE_ISSUE       failure → FATAL

A FATAL result stops the run. What was already applied stays applied:
the remote is not transactional and there is no rollback.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.core.engine.files import apply_copy, apply_remove
from ghworkflow.core.engine.labels import LabelSummary, LabelSynchronizer
from ghworkflow.core.engine.planner import Plan
from ghworkflow.core.errors import ControlPlaneError
from ghworkflow.core.models.operation import (
    CATEGORY_ORDER,
    Operation,
    OperationKind,
    OperationResult,
    OperationStatus,
    RunStatus,
)
from ghworkflow.core.models.remote import InstallationStatus, RepoInfo

logger = logging.getLogger(__name__)


@dataclass
class ExecutionContext:
    """Everything a handler needs to apply an operation."""

    project_root: Path
    client: ControlPlane
    interaction: UserInteraction
    app_verify_delay: float = 2.0
    sleep: Callable[[float], None] = time.sleep


class ExecutionListener:
    """Progress hooks. Subclass and override what you need."""

    def started(self, index: int, total: int, operation: Operation) -> None:
        pass

    def finished(self, index: int, total: int, result: OperationResult) -> None:
        pass


@dataclass
class ExecutionResult:
    """Result of executing a plan."""

    operation_id: str = ""
    status: RunStatus = RunStatus.PENDING
    results: list[OperationResult] = field(default_factory=list)
    planned: int = 0

    def count(self, status: OperationStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def not_run(self) -> int:
        return self.planned - self.total

    @property
    def fatal_result(self) -> OperationResult | None:
        for r in self.results:
            if r.fatal:
                return r
        return None

    @property
    def aborted(self) -> bool:
        return self.status is RunStatus.ABORTED

    @property
    def labels(self) -> LabelSummary:
        return LabelSynchronizer.summarize(self.results)

    def counts(self) -> dict[str, int]:
        return {s.value: self.count(s) for s in OperationStatus}

    def category_counts(self) -> dict[str, dict[str, int]]:
        """{category: {status: n}} in execution order."""
        per: dict[str, Counter] = {}
        for category in CATEGORY_ORDER:
            statuses = Counter(
                r.status.value for r in self.results if r.operation.category is category
            )
            if statuses:
                per[category.value] = statuses
        return {cat: dict(counter) for cat, counter in per.items()}

    def to_dict(self) -> dict:
        fatal = self.fatal_result
        return {
            "operation_id": self.operation_id,
            "status": self.status.value,
            "planned": self.planned,
            "executed": self.total,
            "counts": self.counts(),
            "categories": self.category_counts(),
            "fatal": (
                {"target": fatal.operation.target, "error": fatal.error, "hint": fatal.hint}
                if fatal else None
            ),
            "results": [r.model_dump(mode="json") for r in self.results],
        }


def install_url(app_slug: str, repo: RepoInfo) -> str:
    """GitHub App installation page preselecting this repository."""
    base = f"https://github.com/apps/{app_slug}/installations/new"
    if repo.owner_id is None or repo.repo_id is None:
        return base
    return f"{base}/permissions?target_id={repo.owner_id}&repository_ids[]={repo.repo_id}"


# ── Handlers ────────────────────────────────────────────────────


def _ensure_app_installed(op: Operation, ctx: ExecutionContext) -> OperationResult:
    slug = op.target
    try:
        repo = ctx.client.get_repo_info()
    except ControlPlaneError as e:
        return OperationResult.warned(op, f"Could not resolve repository to check the app: {e}")

    status = ctx.client.get_installation_status(repo, slug)
    if status is InstallationStatus.INSTALLED:
        return OperationResult.skipped(op, f"GitHub App '{slug}' already installed")
    if status is InstallationStatus.UNKNOWN:
        # The endpoint rejects user tokens (401), so inconclusive means absent here
        logger.info("Installation check inconclusive for '%s', starting install flow", slug)

    url = install_url(slug, repo)
    ctx.interaction.notify(f"Installing GitHub App '{slug}' on {repo.full_name}")
    ctx.interaction.open_url(url)

    if not ctx.interaction.confirm(
        f"Have you completed the '{slug}' GitHub App installation?",
        default=False,
    ):
        return OperationResult.fatal_error(
            op,
            f"Setup cannot continue without the '{slug}' GitHub App",
            hint=f"Complete the installation and run init again: {url}",
        )

    # Installation takes a moment to propagate
    if ctx.app_verify_delay > 0:
        ctx.sleep(ctx.app_verify_delay)

    if ctx.client.get_installation_status(repo, slug) is InstallationStatus.INSTALLED:
        return OperationResult.applied(op, f"GitHub App '{slug}' installation verified")
    return OperationResult.warned(
        op,
        "Could not verify installation yet; GitHub may still be processing it",
    )


def _copy_file(op: Operation, ctx: ExecutionContext) -> OperationResult:
    return apply_copy(ctx.project_root, op)


def _remove_file(op: Operation, ctx: ExecutionContext) -> OperationResult:
    return apply_remove(ctx.project_root, op)


def _upsert_label(op: Operation, ctx: ExecutionContext) -> OperationResult:
    return LabelSynchronizer.upsert(ctx.client, op)


def _delete_label(op: Operation, ctx: ExecutionContext) -> OperationResult:
    return LabelSynchronizer.delete(ctx.client, op)


def _add_collaborator(op: Operation, ctx: ExecutionContext) -> OperationResult:
    try:
        ctx.client.add_collaborator(op.target)
    except ControlPlaneError as e:
        logger.info("add_collaborator %s: %s", op.target, e)
        return OperationResult.warned(
            op,
            f"{op.target} may already be a collaborator or the invitation is pending",
        )
    return OperationResult.applied(op, f"Invited {op.target}")


def _prompt_secret(op: Operation, ctx: ExecutionContext) -> OperationResult:
    ctx.interaction.notify("Run this command and paste your API key:")
    ctx.interaction.notify(f"   gh secret set {op.target}")
    console_url = op.params.get("console_url")
    if console_url:
        ctx.interaction.notify(f"Get your API key at: {console_url}")
    ctx.interaction.acknowledge("Press Enter after configuring the secret...")
    return OperationResult.applied(op, f"Secret {op.target} configuration acknowledged")


def _create_sample_issue(op: Operation, ctx: ExecutionContext) -> OperationResult:
    try:
        url = ctx.client.create_issue(op.target, op.params.get("body", ""))
    except ControlPlaneError as e:
        return OperationResult.fatal_error(
            op,
            f"Failed to create sample issue: {e}",
            hint="Check that Issues are enabled for the repository.",
        )
    return OperationResult.applied(op, f"Sample issue created: {url}")


_HANDLERS: dict[OperationKind, Callable[[Operation, ExecutionContext], OperationResult]] = {
    OperationKind.ENSURE_APP_INSTALLED: _ensure_app_installed,
    OperationKind.COPY_FILE: _copy_file,
    OperationKind.REMOVE_FILE: _remove_file,
    OperationKind.UPSERT_LABEL: _upsert_label,
    OperationKind.DELETE_LABEL: _delete_label,
    OperationKind.ADD_COLLABORATOR: _add_collaborator,
    OperationKind.PROMPT_SECRET: _prompt_secret,
    OperationKind.CREATE_SAMPLE_ISSUE: _create_sample_issue,
}


def execute_plan(
    plan: Plan,
    context: ExecutionContext,
    listener: ExecutionListener | None = None,
) -> ExecutionResult:
    """Apply every operation in order, stopping at the first FATAL.

    Args:
        plan: The plan to apply.
        context: Repository root, control plane and interaction.
        listener: Optional progress hooks.

    Returns:
        ExecutionResult with one OperationResult per executed operation.
    """
    listener = listener or ExecutionListener()
    result = ExecutionResult(
        operation_id=plan.operation_id,
        planned=plan.total,
        status=RunStatus.RUNNING,
    )

    for index, op in enumerate(plan.operations, start=1):
        listener.started(index, plan.total, op)
        start = time.monotonic()

        op_result = _HANDLERS[op.kind](op, context)
        op_result.duration_ms = int((time.monotonic() - start) * 1000)

        result.results.append(op_result)
        listener.finished(index, plan.total, op_result)

        marker = "✓" if op_result.ok else "✗" if op_result.status in (
            OperationStatus.FAILED, OperationStatus.FATAL,
        ) else "⚠"
        logger.info(
            "%s [%d/%d] %s %s → %s",
            marker, index, plan.total, op.kind.value, op.target, op_result.status.value,
        )

        if op_result.fatal:
            logger.error("Aborting run: %s", op_result.error)
            result.status = RunStatus.ABORTED
            return result

    if result.count(OperationStatus.WARNED) or result.count(OperationStatus.FAILED):
        result.status = RunStatus.PARTIALLY_WARNED
    else:
        result.status = RunStatus.SUCCEEDED
    return result
