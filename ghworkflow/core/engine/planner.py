"""
Reconciler — diff ObservedState against DesiredState into one Plan.

Blocks are emitted in a fixed order, each gated by its toggle:

    app install → workflow files → agent files → labels
        → collaborator → secret → sample issue

The app must exist before files that call it land, and the sample
issue's narrative depends on the labels. The rest is fixed only so
step numbering is the same on every run.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ghworkflow.core.engine.files import plan_copies, plan_removals
from ghworkflow.core.engine.labels import LabelSynchronizer
from ghworkflow.core.models.operation import (
    CATEGORY_ORDER,
    Operation,
    OperationCategory,
    OperationKind,
)
from ghworkflow.core.models.state import DesiredState, InstallMode, ObservedState

logger = logging.getLogger(__name__)

SAMPLE_ISSUE_BODY = """## Sample Feature Request

This is a test issue to demonstrate the AI issue workflow.

### Requirements
- Create a simple "Hello World" function
- Add basic tests
- Document the function

**To start the workflow, comment:** `@{collaborator}`"""


@dataclass
class Plan:
    """An ordered set of operations for one run."""

    operation_id: str = ""
    mode: InstallMode = InstallMode.FRESH
    operations: list[Operation] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.operations)

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def of_kind(self, kind: OperationKind) -> list[Operation]:
        return [op for op in self.operations if op.kind is kind]

    def by_category(self) -> dict[OperationCategory, list[Operation]]:
        """Operations grouped by block, in execution order (empty blocks omitted)."""
        grouped: dict[OperationCategory, list[Operation]] = {}
        for category in CATEGORY_ORDER:
            ops = [op for op in self.operations if op.category is category]
            if ops:
                grouped[category] = ops
        return grouped

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "mode": self.mode.value,
            "total": self.total,
            "operations": [op.model_dump(mode="json") for op in self.operations],
        }


def build_plan(
    observed: ObservedState,
    desired: DesiredState,
    operation_id: str | None = None,
) -> Plan:
    """Compute the ordered plan.

    Raises:
        PlanningError: If a template for a planned copy is missing.
            Nothing is returned and nothing has been touched.
    """
    toggles = desired.toggles
    branch = desired.branch_override or observed.current_branch
    ops: list[Operation] = []

    if toggles.install_app:
        ops.append(Operation(
            kind=OperationKind.ENSURE_APP_INSTALLED,
            category=OperationCategory.APP,
            target=desired.app_slug,
        ))

    if toggles.copy_files:
        ops.extend(plan_removals(
            observed.legacy_files_present,
            desired.file_names,
            desired.workflows_dir,
        ))
        ops.extend(plan_copies(desired.file_specs, branch, OperationCategory.FILES))

    if toggles.copy_agents:
        ops.extend(plan_copies(desired.agent_specs, branch, OperationCategory.AGENTS))

    if toggles.setup_labels:
        ops.extend(LabelSynchronizer(desired.label_catalogue).plan_setup())

    if toggles.add_collaborator:
        ops.append(Operation(
            kind=OperationKind.ADD_COLLABORATOR,
            category=OperationCategory.COLLABORATOR,
            target=desired.collaborator,
        ))

    if toggles.configure_secret:
        ops.append(Operation(
            kind=OperationKind.PROMPT_SECRET,
            category=OperationCategory.SECRET,
            target=desired.secret_name,
            params={"console_url": desired.secret_console_url},
        ))

    if toggles.create_sample_issue:
        ops.append(Operation(
            kind=OperationKind.CREATE_SAMPLE_ISSUE,
            category=OperationCategory.ISSUE,
            target=desired.sample_issue_title,
            params={"body": SAMPLE_ISSUE_BODY.format(collaborator=desired.collaborator)},
        ))

    plan = Plan(
        operation_id=operation_id or generate_operation_id(),
        mode=desired.mode,
        operations=ops,
    )
    logger.info("Planned %d operations (%s mode)", plan.total, plan.mode.value)
    return plan


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
