"""
Labels use case — set up, clean or describe the active label catalogue.

Setup and clean run through the same executor as ``init``, so a failing
label is counted and the batch continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.core.catalogue import CURRENT_VERSION, label_catalogue
from ghworkflow.core.engine.executor import (
    ExecutionContext,
    ExecutionListener,
    ExecutionResult,
    execute_plan,
)
from ghworkflow.core.engine.labels import LabelSummary, LabelSynchronizer
from ghworkflow.core.engine.planner import Plan, generate_operation_id
from ghworkflow.core.models.state import CatalogueVersion, LabelCategory, LabelSpec


@dataclass
class LabelsResult:
    """Result of a labels setup or clean."""

    action: str
    execution: ExecutionResult

    @property
    def summary(self) -> LabelSummary:
        return self.execution.labels

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "status": self.execution.status.value,
            "summary": self.summary.to_dict(),
        }


def grouped_catalogue(
    version: CatalogueVersion = CURRENT_VERSION,
) -> dict[LabelCategory, list[LabelSpec]]:
    """The catalogue grouped by category, in needs/review/error order."""
    grouped: dict[LabelCategory, list[LabelSpec]] = {c: [] for c in LabelCategory}
    for label in label_catalogue(version):
        grouped[label.category].append(label)
    return grouped


def _run(
    action: str,
    plan: Plan,
    project_root: Path,
    client: ControlPlane,
    interaction: UserInteraction,
    listener: ExecutionListener | None,
) -> LabelsResult:
    context = ExecutionContext(project_root=project_root, client=client, interaction=interaction)
    return LabelsResult(action=action, execution=execute_plan(plan, context, listener))


def setup_labels(
    project_root: Path,
    client: ControlPlane,
    interaction: UserInteraction,
    listener: ExecutionListener | None = None,
    version: CatalogueVersion = CURRENT_VERSION,
) -> LabelsResult:
    """Create or update every label in the catalogue."""
    sync = LabelSynchronizer(label_catalogue(version))
    plan = Plan(operation_id=generate_operation_id(), operations=sync.plan_setup())
    return _run("setup", plan, project_root, client, interaction, listener)


def clean_labels(
    project_root: Path,
    client: ControlPlane,
    interaction: UserInteraction,
    listener: ExecutionListener | None = None,
    version: CatalogueVersion = CURRENT_VERSION,
) -> LabelsResult:
    """Delete every label in the catalogue; missing ones count as not found."""
    sync = LabelSynchronizer(label_catalogue(version))
    plan = Plan(operation_id=generate_operation_id(), operations=sync.plan_clean())
    return _run("clean", plan, project_root, client, interaction, listener)
