"""
Label synchronizer — upsert and delete the active label catalogue.

Each catalogue entry is handled on its own and in catalogue order. A
failing label is recorded and the batch moves on, so the summary
counts always add up to the catalogue size.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ghworkflow.adapters.base import ControlPlane
from ghworkflow.core.models.operation import (
    Operation,
    OperationCategory,
    OperationKind,
    OperationResult,
    OperationStatus,
)
from ghworkflow.core.models.remote import LabelDeleteResult, LabelWriteResult
from ghworkflow.core.models.state import LabelSpec

logger = logging.getLogger(__name__)


@dataclass
class LabelSummary:
    """Per-label outcome counts for one batch."""

    created: int = 0
    updated: int = 0
    removed: int = 0
    not_found: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.removed + self.not_found + self.failed

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "removed": self.removed,
            "not_found": self.not_found,
            "failed": self.failed,
            "total": self.total,
        }


class LabelSynchronizer:
    """Plans and applies label operations for one catalogue."""

    def __init__(self, catalogue: Iterable[LabelSpec]):
        self.catalogue: tuple[LabelSpec, ...] = tuple(catalogue)

    # ── Planning ────────────────────────────────────────────────

    def plan_setup(self) -> list[Operation]:
        """One UPSERT_LABEL per catalogue entry."""
        return [
            Operation(
                kind=OperationKind.UPSERT_LABEL,
                category=OperationCategory.LABELS,
                target=label.name,
                params={"description": label.description, "color": label.color},
            )
            for label in self.catalogue
        ]

    def plan_clean(self) -> list[Operation]:
        """One DELETE_LABEL per catalogue entry."""
        return [
            Operation(
                kind=OperationKind.DELETE_LABEL,
                category=OperationCategory.LABELS,
                target=label.name,
            )
            for label in self.catalogue
        ]

    def missing_from(self, existing: Iterable[str]) -> list[str]:
        """Catalogue names absent from ``existing``, in catalogue order."""
        present = set(existing)
        return [label.name for label in self.catalogue if label.name not in present]

    # ── Apply ───────────────────────────────────────────────────

    @staticmethod
    def upsert(client: ControlPlane, op: Operation) -> OperationResult:
        result = client.upsert_label(op.target, op.params["description"], op.params["color"])
        if result is LabelWriteResult.CREATED:
            return OperationResult.applied(op, f"Created: {op.target}")
        if result is LabelWriteResult.UPDATED:
            return OperationResult.updated(op, f"Updated: {op.target}")
        logger.warning("Label %s could not be created or updated (%s)", op.target, result.value)
        return OperationResult.failed(op, f"Failed: {op.target} ({result.value})")

    @staticmethod
    def delete(client: ControlPlane, op: Operation) -> OperationResult:
        result = client.delete_label(op.target)
        if result is LabelDeleteResult.DELETED:
            return OperationResult.applied(op, f"Removed: {op.target}")
        if result is LabelDeleteResult.NOT_FOUND:
            return OperationResult.skipped(op, f"Not found: {op.target}")
        logger.warning("Label %s could not be deleted", op.target)
        return OperationResult.failed(op, f"Failed: {op.target}")

    # ── Reporting ───────────────────────────────────────────────

    @staticmethod
    def summarize(results: Iterable[OperationResult]) -> LabelSummary:
        """Fold label results into counts (non-label results are ignored)."""
        summary = LabelSummary()
        for r in results:
            kind = r.operation.kind
            if kind is OperationKind.UPSERT_LABEL:
                if r.status is OperationStatus.APPLIED:
                    summary.created += 1
                elif r.status is OperationStatus.UPDATED:
                    summary.updated += 1
                else:
                    summary.failed += 1
            elif kind is OperationKind.DELETE_LABEL:
                if r.status is OperationStatus.APPLIED:
                    summary.removed += 1
                elif r.status is OperationStatus.SKIPPED:
                    summary.not_found += 1
                else:
                    summary.failed += 1
        return summary
