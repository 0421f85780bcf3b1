"""
Operation and OperationResult models — the execution contract.

Operations are planned changes. Results are what happened when the
executor applied them. Handlers return results, never exceptions:
a failure is captured as a status, and only FATAL stops the run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class OperationKind(str, Enum):
    ENSURE_APP_INSTALLED = "ensure_app_installed"
    COPY_FILE = "copy_file"
    REMOVE_FILE = "remove_file"
    UPSERT_LABEL = "upsert_label"
    DELETE_LABEL = "delete_label"
    ADD_COLLABORATOR = "add_collaborator"
    PROMPT_SECRET = "prompt_secret"
    CREATE_SAMPLE_ISSUE = "create_sample_issue"


class OperationCategory(str, Enum):
    """Plan block an operation belongs to, in execution order."""

    APP = "app"
    FILES = "files"
    AGENTS = "agents"
    LABELS = "labels"
    COLLABORATOR = "collaborator"
    SECRET = "secret"
    ISSUE = "issue"


CATEGORY_ORDER: tuple[OperationCategory, ...] = tuple(OperationCategory)

MUTATING_KINDS = frozenset({
    OperationKind.COPY_FILE,
    OperationKind.REMOVE_FILE,
    OperationKind.UPSERT_LABEL,
    OperationKind.DELETE_LABEL,
    OperationKind.ADD_COLLABORATOR,
    OperationKind.CREATE_SAMPLE_ISSUE,
})


class OperationStatus(str, Enum):
    APPLIED = "applied"
    UPDATED = "updated"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"
    FATAL = "fatal"


class RunStatus(str, Enum):
    """Lifecycle of one plan execution."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    PARTIALLY_WARNED = "partially_warned"
    ABORTED = "aborted"


class Operation(BaseModel):
    """A single planned change.

    ``target`` identifies what is touched (a repo-relative path, a
    label name, a collaborator handle, ...). ``params`` carries the
    kind-specific payload.
    """

    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    category: OperationCategory
    target: str
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_mutating(self) -> bool:
        return self.kind in MUTATING_KINDS

    def describe(self) -> str:
        """One-line human description, used by dry-run and progress output."""
        if self.kind is OperationKind.COPY_FILE:
            source = self.params.get("source", "?")
            branch = self.params.get("branch")
            suffix = f" (base_branch → {branch})" if branch else ""
            return f"Copy {source} → {self.target}{suffix}"
        if self.kind is OperationKind.REMOVE_FILE:
            return f"Remove legacy file {self.target}"
        if self.kind is OperationKind.UPSERT_LABEL:
            return f"Create or update label {self.target} (#{self.params.get('color', '')})"
        if self.kind is OperationKind.DELETE_LABEL:
            return f"Delete label {self.target}"
        if self.kind is OperationKind.ADD_COLLABORATOR:
            return f"Add collaborator {self.target}"
        if self.kind is OperationKind.PROMPT_SECRET:
            return f"Configure secret {self.target}"
        if self.kind is OperationKind.CREATE_SAMPLE_ISSUE:
            return f"Create sample issue '{self.target}'"
        return f"Check GitHub App '{self.target}' installation"


class OperationResult(BaseModel):
    """Outcome of applying one operation."""

    operation: Operation
    status: OperationStatus
    message: str = ""
    error: str | None = None
    hint: str | None = None
    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status in (
            OperationStatus.APPLIED,
            OperationStatus.UPDATED,
            OperationStatus.SKIPPED,
        )

    @property
    def fatal(self) -> bool:
        return self.status is OperationStatus.FATAL

    @classmethod
    def applied(cls, operation: Operation, message: str = "", **kwargs: Any) -> OperationResult:
        return cls(operation=operation, status=OperationStatus.APPLIED, message=message, **kwargs)

    @classmethod
    def updated(cls, operation: Operation, message: str = "", **kwargs: Any) -> OperationResult:
        return cls(operation=operation, status=OperationStatus.UPDATED, message=message, **kwargs)

    @classmethod
    def skipped(cls, operation: Operation, reason: str = "", **kwargs: Any) -> OperationResult:
        return cls(operation=operation, status=OperationStatus.SKIPPED, message=reason, **kwargs)

    @classmethod
    def warned(cls, operation: Operation, message: str, **kwargs: Any) -> OperationResult:
        return cls(operation=operation, status=OperationStatus.WARNED, message=message, **kwargs)

    @classmethod
    def failed(cls, operation: Operation, error: str, **kwargs: Any) -> OperationResult:
        return cls(operation=operation, status=OperationStatus.FAILED, error=error, **kwargs)

    @classmethod
    def fatal_error(
        cls,
        operation: Operation,
        error: str,
        hint: str | None = None,
        **kwargs: Any,
    ) -> OperationResult:
        return cls(
            operation=operation,
            status=OperationStatus.FATAL,
            error=error,
            hint=hint,
            **kwargs,
        )
