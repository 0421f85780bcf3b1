"""
Error taxonomy.

Exceptions are reserved for conditions that stop a run before any
mutation: preflight failures, planning failures and bad configuration.
Everything that happens during execution is an OperationResult.
"""

from __future__ import annotations

from enum import Enum


class GhWorkflowError(Exception):
    """Base class for all ghworkflow errors."""


class ConfigError(GhWorkflowError):
    """Raised when ghworkflow.yml is invalid."""


class ControlPlaneError(GhWorkflowError):
    """Raised by control-plane reads when the remote cannot be queried."""


class PlanningError(GhWorkflowError):
    """Raised when a plan cannot be built (e.g. a template is missing)."""


class PreflightErrorKind(str, Enum):
    GH_MISSING = "gh_missing"
    GH_UNAUTHENTICATED = "gh_unauthenticated"
    NOT_A_REPO = "not_a_repo"
    REPO_ACCESS_FAILED = "repo_access_failed"
    NO_PERMISSION = "no_permission"


_HINTS: dict[PreflightErrorKind, str] = {
    PreflightErrorKind.GH_MISSING: "Install GitHub CLI: https://cli.github.com/",
    PreflightErrorKind.GH_UNAUTHENTICATED: "Run: gh auth login",
    PreflightErrorKind.NOT_A_REPO: (
        "Run inside a clone of a GitHub repository (check: gh repo view)"
    ),
    PreflightErrorKind.REPO_ACCESS_FAILED: (
        "Check your network connection and that gh can reach the repository"
    ),
    PreflightErrorKind.NO_PERMISSION: "Ensure you have repository admin access",
}


def remediation_hint(kind: PreflightErrorKind) -> str:
    """The fix suggestion printed next to a preflight failure."""
    return _HINTS[kind]


class PreflightError(GhWorkflowError):
    """Missing or unusable control-plane access.

    ``kind`` is machine readable and selects the remediation hint.
    """

    def __init__(self, kind: PreflightErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def hint(self) -> str:
        return remediation_hint(self.kind)
