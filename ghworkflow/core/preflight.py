"""
Preflight — verify control-plane access before touching anything.

Order matters: there is no point checking permissions without a
repository, or a repository without an authenticated CLI.
"""

from __future__ import annotations

import logging

from ghworkflow.adapters.base import ControlPlane
from ghworkflow.core.errors import ControlPlaneError, PreflightError, PreflightErrorKind
from ghworkflow.core.models.remote import RepoInfo

logger = logging.getLogger(__name__)


def run_preflight(client: ControlPlane) -> RepoInfo:
    """Check tool, auth, repository and permissions.

    Returns:
        The repository info, for callers that need it.

    Raises:
        PreflightError: On the first failing check.
    """
    if not client.is_available():
        raise PreflightError(
            PreflightErrorKind.GH_MISSING,
            "GitHub CLI (gh) is not installed or not in PATH",
        )

    if not client.is_authenticated():
        raise PreflightError(
            PreflightErrorKind.GH_UNAUTHENTICATED,
            "GitHub CLI is not authenticated",
        )

    try:
        repo = client.get_repo_info()
    except ControlPlaneError as e:
        message = str(e)
        kind = (
            PreflightErrorKind.NOT_A_REPO
            if "not a git repository" in message.lower() or "not found" in message.lower()
            else PreflightErrorKind.REPO_ACCESS_FAILED
        )
        raise PreflightError(kind, f"Failed to access repository information: {message}") from e

    if not repo.can_administer:
        raise PreflightError(
            PreflightErrorKind.NO_PERMISSION,
            f"Repository admin access required for setup on {repo.full_name}",
        )

    logger.info("Preflight passed for %s", repo.full_name)
    return repo


def check_preflight(client: ControlPlane) -> list[PreflightError]:
    """Non-raising variant for validation: the failing check, if any."""
    try:
        run_preflight(client)
    except PreflightError as e:
        return [e]
    return []
