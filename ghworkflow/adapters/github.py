"""
GitHub control plane — every remote action goes through the ``gh`` CLI.

Channel-independent: no HTTP client, no token handling. ``gh`` owns
authentication and resolves ``{owner}/{repo}`` from the working tree.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from pathlib import Path

from ghworkflow.adapters.base import ControlPlane
from ghworkflow.core.errors import ControlPlaneError
from ghworkflow.core.models.remote import (
    InstallationStatus,
    LabelDeleteResult,
    LabelWriteResult,
    RepoInfo,
    RepoPermissions,
)

logger = logging.getLogger(__name__)


def run_gh(
    *args: str,
    cwd: Path,
    timeout: int = 30,
) -> subprocess.CompletedProcess[str]:
    """Run a gh CLI command and return the result."""
    return subprocess.run(
        ["gh", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def _parse_json(stdout: str, what: str) -> object:
    try:
        return json.loads(stdout or "null")
    except (json.JSONDecodeError, ValueError) as e:
        raise ControlPlaneError(f"Unparseable {what} response from gh: {e}") from e


class GhControlPlane(ControlPlane):
    """Control plane backed by the GitHub CLI.

    Args:
        project_root: Working tree of the target repository.
        timeout: Seconds allowed per gh invocation.
    """

    def __init__(self, project_root: Path, timeout: int = 30):
        self._root = project_root
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "gh"

    # ── Transport ───────────────────────────────────────────────

    def _gh(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run gh, turning transport failures into ControlPlaneError."""
        logger.debug("gh %s", " ".join(args))
        try:
            return run_gh(*args, cwd=self._root, timeout=self._timeout)
        except FileNotFoundError as e:
            raise ControlPlaneError("gh CLI not installed") from e
        except subprocess.TimeoutExpired as e:
            raise ControlPlaneError(f"gh {args[0]} timed out after {self._timeout}s") from e
        except OSError as e:
            raise ControlPlaneError(f"gh {args[0]} could not run: {e}") from e

    def _gh_ok(self, *args: str) -> str:
        """Run gh and return stdout, raising on a non-zero exit."""
        r = self._gh(*args)
        if r.returncode != 0:
            raise ControlPlaneError(r.stderr.strip() or f"gh {args[0]} exited with {r.returncode}")
        return r.stdout

    # ── Access ──────────────────────────────────────────────────

    def is_available(self) -> bool:
        return shutil.which("gh") is not None

    def is_authenticated(self) -> bool:
        try:
            return self._gh("auth", "status").returncode == 0
        except ControlPlaneError:
            return False

    def get_repo_info(self) -> RepoInfo:
        data = _parse_json(self._gh_ok("api", "repos/{owner}/{repo}"), "repository")
        if not isinstance(data, dict) or not data.get("full_name"):
            raise ControlPlaneError("Not in a GitHub repository or repository not found")

        perms = data.get("permissions") or {}
        return RepoInfo(
            full_name=data["full_name"],
            repo_id=data.get("id"),
            owner_id=(data.get("owner") or {}).get("id"),
            default_branch=data.get("default_branch") or "main",
            permissions=RepoPermissions(
                admin=bool(perms.get("admin")),
                maintain=bool(perms.get("maintain")),
                push=bool(perms.get("push")),
            ),
        )

    # ── Labels ──────────────────────────────────────────────────

    def list_labels(self) -> list[str]:
        data = _parse_json(
            self._gh_ok("label", "list", "--json", "name", "--limit", "1000"),
            "label list",
        )
        return [item["name"] for item in data or [] if "name" in item]

    def create_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        try:
            r = self._gh("label", "create", name, "--description", description, "--color", color)
        except ControlPlaneError as e:
            logger.warning("Label create %s failed: %s", name, e)
            return LabelWriteResult.ERROR
        if r.returncode == 0:
            return LabelWriteResult.CREATED
        if "already exists" in r.stderr.lower():
            return LabelWriteResult.CONFLICT
        logger.debug("Label create %s failed: %s", name, r.stderr.strip())
        return LabelWriteResult.ERROR

    def update_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        try:
            r = self._gh("label", "edit", name, "--description", description, "--color", color)
        except ControlPlaneError as e:
            logger.warning("Label edit %s failed: %s", name, e)
            return LabelWriteResult.ERROR
        if r.returncode == 0:
            return LabelWriteResult.UPDATED
        logger.debug("Label edit %s failed: %s", name, r.stderr.strip())
        return LabelWriteResult.ERROR

    def delete_label(self, name: str) -> LabelDeleteResult:
        try:
            r = self._gh("label", "delete", name, "--yes")
        except ControlPlaneError as e:
            logger.warning("Label delete %s failed: %s", name, e)
            return LabelDeleteResult.ERROR
        if r.returncode == 0:
            return LabelDeleteResult.DELETED
        stderr = r.stderr.lower()
        if "not found" in stderr or "404" in stderr:
            return LabelDeleteResult.NOT_FOUND
        logger.debug("Label delete %s failed: %s", name, r.stderr.strip())
        return LabelDeleteResult.ERROR

    # ── Secrets, app, collaborators, issues ─────────────────────

    def get_secret_names(self) -> list[str]:
        data = _parse_json(self._gh_ok("secret", "list", "--json", "name"), "secret list")
        return [item["name"] for item in data or [] if "name" in item]

    def get_installation_status(self, repo: RepoInfo, app_slug: str) -> InstallationStatus:
        try:
            r = self._gh("api", f"repos/{repo.full_name}/installation")
        except ControlPlaneError as e:
            logger.warning("Installation check failed: %s", e)
            return InstallationStatus.UNKNOWN

        if r.returncode == 0:
            if app_slug.lower() in r.stdout.lower():
                return InstallationStatus.INSTALLED
            return InstallationStatus.ABSENT
        stderr = r.stderr.lower()
        if "404" in stderr or "not found" in stderr:
            return InstallationStatus.ABSENT
        logger.debug("Installation check inconclusive: %s", r.stderr.strip())
        return InstallationStatus.UNKNOWN

    def add_collaborator(self, handle: str) -> None:
        self._gh_ok(
            "api", "--method", "PUT",
            f"repos/{{owner}}/{{repo}}/collaborators/{handle}",
        )

    def create_issue(self, title: str, body: str) -> str:
        return self._gh_ok("issue", "create", "--title", title, "--body", body).strip()
