"""
Adapter base — the contracts between the engine and the outside world.

The engine only talks to GitHub through ``ControlPlane`` and only talks
to the person at the terminal through ``UserInteraction``.  Swapping
either for an in-memory double makes planning and execution fully
deterministic.

Reads raise ``ControlPlaneError`` when the remote cannot be queried.
Label writes return tagged results and never raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ghworkflow.core.models.remote import (
    InstallationStatus,
    LabelDeleteResult,
    LabelWriteResult,
    RepoInfo,
)


class ControlPlane(ABC):
    """Narrow interface to the repository's remote configuration.

    To create a new control plane:
        1. Subclass ControlPlane
        2. Implement every abstract method
        3. Pass the instance to the use case (or via ``obj["client"]``)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier shown in logs (e.g. 'gh', 'memory')."""

    # ── Access ──────────────────────────────────────────────────

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool exists. Fast, never raises."""

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Whether the tool has working credentials. Never raises."""

    @abstractmethod
    def get_repo_info(self) -> RepoInfo:
        """Identity and permissions of the current repository.

        Raises:
            ControlPlaneError: If the repository cannot be resolved.
        """

    # ── Labels ──────────────────────────────────────────────────

    @abstractmethod
    def list_labels(self) -> list[str]:
        """Names of all labels. Raises ControlPlaneError on failure."""

    @abstractmethod
    def create_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        """CREATED, CONFLICT when the label exists, or ERROR."""

    @abstractmethod
    def update_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        """UPDATED or ERROR."""

    def upsert_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        """Create the label, or update it in place if it already exists."""
        result = self.create_label(name, description, color)
        if result is LabelWriteResult.CONFLICT:
            return self.update_label(name, description, color)
        return result

    @abstractmethod
    def delete_label(self, name: str) -> LabelDeleteResult:
        """DELETED, NOT_FOUND, or ERROR."""

    # ── Secrets, app, collaborators, issues ─────────────────────

    @abstractmethod
    def get_secret_names(self) -> list[str]:
        """Names of repository secrets. Raises ControlPlaneError on failure."""

    @abstractmethod
    def get_installation_status(self, repo: RepoInfo, app_slug: str) -> InstallationStatus:
        """Whether the GitHub App is installed on ``repo``. Never raises."""

    @abstractmethod
    def add_collaborator(self, handle: str) -> None:
        """Invite ``handle``. Raises ControlPlaneError on failure."""

    @abstractmethod
    def create_issue(self, title: str, body: str) -> str:
        """Open an issue and return its URL. Raises ControlPlaneError on failure."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class UserInteraction(ABC):
    """Blocking conversations with the user."""

    @abstractmethod
    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def open_url(self, url: str) -> None:
        """Open ``url`` in a browser (best effort)."""

    @abstractmethod
    def acknowledge(self, prompt: str) -> None:
        """Block until the user signals they are done."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show an informational message."""
