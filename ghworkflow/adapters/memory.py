"""
In-memory control plane — universal test double for the engine.

Holds labels, secrets, collaborators and issues in plain dicts and
records every call, so tests can assert both on end state and on
which operations were attempted. Failures are injected per method
(and optionally per target).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.core.errors import ControlPlaneError
from ghworkflow.core.models.remote import (
    InstallationStatus,
    LabelDeleteResult,
    LabelWriteResult,
    RepoInfo,
    RepoPermissions,
)

READ_METHODS = frozenset({
    "get_repo_info",
    "list_labels",
    "get_secret_names",
    "get_installation_status",
})

MUTATING_METHODS = frozenset({
    "create_label",
    "update_label",
    "delete_label",
    "add_collaborator",
    "create_issue",
})


@dataclass
class RemoteLabel:
    name: str
    description: str = ""
    color: str = "ededed"


class InMemoryControlPlane(ControlPlane):
    """Control plane backed by dictionaries.

    By default everything succeeds. Use ``fail(method)`` to make a
    method fail (reads raise ControlPlaneError, writes return ERROR).
    """

    def __init__(
        self,
        repo: RepoInfo | None = None,
        *,
        available: bool = True,
        authenticated: bool = True,
        labels: dict[str, RemoteLabel] | None = None,
        secrets: set[str] | None = None,
        installation: InstallationStatus = InstallationStatus.INSTALLED,
    ):
        self.repo = repo or RepoInfo(
            full_name="octo/demo",
            repo_id=42,
            owner_id=7,
            permissions=RepoPermissions(admin=True, maintain=True, push=True),
        )
        self.available = available
        self.authenticated = authenticated
        self.labels: dict[str, RemoteLabel] = dict(labels or {})
        self.secrets: set[str] = set(secrets or ())
        self.collaborators: list[str] = []
        self.issues: list[tuple[str, str]] = []
        self.installation = installation
        # Statuses returned by successive installation checks (then ``installation``)
        self.installation_sequence: list[InstallationStatus] = []
        self._failures: dict[str, set[str] | None] = {}
        self._call_log: list[tuple[str, tuple]] = []

    @property
    def name(self) -> str:
        return "memory"

    # ── Test controls ───────────────────────────────────────────

    @property
    def call_log(self) -> list[tuple[str, tuple]]:
        """Every (method, args) this fake has received."""
        return self._call_log

    @property
    def mutating_calls(self) -> list[tuple[str, tuple]]:
        return [call for call in self._call_log if call[0] in MUTATING_METHODS]

    def calls(self, method: str) -> list[tuple]:
        return [args for name, args in self._call_log if name == method]

    def fail(self, method: str, *targets: str) -> None:
        """Make ``method`` fail, for all targets or only the given ones."""
        self._failures[method] = set(targets) if targets else None

    def reset(self) -> None:
        """Clear call log and injected failures."""
        self._call_log.clear()
        self._failures.clear()

    def _record(self, method: str, *args: object) -> bool:
        """Log the call; return True when an injected failure applies."""
        self._call_log.append((method, args))
        if method not in self._failures:
            return False
        targets = self._failures[method]
        return targets is None or (bool(args) and args[0] in targets)

    # ── Access ──────────────────────────────────────────────────

    def is_available(self) -> bool:
        return self.available

    def is_authenticated(self) -> bool:
        return self.authenticated

    def get_repo_info(self) -> RepoInfo:
        if self._record("get_repo_info"):
            raise ControlPlaneError("injected repo info failure")
        return self.repo

    # ── Labels ──────────────────────────────────────────────────

    def list_labels(self) -> list[str]:
        if self._record("list_labels"):
            raise ControlPlaneError("injected label list failure")
        return list(self.labels)

    def create_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        if self._record("create_label", name, description, color):
            return LabelWriteResult.ERROR
        if name in self.labels:
            return LabelWriteResult.CONFLICT
        self.labels[name] = RemoteLabel(name, description, color)
        return LabelWriteResult.CREATED

    def update_label(self, name: str, description: str, color: str) -> LabelWriteResult:
        if self._record("update_label", name, description, color) or name not in self.labels:
            return LabelWriteResult.ERROR
        self.labels[name] = RemoteLabel(name, description, color)
        return LabelWriteResult.UPDATED

    def delete_label(self, name: str) -> LabelDeleteResult:
        if self._record("delete_label", name):
            return LabelDeleteResult.ERROR
        if self.labels.pop(name, None) is None:
            return LabelDeleteResult.NOT_FOUND
        return LabelDeleteResult.DELETED

    # ── Secrets, app, collaborators, issues ─────────────────────

    def get_secret_names(self) -> list[str]:
        if self._record("get_secret_names"):
            raise ControlPlaneError("injected secret list failure")
        return sorted(self.secrets)

    def get_installation_status(self, repo: RepoInfo, app_slug: str) -> InstallationStatus:
        if self._record("get_installation_status", repo.full_name, app_slug):
            return InstallationStatus.UNKNOWN
        if self.installation_sequence:
            return self.installation_sequence.pop(0)
        return self.installation

    def add_collaborator(self, handle: str) -> None:
        if self._record("add_collaborator", handle):
            raise ControlPlaneError(f"injected failure inviting {handle}")
        if handle not in self.collaborators:
            self.collaborators.append(handle)

    def create_issue(self, title: str, body: str) -> str:
        if self._record("create_issue", title, body):
            raise ControlPlaneError("injected issue failure")
        self.issues.append((title, body))
        return f"https://github.com/{self.repo.full_name}/issues/{len(self.issues)}"


@dataclass
class ScriptedInteraction(UserInteraction):
    """UserInteraction that answers from a script and records everything.

    ``answers`` maps a prompt substring to the answer; unmatched prompts
    get ``default_answer`` (or the prompt's own default when None).
    """

    answers: dict[str, bool] = field(default_factory=dict)
    default_answer: bool | None = None
    prompts: list[str] = field(default_factory=list)
    opened_urls: list[str] = field(default_factory=list)
    acknowledgements: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        for fragment, answer in self.answers.items():
            if fragment in prompt:
                return answer
        return default if self.default_answer is None else self.default_answer

    def open_url(self, url: str) -> None:
        self.opened_urls.append(url)

    def acknowledge(self, prompt: str) -> None:
        self.acknowledgements.append(prompt)

    def notify(self, message: str) -> None:
        self.messages.append(message)
