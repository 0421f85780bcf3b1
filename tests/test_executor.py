"""
Tests for the executor — per-kind failure classes, abort, run status.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from ghworkflow.adapters.github import GhControlPlane
from ghworkflow.adapters.memory import InMemoryControlPlane, ScriptedInteraction
from ghworkflow.core.engine.executor import (
    ExecutionContext,
    ExecutionListener,
    execute_plan,
    install_url,
)
from ghworkflow.core.engine.planner import Plan
from ghworkflow.core.models import (
    InstallationStatus,
    Operation,
    OperationCategory,
    OperationKind,
    OperationStatus,
    RepoInfo,
    RunStatus,
)


def _op(kind: OperationKind, category: OperationCategory, target: str, **params) -> Operation:
    return Operation(kind=kind, category=category, target=target, params=params)


def _app() -> Operation:
    return _op(OperationKind.ENSURE_APP_INSTALLED, OperationCategory.APP, "claude")


def _collab() -> Operation:
    return _op(OperationKind.ADD_COLLABORATOR, OperationCategory.COLLABORATOR, "bot")


def _issue() -> Operation:
    return _op(OperationKind.CREATE_SAMPLE_ISSUE, OperationCategory.ISSUE, "Sample", body="b")


def _label(name: str) -> Operation:
    return _op(
        OperationKind.UPSERT_LABEL, OperationCategory.LABELS, name,
        description="d", color="aabbcc",
    )


def _run(ops, client, interaction=None, root: Path = Path("."), sleeps=None):
    context = ExecutionContext(
        project_root=root,
        client=client,
        interaction=interaction or ScriptedInteraction(),
        app_verify_delay=2.0,
        sleep=(sleeps.append if sleeps is not None else (lambda s: None)),
    )
    return execute_plan(Plan(operation_id="op-test", operations=list(ops)), context)


class TestRunStatus:
    def test_empty_plan_succeeds(self, client):
        result = _run([], client)
        assert result.status is RunStatus.SUCCEEDED
        assert result.total == 0

    def test_all_ok(self, client):
        result = _run([_label("a:x"), _collab()], client)
        assert result.status is RunStatus.SUCCEEDED

    def test_failed_label_continues(self, client):
        client.fail("create_label", "a:x")
        result = _run([_label("a:x"), _label("a:y"), _collab()], client)
        assert result.status is RunStatus.PARTIALLY_WARNED
        assert [r.status for r in result.results] == [
            OperationStatus.FAILED, OperationStatus.APPLIED, OperationStatus.APPLIED,
        ]

    def test_fatal_stops(self, client):
        client.fail("create_issue")
        result = _run([_label("a:x"), _issue(), _collab()], client)
        assert result.aborted
        assert result.total == 2
        assert result.not_run == 1
        assert result.fatal_result.operation.kind is OperationKind.CREATE_SAMPLE_ISSUE
        assert client.calls("add_collaborator") == []


class TestCollaborator:
    def test_failure_is_warning(self, client):
        client.fail("add_collaborator")
        result = _run([_collab()], client)
        assert result.results[0].status is OperationStatus.WARNED
        assert result.status is RunStatus.PARTIALLY_WARNED


class TestAppInstall:
    def test_already_installed(self, client):
        interaction = ScriptedInteraction()
        result = _run([_app()], client, interaction)
        assert result.results[0].status is OperationStatus.SKIPPED
        assert interaction.opened_urls == []

    def test_unknown_starts_install_flow(self):
        client = InMemoryControlPlane(installation=InstallationStatus.UNKNOWN)
        interaction = ScriptedInteraction(default_answer=True)
        result = _run([_app()], client, interaction)
        assert interaction.opened_urls == [install_url("claude", client.repo)]
        assert len(interaction.prompts) == 1
        # Still inconclusive after confirmation
        assert result.results[0].status is OperationStatus.WARNED
        assert not result.aborted

    def test_unknown_then_declined_is_fatal(self):
        client = InMemoryControlPlane(installation=InstallationStatus.UNKNOWN)
        result = _run([_app()], client, ScriptedInteraction(default_answer=False))
        assert result.results[0].status is OperationStatus.FATAL
        assert result.status is RunStatus.ABORTED

    def test_gh_user_token_starts_install_flow(self, tmp_path):
        repo = json.dumps({"full_name": "octo/demo", "id": 42, "owner": {"id": 7}})

        def fake_run(cmd, **kwargs):
            if cmd[-1] == "repos/{owner}/{repo}":
                return MagicMock(returncode=0, stdout=repo, stderr="")
            return MagicMock(
                returncode=1, stdout="",
                stderr="A JSON web token could not be decoded (HTTP 401)",
            )

        interaction = ScriptedInteraction(default_answer=False)
        with patch("ghworkflow.adapters.github.subprocess.run", side_effect=fake_run):
            result = _run([_app()], GhControlPlane(tmp_path), interaction)

        assert interaction.opened_urls == [
            "https://github.com/apps/claude/installations/new"
            "/permissions?target_id=7&repository_ids[]=42"
        ]
        assert len(interaction.prompts) == 1
        assert result.results[0].status is OperationStatus.FATAL
        assert result.aborted

    def test_repo_info_failure_is_warning(self, client):
        client.fail("get_repo_info")
        result = _run([_app()], client)
        assert result.results[0].status is OperationStatus.WARNED

    def test_declined_is_fatal(self):
        client = InMemoryControlPlane(installation=InstallationStatus.ABSENT)
        interaction = ScriptedInteraction(default_answer=False)
        result = _run([_app(), _collab()], client, interaction)
        assert result.aborted
        assert result.total == 1
        assert result.fatal_result.hint
        assert interaction.opened_urls == [install_url("claude", client.repo)]

    def test_confirmed_and_verified(self):
        client = InMemoryControlPlane(installation=InstallationStatus.INSTALLED)
        client.installation_sequence = [InstallationStatus.ABSENT]
        sleeps: list[float] = []
        result = _run(
            [_app()], client, ScriptedInteraction(default_answer=True), sleeps=sleeps
        )
        assert result.results[0].status is OperationStatus.APPLIED
        assert sleeps == [2.0]

    def test_confirmed_but_unverified(self):
        client = InMemoryControlPlane(installation=InstallationStatus.ABSENT)
        result = _run([_app()], client, ScriptedInteraction(default_answer=True))
        assert result.results[0].status is OperationStatus.WARNED
        assert not result.aborted


class TestInstallUrl:
    def test_with_ids(self):
        url = install_url("claude", RepoInfo(full_name="o/r", repo_id=42, owner_id=7))
        assert url == (
            "https://github.com/apps/claude/installations/new/permissions"
            "?target_id=7&repository_ids[]=42"
        )

    def test_without_ids(self):
        url = install_url("claude", RepoInfo(full_name="o/r"))
        assert url == "https://github.com/apps/claude/installations/new"


class TestSecretPrompt:
    def test_never_fails(self, client):
        interaction = ScriptedInteraction()
        op = _op(
            OperationKind.PROMPT_SECRET, OperationCategory.SECRET, "ANTHROPIC_API_KEY",
            console_url="https://console.example/",
        )
        result = _run([op], client, interaction)
        assert result.results[0].status is OperationStatus.APPLIED
        assert len(interaction.acknowledgements) == 1
        assert any("gh secret set ANTHROPIC_API_KEY" in m for m in interaction.messages)


class TestSampleIssue:
    def test_created(self, client):
        result = _run([_issue()], client)
        assert result.results[0].status is OperationStatus.APPLIED
        assert "issues/1" in result.results[0].message
        assert client.issues == [("Sample", "b")]

    def test_failure_is_fatal(self, client):
        client.fail("create_issue")
        result = _run([_issue()], client)
        assert result.results[0].status is OperationStatus.FATAL
        assert result.status is RunStatus.ABORTED
        assert result.fatal_result.hint == "Check that Issues are enabled for the repository."
        assert result.to_dict()["fatal"]["target"] == "Sample"


class TestListener:
    def test_receives_every_operation(self, client):
        seen: list[tuple[str, int, int]] = []

        class Recorder(ExecutionListener):
            def started(self, index, total, operation):
                seen.append(("started", index, total))

            def finished(self, index, total, result):
                seen.append(("finished", index, total))

        context = ExecutionContext(
            project_root=Path("."), client=client, interaction=ScriptedInteraction()
        )
        execute_plan(Plan(operations=[_label("a:x"), _collab()]), context, Recorder())
        assert seen == [
            ("started", 1, 2), ("finished", 1, 2), ("started", 2, 2), ("finished", 2, 2),
        ]


class TestSummary:
    def test_category_counts_and_dict(self, client):
        client.fail("create_label", "a:y")
        result = _run([_label("a:x"), _label("a:y"), _collab()], client)
        assert result.category_counts() == {
            "labels": {"applied": 1, "failed": 1},
            "collaborator": {"applied": 1},
        }
        assert result.labels.created == 1
        assert result.labels.failed == 1
        data = result.to_dict()
        assert data["status"] == "partially_warned"
        assert data["fatal"] is None
        assert data["executed"] == 3
