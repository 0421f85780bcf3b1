"""
Tests for preflight checks and their remediation hints.
"""

import pytest

from ghworkflow.adapters.memory import InMemoryControlPlane
from ghworkflow.core.errors import (
    ControlPlaneError,
    PreflightError,
    PreflightErrorKind,
    remediation_hint,
)
from ghworkflow.core.models import RepoInfo, RepoPermissions
from ghworkflow.core.preflight import check_preflight, run_preflight


class _RepoFailure(InMemoryControlPlane):
    def __init__(self, message: str):
        super().__init__()
        self._message = message

    def get_repo_info(self) -> RepoInfo:
        raise ControlPlaneError(self._message)


class TestRunPreflight:
    def test_passes(self, client):
        assert run_preflight(client).full_name == "octo/demo"

    def test_gh_missing_first(self):
        client = InMemoryControlPlane(available=False, authenticated=False)
        with pytest.raises(PreflightError) as exc:
            run_preflight(client)
        assert exc.value.kind is PreflightErrorKind.GH_MISSING

    def test_unauthenticated(self):
        with pytest.raises(PreflightError) as exc:
            run_preflight(InMemoryControlPlane(authenticated=False))
        assert exc.value.kind is PreflightErrorKind.GH_UNAUTHENTICATED
        assert exc.value.hint == "Run: gh auth login"

    @pytest.mark.parametrize(
        "message,kind",
        [
            ("fatal: not a git repository", PreflightErrorKind.NOT_A_REPO),
            ("HTTP 404: Not Found", PreflightErrorKind.NOT_A_REPO),
            ("connection reset by peer", PreflightErrorKind.REPO_ACCESS_FAILED),
        ],
    )
    def test_repo_failures(self, message, kind):
        with pytest.raises(PreflightError) as exc:
            run_preflight(_RepoFailure(message))
        assert exc.value.kind is kind
        assert message in str(exc.value)

    def test_push_only_is_not_enough(self):
        client = InMemoryControlPlane(
            repo=RepoInfo(full_name="o/r", permissions=RepoPermissions(push=True))
        )
        with pytest.raises(PreflightError) as exc:
            run_preflight(client)
        assert exc.value.kind is PreflightErrorKind.NO_PERMISSION

    def test_maintain_is_enough(self):
        client = InMemoryControlPlane(
            repo=RepoInfo(full_name="o/r", permissions=RepoPermissions(maintain=True))
        )
        assert run_preflight(client).full_name == "o/r"


class TestCheckPreflight:
    def test_no_problems(self, client):
        assert check_preflight(client) == []

    def test_collects_problem(self):
        problems = check_preflight(InMemoryControlPlane(available=False))
        assert [p.kind for p in problems] == [PreflightErrorKind.GH_MISSING]


class TestHints:
    def test_every_kind_has_hint(self):
        for kind in PreflightErrorKind:
            assert remediation_hint(kind)
