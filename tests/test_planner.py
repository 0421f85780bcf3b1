"""
Tests for the reconciler — block order, toggles, migration plan.
"""

from pathlib import Path

import pytest

from ghworkflow.core.catalogue import CURRENT_VERSION
from ghworkflow.core.engine.desired import compute_desired
from ghworkflow.core.engine.planner import build_plan, generate_operation_id
from ghworkflow.core.errors import PlanningError
from ghworkflow.core.models import (
    CATEGORY_ORDER,
    CatalogueVersion,
    InstallMode,
    ObservedState,
    OperationCategory,
    OperationKind,
)

ALL_ON = {
    "install_app": True,
    "copy_files": True,
    "copy_agents": True,
    "setup_labels": True,
    "add_collaborator": True,
    "configure_secret": True,
    "create_sample_issue": True,
}


def _desired(settings, mode=InstallMode.FRESH, toggles=None, **kwargs):
    return compute_desired(
        mode, CURRENT_VERSION, toggles, lambda: False, settings, **kwargs
    )


class TestBuildPlan:
    def test_fresh_all_blocks_in_order(self, settings):
        plan = build_plan(ObservedState(), _desired(settings, toggles=ALL_ON))
        # 1 app + 5 files + 4 agents + 12 labels + collaborator + secret + issue
        assert plan.total == 1 + 5 + 4 + 12 + 1 + 1 + 1
        categories = [op.category for op in plan.operations]
        order = [CATEGORY_ORDER.index(c) for c in categories]
        assert order == sorted(order)
        assert list(plan.by_category()) == list(CATEGORY_ORDER)

    def test_defaults_skip_sample_issue(self, settings):
        plan = build_plan(ObservedState(), _desired(settings))
        assert plan.of_kind(OperationKind.CREATE_SAMPLE_ISSUE) == []

    def test_toggles_gate_blocks(self, settings):
        toggles = {key: False for key in ALL_ON}
        toggles["setup_labels"] = True
        plan = build_plan(ObservedState(), _desired(settings, toggles=toggles))
        assert set(plan.by_category()) == {OperationCategory.LABELS}

    def test_all_off_is_empty(self, settings):
        plan = build_plan(ObservedState(), _desired(settings, toggles={k: False for k in ALL_ON}))
        assert plan.is_empty

    def test_update_plan_migrates(self, settings):
        observed = ObservedState(
            installed_files=frozenset({"orchestrator.yml"}),
            legacy_files_present=frozenset(
                {"stage-triage.yml", "stage-spec.yml", "stage-architect.yml"}
            ),
            detected_version=CatalogueVersion.V1,
        )
        plan = build_plan(observed, _desired(settings, mode=InstallMode.UPDATE))
        assert plan.mode is InstallMode.UPDATE
        removes = plan.of_kind(OperationKind.REMOVE_FILE)
        assert len(removes) == 3
        assert plan.operations[:3] == removes
        assert len(plan.of_kind(OperationKind.COPY_FILE)) == 5 + 4
        assert plan.of_kind(OperationKind.UPSERT_LABEL) == []
        assert plan.of_kind(OperationKind.ENSURE_APP_INSTALLED) == []

    def test_branch_override_wins(self, settings):
        observed = ObservedState(current_branch="feature/x")
        plan = build_plan(observed, _desired(settings, branch_override="develop"))
        branches = {op.params["branch"] for op in plan.operations if "branch" in op.params}
        assert branches == {"develop"}

    def test_current_branch_used(self, settings):
        observed = ObservedState(current_branch="feature/x")
        plan = build_plan(observed, _desired(settings))
        branches = {op.params["branch"] for op in plan.operations if "branch" in op.params}
        assert branches == {"feature/x"}

    def test_sample_issue_mentions_collaborator(self, settings):
        plan = build_plan(ObservedState(), _desired(settings, toggles=ALL_ON))
        issue = plan.of_kind(OperationKind.CREATE_SAMPLE_ISSUE)[0]
        assert issue.target == "Sample: Hello World Function"
        assert "@claude-dev-truefrontier" in issue.params["body"]

    def test_missing_template_raises(self, settings, tmp_path: Path):
        with pytest.raises(PlanningError):
            build_plan(ObservedState(), _desired(settings, templates_dir=tmp_path))

    def test_to_dict(self, settings):
        plan = build_plan(ObservedState(), _desired(settings), operation_id="op-1")
        data = plan.to_dict()
        assert data["operation_id"] == "op-1"
        assert data["mode"] == "fresh"
        assert data["total"] == len(data["operations"])


class TestOperationId:
    def test_format(self):
        op_id = generate_operation_id()
        assert op_id.startswith("op-")
        assert op_id != generate_operation_id()
