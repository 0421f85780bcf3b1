"""
Tests for the desired-state provider — modes and toggle resolution.
"""

import pytest

from ghworkflow.core.engine.desired import (
    UPDATE_TOGGLES,
    compute_desired,
    mode_for,
    resolve_toggles,
)
from ghworkflow.core.models import CatalogueVersion, InstallMode, ObservedState


def _never() -> bool:
    return False


def _always() -> bool:
    return True


class TestModeFor:
    def test_fresh(self):
        assert mode_for(ObservedState()) is InstallMode.FRESH

    def test_update(self):
        observed = ObservedState(detected_version=CatalogueVersion.V1)
        assert mode_for(observed) is InstallMode.UPDATE


class TestResolveToggles:
    def test_fresh_defaults(self):
        toggles = resolve_toggles(InstallMode.FRESH, None, _never)
        assert toggles.install_app and toggles.configure_secret
        assert not toggles.create_sample_issue

    def test_user_choice_applied(self):
        toggles = resolve_toggles(
            InstallMode.FRESH, {"install_app": False, "create_sample_issue": True}, _never
        )
        assert not toggles.install_app
        assert toggles.create_sample_issue

    def test_existing_secret_forces_off(self):
        toggles = resolve_toggles(InstallMode.FRESH, {"configure_secret": True}, _always)
        assert not toggles.configure_secret

    def test_secret_probe_skipped_when_off(self):
        calls = []

        def probe() -> bool:
            calls.append(1)
            return True

        resolve_toggles(InstallMode.FRESH, {"configure_secret": False}, probe)
        assert calls == []

    def test_update_ignores_user(self):
        toggles = resolve_toggles(
            InstallMode.UPDATE,
            {key: True for key in UPDATE_TOGGLES.model_dump()},
            _never,
        )
        assert toggles == UPDATE_TOGGLES
        assert toggles.copy_files and toggles.copy_agents
        assert toggles.enabled_count == 2

    def test_unknown_toggle(self):
        with pytest.raises(ValueError, match="Unknown toggle"):
            resolve_toggles(InstallMode.FRESH, {"launch_rockets": True}, _never)


class TestComputeDesired:
    def test_current_version_only(self, settings):
        with pytest.raises(ValueError, match="current version"):
            compute_desired(InstallMode.FRESH, CatalogueVersion.V1, None, _never, settings)

    def test_consistent_with_settings(self, settings):
        desired = compute_desired(
            InstallMode.FRESH, CatalogueVersion.V2, None, _never, settings,
            branch_override="develop",
        )
        assert desired.version is CatalogueVersion.V2
        assert len(desired.label_catalogue) == 12
        assert len(desired.file_specs) == 5
        assert len(desired.agent_specs) == 4
        assert desired.collaborator == "claude-dev-truefrontier"
        assert desired.secret_name == "ANTHROPIC_API_KEY"
        assert desired.app_slug == "claude"
        assert desired.branch_override == "develop"
        assert all(s.target_dir == settings.workflows_dir for s in desired.file_specs)
