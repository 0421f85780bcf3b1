"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from ghworkflow.adapters.memory import InMemoryControlPlane, ScriptedInteraction
from ghworkflow.core.catalogue import LEGACY_WORKFLOW_FILES
from ghworkflow.core.config.loader import Settings


@pytest.fixture(autouse=True)
def _no_git():
    """Branch detection never shells out to git in tests."""
    with patch("ghworkflow.core.engine.inspector.current_branch", return_value="main"):
        yield


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """An empty working tree."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def settings() -> Settings:
    """Default settings with no propagation delay."""
    return Settings(app_verify_delay=0)


@pytest.fixture
def client() -> InMemoryControlPlane:
    return InMemoryControlPlane()


@pytest.fixture
def interaction() -> ScriptedInteraction:
    return ScriptedInteraction()


@pytest.fixture
def legacy_repo(repo_root: Path) -> Path:
    """A working tree with the V1 stage files installed."""
    workflows = repo_root / ".github" / "workflows"
    workflows.mkdir(parents=True)
    for name in sorted(LEGACY_WORKFLOW_FILES):
        (workflows / name).write_text(f"name: {name}\n")
    (workflows / "orchestrator.yml").write_text("name: old orchestrator\n")
    return repo_root
