"""
State inspector — builds an ObservedState snapshot.

Reads the workflow directory, the control plane and git. Nothing is
cached: every run inspects from scratch.

Control-plane read failures degrade to "resource absent". That keeps
``init`` usable when, say, the token cannot list secrets, at the cost
of not telling a transient failure apart from true absence.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ghworkflow.adapters.base import ControlPlane
from ghworkflow.adapters.vcs import current_branch
from ghworkflow.core.catalogue import CURRENT_WORKFLOW_FILES, LEGACY_WORKFLOW_FILES
from ghworkflow.core.config.loader import Settings
from ghworkflow.core.errors import ControlPlaneError
from ghworkflow.core.models.state import CatalogueVersion, ObservedState

logger = logging.getLogger(__name__)


def scan_workflow_files(workflows_dir: Path) -> tuple[frozenset[str], frozenset[str]]:
    """Return (current files present, legacy files present).

    A missing directory is not an error: it means nothing is installed.
    """
    if not workflows_dir.is_dir():
        return frozenset(), frozenset()

    present = {p.name for p in workflows_dir.iterdir() if p.is_file()}
    return (
        frozenset(present & CURRENT_WORKFLOW_FILES),
        frozenset(present & LEGACY_WORKFLOW_FILES),
    )


def detect_version(
    installed: frozenset[str],
    legacy: frozenset[str],
) -> CatalogueVersion | None:
    """Any legacy file means V1; otherwise any current file means V2."""
    if legacy:
        return CatalogueVersion.V1
    if installed:
        return CatalogueVersion.V2
    return None


def read_labels(client: ControlPlane) -> frozenset[str]:
    try:
        return frozenset(client.list_labels())
    except ControlPlaneError as e:
        logger.warning("Could not list labels, assuming none: %s", e)
        return frozenset()


def read_has_secret(client: ControlPlane, secret_name: str) -> bool:
    try:
        return secret_name in client.get_secret_names()
    except ControlPlaneError as e:
        logger.warning("Could not list secrets, assuming %s is missing: %s", secret_name, e)
        return False


def inspect_state(
    project_root: Path,
    client: ControlPlane,
    settings: Settings,
) -> ObservedState:
    """Snapshot the repository's current configuration."""
    installed, legacy = scan_workflow_files(project_root / settings.workflows_dir)
    version = detect_version(installed, legacy)

    observed = ObservedState(
        installed_files=installed,
        legacy_files_present=legacy,
        detected_version=version,
        labels=read_labels(client),
        has_secret=read_has_secret(client, settings.secret_name),
        current_branch=current_branch(project_root),
    )
    logger.info(
        "Observed: version=%s, %d current / %d legacy files, %d labels, secret=%s, branch=%s",
        version.value if version else "none",
        len(installed),
        len(legacy),
        len(observed.labels),
        observed.has_secret,
        observed.current_branch,
    )
    return observed
