"""
Desired-state provider — version selection plus user toggles.

Fresh installs honour the user's choices. Updates ignore them: an
update only ever refreshes workflow and agent files, and never touches
labels, the collaborator or the secret again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from ghworkflow.core.catalogue import (
    CURRENT_VERSION,
    agent_specs,
    label_catalogue,
    workflow_specs,
)
from ghworkflow.core.config.loader import Settings
from ghworkflow.core.models.state import (
    CatalogueVersion,
    DesiredState,
    InstallMode,
    ObservedState,
    Toggles,
)

logger = logging.getLogger(__name__)

UPDATE_TOGGLES = Toggles(
    install_app=False,
    copy_files=True,
    copy_agents=True,
    setup_labels=False,
    add_collaborator=False,
    configure_secret=False,
    create_sample_issue=False,
)


def mode_for(observed: ObservedState) -> InstallMode:
    """Any pre-existing installation switches to update mode."""
    return InstallMode.UPDATE if observed.is_installed else InstallMode.FRESH


def resolve_toggles(
    mode: InstallMode,
    user_toggles: Mapping[str, bool] | None,
    secret_probe: Callable[[], bool],
) -> Toggles:
    """Merge defaults, user choices and forced values into Toggles."""
    if mode is InstallMode.UPDATE:
        if user_toggles:
            logger.debug("Update mode: ignoring user toggles %s", dict(user_toggles))
        return UPDATE_TOGGLES

    values = Toggles().model_dump()
    for key, value in (user_toggles or {}).items():
        if key not in values:
            raise ValueError(f"Unknown toggle: {key}")
        values[key] = bool(value)

    if values["configure_secret"] and secret_probe():
        logger.info("Secret already configured, skipping secret setup")
        values["configure_secret"] = False

    return Toggles(**values)


def compute_desired(
    mode: InstallMode,
    version: CatalogueVersion,
    user_toggles: Mapping[str, bool] | None,
    secret_probe: Callable[[], bool],
    settings: Settings,
    *,
    templates_dir: Path | None = None,
    branch_override: str | None = None,
) -> DesiredState:
    """Build the DesiredState for one run.

    Args:
        mode: FRESH or UPDATE.
        version: Target generation; must be the engine's current one.
        user_toggles: Partial toggle choices (ignored in UPDATE mode).
        secret_probe: Returns True when the secret already exists.
        settings: Fixed identities and target directories.
        templates_dir: Override for the packaged templates.
        branch_override: Base branch to substitute instead of the current one.

    Raises:
        ValueError: If ``version`` is not the current version, or a
            toggle name is unknown.
    """
    if version is not CURRENT_VERSION:
        raise ValueError(
            f"Can only target the current version ({CURRENT_VERSION.value}), got {version.value}"
        )

    return DesiredState(
        version=version,
        mode=mode,
        file_specs=workflow_specs(settings.workflows_dir, templates_dir),
        agent_specs=agent_specs(settings.agents_dir, templates_dir),
        label_catalogue=label_catalogue(version),
        toggles=resolve_toggles(mode, user_toggles, secret_probe),
        branch_override=branch_override,
        workflows_dir=settings.workflows_dir,
        collaborator=settings.collaborator,
        secret_name=settings.secret_name,
        app_slug=settings.app_slug,
        secret_console_url=settings.secret_console_url,
        sample_issue_title=settings.sample_issue_title,
    )
