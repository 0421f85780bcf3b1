"""
Settings loader — reads ghworkflow.yml into a Settings model.

The file is optional: a repository without one gets the defaults.
It reads YAML, validates against a Pydantic schema, and returns
typed settings.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ghworkflow.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "ghworkflow.yml"

# Identities the shipped templates are written against. Not configurable:
# the workflow files reference them literally.
COLLABORATOR = "claude-dev-truefrontier"
SECRET_NAME = "ANTHROPIC_API_KEY"
APP_SLUG = "claude"


class Settings(BaseModel):
    """Locations and timings used by the engine, plus the fixed identities."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    workflows_dir: str = ".github/workflows"
    agents_dir: str = ".claude/agents"

    gh_timeout: int = 30            # seconds per gh invocation
    app_verify_delay: float = 2.0   # seconds before re-checking the app install

    secret_console_url: str = "https://console.anthropic.com/"
    sample_issue_title: str = "Sample: Hello World Function"

    @property
    def collaborator(self) -> str:
        return COLLABORATOR

    @property
    def secret_name(self) -> str:
        return SECRET_NAME

    @property
    def app_slug(self) -> str:
        return APP_SLUG


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for ghworkflow.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to ghworkflow.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to ghworkflow.yml. None means defaults.

    Raises:
        ConfigError: If the file exists but is unreadable or invalid.
    """
    if path is None:
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings


def settings_for(project_root: Path) -> Settings:
    """Settings for a repository root (ghworkflow.yml there or above, else defaults)."""
    return load_settings(find_settings_file(project_root))
