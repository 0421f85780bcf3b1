"""
State models — what the repository looks like, and what it should look like.

ObservedState is a fresh snapshot built by the inspector on every run.
DesiredState is the target the planner converges to.  Both are frozen:
nothing mutates them for the lifetime of a run, and neither is ever
persisted between invocations.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}$")


class CatalogueVersion(str, Enum):
    """Configuration generation (file set + label alphabet)."""

    V1 = "v1"
    V2 = "v2"


class LabelCategory(str, Enum):
    """Label family — what the label says about who holds the issue."""

    NEEDS = "needs"      # AI working
    REVIEW = "review"    # human review required
    ERROR = "error"      # needs human intervention


class InstallMode(str, Enum):
    FRESH = "fresh"
    UPDATE = "update"


class FileSpec(BaseModel):
    """A file to install: template source → repo-relative destination."""

    model_config = ConfigDict(frozen=True)

    name: str
    source_ref: str
    target_dir: str
    placeholder: str | None = None

    @property
    def target_path(self) -> str:
        return f"{self.target_dir}/{self.name}"


class LabelSpec(BaseModel):
    """One entry of a label catalogue."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    color: str
    category: LabelCategory

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not _HEX_COLOR.match(value):
            raise ValueError(f"label color must be 6 hex digits, got {value!r}")
        return value.lower()


class Toggles(BaseModel):
    """Which setup blocks the run should plan."""

    model_config = ConfigDict(frozen=True)

    install_app: bool = True
    copy_files: bool = True
    copy_agents: bool = True
    setup_labels: bool = True
    add_collaborator: bool = True
    configure_secret: bool = True
    create_sample_issue: bool = False

    @property
    def enabled_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)


class ObservedState(BaseModel):
    """Snapshot of the target repository at inspection time.

    The zero value (all fields empty, ``detected_version=None``)
    means "nothing installed yet".
    """

    model_config = ConfigDict(frozen=True)

    installed_files: frozenset[str] = frozenset()
    legacy_files_present: frozenset[str] = frozenset()
    detected_version: CatalogueVersion | None = None
    labels: frozenset[str] = frozenset()
    has_secret: bool = False
    current_branch: str = "main"

    @property
    def is_installed(self) -> bool:
        return self.detected_version is not None


class DesiredState(BaseModel):
    """The configuration the engine converges to for one run.

    Exactly one catalogue version is active: ``file_specs`` and
    ``label_catalogue`` always come from the same ``version``.
    """

    model_config = ConfigDict(frozen=True)

    version: CatalogueVersion
    mode: InstallMode = InstallMode.FRESH
    file_specs: tuple[FileSpec, ...] = ()
    agent_specs: tuple[FileSpec, ...] = ()
    label_catalogue: tuple[LabelSpec, ...] = ()
    toggles: Toggles = Field(default_factory=Toggles)
    branch_override: str | None = None
    workflows_dir: str = ".github/workflows"

    # Fixed external identities (configuration constants)
    collaborator: str = ""
    secret_name: str = ""
    app_slug: str = ""
    secret_console_url: str = ""
    sample_issue_title: str = ""

    @field_validator("label_catalogue")
    @classmethod
    def _unique_label_names(cls, value: tuple[LabelSpec, ...]) -> tuple[LabelSpec, ...]:
        names = [label.name for label in value]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate label names in catalogue: {', '.join(duplicates)}")
        return value

    @property
    def file_names(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.file_specs)
