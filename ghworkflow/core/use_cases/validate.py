"""
Validate use case — read-only diff of the repository against the target.

Never mutates and never aborts: every problem becomes an entry in the
report, and the report decides pass/fail.

Failing:  preflight problems, missing or invalid workflow files,
          missing agent files.
Warnings: missing labels, missing secret, leftover legacy files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ghworkflow.adapters.base import ControlPlane
from ghworkflow.core.catalogue import (
    CURRENT_VERSION,
    agent_specs,
    label_catalogue,
    workflow_specs,
)
from ghworkflow.core.config.loader import Settings
from ghworkflow.core.engine.inspector import inspect_state
from ghworkflow.core.engine.labels import LabelSynchronizer
from ghworkflow.core.preflight import check_preflight

logger = logging.getLogger(__name__)

# Workflows that don't call the model themselves
_NO_SECRET_REQUIRED = frozenset({"orchestrator.yml"})

CLAUDE_ACTION = "anthropics/claude-code-action"


@dataclass
class ValidationReport:
    """Structured diff between the repository and the current target."""

    preflight: list[dict] = field(default_factory=list)
    workflows_expected: int = 0
    missing_files: list[str] = field(default_factory=list)
    invalid_files: list[str] = field(default_factory=list)
    legacy_files: list[str] = field(default_factory=list)
    without_action: list[str] = field(default_factory=list)
    missing_agents: list[str] = field(default_factory=list)
    labels_total: int = 0
    missing_labels: list[str] = field(default_factory=list)
    secret_name: str = ""
    has_secret: bool = False

    @property
    def files_valid(self) -> int:
        return self.workflows_expected - len(self.missing_files) - len(
            {entry.split(" ", 1)[0] for entry in self.invalid_files}
        )

    @property
    def passed(self) -> bool:
        return not (
            self.preflight
            or self.missing_files
            or self.invalid_files
            or self.missing_agents
        )

    @property
    def warnings(self) -> list[str]:
        warnings = []
        if self.missing_labels:
            warnings.append(
                f"{len(self.missing_labels)}/{self.labels_total} workflow labels missing"
            )
        if not self.has_secret:
            warnings.append(f"{self.secret_name} not configured")
        if self.legacy_files:
            warnings.append(f"Legacy workflow files present: {', '.join(self.legacy_files)}")
        if self.without_action:
            warnings.append(
                f"No {CLAUDE_ACTION} usage in: {', '.join(self.without_action)}"
            )
        return warnings

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "preflight": self.preflight,
            "workflows": {
                "expected": self.workflows_expected,
                "valid": self.files_valid,
                "missing": self.missing_files,
                "invalid": self.invalid_files,
                "legacy": self.legacy_files,
                "without_action": self.without_action,
            },
            "agents": {"missing": self.missing_agents},
            "labels": {
                "total": self.labels_total,
                "existing": self.labels_total - len(self.missing_labels),
                "missing": self.missing_labels,
            },
            "secret": {"name": self.secret_name, "configured": self.has_secret},
            "warnings": self.warnings,
        }


def check_workflow_content(path: Path, secret_name: str, require_secret: bool) -> list[str]:
    """Problems with one installed workflow file (empty list = valid)."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return ["read error"]

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return ["invalid YAML"]

    if not isinstance(data, dict):
        return ["not a YAML mapping"]

    problems = []
    if "name" not in data:
        problems.append("missing name")
    # YAML 1.1 loads a bare ``on`` key as boolean True
    if "on" not in data and True not in data:
        problems.append("missing trigger (on:)")
    if "jobs" not in data:
        problems.append("missing jobs")
    if require_secret and secret_name not in content:
        problems.append(f"missing {secret_name}")
    return problems


def uses_claude_action(path: Path) -> bool:
    """True if the workflow file references the Claude Code action."""
    try:
        return CLAUDE_ACTION in path.read_text(encoding="utf-8")
    except OSError:
        return False


def run_validate(
    project_root: Path,
    client: ControlPlane,
    settings: Settings,
) -> ValidationReport:
    """Compare the repository with the current workflow configuration."""
    report = ValidationReport(secret_name=settings.secret_name)

    report.preflight = [
        {"kind": e.kind.value, "error": str(e), "hint": e.hint}
        for e in check_preflight(client)
    ]

    observed = inspect_state(project_root, client, settings)

    # ── Workflow files ───────────────────────────────────────────
    specs = workflow_specs(settings.workflows_dir)
    report.workflows_expected = len(specs)
    for spec in specs:
        if spec.name not in observed.installed_files:
            report.missing_files.append(spec.name)
            continue
        problems = check_workflow_content(
            project_root / spec.target_path,
            settings.secret_name,
            require_secret=spec.name not in _NO_SECRET_REQUIRED,
        )
        report.invalid_files.extend(f"{spec.name} ({p})" for p in problems)
        if (
            spec.name not in _NO_SECRET_REQUIRED
            and not problems
            and not uses_claude_action(project_root / spec.target_path)
        ):
            report.without_action.append(spec.name)

    report.legacy_files = sorted(observed.legacy_files_present)

    # ── Agent files ──────────────────────────────────────────────
    report.missing_agents = [
        spec.name
        for spec in agent_specs(settings.agents_dir)
        if not (project_root / spec.target_path).is_file()
    ]

    # ── Labels & secret ──────────────────────────────────────────
    sync = LabelSynchronizer(label_catalogue(CURRENT_VERSION))
    report.labels_total = len(sync.catalogue)
    report.missing_labels = sync.missing_from(observed.labels)
    report.has_secret = observed.has_secret

    logger.info("Validation %s", "passed" if report.passed else "failed")
    return report
