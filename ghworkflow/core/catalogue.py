"""
Catalogues — the fixed, versioned resources the engine manages.

Two generations exist:

    V1  stages triage → spec → architect → develop   (16 labels)
    V2  stages specify → plan → develop              (12 labels)

Each issue carries at most one label from the active alphabet at a
time; enforcing that is the workflows' job, not ours.  We only make
sure the alphabet exists with the right description and colour.

Catalogues are immutable tuples keyed by version and are handed to
the synchronizers through DesiredState, never read as globals by them.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

from ghworkflow.core.models.state import (
    CatalogueVersion,
    FileSpec,
    LabelCategory,
    LabelSpec,
)

CURRENT_VERSION = CatalogueVersion.V2

# Literal text rewritten in placeholder-bearing workflow files.
BRANCH_PLACEHOLDER = 'base_branch: "main"'

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _label(name: str, description: str, color: str) -> LabelSpec:
    category = LabelCategory(name.split(":", 1)[0])
    return LabelSpec(name=name, description=description, color=color, category=category)


_V1_LABELS = (
    # needs:* (AI working)
    _label("needs:triage", "AI is analyzing and triaging this issue", "0052cc"),
    _label("needs:triage-revision", "AI is revising triage analysis based on feedback", "0052cc"),
    _label("needs:spec", "AI is creating BDD specification for this issue", "5319e7"),
    _label("needs:spec-revision", "AI is revising BDD specification based on feedback", "5319e7"),
    _label("needs:architect", "AI is designing technical architecture for this issue", "f57c00"),
    _label("needs:architect-revision", "AI is revising architecture design based on feedback", "f57c00"),
    _label("needs:develop", "AI is implementing code for this issue", "2e7d32"),
    _label("needs:develop-revision", "AI is revising implementation based on feedback", "2e7d32"),
    # review:* (human review required)
    _label("review:triage", "Triage analysis ready for human review", "81c784"),
    _label("review:spec", "BDD specification ready for human review", "ba68c8"),
    _label("review:architect", "Architecture design ready for human review", "ffb74d"),
    _label("review:develop", "Implementation ready for human review", "a5d6a7"),
    # error:* (needs human intervention)
    _label("error:triage", "Triage stage encountered an error", "d32f2f"),
    _label("error:spec", "Specification stage encountered an error", "d32f2f"),
    _label("error:architect", "Architecture stage encountered an error", "d32f2f"),
    _label("error:develop", "Development stage encountered an error", "d32f2f"),
)

_V2_LABELS = (
    _label("needs:specify", "AI is writing the feature specification", "5319e7"),
    _label("needs:specify-revision", "AI is revising the specification based on feedback", "5319e7"),
    _label("needs:plan", "AI is writing the implementation plan and tasks", "f57c00"),
    _label("needs:plan-revision", "AI is revising the implementation plan based on feedback", "f57c00"),
    _label("needs:develop", "AI is implementing code for this issue", "2e7d32"),
    _label("needs:develop-revision", "AI is revising implementation based on feedback", "2e7d32"),
    _label("review:specify", "Specification ready for human review", "ba68c8"),
    _label("review:plan", "Implementation plan ready for human review", "ffb74d"),
    _label("review:develop", "Implementation ready for human review", "a5d6a7"),
    _label("error:specify", "Specification stage encountered an error", "d32f2f"),
    _label("error:plan", "Planning stage encountered an error", "d32f2f"),
    _label("error:develop", "Development stage encountered an error", "d32f2f"),
)

LABEL_CATALOGUES: MappingProxyType[CatalogueVersion, tuple[LabelSpec, ...]] = MappingProxyType({
    CatalogueVersion.V1: _V1_LABELS,
    CatalogueVersion.V2: _V2_LABELS,
})

# Workflow filenames per generation. The two sets are disjoint: files
# V1 shared with V2 (orchestrator, stage-develop) count as current.
LEGACY_WORKFLOW_FILES: frozenset[str] = frozenset({
    "stage-triage.yml",
    "stage-spec.yml",
    "stage-architect.yml",
})

# (filename, carries the base-branch placeholder)
_V2_WORKFLOWS: tuple[tuple[str, bool], ...] = (
    ("orchestrator.yml", True),
    ("stage-specify.yml", False),
    ("stage-plan.yml", False),
    ("stage-tasks.yml", False),
    ("stage-develop.yml", True),
)

CURRENT_WORKFLOW_FILES: frozenset[str] = frozenset(name for name, _ in _V2_WORKFLOWS)

_V2_AGENTS: tuple[str, ...] = (
    "specify.md",
    "plan.md",
    "tasks.md",
    "develop.md",
)


def label_catalogue(version: CatalogueVersion) -> tuple[LabelSpec, ...]:
    """The label alphabet for one generation."""
    return LABEL_CATALOGUES[version]


def workflow_specs(
    workflows_dir: str,
    templates_dir: Path | None = None,
) -> tuple[FileSpec, ...]:
    """Current-generation workflow files, in install order."""
    source_root = (templates_dir or TEMPLATES_DIR) / "workflows"
    return tuple(
        FileSpec(
            name=name,
            source_ref=str(source_root / name),
            target_dir=workflows_dir,
            placeholder=BRANCH_PLACEHOLDER if has_placeholder else None,
        )
        for name, has_placeholder in _V2_WORKFLOWS
    )


def agent_specs(
    agents_dir: str,
    templates_dir: Path | None = None,
) -> tuple[FileSpec, ...]:
    """Current-generation agent prompt files, in install order."""
    source_root = (templates_dir or TEMPLATES_DIR) / "agents"
    return tuple(
        FileSpec(name=name, source_ref=str(source_root / name), target_dir=agents_dir)
        for name in _V2_AGENTS
    )
