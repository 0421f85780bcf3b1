"""
File synchronizer — workflow and agent file operations.

Planning:
    legacy files not in the desired set  → REMOVE_FILE
    every desired FileSpec               → COPY_FILE (always; overwrite)

Copies are not diffed against what is installed: re-copying an
identical file is a no-op in effect, and that is what makes re-runs safe.

Specs with a placeholder get one literal substitution at copy time:
``base_branch: "main"`` → ``base_branch: "<branch>"``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ghworkflow.core.errors import PlanningError
from ghworkflow.core.models.operation import (
    Operation,
    OperationCategory,
    OperationKind,
    OperationResult,
)
from ghworkflow.core.models.state import FileSpec

logger = logging.getLogger(__name__)


def substitute_branch(content: str, placeholder: str, branch: str) -> str:
    """Replace every literal ``placeholder`` with the same line pointing at ``branch``.

    The placeholder is ``base_branch: "main"``; the replacement keeps the
    key and quoting and only swaps the branch name.
    """
    if not placeholder or placeholder not in content:
        return content
    key = placeholder.split(":", 1)[0]
    return content.replace(placeholder, f'{key}: "{branch}"')


def plan_removals(
    legacy_present: Iterable[str],
    desired_names: frozenset[str],
    workflows_dir: str,
) -> list[Operation]:
    """REMOVE_FILE for every legacy file the desired set does not keep."""
    return [
        Operation(
            kind=OperationKind.REMOVE_FILE,
            category=OperationCategory.FILES,
            target=f"{workflows_dir}/{name}",
            params={"name": name},
        )
        for name in sorted(set(legacy_present) - desired_names)
    ]


def plan_copies(
    specs: Iterable[FileSpec],
    branch: str,
    category: OperationCategory,
) -> list[Operation]:
    """COPY_FILE for every spec, in spec order.

    Raises:
        PlanningError: If any spec's template is missing. No partial
            list is returned.
    """
    specs = list(specs)
    missing = [spec.name for spec in specs if not Path(spec.source_ref).is_file()]
    if missing:
        raise PlanningError(f"Template file not found: {', '.join(missing)}")

    operations = []
    for spec in specs:
        params: dict[str, str] = {"name": spec.name, "source": spec.source_ref}
        if spec.placeholder:
            params["placeholder"] = spec.placeholder
            params["branch"] = branch
        operations.append(
            Operation(
                kind=OperationKind.COPY_FILE,
                category=category,
                target=spec.target_path,
                params=params,
            )
        )
    return operations


# ── Apply ───────────────────────────────────────────────────────


def apply_copy(project_root: Path, op: Operation) -> OperationResult:
    """Copy the template into the repository, substituting the branch.

    A missing source or any write error is FATAL.
    """
    source = Path(op.params["source"])
    target = project_root / op.target

    if not source.is_file():
        return OperationResult.fatal_error(
            op,
            f"Template file not found: {source}",
            hint="Reinstall ghworkflow; its packaged templates are incomplete.",
        )

    try:
        content = source.read_text(encoding="utf-8")
        placeholder = op.params.get("placeholder")
        if placeholder:
            content = substitute_branch(content, placeholder, op.params["branch"])

        existed = target.exists()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        return OperationResult.fatal_error(
            op,
            f"Cannot write {op.target}: {e}",
            hint="Check file permissions in the repository.",
        )

    logger.debug("Copied %s → %s", source, target)
    if existed:
        return OperationResult.updated(op, f"Overwrote {op.target}")
    return OperationResult.applied(op, f"Created {op.target}")


def apply_remove(project_root: Path, op: Operation) -> OperationResult:
    """Delete a legacy file. Already-absent is fine; an OS error is FATAL."""
    target = project_root / op.target
    if not target.exists():
        return OperationResult.skipped(op, f"{op.target} already absent")

    try:
        target.unlink()
    except OSError as e:
        return OperationResult.fatal_error(
            op,
            f"Cannot remove {op.target}: {e}",
            hint="Check file permissions in the repository.",
        )

    logger.debug("Removed legacy file %s", target)
    return OperationResult.applied(op, f"Removed {op.target}")
