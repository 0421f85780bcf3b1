"""
VCS helpers — local git queries.

Uses the git CLI, never a library binding.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


def run_git(
    *args: str,
    cwd: Path,
    timeout: int = 15,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def current_branch(project_root: Path) -> str:
    """Checked-out branch name, or ``"main"`` when it cannot be determined."""
    try:
        r = run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=project_root)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git branch detection failed: %s", e)
        return DEFAULT_BRANCH

    branch = r.stdout.strip()
    # Detached HEAD reports the literal "HEAD"
    if r.returncode != 0 or not branch or branch == "HEAD":
        return DEFAULT_BRANCH
    return branch
