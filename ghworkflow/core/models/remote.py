"""
Remote models — what the control plane reports back.

Write operations return tagged results instead of raising, so the
synchronizers never branch on exceptions.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class LabelWriteResult(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    CONFLICT = "conflict"   # create refused: label already exists
    ERROR = "error"


class LabelDeleteResult(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    ERROR = "error"


class InstallationStatus(str, Enum):
    INSTALLED = "installed"
    ABSENT = "absent"
    UNKNOWN = "unknown"     # query failed or answer was inconclusive


class RepoPermissions(BaseModel):
    admin: bool = False
    maintain: bool = False
    push: bool = False


class RepoInfo(BaseModel):
    """Repository identity as reported by the control plane."""

    full_name: str              # owner/repo
    repo_id: int | None = None
    owner_id: int | None = None
    default_branch: str = "main"
    permissions: RepoPermissions = RepoPermissions()

    @property
    def can_administer(self) -> bool:
        return self.permissions.admin or self.permissions.maintain
