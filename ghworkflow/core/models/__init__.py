"""
Domain models — Pydantic types for the reconciliation engine.

All models are re-exported here for convenient access:

    from ghworkflow.core.models import ObservedState, DesiredState, Operation
"""

from ghworkflow.core.models.operation import (
    CATEGORY_ORDER,
    MUTATING_KINDS,
    Operation,
    OperationCategory,
    OperationKind,
    OperationResult,
    OperationStatus,
    RunStatus,
)
from ghworkflow.core.models.remote import (
    InstallationStatus,
    LabelDeleteResult,
    LabelWriteResult,
    RepoInfo,
    RepoPermissions,
)
from ghworkflow.core.models.state import (
    CatalogueVersion,
    DesiredState,
    FileSpec,
    InstallMode,
    LabelCategory,
    LabelSpec,
    ObservedState,
    Toggles,
)

__all__ = [
    # operation.py
    "CATEGORY_ORDER",
    "MUTATING_KINDS",
    # state.py
    "CatalogueVersion",
    "DesiredState",
    "FileSpec",
    "InstallMode",
    # remote.py
    "InstallationStatus",
    "LabelCategory",
    "LabelDeleteResult",
    "LabelSpec",
    "LabelWriteResult",
    "ObservedState",
    "Operation",
    "OperationCategory",
    "OperationKind",
    "OperationResult",
    "OperationStatus",
    "RepoInfo",
    "RepoPermissions",
    "RunStatus",
    "Toggles",
]
