"""Reconciliation — snapshot diff, change materialisation, action runner."""

from editrecon.reconcile.differ import ProjectChanges, StructuralDelta, diff
from editrecon.reconcile.materializer import ChangeMaterializer
from editrecon.reconcile.models import (
    ConflictReason,
    FileChange,
    FileStatus,
    RegistrationConflict,
    RunResult,
)
from editrecon.reconcile.runner import RunError, RunRequest, run_code_action

__all__ = [
    "ChangeMaterializer",
    "ConflictReason",
    "FileChange",
    "FileStatus",
    "ProjectChanges",
    "RegistrationConflict",
    "RunError",
    "RunRequest",
    "RunResult",
    "StructuralDelta",
    "diff",
    "run_code_action",
]
