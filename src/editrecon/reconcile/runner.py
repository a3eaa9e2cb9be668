"""Action runner — resolve an action, fold its operations, commit.

Operations are applied strictly in order: each one sees the snapshot the
previous one produced.  Filesystem side effects of materialising new files
are never rolled back, not even when the final commit fails.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from editrecon.actions.models import (
    ActionContext,
    ActionError,
    ActionKey,
    ActionProvider,
    Selection,
)
from editrecon.actions.operations import ApplyChangesOperation
from editrecon.actions.registry import list_actions
from editrecon.reconcile.differ import diff
from editrecon.reconcile.materializer import ChangeMaterializer
from editrecon.reconcile.models import FileChange, RunResult
from editrecon.workspace.workspace import Workspace

logger = logging.getLogger(__name__)


class RunError(Exception):
    """Raised on an unexpected failure while running an action."""


@dataclass(frozen=True)
class RunRequest:
    identifier: ActionKey
    file_path: str
    wants_text_changes: bool = True
    apply_text_changes: bool = False
    selection: Optional[Selection] = None


def run_code_action(
    workspace: Workspace,
    providers: Sequence[ActionProvider],
    request: RunRequest,
) -> RunResult:
    """Run the action named by *request* and return its per-file changes."""
    start = time.perf_counter()

    context = ActionContext(file_path=request.file_path, selection=request.selection)
    actions = list_actions(workspace, providers, context)
    action = next((a for a in actions if a.identifier() == request.identifier), None)
    if action is None:
        logger.info("No action %s available at %s", request.identifier, request.file_path)
        return RunResult(found=False)

    logger.info("Applying code action: %s", action.title)

    base = workspace.current_solution
    solution = base
    changes: Dict[str, FileChange] = {}
    materializer = ChangeMaterializer(
        workspace,
        os.path.dirname(os.path.abspath(request.file_path)),
        wants_text_changes=request.wants_text_changes,
    )

    try:
        operations = action.get_operations()
        for operation in operations:
            if not isinstance(operation, ApplyChangesOperation):
                logger.debug("Skipping %s", type(operation).__name__)
                continue
            new_solution = operation.changed_solution(solution)
            materializer.materialize(diff(solution, new_solution), solution, new_solution, changes)
            solution = new_solution
    except ActionError:
        raise
    except Exception as exc:
        raise RunError(f"Action {request.identifier} failed: {exc}") from exc

    committed: Optional[bool] = None
    if request.apply_text_changes:
        for document_id in materializer.resolved_paths:
            if solution.get_document(document_id) is None:
                continue
            path = materializer.registered.get(document_id)
            if path is None:
                # Conflicted: the live model keeps whatever it had at that path.
                solution = solution.remove_document(document_id)
            else:
                solution = solution.with_document_file_path(document_id, path)
        committed = workspace.try_apply_changes(solution, base)
        if not committed:
            logger.warning("Failed to apply changes of %s to the workspace", request.identifier)

    elapsed = (time.perf_counter() - start) * 1000
    return RunResult(
        changes=list(changes.values()),
        conflicts=list(materializer.conflicts),
        found=True,
        action_title=action.title,
        operations=len(operations),
        committed=committed,
        duration_ms=round(elapsed, 2),
    )
