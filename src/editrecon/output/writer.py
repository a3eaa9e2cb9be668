"""Write change records to disk, the way a host editor would apply them."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Set

from editrecon.reconcile.models import ConflictReason, FileChange, RegistrationConflict
from editrecon.workspace.text import apply_line_position_changes, read_source_file

logger = logging.getLogger(__name__)

_PROTECTING_REASONS = (ConflictReason.FILE_EXISTS, ConflictReason.ALREADY_REGISTERED)


def apply_change(text: str, change: FileChange) -> str:
    """Return *text* with *change* applied.

    Each batch is anchored to the text the batch before it produced, so
    batches are applied in order.
    """
    if change.buffer is not None:
        return change.buffer
    for batch in change.batches:
        text = apply_line_position_changes(text, batch)
    return text


def protected_paths(conflicts: Iterable[RegistrationConflict]) -> Set[str]:
    """Paths whose existing content a write would clobber."""
    return {c.file_name for c in conflicts if c.reason in _PROTECTING_REASONS}


def write_changes(
    changes: Iterable[FileChange], conflicts: Iterable[RegistrationConflict] = ()
) -> List[str]:
    """Apply every record to its file; returns the paths written.

    Records for paths with a ``file_exists`` or ``already_registered``
    conflict are skipped.
    """
    skip = protected_paths(conflicts)
    written: List[str] = []
    for change in changes:
        if change.file_name in skip:
            logger.warning("Not writing %s: existing content would be overwritten", change.file_name)
            continue
        path = Path(change.file_name)
        current = read_source_file(path) if path.exists() else ""
        updated = apply_change(current, change)
        if updated == current and path.exists():
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the record's own line endings.
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)
        written.append(str(path))
    return written
