"""Turn a structural delta into per-file change records.

Added documents become full-buffer records and are materialised: an empty
placeholder file is created on disk (if needed) and registered in the live
workspace.  Changed documents become line-span edits or a full buffer,
depending on ``wants_text_changes``.

Registration problems are conflicts, not errors: they are logged, collected
in ``conflicts``, and never stop the remaining documents from being handled.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List

from editrecon.reconcile.differ import StructuralDelta
from editrecon.reconcile.models import (
    ConflictReason,
    FileChange,
    FileStatus,
    RegistrationConflict,
)
from editrecon.workspace.models import Document, DocumentId, ProjectId, Solution
from editrecon.workspace.text import get_text_changes, to_line_position_changes
from editrecon.workspace.workspace import Workspace, WorkspaceError

logger = logging.getLogger(__name__)


class ChangeMaterializer:
    """Builds change records for one request; shared across its operations."""

    def __init__(self, workspace: Workspace, directory: str, *, wants_text_changes: bool) -> None:
        self.workspace = workspace
        self.directory = directory
        self.wants_text_changes = wants_text_changes
        self.conflicts: List[RegistrationConflict] = []
        # Added documents → the absolute path they were materialised at.
        self.resolved_paths: Dict[DocumentId, str] = {}
        # The subset of those that were registered in the live workspace.
        self.registered: Dict[DocumentId, str] = {}

    def resolve_path(self, document: Document) -> str:
        """Absolute path for *document*; bare or relative paths hang off the request directory."""
        if document.file_path is None or not os.path.isabs(document.file_path):
            return os.path.join(self.directory, document.name)
        return document.file_path

    def materialize(
        self,
        delta: StructuralDelta,
        old: Solution,
        new: Solution,
        changes: Dict[str, FileChange],
    ) -> Dict[str, FileChange]:
        """Merge the records for *delta* (old → new) into *changes* and return it."""
        for project_changes in delta:
            for document_id in project_changes.added:
                document = new.get_document(document_id)
                assert document is not None
                self._added(project_changes.project_id, document, changes)

            for document_id in project_changes.changed:
                document = new.get_document(document_id)
                original = old.get_document(document_id)
                assert document is not None and original is not None
                self._changed(original, document, changes)

        return changes

    # ---- added documents ----

    def _added(
        self, project_id: ProjectId, document: Document, changes: Dict[str, FileChange]
    ) -> None:
        path = self.resolve_path(document)
        changes[path] = FileChange(
            file_name=path, status=FileStatus.ADDED, buffer=document.get_text()
        )
        self.resolved_paths[document.id] = path

        if self.workspace.get_document_by_path(path) is not None:
            self._conflict(
                path,
                ConflictReason.ALREADY_REGISTERED,
                f"File already exists in workspace: '{path}'",
            )
            return

        target = Path(path)
        try:
            if not target.exists():
                target.parent.mkdir(parents=True, exist_ok=True)
                target.touch()
            elif target.stat().st_size > 0:
                self._conflict(
                    path,
                    ConflictReason.FILE_EXISTS,
                    f"File already exists on disk: '{path}'",
                )
                return
            self.workspace.add_document(project_id, path, document.source_kind)
            self.registered[document.id] = path
        except OSError as exc:
            self._conflict(path, ConflictReason.IO_ERROR, f"Cannot create '{path}': {exc}")
        except WorkspaceError as exc:
            self._conflict(path, ConflictReason.IO_ERROR, str(exc))

    # ---- changed documents ----

    def _changed(
        self, original: Document, document: Document, changes: Dict[str, FileChange]
    ) -> None:
        """Append line-span edits, or overwrite the buffer.

        A record that holds a full buffer stays a buffer: later changes
        replace it with the newest text even when ``wants_text_changes`` is set.
        """
        path = self.resolve_path(document)
        record = changes.get(path)
        if record is None:
            record = FileChange(file_name=path)
            changes[path] = record

        if not self.wants_text_changes or record.has_buffer:
            # Line edits cannot be merged into a buffer; the latest full text wins.
            record.set_buffer(document.get_text())
            return

        text_changes = get_text_changes(original.text, document.text)
        record.add_changes(to_line_position_changes(original.get_text(), text_changes))

    def _conflict(self, path: str, reason: ConflictReason, message: str) -> None:
        logger.warning(message)
        self.conflicts.append(RegistrationConflict(file_name=path, reason=reason, message=message))
