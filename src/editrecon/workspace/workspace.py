"""Live project model — process-wide state with an atomic replace.

Readers take ``current_solution`` (an immutable snapshot) without locking.
Writers (``add_document``, ``try_apply_changes``) are serialised by one
lock; there is no optimistic-concurrency check, the last commit wins.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from editrecon.workspace.models import (
    Document,
    DocumentId,
    ProjectId,
    Solution,
    SourceKind,
    normalize_path,
)
from editrecon.workspace.text import read_source_file

logger = logging.getLogger(__name__)


class WorkspaceError(Exception):
    """Raised on invalid live-model mutations or unreadable workspaces."""


class Workspace:
    """Holds the current ``Solution`` and the path → document registrations."""

    def __init__(self, solution: Optional[Solution] = None, *, read_only: bool = False) -> None:
        self._solution = solution or Solution()
        self._lock = threading.RLock()
        self.read_only = read_only

    @property
    def current_solution(self) -> Solution:
        return self._solution

    # ---- lookups ----

    def get_document_by_path(self, file_path: str) -> Optional[Document]:
        matches = self._solution.find_documents_by_path(file_path)
        return matches[0] if matches else None

    def get_document(self, document_id: DocumentId) -> Optional[Document]:
        return self._solution.get_document(document_id)

    # ---- mutations ----

    def add_document(
        self,
        project_id: ProjectId,
        file_path: str,
        source_kind: SourceKind = SourceKind.REGULAR,
    ) -> DocumentId:
        """Register the file at *file_path* (read from disk) in *project_id*."""
        path = normalize_path(file_path)
        with self._lock:
            if self._solution.get_project(project_id) is None:
                raise WorkspaceError(f"Unknown project for {path}")
            if self.get_document_by_path(path) is not None:
                raise WorkspaceError(f"Document already registered: {path}")
            try:
                text = read_source_file(path)
            except FileNotFoundError:
                text = ""
            except (OSError, UnicodeDecodeError) as exc:
                raise WorkspaceError(f"Cannot read {path}: {exc}") from exc

            document_id = DocumentId.create(project_id, Path(path).name)
            self._solution = self._solution.add_document(
                project_id,
                Path(path).name,
                text,
                file_path=path,
                source_kind=source_kind,
                document_id=document_id,
            )
        logger.debug("Registered %s in workspace", path)
        return document_id

    def try_apply_changes(self, solution: Solution, base: Optional[Solution] = None) -> bool:
        """Commit *solution* to the live model in one step.

        With *base* (the snapshot *solution* was derived from) only the delta
        ``base → solution`` is replayed onto the live state, so documents the
        live model gained meanwhile survive.  Without it the live state is
        replaced wholesale.  Added documents whose path is already registered
        (a placeholder registered while materialising new files) are folded
        into that registration.

        Returns False when the workspace is read-only, a project in the delta
        is no longer loaded, or a changed document was removed meanwhile.
        """
        from editrecon.reconcile.differ import diff

        with self._lock:
            if self.read_only:
                logger.warning("Workspace is read-only; changes not applied")
                return False

            if base is None:
                self._solution = solution
                return True

            merged = self._solution
            for project_changes in diff(base, solution):
                if merged.get_project(project_changes.project_id) is None:
                    logger.warning(
                        "Cannot apply changes: project %s is no longer loaded",
                        project_changes.project_id.debug_name or project_changes.project_id.key,
                    )
                    return False

                for document_id in project_changes.added:
                    doc = solution.get_document(document_id)
                    assert doc is not None
                    registered = (
                        merged.find_documents_by_path(doc.file_path) if doc.file_path else []
                    )
                    if registered:
                        merged = merged.with_document_text(registered[0].id, doc.text)
                    else:
                        merged = merged.add_document(
                            document_id.project_id,
                            doc.name,
                            doc.text,
                            file_path=doc.file_path,
                            source_kind=doc.source_kind,
                            document_id=document_id,
                        )

                for document_id in project_changes.changed:
                    doc = solution.get_document(document_id)
                    assert doc is not None
                    if merged.get_document(document_id) is None:
                        logger.warning(
                            "Cannot apply changes: %s was removed from the workspace",
                            doc.file_path or doc.name,
                        )
                        return False
                    merged = merged.with_document_text(document_id, doc.text)

                for document_id in project_changes.removed:
                    if merged.get_document(document_id) is not None:
                        merged = merged.remove_document(document_id)

            self._solution = merged
        return True
