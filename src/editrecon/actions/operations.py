"""Edit operations — the closed set of things a code action can ask for.

``ApplyChangesOperation`` is the only kind that changes the project; the
rest are informational and produce no file changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from editrecon.workspace.models import DocumentId, Solution

SolutionTransform = Callable[[Solution], Solution]


@dataclass(frozen=True)
class ApplyChangesOperation:
    """Derive a new snapshot from the current one."""

    transform: SolutionTransform
    title: str = ""

    def changed_solution(self, current: Solution) -> Solution:
        return self.transform(current)


@dataclass(frozen=True)
class OpenDocumentOperation:
    """Ask the host to bring a document into view."""

    document_id: Optional[DocumentId] = None
    document_name: Optional[str] = None


@dataclass(frozen=True)
class NoticeOperation:
    """A message for the user."""

    message: str


EditOperation = Union[ApplyChangesOperation, OpenDocumentOperation, NoticeOperation]


def rewrite_document(
    document_id: DocumentId, rewrite: Callable[[str], str], title: str = ""
) -> ApplyChangesOperation:
    """An operation replacing one document's text with ``rewrite(text)``."""

    def transform(current: Solution) -> Solution:
        document = current.get_document(document_id)
        if document is None:
            raise KeyError(f"Document not in snapshot: {document_id.debug_name}")
        return current.with_document_text(document_id, rewrite(document.get_text()))

    return ApplyChangesOperation(transform=transform, title=title)
