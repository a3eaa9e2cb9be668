"""Structural diff between two project snapshots.

Documents are compared by identity and revision token only; text is never
read, so a document whose revision changed counts as changed even when its
content came out identical.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from editrecon.workspace.models import DocumentId, ProjectId, Solution


@dataclass(frozen=True)
class ProjectChanges:
    """Added / removed / changed document ids for one project (disjoint)."""

    project_id: ProjectId
    added: Tuple[DocumentId, ...] = ()
    removed: Tuple[DocumentId, ...] = ()
    changed: Tuple[DocumentId, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


@dataclass(frozen=True)
class StructuralDelta:
    projects: Tuple[ProjectChanges, ...] = field(default_factory=tuple)

    def __iter__(self):
        return iter(self.projects)

    @property
    def is_empty(self) -> bool:
        return all(p.is_empty for p in self.projects)

    @property
    def added(self) -> List[DocumentId]:
        return [d for p in self.projects for d in p.added]

    @property
    def removed(self) -> List[DocumentId]:
        return [d for p in self.projects for d in p.removed]

    @property
    def changed(self) -> List[DocumentId]:
        return [d for p in self.projects for d in p.changed]


def diff(old: Solution, new: Solution) -> StructuralDelta:
    """Compute per-project added / removed / changed documents, old → new.

    Only projects present in *new* are reported; a project missing from
    *old* reports all of its documents as added.
    """
    results: List[ProjectChanges] = []

    for project_id, new_project in new.projects.items():
        old_project = old.get_project(project_id)
        old_docs = old_project.documents if old_project is not None else {}
        new_docs = new_project.documents

        if old_project is new_project:
            results.append(ProjectChanges(project_id=project_id))
            continue

        added = tuple(doc_id for doc_id in new_docs if doc_id not in old_docs)
        removed = tuple(doc_id for doc_id in old_docs if doc_id not in new_docs)
        changed = tuple(
            doc_id
            for doc_id, doc in new_docs.items()
            if doc_id in old_docs and old_docs[doc_id].text.version != doc.text.version
        )
        results.append(
            ProjectChanges(
                project_id=project_id,
                added=added,
                removed=removed,
                changed=changed,
            )
        )

    return StructuralDelta(projects=tuple(results))
