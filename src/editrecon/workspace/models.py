"""Immutable project snapshot model — texts, documents, projects, solutions.

Every mutator returns a new object; nothing here is ever changed in place.
Revision identity lives in ``SourceText.version``: two texts with equal
content but different versions are different revisions.
"""

from __future__ import annotations

import itertools
import os
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional

_revision_counter = itertools.count(1)


def _next_version() -> int:
    return next(_revision_counter)


def normalize_path(path: str) -> str:
    """Absolute, case-preserving, separator-normalised path used as a lookup key."""
    return os.path.normpath(os.path.abspath(path))


class SourceKind(str, Enum):
    REGULAR = "regular"
    SCRIPT = "script"


@dataclass(frozen=True)
class SourceText:
    """One immutable text revision."""

    text: str
    version: int = field(default_factory=_next_version)

    @classmethod
    def from_string(cls, text: str) -> "SourceText":
        return cls(text=text)

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class ProjectId:
    key: str
    debug_name: str = field(default="", compare=False)

    @classmethod
    def create(cls, name: str = "") -> "ProjectId":
        return cls(key=uuid.uuid4().hex, debug_name=name)


@dataclass(frozen=True)
class DocumentId:
    """Stable identity of one document across snapshots.

    Equality is ``(project_id, key)``; ``debug_name`` is informational only.
    """

    project_id: ProjectId
    key: str
    debug_name: str = field(default="", compare=False)

    @classmethod
    def create(cls, project_id: ProjectId, name: str = "") -> "DocumentId":
        return cls(project_id=project_id, key=uuid.uuid4().hex, debug_name=name)


@dataclass(frozen=True)
class Document:
    id: DocumentId
    name: str
    text: SourceText
    file_path: Optional[str] = None
    source_kind: SourceKind = SourceKind.REGULAR

    def get_text(self) -> str:
        return self.text.text

    def with_text(self, text: str | SourceText) -> "Document":
        if isinstance(text, str):
            text = SourceText.from_string(text)
        return replace(self, text=text)


@dataclass(frozen=True)
class Project:
    id: ProjectId
    name: str
    directory: Optional[str] = None
    documents: Mapping[DocumentId, Document] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def get_document(self, document_id: DocumentId) -> Optional[Document]:
        return self.documents.get(document_id)

    @property
    def document_ids(self) -> List[DocumentId]:
        return list(self.documents)

    def _with_documents(self, documents: dict) -> "Project":
        return replace(self, documents=MappingProxyType(documents))

    def with_document(self, document: Document) -> "Project":
        docs = dict(self.documents)
        docs[document.id] = document
        return self._with_documents(docs)

    def without_document(self, document_id: DocumentId) -> "Project":
        docs = dict(self.documents)
        docs.pop(document_id, None)
        return self._with_documents(docs)


@dataclass(frozen=True)
class Solution:
    """A whole-workspace snapshot: every project and document at one instant."""

    projects: Mapping[ProjectId, Project] = field(
        default_factory=lambda: MappingProxyType({})
    )

    # ---- queries ----

    def get_project(self, project_id: ProjectId) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_document(self, document_id: DocumentId) -> Optional[Document]:
        project = self.projects.get(document_id.project_id)
        if project is None:
            return None
        return project.get_document(document_id)

    def iter_documents(self) -> Iterator[Document]:
        for project in self.projects.values():
            yield from project.documents.values()

    def find_documents_by_path(self, file_path: str) -> List[Document]:
        key = normalize_path(file_path)
        return [
            doc for doc in self.iter_documents()
            if doc.file_path is not None and normalize_path(doc.file_path) == key
        ]

    def find_documents_by_name(self, name: str) -> List[Document]:
        return [doc for doc in self.iter_documents() if doc.name == name]

    # ---- derivation (always returns a new snapshot) ----

    def _with_project(self, project: Project) -> "Solution":
        projects = dict(self.projects)
        projects[project.id] = project
        return Solution(projects=MappingProxyType(projects))

    def add_project(self, project: Project) -> "Solution":
        if project.id in self.projects:
            raise KeyError(f"Project already present: {project.name}")
        return self._with_project(project)

    def add_document(
        self,
        project_id: ProjectId,
        name: str,
        text: str | SourceText,
        *,
        file_path: Optional[str] = None,
        source_kind: SourceKind = SourceKind.REGULAR,
        document_id: Optional[DocumentId] = None,
    ) -> "Solution":
        project = self._require_project(project_id)
        if isinstance(text, str):
            text = SourceText.from_string(text)
        doc = Document(
            id=document_id or DocumentId.create(project_id, name),
            name=name,
            text=text,
            file_path=file_path,
            source_kind=source_kind,
        )
        return self._with_project(project.with_document(doc))

    def with_document_text(
        self, document_id: DocumentId, text: str | SourceText
    ) -> "Solution":
        doc = self._require_document(document_id)
        project = self._require_project(document_id.project_id)
        return self._with_project(project.with_document(doc.with_text(text)))

    def with_document_file_path(self, document_id: DocumentId, file_path: str) -> "Solution":
        doc = self._require_document(document_id)
        project = self._require_project(document_id.project_id)
        return self._with_project(project.with_document(replace(doc, file_path=file_path)))

    def remove_document(self, document_id: DocumentId) -> "Solution":
        self._require_document(document_id)
        project = self._require_project(document_id.project_id)
        return self._with_project(project.without_document(document_id))

    def _require_project(self, project_id: ProjectId) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise KeyError(f"Unknown project: {project_id.debug_name or project_id.key}")
        return project

    def _require_document(self, document_id: DocumentId) -> Document:
        doc = self.get_document(document_id)
        if doc is None:
            raise KeyError(f"Unknown document: {document_id.debug_name or document_id.key}")
        return doc
