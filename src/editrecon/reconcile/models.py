"""Change-record and run-result data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from editrecon.workspace.text import LinePositionSpanTextChange


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"


class ConflictReason(str, Enum):
    FILE_EXISTS = "file_exists"  # non-empty file already on disk
    ALREADY_REGISTERED = "already_registered"  # path already in the live model
    IO_ERROR = "io_error"  # placeholder could not be created / registered


@dataclass
class FileChange:
    """Everything one request does to one file.

    Holds either a full ``buffer`` or line-span edits grouped in ``batches``
    (one batch per edit operation, each anchored to the text that operation
    started from), never both.
    """

    file_name: str
    status: FileStatus = FileStatus.MODIFIED
    buffer: Optional[str] = None
    batches: List[List[LinePositionSpanTextChange]] = field(default_factory=list)

    @property
    def changes(self) -> List[LinePositionSpanTextChange]:
        return [c for batch in self.batches for c in batch]

    @property
    def has_buffer(self) -> bool:
        return self.buffer is not None

    def set_buffer(self, text: str) -> None:
        self.buffer = text
        self.batches.clear()

    def add_changes(self, changes: List[LinePositionSpanTextChange]) -> None:
        self.batches.append(list(changes))


@dataclass(frozen=True)
class RegistrationConflict:
    """A new document that could not be registered in the live model."""

    file_name: str
    reason: ConflictReason
    message: str


@dataclass
class RunResult:
    """Complete result of running one code action."""

    changes: List[FileChange] = field(default_factory=list)
    conflicts: List[RegistrationConflict] = field(default_factory=list)
    found: bool = False
    action_title: Optional[str] = None
    operations: int = 0
    committed: Optional[bool] = None  # None: commit not requested
    duration_ms: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.changes)

    @property
    def commit_failed(self) -> bool:
        return self.committed is False

    def get(self, file_name: str) -> Optional[FileChange]:
        for change in self.changes:
            if change.file_name == file_name:
                return change
        return None
