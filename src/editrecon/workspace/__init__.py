"""Workspace layer — snapshot models, text diffs, live model, loading."""

from editrecon.workspace.models import (
    Document,
    DocumentId,
    Project,
    ProjectId,
    Solution,
    SourceKind,
    SourceText,
)
from editrecon.workspace.text import (
    LinePositionSpanTextChange,
    TextChange,
    TextSpan,
    get_text_changes,
    to_line_position_changes,
)
from editrecon.workspace.workspace import Workspace, WorkspaceError

__all__ = [
    "Document",
    "DocumentId",
    "LinePositionSpanTextChange",
    "Project",
    "ProjectId",
    "Solution",
    "SourceKind",
    "SourceText",
    "TextChange",
    "TextSpan",
    "Workspace",
    "WorkspaceError",
    "get_text_changes",
    "to_line_position_changes",
]
