"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class RunConfig:
    wants_text_changes: bool = True  # line-span edits instead of full buffers
    apply_text_changes: bool = False  # commit the final snapshot to the workspace


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class WorkspaceConfig:
    include: List[str] = field(default_factory=lambda: ["*"])
    exclude: List[str] = field(default_factory=list)
    max_file_size_kb: int = 512
    script_extensions: List[str] = field(default_factory=lambda: [".csx"])
    project_name: Optional[str] = None


@dataclass
class ActionsConfig:
    enable: List[str] = field(default_factory=list)  # empty = all enabled
    disable: List[str] = field(default_factory=list)
    directory: str = ".editrecon-actions"
    tab_size: int = 4


@dataclass
class EditReconConfig:
    version: str = "1.0"
    run: RunConfig = field(default_factory=RunConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    actions: ActionsConfig = field(default_factory=ActionsConfig)
