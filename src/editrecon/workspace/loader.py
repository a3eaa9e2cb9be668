"""Build a live Workspace from a directory on disk."""

from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Tuple

from editrecon.config.schema import EditReconConfig
from editrecon.workspace.models import Project, ProjectId, Solution, SourceKind
from editrecon.workspace.text import read_source_file
from editrecon.workspace.workspace import Workspace, WorkspaceError

_ALWAYS_EXCLUDED = (".git/*", "*/.git/*")


def _matches(rel_path: str, patterns: List[str]) -> bool:
    return any(fnmatch(rel_path, p) for p in patterns)


def load_workspace(root: Path, config: EditReconConfig) -> Tuple[Workspace, List[str]]:
    """Load one project rooted at *root*.

    Returns the workspace and a list of ``"<path> (<reason>)"`` entries for
    files that were left out (oversized or not UTF-8 text).
    """
    root = root.resolve()
    if not root.is_dir():
        raise WorkspaceError(f"Not a directory: {root}")

    ws_cfg = config.workspace
    max_bytes = ws_cfg.max_file_size_kb * 1024
    script_exts = {e.lower() for e in ws_cfg.script_extensions}
    exclude = list(ws_cfg.exclude) + list(_ALWAYS_EXCLUDED)

    name = ws_cfg.project_name or root.name
    project_id = ProjectId.create(name)
    solution = Solution().add_project(Project(id=project_id, name=name, directory=str(root)))
    skipped: List[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != ".git")
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            rel = path.relative_to(root).as_posix()
            if not _matches(rel, ws_cfg.include) or _matches(rel, exclude):
                continue
            try:
                if path.stat().st_size > max_bytes:
                    skipped.append(f"{rel} (oversized)")
                    continue
                text = read_source_file(path)
            except UnicodeDecodeError:
                skipped.append(f"{rel} (binary)")
                continue
            except OSError as exc:
                skipped.append(f"{rel} (unreadable: {exc.strerror})")
                continue
            kind = SourceKind.SCRIPT if path.suffix.lower() in script_exts else SourceKind.REGULAR
            solution = solution.add_document(
                project_id, filename, text, file_path=str(path), source_kind=kind
            )

    return Workspace(solution), skipped
