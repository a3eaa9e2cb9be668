"""Shared test fixtures — workspaces on disk, snapshot builders, scripted providers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest

from editrecon.actions.models import ActionContext, ActionKey, CodeAction
from editrecon.actions.operations import EditOperation
from editrecon.workspace.models import Project, ProjectId, Solution
from editrecon.workspace.workspace import Workspace


def build_workspace(root: Path, files: Dict[str, str]) -> Tuple[Workspace, ProjectId]:
    """Write *files* under *root* and register them in a one-project workspace."""
    project_id = ProjectId.create("app")
    solution = Solution().add_project(Project(id=project_id, name="app", directory=str(root)))
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        solution = solution.add_document(project_id, path.name, text, file_path=str(path))
    return Workspace(solution), project_id


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[[Dict[str, str]], Tuple[Workspace, ProjectId]]:
    def factory(files: Dict[str, str]) -> Tuple[Workspace, ProjectId]:
        return build_workspace(tmp_path, files)

    return factory


class ScriptedProvider:
    """Offers fixed actions everywhere; operations come from the test."""

    def __init__(self, name: str = "test") -> None:
        self.name = name
        self._actions: List[Tuple[str, str, Callable[[], List[EditOperation]]]] = []

    def add(self, name: str, operations: Callable[[], List[EditOperation]], title: str = "") -> ActionKey:
        self._actions.append((name, title or name, operations))
        return ActionKey(self.name, name)

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        return [
            CodeAction(key=ActionKey(self.name, n), title=t, operations_factory=ops)
            for n, t, ops in self._actions
        ]


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()
