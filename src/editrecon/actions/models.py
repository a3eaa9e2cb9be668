"""Code action data model — keys, contexts, actions, the provider protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from editrecon.actions.operations import EditOperation
from editrecon.workspace.models import DocumentId, Solution


class ActionError(Exception):
    """Raised for malformed action definitions or operations that cannot run."""


@dataclass(frozen=True)
class ActionKey:
    """Composite action identifier; compared structurally, case-sensitive."""

    provider: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "ActionKey":
        """Parse ``provider/name``."""
        provider, sep, name = value.partition("/")
        if not sep or not provider or not name:
            raise ValueError(f"Action identifier must look like 'provider/name': {value!r}")
        return cls(provider=provider, name=name)

    def __str__(self) -> str:
        return f"{self.provider}/{self.name}"


@dataclass(frozen=True)
class Selection:
    """0-based, end-exclusive line/column range."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class ActionContext:
    """Where the user asked for actions."""

    file_path: str
    document_id: Optional[DocumentId] = None
    selection: Optional[Selection] = None


@dataclass
class CodeAction:
    """A named, user-selectable transformation.

    Operations are computed lazily, only for the action actually run.
    """

    key: ActionKey
    title: str
    operations_factory: Callable[[], List[EditOperation]] = field(repr=False)

    def identifier(self) -> ActionKey:
        return self.key

    def get_operations(self) -> List[EditOperation]:
        return list(self.operations_factory())


class ActionProvider(Protocol):
    name: str

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        ...
