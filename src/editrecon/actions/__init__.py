"""Code actions — models, operations, providers, registry."""

from editrecon.actions.models import (
    ActionContext,
    ActionError,
    ActionKey,
    ActionProvider,
    CodeAction,
    Selection,
)
from editrecon.actions.operations import (
    ApplyChangesOperation,
    EditOperation,
    NoticeOperation,
    OpenDocumentOperation,
)
from editrecon.actions.registry import (
    ActionRegistry,
    YamlActionProvider,
    build_registry,
    list_actions,
)

__all__ = [
    "ActionContext",
    "ActionError",
    "ActionKey",
    "ActionProvider",
    "ActionRegistry",
    "ApplyChangesOperation",
    "CodeAction",
    "EditOperation",
    "NoticeOperation",
    "OpenDocumentOperation",
    "Selection",
    "YamlActionProvider",
    "build_registry",
    "list_actions",
]
