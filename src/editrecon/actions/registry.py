"""Action registry — built-in and YAML-defined providers, config filters."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from editrecon.actions.models import (
    ActionContext,
    ActionError,
    ActionKey,
    ActionProvider,
    CodeAction,
)
from editrecon.actions.operations import (
    ApplyChangesOperation,
    EditOperation,
    NoticeOperation,
    OpenDocumentOperation,
)
from editrecon.config.schema import EditReconConfig
from editrecon.workspace.models import Document, ProjectId, Solution, SourceKind
from editrecon.workspace.workspace import Workspace

_OPERATION_KINDS = ("replace", "create", "delete", "open", "notice")


def list_actions(
    workspace: Workspace, providers: Sequence[ActionProvider], context: ActionContext
) -> List[CodeAction]:
    """Collect the actions every provider offers at *context*, in provider order."""
    solution = workspace.current_solution
    if context.document_id is None:
        document = workspace.get_document_by_path(context.file_path)
        if document is not None:
            context = ActionContext(
                file_path=context.file_path,
                document_id=document.id,
                selection=context.selection,
            )
    actions: List[CodeAction] = []
    for provider in providers:
        actions.extend(provider.get_actions(solution, context))
    return actions


# ---- declarative (YAML) actions ----


@dataclass
class ActionDefinition:
    """One action loaded from ``.editrecon-actions/*.yaml``.

    ``when`` (a regex) and ``file_patterns`` both have to match the document
    the request points at for the action to be offered.
    """

    id: str
    title: str
    operations: List[Dict[str, Any]]
    file_patterns: Optional[List[str]] = None
    when: Optional[str] = None

    _compiled_when: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def compiled_when(self) -> Optional[re.Pattern[str]]:
        if self.when is None:
            return None
        if self._compiled_when is None:
            self._compiled_when = re.compile(self.when, re.MULTILINE)
        return self._compiled_when

    def applies_to(self, document: Optional[Document], file_path: str) -> bool:
        if self.file_patterns:
            basename = os.path.basename(file_path)
            if not any(fnmatch(basename, p) or fnmatch(file_path, p) for p in self.file_patterns):
                return False
        if self.compiled_when is not None:
            if document is None or not self.compiled_when.search(document.get_text()):
                return False
        return True


def _parse_definition(entry: Any, source: Path) -> ActionDefinition:
    if not isinstance(entry, dict) or "id" not in entry:
        raise ActionError(f"{source}: every action needs an 'id'")
    operations = entry.get("operations") or []
    if not isinstance(operations, list):
        raise ActionError(f"{source}: 'operations' of {entry['id']} must be a list")
    for op in operations:
        if not isinstance(op, dict) or len(op) != 1 or next(iter(op)) not in _OPERATION_KINDS:
            raise ActionError(
                f"{source}: bad operation in {entry['id']}: {op!r} "
                f"(expected one of {', '.join(_OPERATION_KINDS)})"
            )
    return ActionDefinition(
        id=str(entry["id"]),
        title=entry.get("title", entry["id"]),
        operations=operations,
        file_patterns=entry.get("file_patterns"),
        when=entry.get("when"),
    )


def load_definitions(directory: Path) -> List[ActionDefinition]:
    """Load every YAML action file in *directory* (sorted by name)."""
    if not directory.is_dir():
        return []
    definitions: List[ActionDefinition] = []
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ActionError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            continue
        if not isinstance(data, list):
            data = [data]
        definitions.extend(_parse_definition(entry, path) for entry in data)
    return definitions


class YamlActionProvider:
    """Turns ``ActionDefinition`` entries into code actions."""

    def __init__(self, definitions: List[ActionDefinition], name: str = "custom") -> None:
        self.name = name
        self.definitions = definitions

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        document = solution.get_document(context.document_id) if context.document_id else None
        actions: List[CodeAction] = []
        for definition in self.definitions:
            if not definition.applies_to(document, context.file_path):
                continue
            actions.append(
                CodeAction(
                    key=ActionKey(self.name, definition.id),
                    title=definition.title,
                    operations_factory=lambda d=definition: self._build_operations(d, context),
                )
            )
        return actions

    def _build_operations(
        self, definition: ActionDefinition, context: ActionContext
    ) -> List[EditOperation]:
        operations: List[EditOperation] = []
        for op in definition.operations:
            kind, args = next(iter(op.items()))
            args = args or {}
            if kind == "replace":
                operations.append(_replace_operation(args, context))
            elif kind == "create":
                operations.append(_create_operation(args, context))
            elif kind == "delete":
                operations.append(_delete_operation(args, context))
            elif kind == "open":
                operations.append(OpenDocumentOperation(document_name=args.get("document")))
            elif kind == "notice":
                operations.append(NoticeOperation(message=str(args.get("message", ""))))
        return operations


def _find_document(solution: Solution, reference: Optional[str], context: ActionContext) -> Document:
    """Resolve a document reference: none → the requesting document; else name or path."""
    if reference is None:
        if context.document_id is not None:
            document = solution.get_document(context.document_id)
            if document is not None:
                return document
        matches = solution.find_documents_by_path(context.file_path)
    else:
        path = reference
        if not os.path.isabs(path):
            path = os.path.join(os.path.dirname(context.file_path), reference)
        matches = solution.find_documents_by_path(path) or solution.find_documents_by_name(reference)
    if not matches:
        raise ActionError(f"Document not found: {reference or context.file_path}")
    return matches[0]


def _target_project(solution: Solution, context: ActionContext) -> ProjectId:
    if context.document_id is not None and solution.get_project(context.document_id.project_id):
        return context.document_id.project_id
    for document in solution.find_documents_by_path(context.file_path):
        return document.id.project_id
    for project_id in solution.projects:
        return project_id
    raise ActionError("Workspace has no project to add documents to")


def _replace_operation(args: Dict[str, Any], context: ActionContext) -> ApplyChangesOperation:
    if "pattern" not in args:
        raise ActionError("'replace' needs a 'pattern'")
    pattern = re.compile(args["pattern"], re.MULTILINE)
    replacement = str(args.get("replacement", ""))
    count = int(args.get("count", 0))

    def transform(current: Solution) -> Solution:
        document = _find_document(current, args.get("document"), context)
        new_text = pattern.sub(replacement, document.get_text(), count=count)
        return current.with_document_text(document.id, new_text)

    return ApplyChangesOperation(transform=transform, title=f"replace {args['pattern']}")


def _create_operation(args: Dict[str, Any], context: ActionContext) -> ApplyChangesOperation:
    if "name" not in args:
        raise ActionError("'create' needs a 'name'")
    kind = SourceKind(args.get("kind", SourceKind.REGULAR.value))

    def transform(current: Solution) -> Solution:
        return current.add_document(
            _target_project(current, context),
            str(args["name"]),
            str(args.get("text", "")),
            file_path=args.get("path"),
            source_kind=kind,
        )

    return ApplyChangesOperation(transform=transform, title=f"create {args['name']}")


def _delete_operation(args: Dict[str, Any], context: ActionContext) -> ApplyChangesOperation:
    def transform(current: Solution) -> Solution:
        document = _find_document(current, args.get("document"), context)
        return current.remove_document(document.id)

    return ApplyChangesOperation(transform=transform, title="delete")


# ---- registry ----


class ActionRegistry:
    """Central store for all action providers; itself usable as a provider."""

    name = "registry"

    def __init__(self) -> None:
        self._providers: Dict[str, ActionProvider] = {}
        self._enable: List[str] = []
        self._disable: List[str] = []

    # ---- registration ----

    def register(self, provider: ActionProvider) -> None:
        self._providers[provider.name] = provider

    def register_many(self, providers: Sequence[ActionProvider]) -> None:
        for p in providers:
            self.register(p)

    # ---- queries ----

    @property
    def providers(self) -> List[ActionProvider]:
        return list(self._providers.values())

    def get(self, name: str) -> Optional[ActionProvider]:
        return self._providers.get(name)

    def is_enabled(self, key: ActionKey) -> bool:
        """``provider/name`` or bare ``provider`` entries; disable wins over enable."""
        names = (str(key), key.provider)
        if self._enable and not any(n in self._enable for n in names):
            return False
        return not any(n in self._disable for n in names)

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        actions: List[CodeAction] = []
        for provider in self._providers.values():
            actions.extend(
                a for a in provider.get_actions(solution, context) if self.is_enabled(a.key)
            )
        return actions

    # ---- config filtering ----

    def apply_config(self, config: EditReconConfig) -> None:
        self._enable = list(config.actions.enable)
        self._disable = list(config.actions.disable)


def build_registry(config: EditReconConfig, root: Path) -> ActionRegistry:
    """Create a fully populated, config-filtered action registry."""
    from editrecon.actions.builtin import builtin_providers

    registry = ActionRegistry()
    registry.register_many(builtin_providers(tab_size=config.actions.tab_size))

    definitions = load_definitions(root / config.actions.directory)
    if definitions:
        registry.register(YamlActionProvider(definitions))

    registry.apply_config(config)
    return registry
