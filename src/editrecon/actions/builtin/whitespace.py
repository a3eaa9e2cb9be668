"""Whitespace fixes: trailing whitespace, tab expansion."""

from __future__ import annotations

import re
from typing import List

from editrecon.actions.models import ActionContext, ActionKey, CodeAction
from editrecon.actions.operations import rewrite_document
from editrecon.workspace.models import Solution

_TRAILING_WS_RE = re.compile(r"[ \t]+(?=\r\n|\r|\n|\Z)")
_LEADING_TABS_RE = re.compile(r"^[ \t]*\t[ \t]*", re.MULTILINE)


def trim_trailing_whitespace(text: str) -> str:
    return _TRAILING_WS_RE.sub("", text)


def expand_leading_tabs(text: str, tab_size: int = 4) -> str:
    """Expand tabs in indentation only; tabs inside code are left alone."""
    return _LEADING_TABS_RE.sub(lambda m: m.group(0).expandtabs(tab_size), text)


class WhitespaceProvider:
    name = "whitespace"

    def __init__(self, tab_size: int = 4) -> None:
        self.tab_size = tab_size

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        if context.document_id is None:
            return []
        document = solution.get_document(context.document_id)
        if document is None:
            return []
        text = document.get_text()
        doc_id = document.id
        actions: List[CodeAction] = []

        if _TRAILING_WS_RE.search(text):
            actions.append(
                CodeAction(
                    key=ActionKey(self.name, "trim-trailing-whitespace"),
                    title="Remove trailing whitespace",
                    operations_factory=lambda: [
                        rewrite_document(doc_id, trim_trailing_whitespace)
                    ],
                )
            )

        if _LEADING_TABS_RE.search(text):
            tab_size = self.tab_size
            actions.append(
                CodeAction(
                    key=ActionKey(self.name, "tabs-to-spaces"),
                    title=f"Convert indentation tabs to {tab_size} spaces",
                    operations_factory=lambda: [
                        rewrite_document(doc_id, lambda t: expand_leading_tabs(t, tab_size))
                    ],
                )
            )

        return actions
