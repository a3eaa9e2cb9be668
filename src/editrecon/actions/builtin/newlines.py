"""Line-ending fixes: final newline, LF normalisation."""

from __future__ import annotations

import re
from typing import List

from editrecon.actions.models import ActionContext, ActionKey, CodeAction
from editrecon.actions.operations import rewrite_document
from editrecon.workspace.models import Solution

_CR_RE = re.compile(r"\r\n?")


def detect_newline(text: str) -> str:
    """Most common line ending in *text*; ``\\n`` when there is none."""
    crlf = text.count("\r\n")
    lf = text.count("\n") - crlf
    cr = text.count("\r") - crlf
    best = max((lf, "\n"), (crlf, "\r\n"), (cr, "\r"))
    return best[1] if best[0] > 0 else "\n"


def ensure_final_newline(text: str) -> str:
    if not text or text.endswith(("\n", "\r")):
        return text
    return text + detect_newline(text)


def normalize_line_endings(text: str) -> str:
    return _CR_RE.sub("\n", text)


class NewlineProvider:
    name = "newlines"

    def get_actions(self, solution: Solution, context: ActionContext) -> List[CodeAction]:
        if context.document_id is None:
            return []
        document = solution.get_document(context.document_id)
        if document is None:
            return []
        text = document.get_text()
        doc_id = document.id
        actions: List[CodeAction] = []

        if ensure_final_newline(text) != text:
            actions.append(
                CodeAction(
                    key=ActionKey(self.name, "ensure-final-newline"),
                    title="Add newline at end of file",
                    operations_factory=lambda: [rewrite_document(doc_id, ensure_final_newline)],
                )
            )

        if "\r" in text:
            actions.append(
                CodeAction(
                    key=ActionKey(self.name, "normalize-line-endings"),
                    title="Convert line endings to LF",
                    operations_factory=lambda: [rewrite_document(doc_id, normalize_line_endings)],
                )
            )

        return actions
