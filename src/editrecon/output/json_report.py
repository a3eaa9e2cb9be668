"""JSON reporter — the outbound response of a run."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from editrecon.reconcile.models import FileChange, RunResult


def change_to_dict(change: FileChange) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"file_name": change.file_name, "status": change.status.value}
    if change.buffer is not None:
        entry["buffer"] = change.buffer
    else:
        entry["changes"] = [
            {
                "start_line": c.start_line,
                "start_column": c.start_column,
                "end_line": c.end_line,
                "end_column": c.end_column,
                "new_text": c.new_text,
            }
            for c in change.changes
        ]
    return entry


def to_dict(result: RunResult) -> Dict[str, Any]:
    """Convert RunResult to a JSON-serialisable dict."""
    conflicts: List[Dict[str, Any]] = [
        {"file_name": c.file_name, "reason": c.reason.value, "message": c.message}
        for c in result.conflicts
    ]
    return {
        "version": "1.0",
        "found": result.found,
        "action": result.action_title,
        "changes": [change_to_dict(c) for c in result.changes],
        "conflicts": conflicts,
        "committed": result.committed,
        "duration_ms": result.duration_ms,
    }


def render(result: RunResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
