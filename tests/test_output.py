"""Tests for the JSON and terminal reporters and the change writer."""

import io
import json
from pathlib import Path

from rich.console import Console

from editrecon.output import json_report, terminal
from editrecon.output.writer import apply_change, protected_paths, write_changes
from editrecon.reconcile.models import (
    ConflictReason,
    FileChange,
    FileStatus,
    RegistrationConflict,
    RunResult,
)
from editrecon.workspace.text import LinePositionSpanTextChange


def _edit(sl, sc, el, ec, text):
    return LinePositionSpanTextChange(
        start_line=sl, start_column=sc, end_line=el, end_column=ec, new_text=text
    )


def _result() -> RunResult:
    modified = FileChange(file_name="/w/Bar.cs")
    modified.add_changes([_edit(0, 4, 0, 5, "y")])
    added = FileChange(file_name="/w/Foo.cs", status=FileStatus.ADDED, buffer="class Foo {}")
    conflict = RegistrationConflict(
        file_name="/w/Foo.cs",
        reason=ConflictReason.FILE_EXISTS,
        message="File already exists on disk: '/w/Foo.cs'",
    )
    return RunResult(
        changes=[modified, added],
        conflicts=[conflict],
        found=True,
        action_title="Rename",
        operations=2,
    )


class TestJsonReport:
    def test_shape(self):
        data = json.loads(json_report.render(_result()))
        assert data["found"] is True
        assert data["action"] == "Rename"
        assert data["changes"][0] == {
            "file_name": "/w/Bar.cs",
            "status": "modified",
            "changes": [
                {"start_line": 0, "start_column": 4, "end_line": 0, "end_column": 5, "new_text": "y"}
            ],
        }
        assert data["changes"][1] == {
            "file_name": "/w/Foo.cs",
            "status": "added",
            "buffer": "class Foo {}",
        }
        assert data["conflicts"][0]["reason"] == "file_exists"
        assert data["committed"] is None

    def test_not_found(self):
        data = json_report.to_dict(RunResult())
        assert data["found"] is False
        assert data["changes"] == []


class TestTerminal:
    def _render(self, result: RunResult) -> str:
        buf = io.StringIO()
        terminal.render(result, console=Console(file=buf, width=200))
        return buf.getvalue()

    def test_changes_and_conflicts(self):
        out = self._render(_result())
        assert "Rename" in out
        assert "/w/Bar.cs" in out
        assert "1 edit(s)" in out
        assert "File already exists on disk" in out

    def test_not_found(self):
        assert "No matching action" in self._render(RunResult())

    def test_commit_failure(self):
        result = _result()
        result.committed = False
        assert "could not be applied" in self._render(result)


class TestWriter:
    def test_batches_applied_in_order(self):
        change = FileChange(file_name="x")
        change.add_changes([_edit(0, 0, 0, 1, "x")])
        # Second batch is anchored to "x b c".
        change.add_changes([_edit(0, 4, 0, 5, "z")])
        assert apply_change("a b c", change) == "x b z"

    def test_buffer_wins(self):
        change = FileChange(file_name="x", buffer="new")
        assert apply_change("old", change) == "new"

    def test_write_changes(self, tmp_path: Path):
        target = tmp_path / "Bar.cs"
        target.write_bytes(b"int x;\r\n")
        change = FileChange(file_name=str(target))
        change.add_changes([_edit(0, 4, 0, 5, "y")])
        created = FileChange(
            file_name=str(tmp_path / "new" / "Foo.cs"), status=FileStatus.ADDED, buffer="class Foo {}"
        )

        written = write_changes([change, created])

        assert written == [str(target), str(tmp_path / "new" / "Foo.cs")]
        assert target.read_bytes() == b"int y;\r\n"
        assert (tmp_path / "new" / "Foo.cs").read_text() == "class Foo {}"

    def test_unchanged_not_written(self, tmp_path: Path):
        target = tmp_path / "a.cs"
        target.write_text("same")
        assert write_changes([FileChange(file_name=str(target), buffer="same")]) == []

    def test_file_exists_conflict_not_written(self, tmp_path: Path):
        target = tmp_path / "Foo.cs"
        target.write_text("// existing\n")
        other = tmp_path / "Bar.cs"
        records = [
            FileChange(file_name=str(target), status=FileStatus.ADDED, buffer="class Foo {}"),
            FileChange(file_name=str(other), status=FileStatus.ADDED, buffer="class Bar {}"),
        ]
        conflicts = [
            RegistrationConflict(
                file_name=str(target),
                reason=ConflictReason.FILE_EXISTS,
                message=f"File already exists on disk: '{target}'",
            )
        ]

        written = write_changes(records, conflicts)

        assert written == [str(other)]
        assert target.read_text() == "// existing\n"
        assert protected_paths(conflicts) == {str(target)}

    def test_already_registered_conflict_not_written(self, tmp_path: Path):
        target = tmp_path / "Foo.cs"
        target.write_text("class Foo {}")
        conflicts = [
            RegistrationConflict(
                file_name=str(target),
                reason=ConflictReason.ALREADY_REGISTERED,
                message=f"File already exists in workspace: '{target}'",
            )
        ]
        record = FileChange(file_name=str(target), status=FileStatus.ADDED, buffer="class Foo2 {}")

        assert write_changes([record], conflicts) == []
        assert target.read_text() == "class Foo {}"
