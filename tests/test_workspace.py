"""Tests for the live workspace, snapshot immutability, and loading."""

from pathlib import Path

import pytest

from editrecon.config.schema import EditReconConfig
from editrecon.workspace.loader import load_workspace
from editrecon.workspace.models import SourceKind
from editrecon.workspace.workspace import WorkspaceError


class TestRegistration:
    def test_add_document_reads_disk(self, tmp_path: Path, make_workspace):
        ws, pid = make_workspace({"A.cs": "a"})
        (tmp_path / "New.cs").write_text("")
        doc_id = ws.add_document(pid, str(tmp_path / "New.cs"), SourceKind.SCRIPT)
        doc = ws.get_document(doc_id)
        assert doc.get_text() == ""
        assert doc.source_kind == SourceKind.SCRIPT

    def test_double_registration_rejected(self, tmp_path: Path, make_workspace):
        ws, pid = make_workspace({"A.cs": "a"})
        with pytest.raises(WorkspaceError):
            ws.add_document(pid, str(tmp_path / "A.cs"))

    def test_snapshot_unchanged_by_registration(self, tmp_path: Path, make_workspace):
        ws, pid = make_workspace({"A.cs": "a"})
        before = ws.current_solution
        ws.add_document(pid, str(tmp_path / "B.cs"))
        assert len(list(before.iter_documents())) == 1
        assert len(list(ws.current_solution.iter_documents())) == 2


class TestApplyChanges:
    def test_replace_wholesale(self, make_workspace):
        ws, _ = make_workspace({"A.cs": "a"})
        doc = next(ws.current_solution.iter_documents())
        new = ws.current_solution.with_document_text(doc.id, "b")
        assert ws.try_apply_changes(new) is True
        assert ws.current_solution is new

    def test_delta_keeps_concurrent_registrations(self, tmp_path: Path, make_workspace):
        ws, pid = make_workspace({"A.cs": "a"})
        base = ws.current_solution
        doc = next(base.iter_documents())
        new = base.with_document_text(doc.id, "b")
        ws.add_document(pid, str(tmp_path / "Other.cs"))

        assert ws.try_apply_changes(new, base) is True
        assert ws.get_document(doc.id).get_text() == "b"
        assert ws.get_document_by_path(str(tmp_path / "Other.cs")) is not None

    def test_last_writer_wins(self, make_workspace):
        ws, _ = make_workspace({"A.cs": "a"})
        base = ws.current_solution
        doc = next(base.iter_documents())
        assert ws.try_apply_changes(base.with_document_text(doc.id, "first"), base)
        assert ws.try_apply_changes(base.with_document_text(doc.id, "second"), base)
        assert ws.get_document(doc.id).get_text() == "second"

    def test_changed_document_removed_meanwhile_fails(self, make_workspace):
        ws, _ = make_workspace({"A.cs": "a"})
        base = ws.current_solution
        doc = next(base.iter_documents())
        ws.try_apply_changes(base.remove_document(doc.id))
        assert ws.try_apply_changes(base.with_document_text(doc.id, "b"), base) is False

    def test_read_only_fails(self, make_workspace):
        ws, _ = make_workspace({"A.cs": "a"})
        ws.read_only = True
        assert ws.try_apply_changes(ws.current_solution) is False


class TestLoader:
    def test_loads_files(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "A.cs").write_text("class A {}")
        (tmp_path / "run.csx").write_text("Console.WriteLine();")
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "HEAD").write_text("ref")

        ws, skipped = load_workspace(tmp_path, EditReconConfig())

        docs = {d.name: d for d in ws.current_solution.iter_documents()}
        assert set(docs) == {"A.cs", "run.csx"}
        assert docs["run.csx"].source_kind == SourceKind.SCRIPT
        assert skipped == []

    def test_skips_binary_and_oversized(self, tmp_path: Path):
        (tmp_path / "img.bin").write_bytes(b"\xff\xfe\x00\x81")
        (tmp_path / "big.txt").write_text("x" * 2048)
        cfg = EditReconConfig()
        cfg.workspace.max_file_size_kb = 1

        ws, skipped = load_workspace(tmp_path, cfg)

        assert list(ws.current_solution.iter_documents()) == []
        assert "img.bin (binary)" in skipped
        assert "big.txt (oversized)" in skipped

    def test_exclude_globs(self, tmp_path: Path):
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "out.cs").write_text("x")
        (tmp_path / "keep.cs").write_text("y")
        cfg = EditReconConfig()
        cfg.workspace.exclude = ["build/*"]

        ws, _ = load_workspace(tmp_path, cfg)

        assert [d.name for d in ws.current_solution.iter_documents()] == ["keep.cs"]

    def test_not_a_directory(self, tmp_path: Path):
        with pytest.raises(WorkspaceError):
            load_workspace(tmp_path / "missing", EditReconConfig())

    def test_line_endings_preserved(self, tmp_path: Path):
        (tmp_path / "win.cs").write_bytes(b"a\r\nb\r\n")
        ws, _ = load_workspace(tmp_path, EditReconConfig())
        doc = next(ws.current_solution.iter_documents())
        assert doc.get_text() == "a\r\nb\r\n"
