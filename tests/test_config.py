"""Tests for config loading and env overrides."""

from pathlib import Path

import pytest

from editrecon.config.defaults import DEFAULT_TOML
from editrecon.config.loader import CONFIG_FILENAME, ConfigError, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "EDITRECON_FORMAT",
        "EDITRECON_WANTS_TEXT_CHANGES",
        "EDITRECON_APPLY_TEXT_CHANGES",
        "EDITRECON_DISABLE_ACTIONS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.run.wants_text_changes is True
        assert cfg.run.apply_text_changes is False
        assert cfg.output.format == "terminal"
        assert cfg.actions.directory == ".editrecon-actions"

    def test_default_template_parses(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.workspace.script_extensions == [".csx"]

    def test_file_values(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(
            '[run]\nwants_text_changes = false\n\n[output]\nformat = "json"\n\n'
            '[actions]\ndisable = ["newlines"]\nunknown_key = 1\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.run.wants_text_changes is False
        assert cfg.output.format == "json"
        assert cfg.actions.disable == ["newlines"]

    def test_invalid_format(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('[output]\nformat = "xml"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("[run\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_not_table(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('run = "fast"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_missing_override(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, str(tmp_path / "nope.toml"))

    def test_override_path(self, tmp_path: Path):
        other = tmp_path / "custom.toml"
        other.write_text("[run]\napply_text_changes = true\n")
        assert load_config(tmp_path, str(other)).run.apply_text_changes is True


class TestEnvOverrides:
    def test_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("EDITRECON_FORMAT", "json")
        monkeypatch.setenv("EDITRECON_WANTS_TEXT_CHANGES", "no")
        monkeypatch.setenv("EDITRECON_APPLY_TEXT_CHANGES", "1")
        monkeypatch.setenv("EDITRECON_DISABLE_ACTIONS", "whitespace, newlines/ensure-final-newline")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "json"
        assert cfg.run.wants_text_changes is False
        assert cfg.run.apply_text_changes is True
        assert cfg.actions.disable == ["whitespace", "newlines/ensure-final-newline"]

    def test_invalid_values_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("EDITRECON_FORMAT", "xml")
        monkeypatch.setenv("EDITRECON_APPLY_TEXT_CHANGES", "maybe")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "terminal"
        assert cfg.run.apply_text_changes is False
