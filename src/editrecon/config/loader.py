"""Load and merge configuration from .editrecon.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from editrecon.config.schema import (
    OUTPUT_FORMATS,
    ActionsConfig,
    EditReconConfig,
    OutputConfig,
    RunConfig,
    WorkspaceConfig,
)

CONFIG_FILENAME = ".editrecon.toml"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _env_bool(name: str) -> Optional[bool]:
    val = os.environ.get(name, "").strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    return None


def _merge_env_overrides(cfg: EditReconConfig) -> None:
    """Apply EDITRECON_* environment variable overrides; invalid values are ignored."""
    if val := os.environ.get("EDITRECON_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if (flag := _env_bool("EDITRECON_WANTS_TEXT_CHANGES")) is not None:
        cfg.run.wants_text_changes = flag
    if (flag := _env_bool("EDITRECON_APPLY_TEXT_CHANGES")) is not None:
        cfg.run.apply_text_changes = flag
    if val := os.environ.get("EDITRECON_DISABLE_ACTIONS"):
        cfg.actions.disable.extend(a.strip() for a in val.split(",") if a.strip())


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def load_config(root: Path, config_override: Optional[str] = None) -> EditReconConfig:
    """Load, validate, and return an EditReconConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = EditReconConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = EditReconConfig(
            version=raw.get("version", "1.0"),
            run=_build_section(raw, RunConfig, "run"),
            output=_build_section(raw, OutputConfig, "output"),
            workspace=_build_section(raw, WorkspaceConfig, "workspace"),
            actions=_build_section(raw, ActionsConfig, "actions"),
        )
        if cfg.output.format not in OUTPUT_FORMATS:
            raise ConfigError(f"Invalid output format in {config_path}: {cfg.output.format}")

    _merge_env_overrides(cfg)
    return cfg
