"""editrecon CLI — Typer application with list, run, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from editrecon import __version__

app = typer.Typer(
    name="editrecon",
    help="Run code actions over a project and reconcile the resulting file changes.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _load(root: str, config: Optional[str]):
    """Load config, workspace, and action registry; exit 2 on failure."""
    from editrecon.actions.models import ActionError
    from editrecon.actions.registry import build_registry
    from editrecon.config.loader import ConfigError, load_config
    from editrecon.workspace.loader import load_workspace
    from editrecon.workspace.workspace import WorkspaceError

    root_path = Path(root).resolve()
    try:
        cfg = load_config(root_path, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    try:
        workspace, skipped = load_workspace(root_path, cfg)
        registry = build_registry(cfg, root_path)
    except (WorkspaceError, ActionError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    logging.getLogger("editrecon").debug(
        "Loaded %d document(s), skipped %d", sum(1 for _ in workspace.current_solution.iter_documents()), len(skipped)
    )
    return cfg, workspace, registry, root_path


def _set_verbosity(verbose: bool, debug: bool) -> None:
    from editrecon.logging_setup import configure_logging

    if debug:
        configure_logging(logging.DEBUG)
    elif verbose:
        configure_logging(logging.INFO)
    else:
        configure_logging()


# ── list ──────────────────────────────────────────────────────────────────────


@app.command("list")
def list_cmd(
    file: str = typer.Argument(..., help="File the actions should apply to"),
    root: str = typer.Option(".", "--root", "-r", help="Workspace root directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .editrecon.toml"),
) -> None:
    """List the actions available for FILE."""
    from editrecon.actions.models import ActionContext
    from editrecon.actions.registry import list_actions

    _set_verbosity(False, False)
    _, workspace, registry, _ = _load(root, config)
    actions = list_actions(workspace, [registry], ActionContext(file_path=str(Path(file).resolve())))

    if not actions:
        console.print("[dim]No actions available.[/dim]")
        raise typer.Exit(code=0)
    for action in actions:
        print(f"{action.key}\t{action.title}")


# ── run ───────────────────────────────────────────────────────────────────────


@app.command()
def run(
    action: str = typer.Argument(..., help="Action identifier, e.g. whitespace/trim-trailing-whitespace"),
    file: str = typer.Argument(..., help="File the action is run from"),
    root: str = typer.Option(".", "--root", "-r", help="Workspace root directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .editrecon.toml"),
    text_changes: Optional[bool] = typer.Option(
        None, "--text-changes/--buffer", help="Line-span edits or full buffers per changed file"
    ),
    apply: Optional[bool] = typer.Option(None, "--apply/--no-apply", help="Commit to the workspace"),
    write: bool = typer.Option(False, "--write", "-w", help="Write the changes to disk"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Run ACTION at FILE and report the per-file changes."""
    from editrecon.actions.models import ActionError, ActionKey
    from editrecon.output import json_report, terminal
    from editrecon.output.writer import protected_paths, write_changes
    from editrecon.reconcile.runner import RunError, RunRequest, run_code_action

    _set_verbosity(verbose, debug)

    try:
        key = ActionKey.parse(action)
    except ValueError as exc:
        console.print(f"[bold red]Invalid action:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    cfg, workspace, registry, _ = _load(root, config)

    # --- CLI overrides ---
    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if text_changes is not None:
        cfg.run.wants_text_changes = text_changes
    if apply is not None:
        cfg.run.apply_text_changes = apply

    request = RunRequest(
        identifier=key,
        file_path=str(Path(file).resolve()),
        wants_text_changes=cfg.run.wants_text_changes,
        apply_text_changes=cfg.run.apply_text_changes,
    )

    try:
        result = run_code_action(workspace, [registry], request)
    except (ActionError, RunError) as exc:
        console.print(f"[bold red]Action error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- Output ---
    if cfg.output.format == "terminal":
        terminal.render(result, show_summary=cfg.output.show_summary)
    else:
        print(json_report.render(result))

    if output:
        Path(output).write_text(json_report.render(result), encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    if write and result.changes:
        written = write_changes(result.changes, result.conflicts)
        console.print(f"[green]✓[/green] Wrote {len(written)} file(s)")
        for path in sorted(protected_paths(result.conflicts)):
            console.print(f"[yellow]⚠[/yellow]  Skipped {path}: existing content would be overwritten")

    if result.commit_failed:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    root: str = typer.Option(".", "--root", "-r", help="Workspace root directory"),
) -> None:
    """Generate a starter .editrecon.toml in the workspace root."""
    from editrecon.config.defaults import DEFAULT_TOML
    from editrecon.config.loader import CONFIG_FILENAME

    config_path = Path(root).resolve() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"editrecon {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """editrecon — run code actions and reconcile file changes."""
