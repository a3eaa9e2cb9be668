"""Rich terminal reporter — change table, conflicts, summary."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from editrecon.reconcile.models import FileChange, FileStatus, RunResult

_STATUS_STYLE = {
    FileStatus.ADDED: "bold black on green",
    FileStatus.MODIFIED: "bold black on yellow",
}


def _status_pill(status: FileStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLE.get(status, ""))


def _describe(change: FileChange) -> str:
    if change.buffer is not None:
        lines = change.buffer.count("\n") + (0 if change.buffer.endswith("\n") else 1)
        return f"full buffer, {lines} line(s)"
    return f"{len(change.changes)} edit(s)"


def render(result: RunResult, *, show_summary: bool = True, console: Console | None = None) -> None:
    """Print run results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not result.found:
        console.print("[bold yellow]No matching action at this location.[/bold yellow]")
        return

    console.print()
    console.print(f"[bold]Applied:[/bold] {result.action_title}")

    if result.changes:
        table = Table(show_lines=False, title_style="bold", border_style="dim")
        table.add_column("Status", justify="center", width=12)
        table.add_column("File", style="magenta")
        table.add_column("Change", style="cyan")
        for change in result.changes:
            table.add_row(_status_pill(change.status), change.file_name, _describe(change))
        console.print(table)
    else:
        console.print("[dim]No file changes.[/dim]")

    for conflict in result.conflicts:
        console.print(f"[yellow]⚠[/yellow]  {conflict.message}")

    if result.commit_failed:
        console.print("[bold red]✗ Changes could not be applied to the workspace.[/bold red]")

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: RunResult) -> None:
    console.print()
    console.print(f"[dim]Operations:[/dim]  {result.operations}")
    console.print(f"[dim]Files:[/dim]       {result.total_files}")
    console.print(f"[dim]Conflicts:[/dim]   {len(result.conflicts)}")
    if result.committed is not None:
        console.print(f"[dim]Committed:[/dim]   {result.committed}")
    console.print(f"[dim]Duration:[/dim]    {result.duration_ms:.0f}ms")
