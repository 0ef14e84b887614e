"""Rich console output for ssekit commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

console = Console()
error_console = Console(stderr=True)


def print_error(message: str) -> None:
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def print_sent(event: str, session_id: str, message_id: int | None) -> None:
    """Confirm a pushed event, with the id the client will see when tagged."""
    tag = f" [dim](id {message_id})[/dim]" if message_id is not None else " [dim](untagged)[/dim]"
    console.print(f"[green]Sent[/green] [bold]{event}[/bold] to [cyan]{session_id}[/cyan]{tag}")


def sessions_table(session_ids: list[str]) -> Table:
    """Numbered table of open session ids.

    Ids are never wrapped so they can be copied straight into ``ssekit push``.
    """
    table = Table(
        title=f"Open sessions ({len(session_ids)})", show_header=True, header_style="bold"
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Session ID", style="cyan", no_wrap=True)
    for index, session_id in enumerate(session_ids, start=1):
        table.add_row(str(index), session_id)
    return table


def print_config(title: str, values: dict) -> None:
    console.print(f"[bold]{title}:[/bold]")
    for key, value in values.items():
        console.print(f"  {key}: [cyan]{value}[/cyan]")
