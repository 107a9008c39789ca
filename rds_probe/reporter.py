from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rds_probe.domain.models import InvocationResult


def _recent_items_table(items: List[Dict[str, Any]], total: Any) -> Table:
    table = Table(
        title="Recent test_items",
        box=box.ROUNDED,
        caption=f"Total rows: {total} │ Sorted by created_at (descending)",
    )
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Description")
    table.add_column("Created", style="green")

    for item in items:
        table.add_row(
            str(item.get("id", "")),
            escape(str(item.get("name") or "")),
            escape(str(item.get("description") or "")),
            escape(str(item.get("created_at") or "N/A")),
        )
    return table


def print_result(result: InvocationResult, console: Optional[Console] = None) -> None:
    """
    Render an invocation result for a terminal.

    Successful runs show the inserted id, the redacted connection target and
    a table of recent rows; failures show the error and troubleshooting hints.
    """
    console = console or Console()
    body = result.body
    env = body.get("environment", "?")

    if not result.ok:
        console.print(f"[bold red]✗ {body.get('message', 'Invocation failed')}[/bold red] [dim]({env})[/dim]")
        console.print(f"  [red]{escape(str(body.get('error', '')))}[/red]")
        for hint in body.get("troubleshooting", []):
            console.print(f"  • {escape(hint)}")
        return

    creds = body.get("credentials", {})
    target = f"{creds.get('username')}@{creds.get('host')}:{creds.get('port')}/{creds.get('database')}"
    inserted = body.get("insertedItem", {})

    console.print(f"[bold green]✓ {body.get('message')}[/bold green] [dim]({env})[/dim]")
    console.print(f"  Target: [cyan]{escape(target)}[/cyan]")
    console.print(f"  Inserted: #{inserted.get('id')} {escape(str(inserted.get('name')))}")
    console.print(_recent_items_table(body.get("recentItems", []), body.get("totalItems", 0)))


__all__ = ["print_result"]
