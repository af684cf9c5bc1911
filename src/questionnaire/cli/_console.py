"""Rich console singleton and output helpers."""

import json as json_mod
from typing import Mapping, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Status/progress to stderr so it doesn't pollute piped JSON output
console = Console(stderr=True)

# Data output to stdout (pipeable to jq)
stdout_console = Console(soft_wrap=True)


def print_ok(msg: str) -> None:
    """Print a success message to stderr."""
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {msg}")


def output_result(data: dict, *, ctx: typer.Context, title: str = "") -> None:
    """Print result as JSON (stdout) or a Rich panel (stderr)."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data)
    else:
        formatted = json_mod.dumps(data, indent=2, ensure_ascii=False, default=str)
        if title:
            console.print(Panel(formatted, title=title, border_style="blue"))
        else:
            console.print(formatted)


def output_errors(errors: Mapping[str, Optional[str]], *, ctx: typer.Context, title: str = "") -> None:
    """Print an error map as JSON or as a table of failing fields."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=dict(errors))
        return

    failing = {key: message for key, message in errors.items() if message is not None}
    if not failing:
        console.print("[dim]No errors[/dim]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("field")
    table.add_column("message")
    for key, message in failing.items():
        table.add_row(key, message)
    console.print(table)
