"""
Endb CLI entry point.

Commands:
    endb get KEY        — Print a value
    endb set KEY VALUE  — Store a value (JSON when it parses, else a string)
    endb delete KEY     — Remove a key
    endb all            — List the namespace
    endb clear          — Empty the namespace
    endb math KEY OP N  — Arithmetic on a stored number
    endb config         — Show the resolved configuration
    endb version        — Show the version

Connection options come from --uri/--namespace/--adapter, ENDB_*
environment variables or ./endb.toml, in that order.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from endb.core.config import EndbConfig
from endb.core.errors import EndbError
from endb.core.logging import setup_logging
from endb.store import Endb

app = typer.Typer(
    name="endb",
    help="Endb — one key-value API for many storage backends.",
    add_completion=False,
)

console = Console()


def _parse_value(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="backslashreplace")
    return str(value)


def _render(value: Any) -> str:
    """JSON for display; unlike the stored form, nothing is escaped."""
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _run(ctx: typer.Context, action: Callable[[Endb], Awaitable[Any]]) -> Any:
    """Open the configured store, run one action, close it."""
    config: EndbConfig = ctx.obj

    async def runner() -> Any:
        async with Endb(config) as db:
            return await action(db)

    try:
        return asyncio.run(runner())
    except (EndbError, ValueError, TypeError, ZeroDivisionError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    uri: str = typer.Option(None, "--uri", "-u", help="Connection string, e.g. sqlite://db.sqlite"),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Key namespace"),
    adapter: str = typer.Option(None, "--adapter", "-a", help="Adapter name (overrides URI scheme)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Resolve configuration shared by every command."""
    setup_logging(console_level=logging.DEBUG if verbose else logging.WARNING)
    try:
        ctx.obj = EndbConfig.load(
            overrides={"uri": uri, "namespace": namespace, "adapter": adapter}
        )
    except EndbError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to read"),
    path: str = typer.Option(None, "--path", "-p", help="Dotted property path"),
) -> None:
    """Print the value stored under KEY."""

    async def action(db: Endb) -> tuple[bool, Any]:
        if not await db.has(key):
            return False, None
        return True, await db.get(key, path)

    found, value = _run(ctx, action)
    if not found:
        console.print(f"[yellow]Key not found:[/yellow] {escape(key)}")
        raise typer.Exit(1)
    console.print_json(_render(value))


@app.command("set")
def set_(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to write"),
    value: str = typer.Argument(..., help="Value (parsed as JSON when valid)"),
    path: str = typer.Option(None, "--path", "-p", help="Dotted property path"),
) -> None:
    """Store VALUE under KEY."""
    _run(ctx, lambda db: db.set(key, _parse_value(value), path))
    console.print(f"[green]✓[/green] {key}")


@app.command()
def delete(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to remove"),
    path: str = typer.Option(None, "--path", "-p", help="Dotted property path"),
) -> None:
    """Remove KEY (or one property of its value)."""
    deleted = _run(ctx, lambda db: db.delete(key, path))
    if not deleted:
        console.print(f"[yellow]Key not found:[/yellow] {escape(key)}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] deleted {key}")


@app.command("all")
def all_(ctx: typer.Context) -> None:
    """List every key and value in the namespace."""
    elements = _run(ctx, lambda db: db.all())
    if not elements:
        console.print("[dim]No entries.[/dim]")
        return

    table = Table(title=f"namespace: {ctx.obj.namespace}")
    table.add_column("key", style="cyan")
    table.add_column("value")
    for element in elements:
        table.add_row(escape(element["key"]), escape(_render(element["value"])))
    console.print(table)


@app.command()
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every key in the namespace."""
    if not yes:
        typer.confirm(f"Delete every key in namespace '{ctx.obj.namespace}'?", abort=True)
    _run(ctx, lambda db: db.clear())
    console.print(f"[green]✓[/green] cleared {ctx.obj.namespace}")


@app.command()
def math(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key holding a number"),
    operation: str = typer.Argument(..., help="add, sub, mult, div, exp, mod or random"),
    operand: float = typer.Argument(..., help="Right-hand operand"),
) -> None:
    """Apply an arithmetic operation to the number stored under KEY."""
    number: int | float = int(operand) if operand.is_integer() else operand

    async def action(db: Endb) -> Any:
        await db.math(key, operation, number)
        return await db.get(key)

    result = _run(ctx, action)
    console.print_json(_render(result))


@app.command()
def config(ctx: typer.Context) -> None:
    """Show the resolved configuration."""
    table = Table(title="endb configuration")
    table.add_column("option", style="cyan")
    table.add_column("value")
    for name, value in ctx.obj.model_dump().items():
        table.add_row(name, "" if value is None else escape(str(value)))
    console.print(table)


@app.command()
def version() -> None:
    """Show endb version."""
    from endb import __version__

    console.print(f"endb v{__version__}")


if __name__ == "__main__":
    app()
