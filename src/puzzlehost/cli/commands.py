"""CLI commands for puzzlehost.

Commands:
- serve: Run the HTTP API
- init-db: Create the database schema
- puzzles: List a user's puzzles

Every command takes an optional DB_CONNECTION argument; without it the
DB_CONNECTION environment variable, then config/puzzlehost.yaml, is used.
"""

import sqlite3

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from puzzlehost.config.app_config import load_app_config
from puzzlehost.db.data_access import DataAccess, start_session
from puzzlehost.db.database import UnsupportedConnectionError
from puzzlehost.web.api import create_app

app = typer.Typer(
    name="puzzlehost",
    help="Puzzle hosting HTTP API.",
    no_args_is_help=True,
)

console = Console()

CONNECTION_HELP = "Database connection (sqlite:///path.db or a file path)"


def _start_session_or_exit(connection: str | None) -> DataAccess:
    """Open the database, or exit with a readable error."""
    try:
        return start_session(connection)
    except UnsupportedConnectionError as e:
        console.print(f"[red]✗ {e}[/red]")
        console.print("  [dim]Only SQLite connections are supported[/dim]")
        raise typer.Exit(code=1)
    except sqlite3.Error as e:
        console.print(f"[red]✗ error connecting to database: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def serve(
    connection: str | None = typer.Argument(None, help=CONNECTION_HELP),
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default 8888)"),
) -> None:
    """Start the HTTP API server."""
    config = load_app_config()
    data_access = _start_session_or_exit(connection)

    host = host or config.server.host
    port = port or config.server.port

    api = create_app(data_access=data_access, config=config)

    console.print(f"[green]✓ Server started on port: {port}[/green]")
    console.print("  [dim]ctrl+c to quit[/dim]")
    uvicorn.run(api, host=host, port=port)


@app.command(name="init-db")
def init_db(
    connection: str | None = typer.Argument(None, help=CONNECTION_HELP),
) -> None:
    """Create the database and its tables if missing."""
    data_access = _start_session_or_exit(connection)
    console.print("[green]✓ Database ready[/green]")
    console.print(f"  [dim]path:[/dim] {data_access.database.path}")


@app.command()
def puzzles(
    owner: str = typer.Option(..., "--owner", "-o", help="User id"),
    connection: str | None = typer.Argument(None, help=CONNECTION_HELP),
) -> None:
    """List the puzzles a user owns."""
    data_access = _start_session_or_exit(connection)
    records = data_access.puzzles.list_for_owner(owner)

    if not records:
        console.print(f"[yellow]⚠ No puzzles for user '{owner}'[/yellow]")
        return

    table = Table(title=f"Puzzles of {owner}")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Answers", justify="right")
    table.add_column("Created")

    for record in records:
        table.add_row(
            str(record.id),
            record.name,
            str(data_access.answers.count_for_puzzle(record.id)),
            record.created_at,
        )

    console.print(table)


if __name__ == "__main__":
    app()
