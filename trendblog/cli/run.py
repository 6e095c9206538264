"""Run command implementation."""

import typer
from rich.console import Console

from ..config import Config
from ..db import validate_connection
from ..pipeline import PipelineOrchestrator

console = Console()


def run_command(
    check_db: bool = typer.Option(
        True,
        "--check-db/--no-check-db",
        help="Validate the database connection before fetching topics",
    ),
) -> None:
    """Run one blog generation cycle over the configured subreddits."""
    try:
        config = Config()

        if check_db:
            console.print("[dim]Checking database connection...[/dim]")
            if not validate_connection(config.get_db_config()):
                console.print("[red]❌ Database connection failed![/red]")
                console.print("Please check your database configuration and ensure Postgres is running.")
                raise typer.Exit(1)

        orchestrator = PipelineOrchestrator(config)
        try:
            summary = orchestrator.run()
        finally:
            orchestrator.close()

        if not summary.success:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)
