"""Init command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, save_config
from ..config.loader import DEFAULT_CONFIG_PATH
from ..db import init_database, validate_connection

console = Console()


def init_command(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Where to write config.yaml",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("trendblog", "--db-name", help="Database name"),
    db_user: str = typer.Option("trendblog_user", "--db-user", help="Database user"),
    subreddits: Optional[List[str]] = typer.Option(
        None,
        "--subreddit",
        "-s",
        help="Subreddit to pull topics from (repeatable)",
    ),
    llm_provider: str = typer.Option("gemini", "--llm", help="Text provider (gemini, openai, mock)"),
    skip_db: bool = typer.Option(False, "--skip-db", help="Only write the config file"),
) -> None:
    """Initialize trendblog configuration and database."""
    console.print(Panel.fit("trendblog - Initialization", style="bold blue"))

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "TRENDBLOG_DB_PASSWORD",
        },
        llm={
            "provider": llm_provider,
            "model": "gpt-4o-mini" if llm_provider == "openai" else "gemini-2.5-flash",
            "api_key_env": "OPENAI_API_KEY" if llm_provider == "openai" else "GEMINI_API_KEY",
        },
    )
    if subreddits:
        config.reddit.subreddits = list(subreddits)

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if skip_db:
        return

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export TRENDBLOG_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ trendblog initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export TRENDBLOG_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export {config.llm.api_key_env}=your_key[/bold]\n"
            f"3. Set admin credentials: [bold]export ADMIN_PASSWORD=... JWT_SECRET=...[/bold]\n"
            f"4. Run: [bold]trendblog run[/bold]",
            style="green",
        )
    )
