"""Article management commands."""

from typing import Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import ArticleStore, get_connection
from ..models import ArticleQuery

console = Console()
articles_app = typer.Typer(help="Manage stored articles")


@articles_app.command("list")
def articles_list(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=100, help="Articles per page"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by title, content or topic"),
    public_only: bool = typer.Option(False, "--public", help="Hide archived and private articles"),
) -> None:
    """List stored articles, newest first."""
    config = Config()
    query = ArticleQuery(
        page=page,
        limit=limit,
        search=search,
        archived=False if public_only else None,
        private=False if public_only else None,
    )

    with get_connection(config.get_db_config()) as conn:
        result = ArticleStore().list_articles(conn, query)

    if not result.blogs:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title=f"Articles (page {result.pagination.page} of {result.pagination.pages})")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Topic", style="magenta")
    table.add_column("Flags", style="yellow")
    table.add_column("Created", style="dim")

    for article in result.blogs:
        flags = []
        if article.is_archived:
            flags.append("archived")
        if article.is_private:
            flags.append("private")
        created = pendulum.instance(article.created_at).format("MMM DD, YYYY") if article.created_at else "-"
        table.add_row(str(article.id), article.title, article.topic, ", ".join(flags) or "-", created)

    console.print(table)
    console.print(f"[dim]{result.pagination.total} articles total[/dim]")


@articles_app.command("purge")
def articles_purge(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every stored article."""
    if not yes and not typer.confirm("Delete ALL articles? This cannot be undone"):
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(0)

    config = Config()
    with get_connection(config.get_db_config()) as conn:
        deleted = ArticleStore().delete_all_articles(conn)

    console.print(f"[green]✅ Deleted {deleted} articles[/green]")
