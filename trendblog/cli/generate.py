"""Single-article generation commands."""

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config
from ..errors import TrendBlogError
from ..models import Article
from ..pipeline import PipelineOrchestrator

console = Console()


def _print_article(article: Article) -> None:
    console.print(Panel(
        f"[green]✅ Blog generated successfully![/green]\n\n"
        f"ID: {article.id}\n"
        f"Title: {article.title}\n"
        f"Topic: {article.topic}\n"
        f"Image: {'yes' if article.image else 'no'}",
        style="green",
    ))


def topic_command(
    topic: str = typer.Argument(..., help="Free-text topic to write about"),
) -> None:
    """Generate one article from a free-text topic."""
    orchestrator = PipelineOrchestrator(Config())
    try:
        article = orchestrator.generate_from_topic(topic)
    except TrendBlogError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    _print_article(article)


def url_command(
    url: str = typer.Argument(..., help="Reddit post URL (https://www.reddit.com/r/<sub>/comments/<id>/...)"),
) -> None:
    """Generate one article from a specific Reddit post."""
    orchestrator = PipelineOrchestrator(Config())
    try:
        article = orchestrator.generate_from_url(url)
    except TrendBlogError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    _print_article(article)
