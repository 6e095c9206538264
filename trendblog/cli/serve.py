"""Serve command implementation."""

import typer
import uvicorn
from rich.console import Console

from ..config import Config
from ..db import close_connection_pool
from ..web import create_app

console = Console()


def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
) -> None:
    """Serve the REST API."""
    app = create_app(Config())
    console.print(f"[green]Serving trendblog API on http://{host}:{port}[/green]")
    try:
        uvicorn.run(app, host=host, port=port)
    finally:
        close_connection_pool()
