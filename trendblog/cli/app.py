"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .articles import articles_app
from .generate import topic_command, url_command
from .init import init_command
from .run import run_command
from .serve import serve_command

app = typer.Typer(
    name="trendblog",
    help="Trending Reddit topics to AI-written blog articles",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("topic")(topic_command)
app.command("url")(url_command)
app.command("serve")(serve_command)
app.add_typer(articles_app, name="articles", help="Manage stored articles")


if __name__ == "__main__":
    app()
