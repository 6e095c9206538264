"""Pipeline orchestrator that turns trending Reddit topics into blog articles."""

import threading
import time
from contextlib import AbstractContextManager
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

import pendulum
import psycopg
from psycopg import Connection
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..config import Config
from ..db import ArticleStore, get_connection
from ..errors import DuplicateArticleError, GenerationError, InvalidSourceURLError
from ..generation import ArticleGenerator, GenerationResult, ImageGenerator, create_llm_provider
from ..ingestion import (
    CommentFetcher,
    GroundingFetcher,
    RedditClient,
    Topic,
    TopicFetcher,
    extract_links,
    parse_post_url,
)
from ..models import Article, ArticleCreate
from .dedup import DedupGate

console = Console()

ALREADY_RUNNING_MESSAGE = "Blog generation is already in progress"
COMPLETED_MESSAGE = "Blog generation completed"
CUSTOM_TOPIC = "custom"

ConnectionFactory = Callable[[], AbstractContextManager]


class RunState(str, Enum):
    """Lifecycle of a generation cycle."""

    IDLE = "idle"
    RUNNING = "running"


class TopicResult(BaseModel):
    """Outcome for one topic in a run."""

    success: bool
    title: str
    reason: Optional[str] = None
    article_id: Optional[int] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class RunSummary(BaseModel):
    """Outcome of a whole run."""

    success: bool
    message: str
    results: List[TopicResult] = Field(default_factory=list)
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel

    @property
    def created(self) -> int:
        return sum(1 for result in self.results if result.success)


class PipelineOrchestrator:
    """
    Drives topic selection, generation and persistence.

    Only one run may be in progress per orchestrator; a second request while
    running returns immediately instead of queueing. The single-shot topic
    and URL flows are not guarded.
    """

    def __init__(
        self,
        config: Config,
        store: Optional[ArticleStore] = None,
        reddit_client: Optional[RedditClient] = None,
        topic_fetcher: Optional[TopicFetcher] = None,
        comment_fetcher: Optional[CommentFetcher] = None,
        generator: Optional[ArticleGenerator] = None,
        image_generator: Optional[ImageGenerator] = None,
        grounding_fetcher: Optional[GroundingFetcher] = None,
        connection_factory: Optional[ConnectionFactory] = None,
    ) -> None:
        """
        Initialize pipeline orchestrator.

        Any component left as None is built from configuration.
        """
        self.config = config
        settings = config.config

        self._owns_reddit_client = False
        if reddit_client is None and (topic_fetcher is None or comment_fetcher is None):
            reddit_client = RedditClient(
                user_agent=settings.reddit.user_agent,
                timeout=settings.reddit.timeout,
                credentials=config.get_reddit_credentials(),
                auth_mode=settings.reddit.auth_mode,
            )
            self._owns_reddit_client = True
        self.reddit_client = reddit_client

        self.store = store or ArticleStore()
        self.topic_fetcher = topic_fetcher or TopicFetcher(reddit_client, settings.reddit)
        self.comment_fetcher = comment_fetcher or CommentFetcher(reddit_client, settings.reddit)

        if generator is None:
            generator = ArticleGenerator(
                create_llm_provider(config.get_llm_config()),
                accept_fallback=settings.generation.accept_fallback_extraction,
            )
        self.generator = generator

        if image_generator is None:
            image_config = config.get_image_config()
            image_generator = ImageGenerator(
                api_key=image_config.get("api_key"),
                model=image_config["model"],
                enabled=image_config["enabled"],
            )
        self.image_generator = image_generator

        if grounding_fetcher is None and settings.generation.fetch_grounding_content:
            grounding_fetcher = GroundingFetcher(
                max_chars=settings.generation.grounding_max_chars,
                user_agent=settings.reddit.user_agent,
            )
        self.grounding_fetcher = grounding_fetcher

        self.dedup = DedupGate(self.store, settings.dedup)
        self.connection_factory = connection_factory or (lambda: get_connection(config.get_db_config()))

        self._state = RunState.IDLE
        self._lock = threading.Lock()

    def close(self) -> None:
        """Release the Reddit HTTP client if this orchestrator created it."""
        if self._owns_reddit_client and self.reddit_client is not None:
            self.reddit_client.close()

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    def _try_start(self) -> bool:
        with self._lock:
            if self._state is RunState.RUNNING:
                return False
            self._state = RunState.RUNNING
            return True

    def _finish(self) -> None:
        with self._lock:
            self._state = RunState.IDLE

    def _grounding_excerpt(self, topic: Topic) -> Optional[str]:
        if self.grounding_fetcher is None:
            return None
        links = extract_links(f"{topic.selftext} {topic.title}")
        if not links:
            return None
        return self.grounding_fetcher.fetch_excerpt(links[0])

    def _generate_article(self, topic: Topic) -> GenerationResult:
        comments = self.comment_fetcher.fetch_comments(topic.subreddit, topic.id)
        console.print(f"[dim]Fetched {len(comments)} comments for '{topic.title}'[/dim]")
        return self.generator.generate_for_topic(topic, comments, self._grounding_excerpt(topic))

    def _persist(self, conn: Connection, result: GenerationResult, topic_name: str) -> Article:
        """Generate the illustration and insert the article."""
        generated = result.article
        image = self.image_generator.generate(generated.title)
        if not image:
            console.print(f"[yellow]Could not generate image for '{generated.title}'. Saving without image.[/yellow]")

        return self.store.create_article(
            conn,
            ArticleCreate(
                title=generated.title,
                meta_description=generated.meta_description,
                content=generated.content,
                image=image,
                topic=topic_name,
            ),
        )

    def process_topic(self, conn: Connection, topic: Topic) -> TopicResult:
        """
        Run dedup, generation, dedup, image and persistence for one topic.

        Exceptions propagate; ``run`` converts them into failed results.
        """
        reason = self.dedup.check_topic(conn, topic)
        if reason:
            console.print(f"[yellow]{reason}[/yellow]")
            return TopicResult(success=False, title=topic.title, reason=reason)

        result = self._generate_article(topic)
        if not result.success:
            return TopicResult(
                success=False,
                title=topic.title,
                reason=result.error or "Failed to generate content",
            )

        reason = self.dedup.check_generated_title(conn, result.article.title)
        if reason:
            console.print(f"[yellow]{reason}[/yellow]")
            return TopicResult(success=False, title=result.article.title, reason=reason)

        article = self._persist(conn, result, topic.subreddit)
        console.print(f"[green]Created blog: {article.title}[/green]")
        return TopicResult(success=True, title=article.title, article_id=article.id)

    def run(self) -> RunSummary:
        """
        Run one generation cycle.

        Returns:
            Summary with one result per selected topic
        """
        if not self._try_start():
            console.print(f"[yellow]{ALREADY_RUNNING_MESSAGE}[/yellow]")
            return RunSummary(success=False, message=ALREADY_RUNNING_MESSAGE)

        started_at = pendulum.now("UTC")
        start_time = time.time()
        results: List[TopicResult] = []

        try:
            if self.reddit_client is not None:
                self.reddit_client.authenticate()

            topics = self.topic_fetcher.fetch_topics()
            console.print(f"Selected {len(topics)} topics")

            with self.connection_factory() as conn:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    TimeElapsedColumn(),
                    console=console,
                ) as progress:
                    task = progress.add_task("Generating articles", total=len(topics))

                    for topic in topics:
                        progress.update(task, description=f"r/{topic.subreddit}: {topic.title[:60]}")
                        try:
                            results.append(self.process_topic(conn, topic))
                        except Exception as e:
                            console.print(f"[red]Error while processing topic '{topic.title}': {e}[/red]")
                            if isinstance(e, psycopg.Error):
                                conn.rollback()
                            results.append(TopicResult(success=False, title=topic.title, reason=str(e)))
                        progress.advance(task, 1)

            summary = RunSummary(
                success=True,
                message=COMPLETED_MESSAGE,
                results=results,
                started_at=started_at,
                finished_at=pendulum.now("UTC"),
            )
        except Exception as e:
            console.print(f"[red]Error in blog generation: {e}[/red]")
            summary = RunSummary(
                success=False,
                message=str(e),
                error=str(e),
                results=results,
                started_at=started_at,
                finished_at=pendulum.now("UTC"),
            )
        finally:
            self._finish()

        self._print_summary(summary, time.time() - start_time)
        return summary

    def _print_summary(self, summary: RunSummary, duration: float) -> None:
        """Print run summary."""
        table = Table(title="Generation Summary")
        table.add_column("Status", style="bold")
        table.add_column("Title", style="cyan")
        table.add_column("Details", style="dim")

        for result in summary.results:
            status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
            details = f"id {result.article_id}" if result.success else (result.reason or "Failed")
            table.add_row(status, result.title, details)

        console.print("\n")
        console.print(table)

        if summary.success:
            console.print(Panel(
                f"[green]{summary.message}[/green]\n\n"
                f"Created: {summary.created} of {len(summary.results)} topics\n"
                f"Duration: {duration:.1f} seconds",
                style="green",
            ))
        else:
            console.print(Panel(
                f"[red]Blog generation failed![/red]\n\n"
                f"Error: {summary.message}\n"
                f"Duration: {duration:.1f} seconds",
                style="red",
            ))

    def generate_from_topic(self, topic: str) -> Article:
        """
        Generate and store an article about a free-text topic.

        Raises:
            GenerationError: If no usable article was produced
            DuplicateArticleError: If the generated title already exists
        """
        topic = topic.strip()
        if not topic:
            raise GenerationError("Topic is required")

        result = self.generator.generate_from_text(topic)
        if not result.success:
            raise GenerationError(result.error or "Failed to generate content")

        with self.connection_factory() as conn:
            reason = self.dedup.check_generated_title(conn, result.article.title)
            if reason:
                raise DuplicateArticleError(reason)
            return self._persist(conn, result, CUSTOM_TOPIC)

    def generate_from_url(self, url: str) -> Article:
        """
        Generate and store an article from a single Reddit post URL.

        Raises:
            InvalidSourceURLError: If the URL is not a Reddit post link
            SourceFetchError: If the post cannot be fetched
            DuplicateArticleError: If the post or generated title is already stored
            GenerationError: If no usable article was produced
        """
        parsed = parse_post_url(url)
        if parsed is None:
            raise InvalidSourceURLError("Invalid Reddit URL format. Could not extract subreddit and post ID.")
        subreddit, post_id = parsed

        if self.reddit_client is not None and self.reddit_client.access_token is None:
            self.reddit_client.authenticate()

        topic = self.topic_fetcher.fetch_post(subreddit, post_id)

        with self.connection_factory() as conn:
            reason = self.dedup.check_source_url(conn, topic.url)
            if reason:
                raise DuplicateArticleError(reason)

            result = self._generate_article(topic)
            if not result.success:
                raise GenerationError(result.error or "Failed to generate content")

            reason = self.dedup.check_generated_title(conn, result.article.title)
            if reason:
                raise DuplicateArticleError(reason)

            return self._persist(conn, result, topic.subreddit)
