"""Duplicate checks around article generation."""

from typing import Optional

from psycopg import Connection

from ..config import DedupConfig
from ..db.articles import ArticleStore
from ..ingestion.models import Topic


class DedupGate:
    """
    Best-effort duplicate detection against stored articles.

    Each check returns a human-readable reason when the candidate is a
    duplicate and None otherwise. Checks and inserts are not transactional;
    the unique title constraint is the backstop.
    """

    def __init__(self, store: ArticleStore, config: DedupConfig) -> None:
        self.store = store
        self.config = config

    def check_topic(self, conn: Connection, topic: Topic) -> Optional[str]:
        """Run the pre-generation checks for a topic."""
        if self.config.topic_title and self.store.find_by_title(conn, topic.title):
            return f"Duplicate: a blog with this topic title already exists: {topic.title.strip()}"

        return self.check_source_url(conn, topic.url)

    def check_source_url(self, conn: Connection, url: str) -> Optional[str]:
        if self.config.source_url and url and self.store.find_by_content_containing(conn, url):
            return f"Duplicate: a blog from this source already exists: {url}"
        return None

    def check_generated_title(self, conn: Connection, title: str) -> Optional[str]:
        """Run the pre-persistence check for a generated title."""
        if self.config.generated_title and self.store.find_by_title(conn, title):
            return f"Duplicate: a blog with this title already exists: {title.strip()}"
        return None
