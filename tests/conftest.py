"""Shared fixtures: an in-memory article store and fake Reddit payloads."""

import json
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from trendblog.config import Config, ConfigModel
from trendblog.errors import ArticleNotFoundError, DuplicateArticleError
from trendblog.models import Article, ArticleCreate, ArticlePage, ArticleQuery, ArticleUpdate, Pagination


class FakeArticleStore:
    """ArticleStore stand-in that keeps rows in a list."""

    def __init__(self) -> None:
        self.articles: List[Article] = []
        self._next_id = 1
        self._clock = datetime(2025, 1, 1, 12, 0, 0)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def add(self, **fields: Any) -> Article:
        defaults = {"title": f"Article {self._next_id}", "content": "<p>Body</p>", "topic": "technology"}
        defaults.update(fields)
        return self.create_article(None, ArticleCreate(**defaults))

    def get_article(self, conn, article_id: int) -> Optional[Article]:
        return next((a for a in self.articles if a.id == article_id), None)

    def find_by_title(self, conn, title: str) -> Optional[Article]:
        return next((a for a in self.articles if a.title == title.strip()), None)

    def find_by_content_containing(self, conn, needle: str) -> Optional[Article]:
        return next((a for a in self.articles if needle in a.content), None)

    def list_articles(self, conn, query: ArticleQuery) -> ArticlePage:
        rows = list(self.articles)
        if query.search:
            needle = query.search.lower()
            rows = [
                a for a in rows
                if needle in a.title.lower() or needle in a.content.lower() or needle in a.topic.lower()
            ]
        if query.archived is not None:
            rows = [a for a in rows if a.is_archived == query.archived]
        if query.private is not None:
            rows = [a for a in rows if a.is_private == query.private]

        rows.sort(key=lambda a: (a.created_at, a.id), reverse=True)
        page = rows[query.offset:query.offset + query.limit]
        return ArticlePage(blogs=page, pagination=Pagination.build(query.page, query.limit, len(rows)))

    def list_public_articles(self, conn) -> List[Article]:
        return [a for a in self.articles if not a.is_archived and not a.is_private]

    def create_article(self, conn, article: ArticleCreate) -> Article:
        if self.find_by_title(conn, article.title):
            raise DuplicateArticleError(f"A blog with this title already exists: {article.title}")
        now = self._tick()
        stored = Article(id=self._next_id, created_at=now, updated_at=now, **article.model_dump())
        self._next_id += 1
        self.articles.append(stored)
        return stored

    def update_article(self, conn, article_id: int, changes: ArticleUpdate) -> Article:
        existing = self.get_article(conn, article_id)
        if existing is None:
            raise ArticleNotFoundError(f"Blog not found: {article_id}")
        fields = changes.model_dump(exclude_none=True)
        if "title" in fields:
            clash = self.find_by_title(conn, fields["title"])
            if clash and clash.id != article_id:
                raise DuplicateArticleError(f"A blog with this title already exists: {fields['title']}")
        updated = existing.model_copy(update={**fields, "updated_at": self._tick()})
        self.articles[self.articles.index(existing)] = updated
        return updated

    def delete_article(self, conn, article_id: int) -> None:
        existing = self.get_article(conn, article_id)
        if existing is None:
            raise ArticleNotFoundError(f"Blog not found: {article_id}")
        self.articles.remove(existing)

    def delete_all_articles(self, conn) -> int:
        count = len(self.articles)
        self.articles.clear()
        return count


@pytest.fixture
def store() -> FakeArticleStore:
    return FakeArticleStore()


@pytest.fixture
def connection_factory():
    """Callable returning a context manager that yields a mock connection."""
    conn = MagicMock(name="connection")

    @contextmanager
    def factory():
        yield conn

    factory.conn = conn
    return factory


@pytest.fixture
def config(monkeypatch) -> Config:
    for name in ("GEMINI_API_KEY", "OPENAI_API_KEY", "REDDIT_CLIENT_ID", "ADMIN_PASSWORD", "JWT_SECRET"):
        monkeypatch.delenv(name, raising=False)
    model = ConfigModel(
        reddit={"subreddits": ["technology"], "request_delay": 0},
        llm={"provider": "mock"},
        image={"enabled": False},
    )
    return Config(model=model)


def make_post(title: str, post_id: str = "abc123", subreddit: str = "technology", **extra: Any) -> Dict[str, Any]:
    post = {
        "id": post_id,
        "title": title,
        "permalink": f"/r/{subreddit}/comments/{post_id}/slug/",
        "subreddit": subreddit,
        "score": 42,
        "selftext": "",
    }
    post.update(extra)
    return post


def listing(*posts: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}}


def comment(body: str, *replies: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "kind": "t1",
        "data": {
            "body": body,
            "replies": {"kind": "Listing", "data": {"children": list(replies)}} if replies else "",
        },
    }


def comments_payload(post: Dict[str, Any], *comments: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [listing(post), {"kind": "Listing", "data": {"children": list(comments)}}]


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})


def article_json(title: str = "Generated Title", meta: str = "Meta", content: str = "<p>Body</p>") -> str:
    return json.dumps({"title": title, "metaDescription": meta, "content": content})
