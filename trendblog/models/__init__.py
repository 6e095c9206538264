"""Data models for trendblog."""

from .article import (
    Article,
    ArticleCreate,
    ArticlePage,
    ArticleQuery,
    ArticleUpdate,
    Pagination,
)

__all__ = [
    "Article",
    "ArticleCreate",
    "ArticleUpdate",
    "ArticleQuery",
    "ArticlePage",
    "Pagination",
]
