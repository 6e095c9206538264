"""Tests for the Postgres article store against a mocked connection."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from psycopg.errors import UniqueViolation

from trendblog.db import ArticleStore
from trendblog.errors import ArticleNotFoundError, DuplicateArticleError
from trendblog.models import ArticleCreate, ArticleQuery, ArticleUpdate, Pagination


def _row(**fields):
    row = {
        "id": 1,
        "title": "T",
        "meta_description": "M",
        "content": "<p>C</p>",
        "image": "",
        "topic": "technology",
        "is_archived": False,
        "is_private": False,
        "created_at": datetime(2025, 1, 1),
        "updated_at": datetime(2025, 1, 1),
    }
    row.update(fields)
    return row


def _conn():
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    return conn, cur


class TestPagination:
    @pytest.mark.parametrize("total,limit,pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3)])
    def test_pages_is_ceiling(self, total, limit, pages):
        assert Pagination.build(1, limit, total).pages == pages

    def test_offset(self):
        assert ArticleQuery(page=3, limit=10).offset == 20


class TestArticleStore:
    def test_create_returns_article_and_commits(self):
        conn, cur = _conn()
        cur.fetchone.return_value = _row(title="New")

        article = ArticleStore().create_article(
            conn, ArticleCreate(title="New", content="<p>C</p>", topic="technology")
        )

        assert article.title == "New"
        params = cur.execute.call_args.args[1]
        assert params == ("New", "", "<p>C</p>", "", "technology", False, False)
        conn.commit.assert_called_once()

    def test_create_duplicate_rolls_back(self):
        conn, cur = _conn()
        cur.execute.side_effect = UniqueViolation("duplicate key")

        with pytest.raises(DuplicateArticleError):
            ArticleStore().create_article(conn, ArticleCreate(title="Dup", content="c", topic="t"))
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_find_by_title_trims(self):
        conn, cur = _conn()
        cur.fetchone.return_value = None
        assert ArticleStore().find_by_title(conn, "  Spaced  ") is None
        assert cur.execute.call_args.args[1] == ("Spaced",)

    def test_list_builds_filters_and_pagination(self):
        conn, cur = _conn()
        cur.fetchone.return_value = {"total": 25}
        cur.fetchall.return_value = [_row(id=5), _row(id=4)]

        page = ArticleStore().list_articles(
            conn, ArticleQuery(page=3, limit=10, search="50%", archived=False, private=False)
        )

        count_sql, count_params = cur.execute.call_args_list[0].args
        assert "ILIKE" in count_sql
        assert count_params == ["%50\\%%", "%50\\%%", "%50\\%%", False, False]
        select_params = cur.execute.call_args_list[1].args[1]
        assert select_params[-2:] == [10, 20]
        assert [a.id for a in page.blogs] == [5, 4]
        assert page.pagination.pages == 3

    def test_list_without_filters_has_no_where(self):
        conn, cur = _conn()
        cur.fetchone.return_value = {"total": 0}
        cur.fetchall.return_value = []

        page = ArticleStore().list_articles(conn, ArticleQuery())
        assert "WHERE" not in cur.execute.call_args_list[0].args[0]
        assert page.blogs == []

    def test_update_absent_raises(self):
        conn, cur = _conn()
        cur.fetchone.return_value = None
        with pytest.raises(ArticleNotFoundError):
            ArticleStore().update_article(conn, 9, ArticleUpdate(title="x"))

    def test_update_passes_only_set_fields(self):
        conn, cur = _conn()
        cur.fetchone.return_value = _row(is_archived=True)
        article = ArticleStore().update_article(conn, 1, ArticleUpdate(is_archived=True))
        assert cur.execute.call_args.args[1] == [True, 1]
        assert article.is_archived is True

    def test_delete_absent_raises(self):
        conn, cur = _conn()
        cur.fetchone.return_value = None
        with pytest.raises(ArticleNotFoundError):
            ArticleStore().delete_article(conn, 9)

    def test_delete_all_returns_count(self):
        conn, cur = _conn()
        cur.rowcount = 7
        assert ArticleStore().delete_all_articles(conn) == 7
