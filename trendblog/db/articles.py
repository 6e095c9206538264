"""Article storage and management."""

from typing import List, Optional

from psycopg import Connection, sql
from psycopg.errors import UniqueViolation

from ..errors import ArticleNotFoundError, DuplicateArticleError
from ..models import Article, ArticleCreate, ArticlePage, ArticleQuery, ArticleUpdate, Pagination


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so search terms match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ArticleStore:
    """Read and write rows of the articles table."""

    def get_article(self, conn: Connection, article_id: int) -> Optional[Article]:
        """Get article by ID, regardless of archived/private flags."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM articles WHERE id = %s", (article_id,))
            row = cur.fetchone()
        return Article.model_validate(row) if row else None

    def find_by_title(self, conn: Connection, title: str) -> Optional[Article]:
        """Find an article whose title equals the trimmed title."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM articles WHERE title = %s LIMIT 1",
                (title.strip(),),
            )
            row = cur.fetchone()
        return Article.model_validate(row) if row else None

    def find_by_content_containing(self, conn: Connection, needle: str) -> Optional[Article]:
        """Find an article whose content contains the given text verbatim."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM articles WHERE strpos(content, %s) > 0 LIMIT 1",
                (needle,),
            )
            row = cur.fetchone()
        return Article.model_validate(row) if row else None

    def list_articles(self, conn: Connection, query: ArticleQuery) -> ArticlePage:
        """
        List articles newest first with filtering and pagination.

        Returns:
            Page of articles with pagination metadata
        """
        conditions = []
        params: list = []

        if query.search:
            pattern = f"%{_escape_like(query.search)}%"
            conditions.append("(title ILIKE %s OR content ILIKE %s OR topic ILIKE %s)")
            params.extend([pattern, pattern, pattern])

        if query.archived is not None:
            conditions.append("is_archived = %s")
            params.append(query.archived)

        if query.private is not None:
            conditions.append("is_private = %s")
            params.append(query.private)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        with conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) AS total FROM articles {where}", params)
            total = cur.fetchone()["total"]

            cur.execute(
                f"""
                SELECT * FROM articles
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                params + [query.limit, query.offset],
            )
            rows = cur.fetchall()

        return ArticlePage(
            blogs=[Article.model_validate(row) for row in rows],
            pagination=Pagination.build(query.page, query.limit, total),
        )

    def list_public_articles(self, conn: Connection) -> List[Article]:
        """Get every article that is neither archived nor private."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM articles
                WHERE is_archived = FALSE AND is_private = FALSE
                ORDER BY created_at DESC
                """
            )
            return [Article.model_validate(row) for row in cur.fetchall()]

    def create_article(self, conn: Connection, article: ArticleCreate) -> Article:
        """
        Insert a new article.

        Raises:
            DuplicateArticleError: If the title is already taken
        """
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO articles (
                        title, meta_description, content, image,
                        topic, is_archived, is_private
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING *
                    """,
                    (
                        article.title,
                        article.meta_description or "",
                        article.content,
                        article.image or "",
                        article.topic,
                        article.is_archived,
                        article.is_private,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        except UniqueViolation:
            conn.rollback()
            raise DuplicateArticleError(f"A blog with this title already exists: {article.title}")

        return Article.model_validate(row)

    def update_article(self, conn: Connection, article_id: int, changes: ArticleUpdate) -> Article:
        """
        Apply a partial update.

        Raises:
            ArticleNotFoundError: If no article has this ID
            DuplicateArticleError: If the new title is already taken
        """
        fields = changes.model_dump(exclude_none=True)
        if not fields:
            existing = self.get_article(conn, article_id)
            if existing is None:
                raise ArticleNotFoundError(f"Blog not found: {article_id}")
            return existing

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        query = sql.SQL("UPDATE articles SET {} WHERE id = %s RETURNING *").format(assignments)

        try:
            with conn.cursor() as cur:
                cur.execute(query, list(fields.values()) + [article_id])
                row = cur.fetchone()
            conn.commit()
        except UniqueViolation:
            conn.rollback()
            raise DuplicateArticleError(f"A blog with this title already exists: {fields.get('title')}")

        if row is None:
            raise ArticleNotFoundError(f"Blog not found: {article_id}")
        return Article.model_validate(row)

    def delete_article(self, conn: Connection, article_id: int) -> None:
        """
        Delete an article.

        Raises:
            ArticleNotFoundError: If no article has this ID
        """
        with conn.cursor() as cur:
            cur.execute("DELETE FROM articles WHERE id = %s RETURNING id", (article_id,))
            row = cur.fetchone()
        conn.commit()

        if row is None:
            raise ArticleNotFoundError(f"Blog not found: {article_id}")

    def delete_all_articles(self, conn: Connection) -> int:
        """Delete every article and return how many were removed."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM articles")
            deleted = cur.rowcount
        conn.commit()
        return deleted
