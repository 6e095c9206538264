"""REST API for reading, curating and generating blog articles."""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from rich.console import Console

from .. import __version__
from ..config import Config
from ..db import ArticleStore, get_connection
from ..errors import (
    ArticleNotFoundError,
    DuplicateArticleError,
    InvalidSourceURLError,
    SourceFetchError,
)
from ..models import Article, ArticleCreate, ArticleQuery, ArticleUpdate
from ..pipeline import PipelineOrchestrator
from ..pipeline.orchestrator import ALREADY_RUNNING_MESSAGE, ConnectionFactory
from .auth import COOKIE_NAME, check_password, create_token, verify_token
from .schemas import AuthRequest, BlogCreateRequest, BlogUpdateRequest, RedditUrlRequest, TopicRequest
from .sitemap import build_sitemap

console = Console()


def _dump(article: Article) -> Dict[str, Any]:
    return article.model_dump(by_alias=True, mode="json")


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({**extra, "error": message}, status_code=status_code)


def _parse_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def create_app(
    config: Config,
    orchestrator: Optional[PipelineOrchestrator] = None,
    store: Optional[ArticleStore] = None,
    connection_factory: Optional[ConnectionFactory] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Loaded configuration
        orchestrator: Generation pipeline (built from config if omitted)
        store: Article store
        connection_factory: Callable returning a connection context manager

    Returns:
        FastAPI application
    """
    settings = config.config
    store = store or ArticleStore()
    connection_factory = connection_factory or (lambda: get_connection(config.get_db_config()))
    if orchestrator is None:
        orchestrator = PipelineOrchestrator(config, store=store, connection_factory=connection_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        orchestrator.close()

    app = FastAPI(title="trendblog", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.orchestrator = orchestrator

    def current_admin(request: Request) -> Optional[Dict[str, Any]]:
        return verify_token(request.cookies.get(COOKIE_NAME), config.get_jwt_secret())

    def require_admin(request: Request) -> Dict[str, Any]:
        user = current_admin(request)
        if user is None:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return user

    # Blogs

    @app.get("/api/blogs")
    def list_blogs(
        request: Request,
        page: int = Query(1, ge=1),
        limit: int = Query(settings.site.page_size, ge=1, le=100),
        search: Optional[str] = None,
        archived: Optional[bool] = None,
        private: Optional[bool] = None,
    ):
        if current_admin(request) is None:
            archived, private = False, False

        query = ArticleQuery(page=page, limit=limit, search=search or None, archived=archived, private=private)
        try:
            with connection_factory() as conn:
                result = store.list_articles(conn, query)
        except Exception as e:
            console.print(f"[red]Error fetching blogs: {e}[/red]")
            return _error("Failed to fetch blogs", 500)

        return result.model_dump(by_alias=True, mode="json")

    @app.get("/api/blogs/{blog_id}")
    def get_blog(blog_id: int):
        try:
            with connection_factory() as conn:
                article = store.get_article(conn, blog_id)
        except Exception as e:
            console.print(f"[red]Error fetching blog {blog_id}: {e}[/red]")
            return _error("Failed to fetch blog", 500)

        if article is None:
            return _error("Blog not found", 404)
        return {"blog": _dump(article)}

    @app.post("/api/blogs", dependencies=[Depends(require_admin)])
    def create_blog(body: BlogCreateRequest):
        if not body.title or not body.content or not body.topic:
            return _error("Title, content, and topic are required", 400)

        try:
            with connection_factory() as conn:
                article = store.create_article(
                    conn,
                    ArticleCreate(
                        title=body.title,
                        meta_description=body.meta_description or "",
                        content=body.content,
                        image=body.image or "",
                        topic=body.topic,
                        is_private=body.is_private,
                    ),
                )
        except DuplicateArticleError:
            return _error("A blog with this title already exists", 400)
        except Exception as e:
            console.print(f"[red]Error creating blog: {e}[/red]")
            return _error("Failed to create blog", 500)

        return {"blog": _dump(article), "message": "Blog created successfully"}

    @app.put("/api/blogs", dependencies=[Depends(require_admin)])
    def update_blog(body: BlogUpdateRequest):
        blog_id = _parse_id(body.id)
        if blog_id is None:
            return _error("Blog ID is required", 400)

        changes = ArticleUpdate(**body.model_dump(exclude={"id"}, exclude_none=True))
        try:
            with connection_factory() as conn:
                article = store.update_article(conn, blog_id, changes)
        except ArticleNotFoundError:
            return _error("Blog not found", 404)
        except DuplicateArticleError:
            return _error("A blog with this title already exists", 400)
        except Exception as e:
            console.print(f"[red]Error updating blog: {e}[/red]")
            return _error("Failed to update blog", 500)

        return {"blog": _dump(article), "message": "Blog updated successfully"}

    @app.delete("/api/blogs", dependencies=[Depends(require_admin)])
    def delete_blog(id: Optional[str] = None):
        blog_id = _parse_id(id)
        if blog_id is None:
            return _error("Blog ID is required", 400)

        try:
            with connection_factory() as conn:
                store.delete_article(conn, blog_id)
        except ArticleNotFoundError:
            return _error("Blog not found", 404)
        except Exception as e:
            console.print(f"[red]Error deleting blog: {e}[/red]")
            return _error("Failed to delete blog", 500)

        return {"message": "Blog deleted successfully"}

    # Generation

    @app.post("/api/generate-blogs", dependencies=[Depends(require_admin)])
    def generate_blogs():
        summary = orchestrator.run()
        payload = summary.model_dump(by_alias=True, mode="json", exclude_none=True)

        if summary.success:
            return payload
        if summary.message == ALREADY_RUNNING_MESSAGE:
            return JSONResponse(payload, status_code=409)
        return JSONResponse({**payload, "error": summary.error or summary.message}, status_code=500)

    @app.post("/api/generate-from-topic", dependencies=[Depends(require_admin)])
    def generate_from_topic(body: TopicRequest):
        if not body.topic or not body.topic.strip():
            return _error('Request body must contain a "topic" key.', 400, success=False)

        try:
            article = orchestrator.generate_from_topic(body.topic)
        except DuplicateArticleError as e:
            return _error(str(e), 409, success=False)
        except Exception as e:
            console.print(f"[red]Error generating blog from topic: {e}[/red]")
            return _error(str(e), 500, success=False)

        return {"success": True, "message": "Blog generated successfully!", "blog": _dump(article)}

    @app.post("/api/generate-from-url", dependencies=[Depends(require_admin)])
    def generate_from_url(body: RedditUrlRequest):
        if not body.reddit_url:
            return _error('Request body must contain a "redditUrl" key.', 400, success=False)

        try:
            article = orchestrator.generate_from_url(body.reddit_url)
        except InvalidSourceURLError:
            return _error("Invalid Reddit post URL format.", 400, success=False)
        except SourceFetchError:
            return _error("Could not fetch the specified Reddit post.", 404, success=False)
        except DuplicateArticleError:
            return _error("A blog for this post already exists.", 409, success=False)
        except Exception as e:
            console.print(f"[red]Error generating blog from URL: {e}[/red]")
            return _error(str(e), 500, success=False)

        return {"success": True, "message": "Blog generated successfully!", "blog": _dump(article)}

    # Auth

    @app.post("/api/auth")
    def auth(body: AuthRequest):
        if body.action == "login":
            secret = config.get_jwt_secret()
            if not secret or not config.get_admin_password():
                console.print("[red]Admin login is not configured (missing password or JWT secret)[/red]")
                return JSONResponse({"success": False, "message": "Server error"}, status_code=500)

            if not check_password(body.password, config.get_admin_password()):
                return JSONResponse({"success": False, "message": "Invalid password"}, status_code=401)

            hours = settings.auth.session_hours
            response = JSONResponse({"success": True, "message": "Login successful"})
            response.set_cookie(
                COOKIE_NAME,
                create_token(secret, hours=hours),
                max_age=hours * 60 * 60,
                httponly=True,
                secure=settings.auth.secure_cookie,
                samesite="strict",
            )
            return response

        if body.action == "logout":
            response = JSONResponse({"success": True, "message": "Logout successful"})
            response.delete_cookie(COOKIE_NAME)
            return response

        return JSONResponse({"success": False, "message": "Invalid action"}, status_code=400)

    @app.get("/api/auth")
    def auth_status(request: Request):
        user = current_admin(request)
        if user is None:
            return {"authenticated": False}
        return {"authenticated": True, "user": user}

    # Sitemap

    @app.get("/sitemap.xml")
    def sitemap():
        try:
            with connection_factory() as conn:
                articles = store.list_public_articles(conn)
        except Exception as e:
            console.print(f"[red]Error building sitemap: {e}[/red]")
            articles = []

        xml = build_sitemap(settings.site.base_url, settings.site.static_pages, articles)
        return Response(content=xml, media_type="application/xml")

    return app
