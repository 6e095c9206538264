"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("trendblog", description="Database name")
    user: str = Field("trendblog_user", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class RedditConfig(BaseModel):
    """Reddit topic source configuration."""

    subreddits: List[str] = Field(
        default_factory=lambda: ["technology", "artificial", "cybersecurity", "saas"],
        description="Subreddits to pull topics from, in order",
    )
    listings: List[str] = Field(
        default_factory=lambda: ["hot", "top", "new"],
        description="Listing endpoints tried in order per subreddit",
    )
    listing_limit: int = Field(25, ge=1, le=100)
    auth_mode: str = Field("public", description="public or password")
    user_agent: str = Field("trendblog:v1.0 (trending topic blog generator)")
    client_id_env: str = Field("REDDIT_CLIENT_ID")
    client_secret_env: str = Field("REDDIT_CLIENT_SECRET")
    username_env: str = Field("REDDIT_USERNAME")
    password_env: str = Field("REDDIT_PASSWORD")
    request_delay: float = Field(2.0, ge=0.0, description="Seconds to pause between subreddits")
    timeout: float = Field(30.0, gt=0.0)
    min_title_length: int = Field(15, ge=0)
    max_title_length: int = Field(300, ge=1)
    banned_title_terms: List[str] = Field(default_factory=lambda: ["removed", "deleted"])
    comment_limit: int = Field(100, ge=1, le=500)
    comment_depth: int = Field(10, ge=1, le=50)

    @field_validator("auth_mode")
    @classmethod
    def validate_auth_mode(cls, v: str) -> str:
        """Only public and password-grant access are supported."""
        if v not in ("public", "password"):
            raise ValueError(f"auth_mode must be 'public' or 'password', got {v!r}")
        return v


class LLMConfig(BaseModel):
    """Text-generation provider configuration."""

    provider: str = Field("gemini", description="LLM provider (gemini, openai, mock)")
    model: str = Field("gemini-2.5-flash", description="Model name")
    api_key_env: Optional[str] = Field("GEMINI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for OpenAI-compatible APIs")
    temperature: float = Field(0.7, ge=0.0, le=2.0)


class ImageConfig(BaseModel):
    """Image-generation configuration."""

    enabled: bool = Field(True, description="Generate an illustration per article")
    model: str = Field("gemini-2.0-flash-preview-image-generation")
    api_key_env: Optional[str] = Field("GEMINI_API_KEY")
    api_key: Optional[str] = Field(None)


class GenerationConfig(BaseModel):
    """Article generation policy."""

    accept_fallback_extraction: bool = Field(
        False,
        description="Accept articles recovered by regex field extraction",
    )
    fetch_grounding_content: bool = Field(
        False,
        description="Fetch the first linked page and add an excerpt to the prompt",
    )
    grounding_max_chars: int = Field(4000, ge=0)


class DedupConfig(BaseModel):
    """Duplicate checks applied around generation."""

    topic_title: bool = Field(True, description="Skip topics whose title is already stored")
    source_url: bool = Field(True, description="Skip topics whose permalink appears in stored content")
    generated_title: bool = Field(True, description="Skip generated articles whose title is already stored")


class AuthConfig(BaseModel):
    """Admin authentication."""

    admin_password_env: str = Field("ADMIN_PASSWORD")
    jwt_secret_env: str = Field("JWT_SECRET")
    session_hours: int = Field(24, ge=1)
    secure_cookie: bool = Field(False, description="Send the session cookie only over HTTPS")


class SiteConfig(BaseModel):
    """Public site settings."""

    base_url: str = Field("https://aitechblog.vercel.app")
    static_pages: List[str] = Field(
        default_factory=lambda: ["", "about", "contact", "newsletter", "topics", "archive"]
    )
    page_size: int = Field(10, ge=1, le=100)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    reddit: RedditConfig = Field(default_factory=RedditConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
