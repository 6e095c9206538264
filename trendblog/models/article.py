"""Article models for generated and hand-written blog posts."""

import math
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .base import DBModel


class Article(DBModel):
    """Stored blog article."""

    title: str = Field(..., description="Article title, unique")
    meta_description: Optional[str] = Field("", description="SEO description, 150-160 chars")
    content: str = Field(..., description="HTML fragment")
    image: Optional[str] = Field("", description="Empty or a base64 data URI")
    topic: str = Field(..., description="Source subreddit, or 'custom'")
    is_archived: bool = Field(False, description="Hidden from the public listing")
    is_private: bool = Field(False, description="Hidden from the listing but addressable by id")


class ArticleCreate(BaseModel):
    """Fields for inserting a new article."""

    title: str
    meta_description: Optional[str] = ""
    content: str
    image: Optional[str] = ""
    topic: str
    is_archived: bool = False
    is_private: bool = False

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ArticleUpdate(BaseModel):
    """Partial update; unset fields are left untouched."""

    title: Optional[str] = None
    meta_description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    topic: Optional[str] = None
    is_archived: Optional[bool] = None
    is_private: Optional[bool] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ArticleQuery(BaseModel):
    """Filters for listing articles."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    archived: Optional[bool] = None
    private: Optional[bool] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination block returned with article listings."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class ArticlePage(BaseModel):
    """One page of articles."""

    blogs: List[Article] = Field(default_factory=list)
    pagination: Pagination
