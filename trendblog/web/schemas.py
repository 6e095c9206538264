"""Request bodies for the REST API.

Required fields are declared optional so handlers can answer with the
API's own 400 messages instead of FastAPI's validation errors.
"""

from typing import Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        populate_by_name = True
        alias_generator = to_camel


class BlogCreateRequest(CamelModel):
    title: Optional[str] = None
    meta_description: Optional[str] = ""
    content: Optional[str] = None
    image: Optional[str] = ""
    topic: Optional[str] = None
    is_private: bool = False


class BlogUpdateRequest(CamelModel):
    id: Optional[Union[int, str]] = None
    title: Optional[str] = None
    meta_description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    topic: Optional[str] = None
    is_archived: Optional[bool] = None
    is_private: Optional[bool] = None


class TopicRequest(CamelModel):
    topic: Optional[str] = None


class RedditUrlRequest(CamelModel):
    reddit_url: Optional[str] = None


class AuthRequest(CamelModel):
    action: Optional[str] = None
    password: Optional[str] = None
