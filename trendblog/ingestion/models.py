"""Data models for ingestion."""

from pydantic import BaseModel, Field


class Topic(BaseModel):
    """Candidate subject for an article, taken from one Reddit post."""

    title: str = Field(..., description="Post title, trimmed")
    url: str = Field(..., description="Absolute permalink to the post")
    subreddit: str = Field(..., description="Subreddit the post was taken from")
    score: int = Field(0, description="Post score at fetch time")
    selftext: str = Field("", description="Post body, empty for link posts")
    id: str = Field(..., description="Reddit post identifier")
