"""Reddit ingestion: topics, comments and grounding links."""

from .comments import CommentFetcher, flatten_comments
from .grounding import GroundingFetcher, extract_links
from .models import Topic
from .reddit_client import RedditClient
from .topics import TopicFetcher, parse_post_url

__all__ = [
    "RedditClient",
    "TopicFetcher",
    "CommentFetcher",
    "GroundingFetcher",
    "Topic",
    "flatten_comments",
    "extract_links",
    "parse_post_url",
]
