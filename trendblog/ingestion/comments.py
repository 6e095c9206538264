"""Comment tree fetching and flattening."""

from typing import Any, List

from rich.console import Console

from ..config import RedditConfig
from .reddit_client import RedditClient

console = Console()


def flatten_comments(children: List[Any], max_depth: int = 10, max_comments: int = 100) -> List[str]:
    """
    Flatten a Reddit comment listing into bodies, parent before replies.

    Args:
        children: The ``data.children`` list of a comment listing
        max_depth: Deepest reply level to descend into (top level is 1)
        max_comments: Maximum number of bodies to return

    Returns:
        Comment bodies in pre-order
    """
    bodies: List[str] = []
    stack = [(child, 1) for child in reversed(children or [])]

    while stack and len(bodies) < max_comments:
        node, depth = stack.pop()
        if not isinstance(node, dict):
            continue

        data = node.get("data") or {}
        body = data.get("body")
        if node.get("kind") == "t1" and body:
            bodies.append(body)

        if depth >= max_depth:
            continue

        # An empty reply list comes back as "" rather than a listing
        replies = data.get("replies")
        if isinstance(replies, dict):
            nested = (replies.get("data") or {}).get("children") or []
            stack.extend((reply, depth + 1) for reply in reversed(nested))

    return bodies


class CommentFetcher:
    """Fetch the comments of a post."""

    def __init__(self, client: RedditClient, config: RedditConfig) -> None:
        self.client = client
        self.config = config

    def fetch_comments(self, subreddit: str, post_id: str) -> List[str]:
        """
        Fetch and flatten a post's comments.

        Comments are optional enrichment: any failure returns an empty list.
        """
        path = f"/r/{subreddit}/comments/{post_id}.json"
        try:
            data = self.client.get_json(
                path,
                params={"limit": self.config.comment_limit, "depth": self.config.comment_depth},
            )
            children = data[1]["data"]["children"]
        except Exception as e:
            console.print(f"[yellow]Failed to fetch comments for post {post_id}: {e}[/yellow]")
            return []

        return flatten_comments(
            children,
            max_depth=self.config.comment_depth,
            max_comments=self.config.comment_limit,
        )
