"""Topic selection from subreddit listings."""

import random
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import httpx
from rich.console import Console

from ..config import RedditConfig
from ..errors import SourceFetchError
from .models import Topic
from .reddit_client import PUBLIC_BASE_URL, RedditClient

console = Console()


def parse_post_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Extract subreddit and post id from a Reddit post URL.

    Returns:
        Tuple of (subreddit, post_id), or None if the URL is not a post link
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or "reddit.com" not in (parsed.hostname or ""):
        return None

    parts = parsed.path.split("/")
    if "comments" not in parts:
        return None

    index = parts.index("comments")
    if index > 1 and len(parts) > index + 1:
        subreddit = parts[index - 1]
        post_id = parts[index + 1]
        if subreddit and post_id:
            return subreddit, post_id
    return None


def _topic_from_post(post: Dict[str, Any], subreddit: str) -> Topic:
    return Topic(
        title=post["title"].strip(),
        url=f"{PUBLIC_BASE_URL}{post.get('permalink', '')}",
        subreddit=subreddit,
        score=post.get("score") or 0,
        selftext=post.get("selftext") or "",
        id=post["id"],
    )


class TopicFetcher:
    """Pick one trending post per configured subreddit."""

    def __init__(
        self,
        client: RedditClient,
        config: RedditConfig,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize topic fetcher.

        Args:
            client: Reddit HTTP client
            config: Subreddits, listings and filter bounds
            rng: Random source for candidate selection
            sleep: Blocking pause between subreddits
        """
        self.client = client
        self.config = config
        self.rng = rng or random.Random()
        self.sleep = sleep

    def _listing_params(self, listing: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": self.config.listing_limit}
        if listing == "top":
            params["t"] = "day"
        return params

    def fetch_listing(self, subreddit: str) -> List[Dict[str, Any]]:
        """
        Fetch posts from the first listing endpoint that returns any.

        Returns:
            Raw post data dicts, empty if every endpoint failed
        """
        for listing in self.config.listings:
            path = f"/r/{subreddit}/{listing}.json"
            try:
                data = self.client.get_json(path, params=self._listing_params(listing))
            except (httpx.HTTPError, ValueError) as e:
                console.print(f"[yellow]Failed to fetch {path}: {e}[/yellow]")
                continue

            children = []
            if isinstance(data, dict):
                children = (data.get("data") or {}).get("children") or []
            posts = [child.get("data") for child in children if isinstance(child, dict) and child.get("data")]
            if posts:
                return posts

        return []

    def filter_posts(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Keep posts with a usable title."""
        kept = []
        for post in posts:
            title = post.get("title")
            if not isinstance(title, str) or not post.get("id"):
                continue
            if not self.config.min_title_length < len(title) < self.config.max_title_length:
                continue
            lowered = title.lower()
            if any(term in lowered for term in self.config.banned_title_terms):
                continue
            kept.append(post)
        return kept

    def fetch_topics(self) -> List[Topic]:
        """
        Select one random topic per subreddit.

        Subreddits with no usable posts are skipped; total failure returns
        an empty list.
        """
        topics: List[Topic] = []

        for index, subreddit in enumerate(self.config.subreddits):
            if index > 0 and self.config.request_delay > 0:
                self.sleep(self.config.request_delay)

            posts = self.fetch_listing(subreddit)
            if not posts:
                console.print(f"[red]Failed to fetch posts from r/{subreddit} with all endpoints[/red]")
                continue

            candidates = self.filter_posts(posts)
            if not candidates:
                console.print(f"[yellow]No valid posts found for r/{subreddit}[/yellow]")
                continue

            topic = _topic_from_post(self.rng.choice(candidates), subreddit)
            topics.append(topic)
            console.print(f"[dim]Selected topic from r/{subreddit}: {topic.title}[/dim]")

        return topics

    def fetch_post(self, subreddit: str, post_id: str) -> Topic:
        """
        Fetch a single post as a topic.

        Raises:
            SourceFetchError: If the post cannot be fetched or parsed
        """
        path = f"/r/{subreddit}/comments/{post_id}.json"
        try:
            data = self.client.get_json(path)
            post = data[0]["data"]["children"][0]["data"]
            return _topic_from_post(post, post.get("subreddit") or subreddit)
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Failed to fetch post from Reddit: {e}")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise SourceFetchError(f"Post data not found in Reddit API response: {e}")
