"""Fetch linked pages to ground generated articles."""

import re
from typing import List, Optional

import httpx
import trafilatura
from rich.console import Console

console = Console()

LINK_PATTERN = re.compile(r"https?://[^\s)]+")


def extract_links(text: str) -> List[str]:
    """Find absolute http(s) URLs in free text, in order of appearance."""
    return LINK_PATTERN.findall(text or "")


class GroundingFetcher:
    """Fetch HTML and extract the main text of a linked page."""

    def __init__(
        self,
        timeout: float = 20.0,
        max_chars: int = 4000,
        user_agent: str = "trendblog/1.0 (grounding fetcher)",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize grounding fetcher."""
        self.timeout = timeout
        self.max_chars = max_chars
        self.user_agent = user_agent
        self.transport = transport

    def fetch_excerpt(self, url: str) -> Optional[str]:
        """
        Fetch a page and return a bounded excerpt of its main text.

        Returns:
            Extracted text, or None on any failure
        """
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }

        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            console.print(f"[yellow]Grounding link returned HTTP {e.response.status_code}: {url}[/yellow]")
            return None
        except httpx.HTTPError as e:
            console.print(f"[yellow]Could not fetch grounding link {url}: {e}[/yellow]")
            return None

        # Check for paywall indicators
        if any(
            indicator in response.text.lower()
            for indicator in ["paywall", "subscribe to read", "members only"]
        ):
            console.print(f"[dim]Paywall detected, skipping grounding excerpt: {url}[/dim]")
            return None

        extracted = trafilatura.extract(
            response.text,
            include_comments=False,
            include_tables=False,
            deduplicate=True,
            favor_precision=True,
            url=str(response.url),
        )
        if not extracted:
            return None

        if len(extracted) > self.max_chars:
            extracted = extracted[: self.max_chars].rstrip() + "..."
        return extracted
