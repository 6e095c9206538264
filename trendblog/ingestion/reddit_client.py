"""HTTP access to Reddit's JSON endpoints."""

from typing import Any, Dict, Optional

import httpx
from rich.console import Console

console = Console()

PUBLIC_BASE_URL = "https://www.reddit.com"
OAUTH_BASE_URL = "https://oauth.reddit.com"
TOKEN_URL = "https://www.reddit.com/api/v1/access_token"


class RedditClient:
    """Thin wrapper around an httpx client that knows about Reddit auth."""

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        credentials: Optional[Dict[str, str]] = None,
        auth_mode: str = "public",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize Reddit client.

        Args:
            user_agent: Descriptive User-Agent sent with every request
            timeout: Request timeout in seconds
            credentials: client_id, client_secret, username and password for
                the password grant; None for public access
            auth_mode: "public" or "password"; password mode without
                credentials logs the downgrade to public endpoints
            transport: Custom httpx transport (for testing)
        """
        self.user_agent = user_agent
        self.credentials = credentials
        self.auth_mode = auth_mode
        self.access_token: Optional[str] = None
        self.http = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Listing host for the current access mode."""
        return OAUTH_BASE_URL if self.access_token else PUBLIC_BASE_URL

    def authenticate(self) -> Optional[str]:
        """
        Exchange credentials for a bearer token.

        Failure is never fatal: the client drops to public endpoints and the
        downgrade is logged.

        Returns:
            The access token, or None when running unauthenticated
        """
        self.access_token = None
        if not self.credentials:
            if self.auth_mode == "password":
                console.print("[yellow]Reddit credentials are incomplete; using public endpoints[/yellow]")
            return None

        try:
            response = self.http.post(
                TOKEN_URL,
                data={
                    "grant_type": "password",
                    "username": self.credentials["username"],
                    "password": self.credentials["password"],
                },
                auth=(self.credentials["client_id"], self.credentials["client_secret"]),
            )
            response.raise_for_status()
            token = response.json().get("access_token")
        except (httpx.HTTPError, ValueError) as e:
            console.print(f"[yellow]Reddit authentication failed ({e}); using public endpoints[/yellow]")
            return None

        if not token:
            console.print("[yellow]Reddit returned no access token; using public endpoints[/yellow]")
            return None

        self.access_token = token
        console.print("[dim]Authenticated with Reddit[/dim]")
        return token

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON document relative to the current base URL.

        Raises:
            httpx.HTTPError: On network failure or non-success status
            ValueError: If the body is not JSON
        """
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        response = self.http.get(f"{self.base_url}{path}", params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "RedditClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
