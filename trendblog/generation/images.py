"""Illustration generation via Gemini's image-capable models."""

import base64
from typing import Any, Optional

from google import genai
from google.genai import types
from rich.console import Console

from .prompts import build_image_prompt

console = Console()

DEFAULT_MIME_TYPE = "image/png"


def to_data_uri(data: Any, mime_type: Optional[str]) -> str:
    """Encode inline image data as a data URI."""
    if isinstance(data, (bytes, bytearray)):
        encoded = base64.b64encode(bytes(data)).decode("ascii")
    else:
        encoded = str(data)
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


class ImageGenerator:
    """Generate an article illustration; never fatal."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash-preview-image-generation",
        enabled: bool = True,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize image generator.

        Args:
            api_key: Gemini API key; generation is skipped without one
            model: Image-capable model name
            enabled: Whether to generate images at all
            client: Pre-built genai client (for testing)
        """
        self.api_key = api_key
        self.model = model
        self.enabled = enabled
        self._client = client

    def is_configured(self) -> bool:
        """Check whether image generation is enabled and has credentials."""
        return self.enabled and (self._client is not None or bool(self.api_key))

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, title: str) -> str:
        """
        Generate an illustration for an article title.

        Returns:
            A ``data:<mime>;base64,...`` URI, or an empty string on any failure
        """
        if not self.is_configured():
            console.print("[dim]Image generation not configured, skipping[/dim]")
            return ""

        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=build_image_prompt(title),
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )

            candidates = response.candidates or []
            parts = []
            if candidates and candidates[0].content is not None:
                parts = candidates[0].content.parts or []

            for part in parts:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    return to_data_uri(inline.data, inline.mime_type)

            console.print(f"[yellow]No image data in response for '{title}'[/yellow]")
            return ""

        except Exception as e:
            console.print(f"[yellow]Image generation failed for '{title}': {e}[/yellow]")
            return ""
