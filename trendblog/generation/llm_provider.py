"""LLM provider interface and implementations."""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types
from openai import OpenAI
from rich.console import Console

from ..errors import LLMError

console = Console()


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def generate_text(self, prompt: str) -> str:
        """
        Send a prompt and return the raw text of the reply.

        Args:
            prompt: Complete prompt text

        Returns:
            Model output, unparsed

        Raises:
            LLMError: If the endpoint fails or returns no text
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key
            model: Model name to use
            temperature: Sampling temperature
            client: Pre-built genai client (for testing)
        """
        self.client = client or genai.Client(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.total_tokens = 0
        self.api_calls = 0

    def generate_text(self, prompt: str) -> str:
        """Generate text using Gemini."""
        self.api_calls += 1
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=self.temperature),
            )
        except Exception as e:
            raise LLMError(f"Gemini request failed: {e}") from e

        usage = getattr(response, "usage_metadata", None)
        if usage is not None and getattr(usage, "total_token_count", None):
            self.total_tokens += usage.total_token_count

        text = response.text
        if not text:
            raise LLMError("No text found in the model response")
        return text

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "estimated_cost": 0.0,
            "model": self.model,
        }


class OpenAIProvider(LLMProvider):
    """OpenAI implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL (for OpenAI-compatible endpoints)
            temperature: Sampling temperature
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature
        self.total_tokens = 0
        self.api_calls = 0

        # Token cost estimates (per 1K tokens)
        self.cost_per_1k_tokens = {
            "gpt-4o": {"input": 0.005, "output": 0.015},
            "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
            "gpt-4": {"input": 0.03, "output": 0.06},
            "gpt-3.5-turbo": {"input": 0.001, "output": 0.002},
        }

    def generate_text(self, prompt: str) -> str:
        """Generate text using OpenAI chat completions."""
        self.api_calls += 1
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=4000,
            )
        except Exception as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if response.usage:
            self.total_tokens += response.usage.total_tokens

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError("No text found in the model response")
        return content.strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        estimated_cost = 0.0
        if self.model in self.cost_per_1k_tokens:
            # Rough estimate (assuming 70% input, 30% output)
            input_tokens = int(self.total_tokens * 0.7)
            output_tokens = int(self.total_tokens * 0.3)
            rates = self.cost_per_1k_tokens[self.model]
            estimated_cost = (
                (input_tokens / 1000) * rates["input"] +
                (output_tokens / 1000) * rates["output"]
            )

        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "estimated_cost": estimated_cost,
            "model": self.model,
        }


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for offline runs and testing."""

    def __init__(self, responses: Optional[List[str]] = None) -> None:
        """
        Initialize mock provider.

        Args:
            responses: Replies returned in order; a canned article once exhausted
        """
        self.responses = list(responses or [])
        self.calls: List[str] = []

    def generate_text(self, prompt: str) -> str:
        """Return the next queued reply or a canned article."""
        self.calls.append(prompt)
        if self.responses:
            return self.responses.pop(0)

        return json.dumps({
            "title": f"Mock Article {len(self.calls)}",
            "metaDescription": "A mock article generated without calling a model.",
            "content": "<h2>Overview</h2><p>Mock content.</p><h2>Key Takeaways</h2><ul><li>Mock</li></ul>",
        })

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "estimated_cost": 0.0,
            "model": "mock",
        }


class UnavailableLLMProvider(LLMProvider):
    """Stands in for a real provider that cannot be built; every call fails."""

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def generate_text(self, prompt: str) -> str:
        raise LLMError(self.reason)

    def get_usage_stats(self) -> Dict:
        return {
            "total_tokens": 0,
            "api_calls": 0,
            "estimated_cost": 0.0,
            "model": None,
        }


def create_llm_provider(llm_config: Dict) -> LLMProvider:
    """
    Build the configured LLM provider.

    The mock provider is only used when configured explicitly. A missing API
    key or an unknown provider yields a provider whose calls raise LLMError,
    so generation fails and nothing is stored.
    """
    provider = llm_config.get("provider")
    api_key = llm_config.get("api_key")

    if provider == "mock":
        return MockLLMProvider()

    if provider == "gemini":
        if not api_key:
            console.print("[red]No Gemini API key configured; article generation will fail.[/red]")
            return UnavailableLLMProvider("No Gemini API key configured")
        return GeminiProvider(
            api_key=api_key,
            model=llm_config.get("model", "gemini-2.5-flash"),
            temperature=llm_config.get("temperature", 0.7),
        )

    if provider == "openai":
        if not api_key:
            console.print("[red]No OpenAI API key configured; article generation will fail.[/red]")
            return UnavailableLLMProvider("No OpenAI API key configured")
        return OpenAIProvider(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4o-mini"),
            base_url=llm_config.get("base_url"),
            temperature=llm_config.get("temperature", 0.7),
        )

    console.print(f"[red]Unknown LLM provider '{provider}'; article generation will fail.[/red]")
    return UnavailableLLMProvider(f"Unknown LLM provider: {provider}")
