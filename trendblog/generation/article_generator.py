"""Article generator."""

from typing import List, Optional

from rich.console import Console

from ..errors import GenerationError, LLMError
from ..ingestion.models import Topic
from .llm_provider import LLMProvider
from .models import GeneratedArticle, GenerationResult
from .parsing import clean_content, parse_article_response
from .prompts import build_article_prompt, build_topic_prompt

console = Console()


class ArticleGenerator:
    """Turn a topic into a validated article via the text model."""

    def __init__(self, llm_provider: LLMProvider, accept_fallback: bool = False) -> None:
        """
        Initialize article generator.

        Args:
            llm_provider: Text-generation provider
            accept_fallback: Accept articles recovered by regex field extraction
        """
        self.llm_provider = llm_provider
        self.accept_fallback = accept_fallback

    def _generate(self, prompt: str) -> GenerationResult:
        try:
            raw = self.llm_provider.generate_text(prompt)
            parsed = parse_article_response(raw, accept_fallback=self.accept_fallback)
        except (LLMError, GenerationError) as e:
            console.print(f"[red]Article generation failed: {e}[/red]")
            return GenerationResult(error=str(e))

        if parsed.repairs_applied:
            console.print(f"[dim]Repaired model JSON with: {', '.join(parsed.repairs_applied)}[/dim]")
        elif parsed.used_fallback:
            console.print("[yellow]Accepted article recovered by field extraction[/yellow]")

        content = clean_content(parsed.fields["content"])
        if not content:
            return GenerationResult(
                error="Generated content was empty after cleaning",
                strategy=parsed.strategy,
                repairs_applied=parsed.repairs_applied,
            )

        article = GeneratedArticle(
            title=parsed.fields["title"],
            meta_description=parsed.fields["metaDescription"],
            content=content,
        )
        return GenerationResult(
            article=article,
            strategy=parsed.strategy,
            repairs_applied=parsed.repairs_applied,
        )

    def generate_for_topic(
        self,
        topic: Topic,
        comments: List[str],
        grounding_excerpt: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate an article about a Reddit topic.

        Args:
            topic: Selected post
            comments: Flattened comment bodies
            grounding_excerpt: Text of the first linked page, if fetched

        Returns:
            Result holding either the article or an error reason
        """
        prompt = build_article_prompt(
            title=topic.title,
            subreddit=topic.subreddit,
            selftext=topic.selftext,
            comments=comments,
            post_url=topic.url,
            grounding_excerpt=grounding_excerpt,
        )
        return self._generate(prompt)

    def generate_from_text(self, topic: str) -> GenerationResult:
        """Generate an article about a free-text topic."""
        return self._generate(build_topic_prompt(topic))
