"""Article and illustration generation."""

from .article_generator import ArticleGenerator
from .images import ImageGenerator
from .llm_provider import (
    GeminiProvider,
    LLMProvider,
    MockLLMProvider,
    OpenAIProvider,
    UnavailableLLMProvider,
    create_llm_provider,
)
from .models import GeneratedArticle, GenerationResult, ParsedResponse
from .parsing import REPAIR_STAGES, clean_content, parse_article_response

__all__ = [
    "ArticleGenerator",
    "ImageGenerator",
    "LLMProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "MockLLMProvider",
    "UnavailableLLMProvider",
    "create_llm_provider",
    "GeneratedArticle",
    "GenerationResult",
    "ParsedResponse",
    "REPAIR_STAGES",
    "clean_content",
    "parse_article_response",
]
