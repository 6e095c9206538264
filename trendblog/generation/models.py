"""Data models for generation."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class GeneratedArticle(BaseModel):
    """Article fields produced by the text model."""

    title: str = Field(..., description="Generated title")
    meta_description: str = Field(..., description="Generated meta description")
    content: str = Field(..., description="Cleaned HTML body")


class ParsedResponse(BaseModel):
    """Fields recovered from a model reply and how they were recovered."""

    fields: Dict[str, str] = Field(default_factory=dict)
    strategy: str = Field(..., description="strict, repaired or fallback")
    repairs_applied: List[str] = Field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.strategy == "fallback"


class GenerationResult(BaseModel):
    """Outcome of one generation attempt; never both article and error."""

    article: Optional[GeneratedArticle] = None
    error: Optional[str] = None
    strategy: Optional[str] = None
    repairs_applied: List[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.article is not None
