"""Exception hierarchy for trendblog."""


class TrendBlogError(Exception):
    """Base class for all trendblog errors."""


class SourceFetchError(TrendBlogError):
    """A Reddit post or listing could not be fetched."""


class InvalidSourceURLError(TrendBlogError):
    """A URL does not point at a Reddit post."""


class LLMError(TrendBlogError):
    """The text-generation endpoint failed or returned nothing."""


class GenerationError(TrendBlogError):
    """No usable article could be produced."""


class DuplicateArticleError(TrendBlogError):
    """An article with the same title or source already exists."""


class ArticleNotFoundError(TrendBlogError):
    """No article exists with the requested id."""
