"""Configuration management for trendblog."""

from .loader import Config, load_config, save_config
from .models import (
    AuthConfig,
    ConfigModel,
    DedupConfig,
    GenerationConfig,
    ImageConfig,
    LLMConfig,
    PostgresConfig,
    RedditConfig,
    SiteConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "PostgresConfig",
    "RedditConfig",
    "LLMConfig",
    "ImageConfig",
    "GenerationConfig",
    "DedupConfig",
    "AuthConfig",
    "SiteConfig",
    "load_config",
    "save_config",
]
