"""Trending-topic blog generator."""

__version__ = "0.1.0"
