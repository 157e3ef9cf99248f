"""Persistent result cache."""

from qualitygate.cache.store import CacheKey, ResultCache

__all__ = ["CacheKey", "ResultCache"]
