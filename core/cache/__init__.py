"""Cache Module - Caching services."""
from core.cache.embedding_cache import EmbeddingCacheService

__all__ = ['EmbeddingCacheService']
