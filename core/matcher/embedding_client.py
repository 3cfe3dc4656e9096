#!/usr/bin/env python3
"""
Embedding Client - Call-through to the EmbeddingProvider with caching by exact text.

Two cache layers:
- a per-run memo (one dict per scoring run, see EmbeddingClient.scoped)
- an optional process-wide Redis cache shared by every run

Both are optimizations only; a miss always falls through to the provider.
"""
from typing import Dict, List, Optional
import logging
import threading

from core.cache.embedding_cache import EmbeddingCacheService
from core.exceptions import ProviderError
from core.llm.interfaces import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_CHARS = 8191 * 4


class EmbeddingClient:
    """Caching adapter in front of an EmbeddingProvider."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        cache: Optional[EmbeddingCacheService] = None,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS
    ):
        """
        Initialize embedding client.

        Args:
            provider: EmbeddingProvider used on cache misses
            cache: Optional process-wide embedding cache
            max_input_chars: Longer inputs are truncated before embedding
        """
        self.provider = provider
        self.cache = cache
        self.max_input_chars = max_input_chars
        self._memo: Dict[str, List[float]] = {}
        self.provider_calls = 0
        self._lock = threading.Lock()
        self._text_locks: Dict[str, threading.Lock] = {}

    def scoped(self) -> "EmbeddingClient":
        """Return a client with a fresh per-run memo sharing provider and cache."""
        return EmbeddingClient(
            provider=self.provider,
            cache=self.cache,
            max_input_chars=self.max_input_chars
        )

    def _truncate(self, text: str) -> str:
        if len(text) <= self.max_input_chars:
            return text
        logger.warning(f"Text truncated from {len(text)} to {self.max_input_chars} characters")
        return text[:self.max_input_chars]

    def embed(self, text: str) -> List[float]:
        """
        Get the embedding for text, consulting the caches first.

        Safe to call from several threads; each distinct text reaches the
        provider at most once per client.

        Raises:
            ProviderError: If the provider fails or returns an empty vector
        """
        text = self._truncate(text)

        with self._lock:
            text_lock = self._text_locks.setdefault(text, threading.Lock())

        with text_lock:
            cached = self._memo.get(text)
            if cached is not None:
                return cached

            model_name = self.provider.model_name
            if self.cache is not None:
                cached = self.cache.get_embedding(model_name, text)
                if cached is not None:
                    self._memo[text] = cached
                    return cached

            with self._lock:
                self.provider_calls += 1
            embedding = self.provider.embed(text)
            if not embedding:
                raise ProviderError(f"Empty embedding returned for text: {text[:50]}...")

            embedding = list(embedding)
            self._memo[text] = embedding
            if self.cache is not None:
                self.cache.set_embedding(model_name, text, embedding)
            return embedding
