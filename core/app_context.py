import logging
from dataclasses import dataclass
from typing import Optional

from core.cache.embedding_cache import EmbeddingCacheService
from core.config_loader import AppConfig, CacheConfig, EmbeddingConfig
from core.llm.interfaces import EmbeddingProvider
from core.llm.openai_service import OpenAIEmbeddingService
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.repositories import CandidateRepository, RequirementRepository
from core.matcher.service import MatcherService
from core.matcher.vector_index import VectorIndex

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Holds the process-wide collaborators (embedding provider and cache).
    DB access should be obtained via matching_uow() per run and handed to
    matcher_service().
    """
    config: AppConfig
    embedding_client: EmbeddingClient
    embedding_cache: Optional[EmbeddingCacheService] = None

    @classmethod
    def build(cls, config: AppConfig, provider: Optional[EmbeddingProvider] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            provider: Embedding provider override (defaults to the OpenAI provider)

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        provider = provider or cls._build_embedding_provider(config.embedding)

        # Embedding cache (lazy - only if enabled)
        embedding_cache = None
        if config.cache.enabled:
            embedding_cache = cls._build_embedding_cache(config.cache)

        embedding_client = EmbeddingClient(
            provider=provider,
            cache=embedding_cache,
            max_input_chars=config.embedding.max_input_chars
        )

        return cls(
            config=config,
            embedding_client=embedding_client,
            embedding_cache=embedding_cache
        )

    @staticmethod
    def _build_embedding_provider(embedding_config: EmbeddingConfig) -> OpenAIEmbeddingService:
        """Build OpenAI embedding service from embedding configuration."""
        return OpenAIEmbeddingService(
            api_key=embedding_config.api_key,
            base_url=embedding_config.base_url,
            model=embedding_config.model,
            dimensions=embedding_config.dimensions,
            max_retries=embedding_config.max_retries
        )

    @staticmethod
    def _build_embedding_cache(cache_config: CacheConfig) -> Optional[EmbeddingCacheService]:
        """Build the Redis embedding cache; unavailable Redis means no process-wide cache."""
        if not cache_config.redis_url:
            logger.warning("Embedding cache enabled but no redis_url configured; continuing without it")
            return None

        cache = EmbeddingCacheService(
            redis_url=cache_config.redis_url,
            password=cache_config.password,
            ttl_seconds=cache_config.ttl_seconds
        )
        return cache if cache.is_available else None

    def matcher_service(
        self,
        candidates: CandidateRepository,
        requirements: RequirementRepository,
        vector_index: VectorIndex
    ) -> MatcherService:
        """Build a MatcherService over run-scoped repositories."""
        return MatcherService(
            candidates=candidates,
            requirements=requirements,
            embeddings=self.embedding_client,
            vector_index=vector_index,
            policy=self.config.matching,
            shortlist_config=self.config.shortlist
        )
