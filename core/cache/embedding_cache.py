"""Embedding Cache Service - Redis caching for embedding vectors."""
import hashlib
import json
import logging
from typing import Optional, List
from datetime import datetime, timezone
from urllib.parse import urlparse

from redis import Redis
from redis.exceptions import RedisError

from core.config_loader import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    parsed = urlparse(url)
    if parsed.password:
        sanitized = parsed._replace(
            netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
        )
        return sanitized.geturl()
    return url


class EmbeddingCacheService:
    """
    Process-wide cache of embedding vectors keyed by exact input text.

    Uses Redis with a TTL. Keys are namespaced by embedding model so vectors
    from different models never mix. Any Redis failure degrades to a cache miss.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = client
        self._available = False

        try:
            if self._redis is None:
                self._redis = Redis.from_url(
                    redis_url,
                    password=password,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5
                )
            self._redis.ping()
            self._available = True
            logger.info(f"Embedding cache connected to Redis at {_sanitize_url(redis_url)}")
        except RedisError as e:
            logger.warning(f"Embedding cache Redis unavailable: {e}")
            self._available = False

    @property
    def is_available(self) -> bool:
        """Check if cache is available."""
        return self._available and self._redis is not None

    @staticmethod
    def make_key(model_name: str, text: str) -> str:
        """Create cache key from model name and text."""
        digest = hashlib.sha256(text.encode('utf-8')).hexdigest()
        return f"embedding:{model_name}:{digest}"

    def get_embedding(self, model_name: str, text: str) -> Optional[List[float]]:
        """Get cached embedding for text."""
        if not self.is_available:
            return None

        key = self.make_key(model_name, text)
        try:
            data = self._redis.get(key)
        except RedisError as e:
            logger.warning(f"Error reading from embedding cache: {e}")
            return None

        if not data:
            logger.debug(f"Cache miss for embedding {key[-16:]}")
            return None

        try:
            cache_entry = json.loads(data)
            embedding = cache_entry["embedding"]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding malformed embedding cache entry {key[-16:]}: {e}")
            return None

        logger.debug(f"Cache hit for embedding {key[-16:]}")
        return [float(x) for x in embedding]

    def set_embedding(
        self,
        model_name: str,
        text: str,
        embedding: List[float],
        ttl_seconds: Optional[int] = None
    ) -> bool:
        """Cache embedding with TTL."""
        if not self.is_available:
            return False

        key = self.make_key(model_name, text)
        ttl = ttl_seconds or self.ttl_seconds
        cache_entry = {
            "embedding": list(embedding),
            "cached_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            self._redis.setex(key, ttl, json.dumps(cache_entry))
        except RedisError as e:
            logger.warning(f"Error writing to embedding cache: {e}")
            return False

        logger.debug(f"Cached embedding {key[-16:]} (TTL: {ttl}s)")
        return True
