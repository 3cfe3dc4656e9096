"""
Embedding Provider Interface - Abstract base for embedding services.

This module defines the interface for embedding providers (OpenAI, Ollama, etc.).
"""
from abc import ABC, abstractmethod
from typing import List


class EmbeddingProvider(ABC):
    """
    Abstract Interface for Embedding Providers.

    Implementations return vectors of a fixed dimensionality per instance and
    raise core.exceptions.ProviderError on network or quota failures.
    """

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """
        Generate a vector embedding for the given text.
        """
        pass

    @property
    def model_name(self) -> str:
        """Identifier of the embedding model (used to namespace cache keys)."""
        return self.__class__.__name__
