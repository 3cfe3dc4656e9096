"""LLM Module - embedding providers and interfaces."""
from core.llm.interfaces import EmbeddingProvider
from core.llm.openai_service import OpenAIEmbeddingService

__all__ = ['EmbeddingProvider', 'OpenAIEmbeddingService']
