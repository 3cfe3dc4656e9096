"""
OpenAI Embedding Service - EmbeddingProvider implementation using the OpenAI API.

Works against any OpenAI-compatible embeddings endpoint (OpenAI, Ollama, vLLM)
through base_url.
"""
from typing import List, Optional
import logging
import re

import openai
from openai import OpenAI
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState

from core.exceptions import ProviderError
from core.llm.interfaces import EmbeddingProvider

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep, including Retry-After info."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _parse_reset_duration(value: str) -> float:
    """Parse an OpenAI reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Reads ``retry-after`` and ``x-ratelimit-reset-requests`` /
    ``x-ratelimit-reset-tokens``, taking the maximum.

    Returns 0.0 if no usable header is present.
    """
    response = getattr(exc, "response", None)
    if response is None:
        return 0.0

    headers = response.headers
    candidates: list[float] = []

    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            logger.debug("Ignoring non-numeric retry-after header: %r", retry_after)

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = _parse_reset_duration(headers.get(header, ""))
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Return how long tenacity should sleep before the next attempt.

    For ``RateLimitError``: honours server-declared timers via response headers.
    For all other retryable errors: falls back to capped exponential backoff.
    """
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _wait_from_rate_limit_headers(exc)
        if wait > 0:
            wait = min(wait, 120)  # safety cap at 2 min
            logger.info("Rate limit headers indicate %.1fs wait.", wait)
            return wait

    # Fallback: exponential backoff 1 -> 2 -> 4 ... capped at 30s
    exp = wait_exponential(multiplier=1, min=1, max=30)
    return exp(retry_state)


class OpenAIEmbeddingService(EmbeddingProvider):
    """
    OpenAI Embedding Service.

    Transient transport errors are retried with backoff; anything that still
    fails is raised as ProviderError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "text-embedding-3-large",
        dimensions: int = 1536,
        max_retries: int = 3,
        client: Optional[OpenAI] = None
    ):
        if client is None:
            client_kwargs = {}
            if api_key:
                client_kwargs['api_key'] = api_key
            if base_url:
                client_kwargs['base_url'] = base_url
            client = OpenAI(**client_kwargs)

        self.client = client
        self.model = model
        self.dimensions = dimensions
        self.max_retries = max_retries

    @property
    def model_name(self) -> str:
        return f"{self.model}:{self.dimensions}"

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            wait=_wait_respecting_retry_after,
            stop=stop_after_attempt(self.max_retries),
            before_sleep=_log_retry,
            reraise=True,
        )

    def _create_embedding(self, text: str) -> List[float]:
        response = self.client.embeddings.create(
            input=text,
            model=self.model,
            dimensions=self.dimensions,
            encoding_format="float"
        )
        return response.data[0].embedding

    def embed(self, text: str) -> List[float]:
        """Generate embedding vector for text."""
        try:
            embedding = self._retrying()(self._create_embedding, text)
        except openai.OpenAIError as e:
            logger.error(f"Embedding request failed for text: {text[:50]}... - {e}")
            raise ProviderError(f"Embedding generation failed: {e}") from e
        except (IndexError, AttributeError) as e:
            raise ProviderError(f"Malformed embedding response: {e}") from e

        if not embedding:
            raise ProviderError("Embedding provider returned an empty vector")
        if len(embedding) != self.dimensions:
            raise ProviderError(
                f"Embedding dimension mismatch: expected {self.dimensions}, got {len(embedding)}"
            )
        return list(embedding)
