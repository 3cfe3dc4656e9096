"""
Unit tests for the OpenAI embedding provider.

Tests verify:
- Embedding requests carry model and dimensions
- Transient errors are retried, persistent errors surface as ProviderError
- Malformed or mis-sized vectors are rejected
- Rate-limit header parsing
"""
import pytest
from unittest.mock import MagicMock, patch

import httpx
import openai

from core.exceptions import ProviderError
from core.llm.openai_service import (
    OpenAIEmbeddingService, _parse_reset_duration, _wait_from_rate_limit_headers
)


def embedding_response(vector):
    response = MagicMock()
    response.data = [MagicMock(embedding=vector)]
    return response


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/embeddings"))


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def service(client):
    return OpenAIEmbeddingService(model="text-embedding-3-large", dimensions=3, max_retries=2, client=client)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("tenacity.nap.time.sleep"):
        yield


class TestOpenAIEmbeddingService:

    def test_embed_returns_vector(self, service, client):
        client.embeddings.create.return_value = embedding_response([0.1, 0.2, 0.3])

        assert service.embed("python") == [0.1, 0.2, 0.3]
        kwargs = client.embeddings.create.call_args.kwargs
        assert kwargs["model"] == "text-embedding-3-large"
        assert kwargs["dimensions"] == 3
        assert kwargs["input"] == "python"

    def test_model_name_includes_dimensions(self, service):
        assert service.model_name == "text-embedding-3-large:3"

    def test_transient_error_retried(self, service, client):
        client.embeddings.create.side_effect = [connection_error(), embedding_response([1.0, 0.0, 0.0])]

        assert service.embed("python") == [1.0, 0.0, 0.0]
        assert client.embeddings.create.call_count == 2

    def test_persistent_error_raises_provider_error(self, service, client):
        client.embeddings.create.side_effect = connection_error()

        with pytest.raises(ProviderError):
            service.embed("python")
        assert client.embeddings.create.call_count == 2

    def test_empty_vector_rejected(self, service, client):
        client.embeddings.create.return_value = embedding_response([])

        with pytest.raises(ProviderError):
            service.embed("python")

    def test_dimension_mismatch_rejected(self, service, client):
        client.embeddings.create.return_value = embedding_response([0.1, 0.2])

        with pytest.raises(ProviderError):
            service.embed("python")

    def test_malformed_response_rejected(self, service, client):
        response = MagicMock()
        response.data = []
        client.embeddings.create.return_value = response

        with pytest.raises(ProviderError):
            service.embed("python")


class TestRateLimitHeaders:

    @pytest.mark.parametrize("value,expected", [
        ("1s", 1.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("", 0.0),
    ])
    def test_parse_reset_duration(self, value, expected):
        assert _parse_reset_duration(value) == pytest.approx(expected)

    def test_longest_declared_wait_wins(self):
        exc = MagicMock(spec=openai.RateLimitError)
        exc.response = MagicMock()
        exc.response.headers = {
            "retry-after": "2",
            "x-ratelimit-reset-requests": "5s",
            "x-ratelimit-reset-tokens": "250ms",
        }

        assert _wait_from_rate_limit_headers(exc) == pytest.approx(5.0)

    def test_no_response_means_no_wait(self):
        exc = MagicMock(spec=openai.RateLimitError)
        exc.response = None

        assert _wait_from_rate_limit_headers(exc) == 0.0
