"""
Unit tests for the remote embedding client.

Tests for:
- Construction and credential lookup
- Request payload
- Response shape parsing
- Retry, backoff and Retry-After handling
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
import requests

from conftest import make_response
from ragsearch.embedders import RemoteEmbedder, RemoteEmbedderConfig
from ragsearch.embedders.remote import extract_embedding
from ragsearch.errors import ConfigurationError, EmbeddingError, TransportError
from ragsearch.protocols import EmbeddingProvider
from ragsearch.utils.backoff import BackoffPolicy


@pytest.fixture
def config() -> RemoteEmbedderConfig:
    return RemoteEmbedderConfig(
        base_url="http://embed.local/v1/",
        api_key_env="TEST_EMBED_KEY",
        model="test-model",
        timeout_seconds=7,
        backoff=BackoffPolicy(max_attempts=4, base_delay=0.2, max_delay=5.0),
    )


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def embedder(config, session, sleeps, api_key) -> RemoteEmbedder:
    return RemoteEmbedder(config, session=session, sleep=sleeps.append)


class TestRemoteEmbedderInit:
    """Tests for construction."""

    def test_missing_api_key(self, config, monkeypatch):
        """An unset key variable is a configuration error."""
        monkeypatch.delenv("TEST_EMBED_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="TEST_EMBED_KEY"):
            RemoteEmbedder(config)

    def test_empty_api_key(self, config, monkeypatch):
        """An empty key variable is a configuration error."""
        monkeypatch.setenv("TEST_EMBED_KEY", "")
        with pytest.raises(ConfigurationError):
            RemoteEmbedder(config)

    def test_initialization(self, embedder):
        """URL is built from the base URL; dimension starts at 0."""
        assert embedder.url == "http://embed.local/v1/embeddings"
        assert embedder.model_name == "test-model"
        assert embedder.dimension == 0
        assert isinstance(embedder, EmbeddingProvider)

    def test_prepare_is_noop(self, embedder, session):
        """Prepare does not touch the network."""
        embedder.prepare(["anything"])
        session.post.assert_not_called()
        assert embedder.dimension == 0


class TestRemoteEmbedderRequests:
    """Tests for successful requests."""

    def test_request_payload(self, embedder, session, api_key):
        """Text is sent as both input and prompt with a bearer token."""
        session.post.return_value = make_response(200, {"data": [{"embedding": [0.1, 0.2]}]})

        embedder.embed("hello world")

        args, kwargs = session.post.call_args
        assert args[0] == "http://embed.local/v1/embeddings"
        assert kwargs["json"] == {
            "input": "hello world",
            "prompt": "hello world",
            "model": "test-model",
        }
        assert kwargs["headers"]["Authorization"] == f"Bearer {api_key}"
        assert kwargs["timeout"] == 7

    def test_openai_shape(self, embedder, session):
        """The nested data[0].embedding shape is accepted."""
        session.post.return_value = make_response(200, {"data": [{"embedding": [1, 2, 3]}]})

        vec = embedder.embed("x")

        assert isinstance(vec, np.ndarray)
        assert vec.tolist() == [1.0, 2.0, 3.0]
        assert embedder.dimension == 3

    def test_flat_shape(self, embedder, session):
        """The flat embedding shape is accepted."""
        session.post.return_value = make_response(200, {"embedding": [0.5, 0.5]})
        assert embedder.embed("x").tolist() == [0.5, 0.5]
        assert embedder.dimension == 2

    def test_dimension_learned_once(self, embedder, session):
        """Dimension comes from the first successful response."""
        session.post.side_effect = [
            make_response(200, {"embedding": [0.1, 0.2]}),
            make_response(200, {"embedding": [0.1, 0.2, 0.3]}),
        ]
        embedder.embed("a")
        embedder.embed("b")
        assert embedder.dimension == 2

    def test_empty_body_is_error(self, embedder, session):
        """A 2xx response without an embedding is an error."""
        session.post.return_value = make_response(200, {"data": []})
        with pytest.raises(EmbeddingError, match="no embedding"):
            embedder.embed("x")

    def test_unparseable_body_is_error(self, embedder, session):
        """A 2xx response that is not JSON is an error."""
        session.post.return_value = make_response(200, json_error=ValueError("bad json"))
        with pytest.raises(EmbeddingError, match="unparseable"):
            embedder.embed("x")


class TestExtractEmbedding:
    """Tests for response shape parsing."""

    def test_nested_wins_over_flat(self):
        payload = {"data": [{"embedding": [1.0]}], "embedding": [2.0]}
        assert extract_embedding(payload) == [1.0]

    def test_empty_nested_falls_through(self):
        payload = {"data": [{"embedding": []}], "embedding": [2.0]}
        assert extract_embedding(payload) == [2.0]

    @pytest.mark.parametrize(
        "payload",
        [None, [], "text", {}, {"data": "x"}, {"embedding": []}, {"data": [1]}],
    )
    def test_no_embedding(self, payload):
        assert extract_embedding(payload) is None


class TestRemoteEmbedderRetry:
    """Tests for retry and backoff behaviour."""

    def test_retry_after_overrides_backoff(self, embedder, session, sleeps):
        """429 with Retry-After: 1 then 200 sleeps once for one second."""
        session.post.side_effect = [
            make_response(429, headers={"Retry-After": "1"}),
            make_response(200, {"embedding": [0.3, 0.4]}),
        ]

        vec = embedder.embed("x")

        assert vec.tolist() == [0.3, 0.4]
        assert sleeps == [1.0]
        assert session.post.call_count == 2

    def test_server_errors_use_exponential_backoff(self, embedder, session, sleeps):
        """5xx without a hint backs off exponentially."""
        session.post.side_effect = [
            make_response(503),
            make_response(500),
            make_response(200, {"embedding": [1.0]}),
        ]

        embedder.embed("x")

        assert sleeps == pytest.approx([0.2, 0.4])

    def test_transport_errors_are_retried(self, embedder, session, sleeps):
        """Connection errors are retried."""
        session.post.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.Timeout("slow"),
            make_response(200, {"embedding": [1.0]}),
        ]

        assert embedder.embed("x").tolist() == [1.0]
        assert len(sleeps) == 2

    def test_exhausted_retries(self, embedder, session, sleeps):
        """Persistent 429s surface a TransportError after max attempts."""
        session.post.return_value = make_response(429)

        with pytest.raises(TransportError) as exc_info:
            embedder.embed("x")

        assert exc_info.value.status_code == 429
        assert session.post.call_count == 4
        # No sleep after the final attempt
        assert len(sleeps) == 3
        assert sleeps == sorted(sleeps)

    def test_exhausted_transport_errors(self, embedder, session):
        """Persistent connection failures surface a TransportError."""
        session.post.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(TransportError, match="after 4 attempts"):
            embedder.embed("x")

    def test_non_retryable_status(self, embedder, session, sleeps):
        """4xx other than 429 fails immediately."""
        session.post.return_value = make_response(401)

        with pytest.raises(TransportError) as exc_info:
            embedder.embed("x")

        assert exc_info.value.status_code == 401
        assert session.post.call_count == 1
        assert sleeps == []

    def test_redirect_status_is_error(self, embedder, session):
        """3xx responses are not treated as success."""
        session.post.return_value = make_response(302)
        with pytest.raises(TransportError):
            embedder.embed("x")

    def test_infinite_retry_after_uses_backoff(self, embedder, session, sleeps):
        """A non-finite Retry-After falls back to the computed delay."""
        session.post.side_effect = [
            make_response(429, headers={"Retry-After": "inf"}),
            make_response(200, {"embedding": [1.0]}),
        ]

        embedder.embed("x")

        assert sleeps == pytest.approx([0.2])
