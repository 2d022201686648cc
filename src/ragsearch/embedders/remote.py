"""Remote HTTP embedding provider (OpenAI-compatible and Ollama-style APIs)."""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import requests

from ragsearch.errors import ConfigurationError, EmbeddingError, TransportError
from ragsearch.utils.backoff import BackoffPolicy, backoff_delay, parse_retry_after

logger = logging.getLogger(__name__)


@dataclass
class RemoteEmbedderConfig:
    """Configuration for the remote embedding client."""

    base_url: str = "https://api.openai.com/v1"
    api_key_env: str = "OPENAI_API_KEY"
    model: str = "text-embedding-3-small"
    timeout_seconds: float = 30.0
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def extract_embedding(payload: Any) -> list[float] | None:
    """Pull the embedding out of a response body.

    Tries the OpenAI shape `{"data": [{"embedding": [...]}]}` first, then
    the flat `{"embedding": [...]}` shape. The first non-empty list wins.
    """
    if not isinstance(payload, dict):
        return None

    data = payload.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        embedding = data[0].get("embedding")
        if isinstance(embedding, list) and embedding:
            return embedding

    embedding = payload.get("embedding")
    if isinstance(embedding, list) and embedding:
        return embedding

    return None


class RemoteEmbedder:
    """Embedding provider backed by a remote `/embeddings` endpoint.

    The request carries the text as both `input` (OpenAI convention) and
    `prompt` (Ollama convention). Transport errors, 429 and 5xx responses
    are retried with exponential backoff, honouring Retry-After.

    The dimension is learned from the first successful response.
    """

    def __init__(
        self,
        config: RemoteEmbedderConfig,
        session: requests.Session | None = None,
        sleep=time.sleep,
    ):
        """Initialize the client.

        Args:
            config: Endpoint, credential and retry settings
            session: Optional requests session (for connection reuse or tests)
            sleep: Sleep function used between retries

        Raises:
            ConfigurationError: If the API key environment variable is unset
        """
        api_key = os.environ.get(config.api_key_env, "")
        if not api_key:
            raise ConfigurationError(f"missing API key in env {config.api_key_env}")

        self.config = config
        self.url = f"{config.base_url.rstrip('/')}/embeddings"
        self._api_key = api_key
        self._session = session or requests.Session()
        self._sleep = sleep
        self._dimension = 0

    @property
    def dimension(self) -> int:
        """Return the embedding dimension (0 until the first response)."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self.config.model

    def prepare(self, corpus: list[str]) -> None:
        """Remote embeddings need no corpus statistics."""
        return None

    def embed(self, text: str) -> np.ndarray:
        """Request the embedding for a text, retrying transient failures.

        Args:
            text: Text to embed

        Returns:
            1-D numpy array with the embedding

        Raises:
            TransportError: If retries are exhausted or a non-retryable
                status is returned
            EmbeddingError: If a successful response carries no embedding
        """
        body = {"input": text, "prompt": text, "model": self.config.model}
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        policy = self.config.backoff
        last_error: str = "no attempt made"
        last_status: int | None = None

        for attempt in range(policy.max_attempts):
            retry_after = None
            try:
                response = self._session.post(
                    self.url,
                    json=body,
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                )
            except requests.exceptions.RequestException as e:
                last_error = str(e)
                logger.warning(
                    f"Embedding request failed (attempt {attempt + 1}/{policy.max_attempts}): {e}"
                )
            else:
                status = response.status_code
                if _is_retryable_status(status):
                    last_status = status
                    last_error = f"HTTP {status}"
                    retry_after = parse_retry_after(response.headers.get("Retry-After"))
                    logger.warning(
                        f"Embedding request returned {status} "
                        f"(attempt {attempt + 1}/{policy.max_attempts})"
                    )
                elif status >= 300:
                    raise TransportError(
                        f"embeddings request failed: HTTP {status}",
                        url=self.url,
                        status_code=status,
                    )
                else:
                    return self._parse(response)

            if attempt < policy.max_attempts - 1:
                delay = backoff_delay(attempt, policy, retry_after)
                logger.debug(f"Backing off for {delay:.3f}s before retry")
                self._sleep(delay)

        raise TransportError(
            f"embeddings request failed after {policy.max_attempts} attempts: {last_error}",
            url=self.url,
            status_code=last_status,
        )

    def _parse(self, response: requests.Response) -> np.ndarray:
        try:
            payload = response.json()
        except ValueError as e:
            raise EmbeddingError(f"unparseable embeddings response: {e}") from e

        embedding = extract_embedding(payload)
        if embedding is None:
            raise EmbeddingError("no embedding returned")

        try:
            vector = np.asarray(embedding, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"embedding is not numeric: {e}") from e
        if vector.ndim != 1:
            raise EmbeddingError(f"expected a flat embedding, got shape {vector.shape}")
        if self._dimension == 0:
            self._dimension = vector.shape[0]
        return vector
