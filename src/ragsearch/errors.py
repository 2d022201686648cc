"""Exceptions raised by the retrieval pipeline."""


class RagSearchError(Exception):
    """Base exception for all ragsearch errors."""

    pass


class ConfigurationError(RagSearchError):
    """Invalid or incomplete configuration.

    Raised when:
    - A required credential environment variable is unset
    - A backend selector names an unknown implementation
    - The config file is missing, unreadable or malformed
    """

    pass


class IngestionError(RagSearchError):
    """Failure that aborts an ingestion call.

    Raised when:
    - No .txt document qualifies
    - A file cannot be read
    - The corpus yields no usable vocabulary
    - Vector dimensions do not agree
    """

    pass


class EmbeddingError(IngestionError):
    """Embedder used out of order or returning an unusable result."""

    pass


class VectorStoreError(IngestionError):
    """Vector store rejected its input (dimension or count mismatch)."""

    pass


class TransportError(RagSearchError):
    """Error talking to a remote embedding service or vector index.

    Raised when:
    - The remote endpoint is unreachable or times out
    - The remote endpoint answers with a non-2xx status
    """

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class QueryError(RagSearchError):
    """Embedding or search failure while answering a query."""

    pass
