"""ragsearch - ranked passage search over a small local text corpus."""

from ragsearch.config import AppConfig, load_config
from ragsearch.errors import (
    ConfigurationError,
    EmbeddingError,
    IngestionError,
    QueryError,
    RagSearchError,
    TransportError,
    VectorStoreError,
)
from ragsearch.factory import build_service
from ragsearch.models import Chunk, Document, SearchResult
from ragsearch.service import NO_SIGNAL_EPSILON, RetrievalService

__all__ = [
    "AppConfig",
    "load_config",
    "build_service",
    "RetrievalService",
    "NO_SIGNAL_EPSILON",
    "Document",
    "Chunk",
    "SearchResult",
    "RagSearchError",
    "ConfigurationError",
    "IngestionError",
    "EmbeddingError",
    "VectorStoreError",
    "TransportError",
    "QueryError",
]
