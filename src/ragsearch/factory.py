"""Assemble a RetrievalService from configuration."""

import logging

from ragsearch.chunkers import SentenceChunker
from ragsearch.config import AppConfig
from ragsearch.embedders import RemoteEmbedder, TfidfEmbedder
from ragsearch.errors import ConfigurationError
from ragsearch.protocols import ChunkingStrategy, EmbeddingProvider, Summarizer, VectorStore
from ragsearch.service import RetrievalService
from ragsearch.storage import MemoryVectorStore, QdrantVectorStore
from ragsearch.summarizers import FrequencySummarizer

logger = logging.getLogger(__name__)


def build_embedder(config: AppConfig) -> EmbeddingProvider:
    kind = config.embedder.type or "tfidf"
    if kind == "tfidf":
        return TfidfEmbedder()
    if kind in ("remote", "openai"):
        if config.embedder.remote is None:
            raise ConfigurationError("remote embedder config missing")
        return RemoteEmbedder(config.embedder.remote)
    raise ConfigurationError(f"unknown embedder: {kind}")


def build_chunker(config: AppConfig) -> ChunkingStrategy:
    kind = config.chunker.type or "sentence"
    if kind == "sentence":
        return SentenceChunker(
            config.chunker.sentences_per_chunk,
            config.chunker.overlap_sentences,
        )
    raise ConfigurationError(f"unknown chunker: {kind}")


def build_store(config: AppConfig) -> VectorStore:
    kind = config.vector_store.type or "memory"
    if kind == "memory":
        return MemoryVectorStore()
    if kind == "qdrant":
        if config.vector_store.qdrant is None:
            raise ConfigurationError("qdrant config missing")
        return QdrantVectorStore(config.vector_store.qdrant)
    raise ConfigurationError(f"unknown vector store: {kind}")


def build_summarizer(config: AppConfig) -> Summarizer:
    kind = config.summarizer.type or "frequency"
    if kind == "frequency":
        return FrequencySummarizer()
    raise ConfigurationError(f"unknown summarizer: {kind}")


def build_service(config: AppConfig) -> RetrievalService:
    """Wire up every component named by the configuration.

    Raises:
        ConfigurationError: If a backend selector is unknown or its
            settings are missing
    """
    service = RetrievalService(
        chunker=build_chunker(config),
        embedder=build_embedder(config),
        store=build_store(config),
        summarizer=build_summarizer(config),
        summary_max_sentences=config.summarizer.max_sentences,
    )
    logger.debug(
        f"Service: embedder={config.embedder.type}, store={config.vector_store.type}"
    )
    return service
