"""Protocol definitions for extensible components."""

from ragsearch.protocols.chunker import ChunkingStrategy
from ragsearch.protocols.embedder import EmbeddingProvider
from ragsearch.protocols.summarizer import Summarizer
from ragsearch.protocols.vector_store import VectorStore

__all__ = ["ChunkingStrategy", "EmbeddingProvider", "VectorStore", "Summarizer"]
