"""Vector storage backends."""

from ragsearch.storage.memory_store import MemoryVectorStore
from ragsearch.storage.qdrant_store import QdrantConfig, QdrantVectorStore

__all__ = ["MemoryVectorStore", "QdrantVectorStore", "QdrantConfig"]
