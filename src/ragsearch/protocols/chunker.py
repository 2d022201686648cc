"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from ragsearch.models import Chunk, Document


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies."""

    def chunk(self, document: Document) -> list[Chunk]:
        """Split a document into ordered chunks."""
        ...
