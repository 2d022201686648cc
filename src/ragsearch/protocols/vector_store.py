"""Protocol for vector storage backends."""

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from ragsearch.models import Chunk, SearchResult


@runtime_checkable
class VectorStore(Protocol):
    """Protocol for vector storage backends.

    Implementations persist (chunk, vector) pairs and answer similarity
    queries. The dimension passed to `init` is fixed until the next `init`.
    """

    def init(self, dimension: int) -> None:
        """Prepare the store for vectors of the given dimension."""
        ...

    def upsert(self, chunks: Sequence[Chunk], vectors: Sequence[np.ndarray]) -> None:
        """Store chunks with their vectors (index i matches index i)."""
        ...

    def search(self, vector: np.ndarray, top_k: int) -> list[SearchResult]:
        """Return the top_k most similar chunks, best first."""
        ...

    def clear(self) -> None:
        """Remove every stored vector."""
        ...
