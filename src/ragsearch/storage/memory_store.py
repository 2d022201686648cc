"""In-process vector store using brute-force dot products."""

from typing import Sequence

import numpy as np

from ragsearch.errors import VectorStoreError
from ragsearch.models import Chunk, SearchResult
from ragsearch.utils.rwlock import ReadWriteLock

DEFAULT_TOP_K = 5


class MemoryVectorStore:
    """In-memory vector store.

    Vectors are expected to be L2-normalized at embedding time, so the raw
    dot product equals cosine similarity. Searches share a read lock;
    init, upsert and clear take the write lock.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._dimension = 0
        self._chunks: list[Chunk] = []
        self._vectors: list[np.ndarray] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._vectors)

    def init(self, dimension: int) -> None:
        """Reset the store for vectors of `dimension` components."""
        if dimension <= 0:
            raise VectorStoreError(f"invalid dimension: {dimension}")
        with self._lock.write_locked():
            self._dimension = dimension
            self._chunks = []
            self._vectors = []

    def upsert(self, chunks: Sequence[Chunk], vectors: Sequence[np.ndarray]) -> None:
        """Append chunks and their vectors.

        Raises:
            VectorStoreError: On a length mismatch or a vector of the wrong
                dimension; nothing is stored in that case
        """
        if len(chunks) != len(vectors):
            raise VectorStoreError(
                f"chunks and vectors length mismatch: {len(chunks)} != {len(vectors)}"
            )
        with self._lock.write_locked():
            arrays = [np.asarray(v, dtype=np.float64) for v in vectors]
            for arr in arrays:
                if arr.shape != (self._dimension,):
                    raise VectorStoreError(
                        f"vector dimension mismatch: expected {self._dimension}, got {arr.shape}"
                    )
            self._chunks.extend(chunks)
            self._vectors.extend(arrays)

    def search(self, vector: np.ndarray, top_k: int) -> list[SearchResult]:
        """Return the top_k chunks by dot product, best first.

        Ties keep insertion order. `top_k <= 0` means the default of 5.
        """
        if top_k <= 0:
            top_k = DEFAULT_TOP_K
        query = np.asarray(vector, dtype=np.float64)

        with self._lock.read_locked():
            if not self._vectors:
                return []
            if query.shape != (self._dimension,):
                raise VectorStoreError(
                    f"query dimension mismatch: expected {self._dimension}, got {query.shape}"
                )
            scores = np.stack(self._vectors) @ query
            # Stable sort on negated scores: descending, ties by insertion order
            order = np.argsort(-scores, kind="stable")[:top_k]
            return [
                SearchResult(chunk=self._chunks[i], score=float(scores[i]))
                for i in order
            ]

    def clear(self) -> None:
        """Drop every stored chunk and vector."""
        with self._lock.write_locked():
            self._chunks = []
            self._vectors = []
