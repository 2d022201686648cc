"""Retrieval service: ingestion and query orchestration."""

import glob
import logging
from pathlib import Path

import numpy as np

from ragsearch.errors import IngestionError, QueryError, RagSearchError
from ragsearch.lexical import rank_lexical
from ragsearch.models import Chunk, Document, SearchResult
from ragsearch.protocols import ChunkingStrategy, EmbeddingProvider, Summarizer, VectorStore

logger = logging.getLogger(__name__)

# Search scores within this distance of zero count as "no signal"
NO_SIGNAL_EPSILON = 1e-9


def expand_paths(paths: list[str]) -> list[str]:
    """Expand globs and keep only .txt files (case-insensitive).

    A pattern without glob matches is kept as a literal path.
    """
    candidates = []
    for pattern in paths:
        matches = sorted(glob.glob(pattern)) or [pattern]
        candidates.extend(m for m in matches if m.lower().endswith(".txt"))
    return candidates


def load_documents(paths: list[str]) -> list[Document]:
    """Read every qualifying file, failing on the first unreadable one.

    Raises:
        IngestionError: If a file cannot be read or no .txt file qualifies
    """
    documents = []
    for path in expand_paths(paths):
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IngestionError(f"failed to read {path}: {e}") from e
        documents.append(Document.from_path(path, content))

    if not documents:
        raise IngestionError("no .txt documents found")
    return documents


def is_zero_vector(vector: np.ndarray) -> bool:
    return not np.any(vector)


class RetrievalService:
    """Indexes .txt files and answers free-text queries.

    Ingestion always replaces the whole index. Queries go through the
    embedder and vector store, falling back to lexical ranking over the
    ingested chunks when the embedding carries no signal.
    """

    def __init__(
        self,
        chunker: ChunkingStrategy,
        embedder: EmbeddingProvider,
        store: VectorStore,
        summarizer: Summarizer,
        summary_max_sentences: int = 5,
    ):
        self.chunker = chunker
        self.embedder = embedder
        self.store = store
        self.summarizer = summarizer
        self.summary_max_sentences = summary_max_sentences
        self._chunks: tuple[Chunk, ...] = ()
        self._ingested = False
        self._last_summary = ""

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        """Chunks from the last successful ingestion."""
        return self._chunks

    @property
    def last_summary(self) -> str:
        return self._last_summary

    def ingest(self, paths: list[str]) -> str:
        """Index the given files, replacing any previous index.

        Args:
            paths: File paths or glob patterns; only .txt files are used

        Returns:
            Short summary of the ingested corpus

        Raises:
            IngestionError: If any step fails; nothing is partially indexed
            TransportError: If a remote embedder or store fails
        """
        documents = load_documents(paths)
        logger.info(f"Loaded {len(documents)} documents")

        all_chunks: list[Chunk] = []
        raw_parts: list[str] = []
        for doc in documents:
            chunks = self._run_step("chunking", self.chunker.chunk, doc)
            all_chunks.extend(chunks)
            raw_parts.append("\n" + doc.content)
            logger.debug(f"  {doc.path}: {len(chunks)} chunks")

        # The live index is only replaced once every vector exists; a failure
        # before store init succeeds leaves the previous index queryable.
        corpus = [c.text for c in all_chunks]
        try:
            self._run_step("embedder preparation", self.embedder.prepare, corpus)
            vectors = [
                self._run_step("embedding", self.embedder.embed, c.text) for c in all_chunks
            ]
            # Remote embedders only know their dimension after a response
            self._run_step("store init", self.store.init, self.embedder.dimension)
        except RagSearchError:
            self._restore_embedder()
            raise

        self._run_step("store clear", self.store.clear)
        self._run_step("store upsert", self.store.upsert, all_chunks, vectors)
        self._chunks = tuple(all_chunks)
        self._ingested = True
        logger.info(f"Indexed {len(all_chunks)} chunks ({self.embedder.dimension}D)")

        summary = self._run_step(
            "summarization", self.summarizer.summarize, "".join(raw_parts), self.summary_max_sentences
        )
        self._last_summary = summary
        return summary

    def query(self, text: str, top_k: int = 5) -> list[SearchResult]:
        """Return the chunks most relevant to a query, best first.

        Raises:
            QueryError: If nothing has been ingested, or embedding or
                search fails
        """
        if not self._ingested:
            raise QueryError("no documents ingested")

        try:
            vector = self.embedder.embed(text)
        except Exception as e:
            raise QueryError(f"failed to embed query: {e}") from e

        if is_zero_vector(vector):
            logger.debug("Query has no known vocabulary; using lexical fallback")
            return rank_lexical(text, self._chunks, top_k)

        try:
            results = self.store.search(vector, top_k)
        except Exception as e:
            raise QueryError(f"vector search failed: {e}") from e

        if all(abs(r.score) <= NO_SIGNAL_EPSILON for r in results):
            logger.debug("Vector scores carry no signal; using lexical fallback")
            return rank_lexical(text, self._chunks, top_k)
        return results

    def _restore_embedder(self) -> None:
        """Re-prepare the embedder on the live corpus after a failed ingest."""
        if not self._chunks:
            return
        try:
            self.embedder.prepare([c.text for c in self._chunks])
        except Exception as e:
            logger.warning(f"Could not restore embedder for the previous corpus: {e}")

    @staticmethod
    def _run_step(name: str, func, *args):
        """Run one ingestion step, wrapping unexpected errors."""
        try:
            return func(*args)
        except RagSearchError:
            raise
        except Exception as e:
            raise IngestionError(f"{name} failed: {e}") from e
