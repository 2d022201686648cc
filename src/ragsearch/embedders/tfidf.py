"""TF-IDF embedding provider."""

import logging
import math
from collections import Counter
from dataclasses import dataclass

import numpy as np

from ragsearch.errors import EmbeddingError
from ragsearch.utils.text import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Vocabulary:
    """Term-to-dimension mapping and IDF weights from one prepare() call."""

    terms: tuple[str, ...]
    index: dict[str, int]
    idf: np.ndarray


class TfidfEmbedder:
    """Local TF-IDF vectorizer.

    `prepare` builds a sorted vocabulary and smoothed IDF weights from the
    corpus; `embed` produces L2-normalized TF-IDF vectors over that
    vocabulary. Text with no in-vocabulary token embeds to the all-zero
    vector, which callers treat as "no signal".
    """

    def __init__(self) -> None:
        self._vocab: _Vocabulary | None = None

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return "tfidf"

    @property
    def prepared(self) -> bool:
        return self._vocab is not None

    @property
    def dimension(self) -> int:
        """Return the vocabulary size, or 0 before `prepare`."""
        if self._vocab is None:
            return 0
        return self._vocab.idf.shape[0]

    @property
    def vocabulary(self) -> tuple[str, ...]:
        """Return the vocabulary terms in dimension order."""
        return self._require_vocab().terms

    def prepare(self, corpus: list[str]) -> None:
        """Build vocabulary and IDF weights from the corpus.

        Replaces any vocabulary from a previous call.

        Args:
            corpus: Chunk texts; each text counts as one document for df

        Raises:
            EmbeddingError: If the corpus is empty or yields no terms
        """
        if not corpus:
            raise EmbeddingError("empty corpus for TF-IDF prepare")

        df: Counter[str] = Counter()
        for text in corpus:
            df.update(set(tokenize(text)))

        if not df:
            raise EmbeddingError(
                "no tokens found in corpus; ensure tokenizer supports your language"
            )

        # Sorted terms give a reproducible dimension-to-term mapping
        terms = tuple(sorted(df))
        n_docs = len(corpus)
        idf = np.array(
            [math.log((1 + n_docs) / (1 + df[term])) + 1.0 for term in terms],
            dtype=np.float64,
        )
        self._vocab = _Vocabulary(
            terms=terms,
            index={term: i for i, term in enumerate(terms)},
            idf=idf,
        )
        logger.debug(f"TF-IDF vocabulary: {len(terms)} terms from {n_docs} texts")

    def embed(self, text: str) -> np.ndarray:
        """Compute the TF-IDF embedding for a text.

        Args:
            text: Text to embed

        Returns:
            L2-normalized vector, or the all-zero vector when no token of
            the text is in the vocabulary

        Raises:
            EmbeddingError: If called before `prepare`
        """
        vocab = self._require_vocab()
        vector = np.zeros(vocab.idf.shape[0], dtype=np.float64)

        counts = Counter(tok for tok in tokenize(text) if tok in vocab.index)
        total = sum(counts.values())
        if total == 0:
            return vector

        for term, count in counts.items():
            idx = vocab.index[term]
            vector[idx] = (count / total) * vocab.idf[idx]

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector

    def _require_vocab(self) -> _Vocabulary:
        if self._vocab is None:
            raise EmbeddingError("tfidf embedder not prepared")
        return self._vocab
