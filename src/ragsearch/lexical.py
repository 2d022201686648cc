"""Token-overlap ranking used when embeddings carry no signal."""

import math
from typing import AbstractSet, Sequence

from ragsearch.models import Chunk, SearchResult
from ragsearch.utils.text import tokenize

DEFAULT_TOP_K = 5


def ochiai(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Ochiai coefficient: |a & b| / sqrt(|a| * |b|), 0 if either set is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / math.sqrt(len(a) * len(b))


def rank_lexical(query: str, chunks: Sequence[Chunk], top_k: int) -> list[SearchResult]:
    """Rank chunks by token overlap with the query.

    Ties are broken by the original chunk order.

    Args:
        query: Free-text query
        chunks: Candidate chunks, in ingestion order
        top_k: Maximum results; <= 0 means the default of 5

    Returns:
        Search results, best first
    """
    if top_k <= 0:
        top_k = DEFAULT_TOP_K

    query_terms = set(tokenize(query))
    scored = [
        SearchResult(chunk=chunk, score=ochiai(query_terms, set(tokenize(chunk.text))))
        for chunk in chunks
    ]
    # sorted() is stable, so equal scores keep ingestion order
    scored = sorted(scored, key=lambda r: r.score, reverse=True)
    return scored[:top_k]
