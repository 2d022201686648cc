"""
Unit tests for sentence chunking.

Tests for:
- SentenceChunker defaults and coercion
- Chunk boundaries and overlap
- Progress guard when overlap >= chunk size
"""

import math

import pytest

from ragsearch.chunkers import SentenceChunker
from ragsearch.models import Document


def make_document(n_sentences: int) -> Document:
    content = " ".join(f"Sentence number {i}." for i in range(n_sentences))
    return Document.from_path("doc.txt", content)


class TestSentenceChunkerConfig:
    """Tests for constructor defaults."""

    def test_defaults(self):
        """Defaults are 5 sentences with 1 overlap."""
        chunker = SentenceChunker()
        assert chunker.sentences_per_chunk == 5
        assert chunker.overlap_sentences == 1

    def test_non_positive_size_coerced(self):
        """Chunk size <= 0 falls back to 5."""
        assert SentenceChunker(0, 1).sentences_per_chunk == 5
        assert SentenceChunker(-3, 1).sentences_per_chunk == 5

    def test_negative_overlap_coerced(self):
        """Negative overlap becomes 0."""
        assert SentenceChunker(3, -2).overlap_sentences == 0


class TestSentenceChunker:
    """Tests for SentenceChunker.chunk."""

    def test_empty_content(self):
        """Empty content yields no chunks."""
        doc = Document.from_path("empty.txt", "   ")
        assert SentenceChunker().chunk(doc) == []

    def test_single_sentence_chunks(self):
        """Size 1, overlap 0 gives one chunk per sentence."""
        doc = Document.from_path("a.txt", "The cat sat. The dog ran fast.")
        chunks = SentenceChunker(1, 0).chunk(doc)

        assert [c.text for c in chunks] == ["The cat sat.", "The dog ran fast."]
        assert [c.index for c in chunks] == [0, 1]
        assert [c.chunk_id for c in chunks] == [f"{doc.id}:0", f"{doc.id}:1"]
        assert all(c.document_id == doc.id for c in chunks)

    def test_content_without_terminator(self):
        """Text without terminators becomes one chunk."""
        doc = Document.from_path("a.txt", "  no punctuation here  ")
        chunks = SentenceChunker().chunk(doc)
        assert len(chunks) == 1
        assert chunks[0].text == "no punctuation here"

    @pytest.mark.parametrize(
        "n,size,overlap",
        [(7, 3, 1), (10, 5, 1), (5, 5, 1), (12, 4, 2), (9, 3, 0), (1, 5, 1)],
    )
    def test_chunk_count_and_overlap(self, n, size, overlap):
        """Chunk count matches ceil((N - O) / (S - O)) and neighbours share O sentences."""
        doc = make_document(n)
        chunks = SentenceChunker(size, overlap).chunk(doc)

        expected = max(1, math.ceil((n - overlap) / (size - overlap)))
        assert len(chunks) == expected

        sentence_lists = [c.text.split(" Sentence") for c in chunks]
        assert all(len(s) <= size for s in sentence_lists)
        # The last chunk always ends at the final sentence
        assert chunks[-1].text.endswith(f"Sentence number {n - 1}.")
        for prev, nxt in zip(chunks, chunks[1:-1]):
            prev_tail = prev.text.split(". ")[-overlap:] if overlap else []
            next_head = nxt.text.split(". ")[:overlap] if overlap else []
            assert [s.rstrip(".") for s in prev_tail] == [s.rstrip(".") for s in next_head]

    def test_overlap_not_smaller_than_size_still_progresses(self):
        """Overlap >= size advances one sentence at a time instead of stalling."""
        doc = make_document(4)
        chunks = SentenceChunker(2, 5).chunk(doc)

        assert [c.text for c in chunks] == [
            "Sentence number 0. Sentence number 1.",
            "Sentence number 1. Sentence number 2.",
            "Sentence number 2. Sentence number 3.",
        ]

    def test_determinism(self):
        """Chunking the same document twice gives equal chunks."""
        doc = make_document(11)
        chunker = SentenceChunker(3, 1)
        assert chunker.chunk(doc) == chunker.chunk(doc)
