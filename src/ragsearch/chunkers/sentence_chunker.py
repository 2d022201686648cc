"""Sentence-based chunking strategy."""

from ragsearch.models import Chunk, Document
from ragsearch.utils.text import split_sentences


class SentenceChunker:
    """Default chunking: groups of sentences with overlap between neighbours.

    - Splits on sentence terminators (., !, ?)
    - Emits `sentences_per_chunk` sentences per chunk
    - Repeats the last `overlap_sentences` sentences at the start of the next chunk
    """

    DEFAULT_SENTENCES_PER_CHUNK = 5
    DEFAULT_OVERLAP_SENTENCES = 1

    def __init__(
        self,
        sentences_per_chunk: int = DEFAULT_SENTENCES_PER_CHUNK,
        overlap_sentences: int = DEFAULT_OVERLAP_SENTENCES,
    ):
        """Initialize the chunker.

        Args:
            sentences_per_chunk: Sentences per chunk; values <= 0 fall back
                to the default of 5.
            overlap_sentences: Sentences shared by consecutive chunks;
                negative values are treated as 0.
        """
        if sentences_per_chunk <= 0:
            sentences_per_chunk = self.DEFAULT_SENTENCES_PER_CHUNK
        self.sentences_per_chunk = sentences_per_chunk
        self.overlap_sentences = max(overlap_sentences, 0)

    def chunk(self, document: Document) -> list[Chunk]:
        """Split a document into ordered, overlapping sentence chunks.

        Args:
            document: The document to chunk

        Returns:
            List of Chunk objects, empty for blank content
        """
        sentences = split_sentences(document.content)
        if not sentences:
            return []

        chunks = []
        start = 0
        while True:
            end = min(start + self.sentences_per_chunk, len(sentences))
            index = len(chunks)
            chunks.append(
                Chunk(
                    document_id=document.id,
                    chunk_id=f"{document.id}:{index}",
                    text=" ".join(sentences[start:end]),
                    index=index,
                )
            )
            if end >= len(sentences):
                break

            # Overlap >= chunk size would stall; always advance one sentence
            start = max(end - self.overlap_sentences, 0, start + 1)

        return chunks
