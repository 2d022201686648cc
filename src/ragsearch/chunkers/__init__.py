"""Chunking strategies for splitting documents."""

from ragsearch.chunkers.sentence_chunker import SentenceChunker

__all__ = ["SentenceChunker"]
