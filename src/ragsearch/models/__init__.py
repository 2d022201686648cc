"""Data models for ragsearch."""

from ragsearch.models.document import Chunk, Document, SearchResult, document_id_for

__all__ = ["Document", "Chunk", "SearchResult", "document_id_for"]
