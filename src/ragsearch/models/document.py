"""Core data models for documents, chunks and search results."""

import hashlib
from dataclasses import dataclass


def document_id_for(path: str) -> str:
    """Return the short deterministic id for a document path.

    The id is the first 8 bytes of the SHA-1 digest of the path, hex encoded.
    """
    return hashlib.sha1(path.encode("utf-8")).digest()[:8].hex()


@dataclass(frozen=True)
class Document:
    """A text file loaded for one ingestion call."""

    id: str
    path: str
    content: str

    @classmethod
    def from_path(cls, path: str, content: str) -> "Document":
        return cls(id=document_id_for(path), path=path, content=content)


@dataclass(frozen=True)
class Chunk:
    """A contiguous group of sentences from one document."""

    document_id: str
    chunk_id: str
    text: str
    index: int


@dataclass(frozen=True)
class SearchResult:
    """A matching chunk with its relevance score."""

    chunk: Chunk
    score: float
