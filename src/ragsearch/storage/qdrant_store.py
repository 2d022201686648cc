"""Qdrant REST-backed vector store."""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import requests

from ragsearch.errors import TransportError, VectorStoreError
from ragsearch.models import Chunk, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
DISTANCE = "Cosine"


@dataclass
class QdrantConfig:
    """Connection settings for a Qdrant collection."""

    url: str = "http://localhost:6333"
    api_key: str = ""
    collection: str = "ragsearch"
    timeout_seconds: float = 15.0


def point_id(chunk: Chunk) -> str:
    """Return the deterministic Qdrant point id for a chunk.

    Qdrant only accepts unsigned integers and UUIDs as ids, so the
    `document_id:index` key is mapped through uuid5.
    """
    key = f"{chunk.document_id}:{chunk.index}"
    return str(uuid.uuid5(uuid.NAMESPACE_URL, key))


def chunk_from_payload(payload: Any) -> Chunk:
    """Rebuild a chunk from a point payload.

    Missing or wrongly typed fields fall back to zero values.
    """
    if not isinstance(payload, dict):
        payload = {}

    def _str(key: str) -> str:
        value = payload.get(key)
        return value if isinstance(value, str) else ""

    index = payload.get("index")
    if isinstance(index, bool) or not isinstance(index, (int, float)):
        index = 0

    return Chunk(
        document_id=_str("document_id"),
        chunk_id=_str("chunk_id"),
        text=_str("text"),
        index=int(index),
    )


class QdrantVectorStore:
    """Vector store backed by a remote Qdrant collection.

    No local locking: concurrent writers are serialized by Qdrant, and
    deterministic point ids make repeated upserts last-write-wins.
    """

    def __init__(self, config: QdrantConfig, session: requests.Session | None = None):
        self.config = config
        self.base_url = config.url.rstrip("/")
        self._session = session or requests.Session()
        self._dimension = 0

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}/collections/{self.config.collection}"

    def init(self, dimension: int) -> None:
        """Create the collection, or validate an existing one.

        Qdrant answers 409 when the collection already exists; its vector
        settings are then fetched and must match.

        Raises:
            VectorStoreError: If dimension is not positive, or the existing
                collection has a different size or distance
            TransportError: If Qdrant is unreachable or answers with an error
        """
        if dimension <= 0:
            raise VectorStoreError(f"invalid dimension: {dimension}")
        body = {"vectors": {"size": dimension, "distance": DISTANCE}}
        try:
            self._request("PUT", self.collection_url, body)
        except TransportError as e:
            if e.status_code != 409:
                raise
            self._check_existing(dimension)
        self._dimension = dimension
        logger.debug(f"Qdrant collection {self.config.collection} ready ({dimension}D)")

    def _check_existing(self, dimension: int) -> None:
        data = self._request("GET", self.collection_url)
        try:
            vectors = data["result"]["config"]["params"]["vectors"]
            size, distance = vectors["size"], vectors["distance"]
        except (KeyError, TypeError):
            raise VectorStoreError(
                f"collection {self.config.collection} exists with an unreadable vector schema"
            ) from None

        if size != dimension or distance != DISTANCE:
            raise VectorStoreError(
                f"collection {self.config.collection} exists with size={size}, "
                f"distance={distance}; expected size={dimension}, distance={DISTANCE}"
            )

    def upsert(self, chunks: Sequence[Chunk], vectors: Sequence[np.ndarray]) -> None:
        """Write one point per chunk, with the chunk fields as payload."""
        if len(chunks) != len(vectors):
            raise VectorStoreError(
                f"chunks and vectors length mismatch: {len(chunks)} != {len(vectors)}"
            )
        points = [
            {
                "id": point_id(chunk),
                "vector": np.asarray(vector, dtype=np.float64).tolist(),
                "payload": {
                    "document_id": chunk.document_id,
                    "chunk_id": chunk.chunk_id,
                    "index": chunk.index,
                    "text": chunk.text,
                },
            }
            for chunk, vector in zip(chunks, vectors)
        ]
        self._request("POST", f"{self.collection_url}/points?wait=true", {"points": points})

    def search(self, vector: np.ndarray, top_k: int) -> list[SearchResult]:
        """Run a similarity query and rebuild results from payloads."""
        if top_k <= 0:
            top_k = DEFAULT_TOP_K
        body = {
            "vector": np.asarray(vector, dtype=np.float64).tolist(),
            "limit": top_k,
            "with_payload": True,
        }
        data = self._request("POST", f"{self.collection_url}/points/search", body)

        hits = data.get("result") if isinstance(data, dict) else None
        results = []
        for hit in hits or []:
            if not isinstance(hit, dict):
                continue
            score = hit.get("score")
            results.append(
                SearchResult(
                    chunk=chunk_from_payload(hit.get("payload")),
                    score=float(score) if isinstance(score, (int, float)) else 0.0,
                )
            )
        return results

    def clear(self) -> None:
        """Drop the collection; failures are logged and ignored.

        When the store has been initialized the empty collection is
        re-created with the same schema, so an upsert can follow directly.
        """
        try:
            self._session.delete(
                self.collection_url,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.debug(f"Ignoring Qdrant clear failure: {e}")

        if self._dimension <= 0:
            return
        body = {"vectors": {"size": self._dimension, "distance": DISTANCE}}
        try:
            self._request("PUT", self.collection_url, body)
        except TransportError as e:
            logger.debug(f"Ignoring Qdrant re-create failure: {e}")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["api-key"] = self.config.api_key
        return headers

    def _request(self, method: str, url: str, body: dict | None = None) -> Any:
        try:
            response = self._session.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"qdrant {method} {url} failed: {e}", url=url) from e

        if response.status_code >= 300:
            raise TransportError(
                f"qdrant {method} {url} failed: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError:
            return {}
