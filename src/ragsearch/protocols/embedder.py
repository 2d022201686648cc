"""Protocol for embedding model providers."""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding model providers.

    Allows swapping between the local TF-IDF vectorizer and a remote
    embedding API. Uses structural subtyping - no inheritance required.
    """

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        ...

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        ...

    def prepare(self, corpus: list[str]) -> None:
        """Compute corpus-wide state needed before embedding.

        Stateless providers implement this as a no-op.
        """
        ...

    def embed(self, text: str) -> np.ndarray:
        """Generate the embedding for a single text.

        Returns: 1-D numpy array of length `dimension`
        """
        ...
