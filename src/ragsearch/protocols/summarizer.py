"""Protocol for corpus summarizers."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Summarizer(Protocol):
    """Produces a short overview of a corpus after ingestion."""

    def summarize(self, text: str, max_sentences: int) -> str:
        ...
