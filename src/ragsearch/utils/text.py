"""Sentence splitting and tokenization shared by the pipeline."""

import re

# A maximal run of non-terminators closed by one terminator
SENTENCE_RE = re.compile(r"[^.!?]+[.!?]")

# Unicode letter runs with at most one internal apostrophe (e.g. "don't")
TOKEN_RE = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)?")

STOPWORDS = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "if", "then", "else", "for",
        "to", "of", "in", "on", "at", "by", "with", "as", "is", "are",
        "was", "were", "be", "been", "being", "it", "this", "that", "these",
        "those", "from", "up", "down", "over", "under", "again", "further",
        "than", "so", "such", "into", "about", "between", "through",
        "during", "before", "after", "above", "below", "out", "off", "own",
        "same", "too", "very", "can", "will", "just", "don", "should", "now",
    }
)


def split_sentences(text: str) -> list[str]:
    """Split text into trimmed sentences.

    If the text contains no terminator, the whole trimmed text is a single
    sentence. Empty or whitespace-only text yields no sentences.
    """
    sentences = [s.strip() for s in SENTENCE_RE.findall(text)]
    if sentences:
        return sentences

    trimmed = text.strip()
    return [trimmed] if trimmed else []


def tokenize(text: str) -> list[str]:
    """Return lower-cased word tokens with stopwords removed."""
    return [tok for tok in TOKEN_RE.findall(text.lower()) if tok not in STOPWORDS]
