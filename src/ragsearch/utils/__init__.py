"""Utility functions for ragsearch."""

from ragsearch.utils.backoff import BackoffPolicy, backoff_delay, parse_retry_after
from ragsearch.utils.rwlock import ReadWriteLock
from ragsearch.utils.text import STOPWORDS, split_sentences, tokenize

__all__ = [
    "BackoffPolicy",
    "backoff_delay",
    "parse_retry_after",
    "ReadWriteLock",
    "STOPWORDS",
    "split_sentences",
    "tokenize",
]
