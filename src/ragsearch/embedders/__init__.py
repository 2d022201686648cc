"""Embedding providers for vector generation."""

from ragsearch.embedders.remote import RemoteEmbedder, RemoteEmbedderConfig
from ragsearch.embedders.tfidf import TfidfEmbedder

__all__ = ["TfidfEmbedder", "RemoteEmbedder", "RemoteEmbedderConfig"]
