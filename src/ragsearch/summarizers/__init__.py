"""Corpus summarizers."""

from ragsearch.summarizers.frequency import FrequencySummarizer

__all__ = ["FrequencySummarizer"]
