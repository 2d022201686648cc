"""Frequency-based extractive summarizer."""

import math
from collections import Counter

from ragsearch.utils.text import split_sentences, tokenize

DEFAULT_MAX_SENTENCES = 5


class FrequencySummarizer:
    """Ranks sentences by normalized word frequency (stopwords filtered).

    Sentence score is the sum of its tokens' normalized frequencies divided
    by the square root of its token count, so long sentences are not
    favoured just for their length. Selected sentences keep document order.
    """

    def summarize(self, text: str, max_sentences: int) -> str:
        if max_sentences <= 0:
            max_sentences = DEFAULT_MAX_SENTENCES

        sentences = split_sentences(text)
        if len(sentences) <= 1:
            return sentences[0] if sentences else ""

        sentence_tokens = [tokenize(s) for s in sentences]
        freq = Counter(tok for tokens in sentence_tokens for tok in tokens)
        top = max(freq.values(), default=0)

        scores = []
        for i, tokens in enumerate(sentence_tokens):
            score = 0.0
            if tokens and top:
                score = sum(freq[tok] / top for tok in tokens) / math.sqrt(len(tokens))
            scores.append((score, i))

        ranked = sorted(scores, key=lambda pair: pair[0], reverse=True)
        selected = sorted(i for _, i in ranked[:max_sentences])
        return " ".join(sentences[i] for i in selected)
