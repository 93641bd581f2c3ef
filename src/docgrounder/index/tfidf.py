"""Term-frequency / inverse-document-frequency model."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from docgrounder.utils.text import tokenize


@dataclass(slots=True)
class TfIdfModel:
    """Per-document term counts plus corpus document frequencies.

    Document ``i`` of the model is document ``i`` of the list it was built
    from. Term frequency is the raw count; inverse document frequency is
    ``1 + ln(N / (1 + df))`` for terms present in the corpus and ``0`` for
    absent ones.
    """

    term_counts: List[Dict[str, int]] = field(default_factory=list)
    document_frequency: Dict[str, int] = field(default_factory=dict)
    remove_stopwords: bool = True

    @property
    def document_count(self) -> int:
        return len(self.term_counts)

    @property
    def vocabulary_size(self) -> int:
        return len(self.document_frequency)

    def tokenize(self, text: str) -> List[str]:
        return tokenize(text, remove_stopwords=self.remove_stopwords)

    def idf(self, term: str) -> float:
        df = self.document_frequency.get(term, 0)
        if df == 0:
            return 0.0
        return 1.0 + math.log(self.document_count / (1.0 + df))

    def tf(self, term: str, index: int) -> int:
        return self.term_counts[index].get(term, 0)

    def tfidf(self, term: str, index: int) -> float:
        """Weight of a single (already tokenized) term in document ``index``."""
        return self.tf(term, index) * self.idf(term)

    def tfidfs(self, query: str) -> np.ndarray:
        """Score every document against ``query``.

        Each query token adds its TF-IDF weight in a document to that
        document's score; repeated tokens count every time.
        """
        scores = np.zeros(self.document_count, dtype=np.float64)
        for term in self.tokenize(query):
            idf = self.idf(term)
            if idf == 0.0:
                continue
            counts = np.fromiter(
                (table.get(term, 0) for table in self.term_counts),
                dtype=np.float64,
                count=self.document_count,
            )
            scores += counts * idf
        return scores


def build_model(contents: Sequence[str], *, remove_stopwords: bool = True) -> TfIdfModel:
    """Build a :class:`TfIdfModel` over ``contents`` in order."""
    term_counts: List[Dict[str, int]] = []
    document_frequency: Counter[str] = Counter()
    for text in contents:
        counts = Counter(tokenize(text, remove_stopwords=remove_stopwords))
        term_counts.append(dict(counts))
        document_frequency.update(counts.keys())

    return TfIdfModel(
        term_counts=term_counts,
        document_frequency=dict(document_frequency),
        remove_stopwords=remove_stopwords,
    )
