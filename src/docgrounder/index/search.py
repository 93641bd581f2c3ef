"""Relevance retrieval over a built TF-IDF model."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from docgrounder.index.tfidf import TfIdfModel
from docgrounder.models import Document, ScoredResult

NO_RELEVANT_INFORMATION = "no relevant information found"
RESULT_SEPARATOR = "\n\n"
DEFAULT_TOP_N = 3


def format_context(results: Sequence[ScoredResult]) -> str:
    """Join ranked results into grounding context, or the sentinel if empty."""
    if not results:
        return NO_RELEVANT_INFORMATION
    return RESULT_SEPARATOR.join(result.content for result in results)


class Retriever:
    """Rank documents for a query and return their text as grounding context."""

    def __init__(self, documents: Sequence[Document], model: TfIdfModel) -> None:
        if len(documents) != model.document_count:
            raise ValueError(
                f"Model covers {model.document_count} documents, got {len(documents)}"
            )
        self.documents = documents
        self.model = model

    def search(self, query: str, *, top_n: int = DEFAULT_TOP_N) -> List[ScoredResult]:
        """Return up to ``top_n`` documents with a positive score, best first.

        Equal scores keep the original document order.
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")

        scores = self.model.tfidfs(query)
        order = np.argsort(-scores, kind="stable")
        results: List[ScoredResult] = []
        for idx in order[:top_n]:
            score = float(scores[idx])
            if score <= 0.0:
                break
            document = self.documents[idx]
            results.append(
                ScoredResult(
                    content=document.content,
                    score=score,
                    index=int(idx),
                    file_name=document.file_name,
                )
            )
        return results

    def retrieve(self, query: str, top_n: int = DEFAULT_TOP_N) -> str:
        return format_context(self.search(query, top_n=top_n))
