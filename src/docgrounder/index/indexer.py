"""Corpus indexing pipeline and the knowledge base that owns the live index."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Tuple

from docgrounder.config import AppConfig
from docgrounder.index.background import build_model_async, build_model_in_background
from docgrounder.index.search import Retriever
from docgrounder.index.tfidf import TfIdfModel, build_model
from docgrounder.ingestion.text_loader import load_documents
from docgrounder.models import Document, ScoredResult

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    documents: int = 0
    terms: int = 0
    background: bool = False
    elapsed: float = 0.0
    file_names: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Documents and the model built from them, published together."""

    documents: Tuple[Document, ...]
    model: TfIdfModel
    stats: IndexStats

    @property
    def retriever(self) -> Retriever:
        return Retriever(self.documents, self.model)


def _stats(documents: Tuple[Document, ...], model: TfIdfModel, background: bool, started: float) -> IndexStats:
    return IndexStats(
        documents=model.document_count,
        terms=model.vocabulary_size,
        background=background,
        elapsed=time.perf_counter() - started,
        file_names=[doc.file_name for doc in documents],
    )


def _log_documents(documents: Tuple[Document, ...]) -> None:
    for position, doc in enumerate(documents, start=1):
        LOGGER.debug("Adding document %d: %s", position, doc.file_name)


class KnowledgeBase:
    """Loads the corpus, builds the TF-IDF index and serves retrievals.

    A load or reload builds a complete new snapshot and then replaces the
    reference to the old one, so concurrent readers always see a whole index.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._snapshot: IndexSnapshot | None = None

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> IndexSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise RuntimeError("Knowledge base has not been loaded")
        return snapshot

    def _load_corpus(self) -> Tuple[Document, ...]:
        directory = self.config.documents_dir
        try:
            documents = load_documents(
                directory,
                extensions=self.config.extensions,
                encoding=self.config.encoding,
            )
        except (OSError, UnicodeDecodeError) as exc:
            if self.config.fail_on_load_error:
                raise
            LOGGER.error("Failed to load documents from %s: %s; continuing with an empty corpus", directory, exc)
            documents = []
        return tuple(documents)

    def _publish(
        self, documents: Tuple[Document, ...], model: TfIdfModel, background: bool, started: float
    ) -> IndexStats:
        stats = _stats(documents, model, background, started)
        self._snapshot = IndexSnapshot(documents=documents, model=model, stats=stats)
        LOGGER.info(
            "Indexed %d documents (%d terms) in %.3fs", stats.documents, stats.terms, stats.elapsed
        )
        return stats

    def load(self) -> IndexStats:
        """Load the corpus and build the index, blocking until published."""
        started = time.perf_counter()
        documents = self._load_corpus()
        contents = [doc.content for doc in documents]
        _log_documents(documents)

        if self.config.background_build:
            built = build_model_in_background(contents, remove_stopwords=self.config.remove_stopwords)
            return self._publish(documents, built.model, built.background, started)
        model = build_model(contents, remove_stopwords=self.config.remove_stopwords)
        return self._publish(documents, model, False, started)

    async def aload(self) -> IndexStats:
        """Awaitable :meth:`load`; neither reading nor indexing blocks the event loop."""
        started = time.perf_counter()
        documents = await asyncio.to_thread(self._load_corpus)
        contents = [doc.content for doc in documents]
        _log_documents(documents)

        if self.config.background_build:
            built = await build_model_async(contents, remove_stopwords=self.config.remove_stopwords)
            return self._publish(documents, built.model, built.background, started)
        model = await asyncio.to_thread(
            build_model, contents, remove_stopwords=self.config.remove_stopwords
        )
        return self._publish(documents, model, False, started)

    reload = load
    areload = aload

    def _top_n(self, top_n: int | None) -> int:
        return self.config.top_n if top_n is None else top_n

    def search(self, query: str, *, top_n: int | None = None) -> List[ScoredResult]:
        return self.snapshot.retriever.search(query, top_n=self._top_n(top_n))

    def retrieve(self, query: str, top_n: int | None = None) -> str:
        """Return grounding context for ``query`` from the current snapshot."""
        return self.snapshot.retriever.retrieve(query, top_n=self._top_n(top_n))
