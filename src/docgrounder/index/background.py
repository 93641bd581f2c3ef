"""Build the TF-IDF model off the serving thread.

The worker receives the full list of document contents, builds the model and
sends it back as a single reply. If the worker cannot produce that reply the
model is built inline instead, unless the caller opts out of the fallback.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import BrokenExecutor, Executor, ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Sequence

from docgrounder.index.tfidf import TfIdfModel, build_model

LOGGER = logging.getLogger(__name__)

_WORKER_FAILURES = (BrokenExecutor, OSError, RuntimeError)


class IndexBuildError(RuntimeError):
    """Raised when the background worker fails and inline fallback is disabled."""


@dataclass(slots=True)
class BuildResult:
    """A built model and whether the worker (not the inline fallback) built it."""

    model: TfIdfModel
    background: bool


def _fallback(
    exc: BaseException,
    contents: Sequence[str],
    *,
    fallback_inline: bool,
    remove_stopwords: bool,
) -> BuildResult:
    if not fallback_inline:
        raise IndexBuildError(f"Background index build failed: {exc}") from exc
    LOGGER.warning("Background index build failed (%s), building inline", exc)
    return BuildResult(build_model(contents, remove_stopwords=remove_stopwords), background=False)


def build_model_in_background(
    contents: Sequence[str],
    *,
    executor: Executor | None = None,
    fallback_inline: bool = True,
    remove_stopwords: bool = True,
) -> BuildResult:
    """Build the model in a worker and wait for the reply.

    When ``executor`` is omitted a single-worker process pool is started for
    the build and shut down afterwards.
    """
    documents = list(contents)
    job = partial(build_model, documents, remove_stopwords=remove_stopwords)
    LOGGER.info("Building TF-IDF model for %d documents in background", len(documents))
    try:
        if executor is None:
            with ProcessPoolExecutor(max_workers=1) as pool:
                model = pool.submit(job).result()
        else:
            model = executor.submit(job).result()
    except _WORKER_FAILURES as exc:
        return _fallback(
            exc, documents, fallback_inline=fallback_inline, remove_stopwords=remove_stopwords
        )
    return BuildResult(model, background=True)


async def build_model_async(
    contents: Sequence[str],
    *,
    executor: Executor | None = None,
    fallback_inline: bool = True,
    remove_stopwords: bool = True,
) -> BuildResult:
    """Awaitable variant of :func:`build_model_in_background`.

    Only the awaiting coroutine suspends while the worker builds the model;
    an owned process pool is joined off the event loop.
    """
    documents = list(contents)
    job = partial(build_model, documents, remove_stopwords=remove_stopwords)
    loop = asyncio.get_running_loop()
    LOGGER.info("Building TF-IDF model for %d documents in background", len(documents))
    try:
        if executor is not None:
            model = await loop.run_in_executor(executor, job)
        else:
            pool = ProcessPoolExecutor(max_workers=1)
            try:
                model = await loop.run_in_executor(pool, job)
            finally:
                await asyncio.to_thread(pool.shutdown)
    except _WORKER_FAILURES as exc:
        return _fallback(
            exc, documents, fallback_inline=fallback_inline, remove_stopwords=remove_stopwords
        )
    return BuildResult(model, background=True)
