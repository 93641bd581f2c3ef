"""Tests for background index construction."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from unittest.mock import MagicMock, patch

import pytest

from docgrounder.index.background import (
    IndexBuildError,
    build_model_async,
    build_model_in_background,
)
from docgrounder.index.tfidf import build_model

from conftest import SCENARIO

CONTENTS = list(SCENARIO.values())


def broken_executor() -> MagicMock:
    executor = MagicMock()
    executor.submit.side_effect = BrokenProcessPool("worker died")
    return executor


def shutdown_executor() -> ThreadPoolExecutor:
    executor = ThreadPoolExecutor(max_workers=1)
    executor.shutdown()
    return executor


class TestBuildModelInBackground:
    """Test the blocking background builder."""

    def test_matches_inline_build_with_thread_executor(self) -> None:
        """Should produce the same model as an inline build."""
        with ThreadPoolExecutor(max_workers=1) as executor:
            built = build_model_in_background(CONTENTS, executor=executor)

        assert built.model == build_model(CONTENTS)
        assert built.background is True

    def test_matches_inline_build_with_process_pool(self) -> None:
        """Should build in a worker process and return the model."""
        built = build_model_in_background(CONTENTS)

        assert built.model == build_model(CONTENTS)
        assert built.background is True

    def test_passes_stopword_policy(self) -> None:
        """Should forward the tokenization policy to the worker."""
        with ThreadPoolExecutor(max_workers=1) as executor:
            built = build_model_in_background(CONTENTS, executor=executor, remove_stopwords=False)

        assert built.model == build_model(CONTENTS, remove_stopwords=False)

    def test_falls_back_inline_on_broken_worker(self) -> None:
        """Should build inline when the worker cannot reply."""
        built = build_model_in_background(CONTENTS, executor=broken_executor())

        assert built.model == build_model(CONTENTS)
        assert built.background is False

    def test_falls_back_inline_on_shutdown_executor(self) -> None:
        """Should build inline when the executor no longer accepts work."""
        built = build_model_in_background(CONTENTS, executor=shutdown_executor())

        assert built.model == build_model(CONTENTS)
        assert built.background is False

    def test_falls_back_when_pool_cannot_start(self) -> None:
        """Should build inline when no worker process can be started."""
        with patch(
            "docgrounder.index.background.ProcessPoolExecutor",
            side_effect=OSError("cannot fork"),
        ):
            built = build_model_in_background(CONTENTS)

        assert built.model == build_model(CONTENTS)
        assert built.background is False

    def test_raises_without_fallback(self) -> None:
        """Should surface the failure when fallback is disabled."""
        with pytest.raises(IndexBuildError, match="worker died"):
            build_model_in_background(CONTENTS, executor=broken_executor(), fallback_inline=False)

    def test_empty_corpus(self) -> None:
        """Should build an empty model."""
        with ThreadPoolExecutor(max_workers=1) as executor:
            built = build_model_in_background([], executor=executor)

        assert built.model.document_count == 0


class TestBuildModelAsync:
    """Test the awaitable background builder."""

    def test_matches_inline_build(self) -> None:
        """Should await the worker's single reply."""
        with ThreadPoolExecutor(max_workers=1) as executor:
            built = asyncio.run(build_model_async(CONTENTS, executor=executor))

        assert built.model == build_model(CONTENTS)
        assert built.background is True

    def test_default_process_pool(self) -> None:
        """Should use a process pool when no executor is given."""
        built = asyncio.run(build_model_async(CONTENTS))

        assert built.model == build_model(CONTENTS)
        assert built.background is True

    def test_owned_pool_joined_off_loop(self) -> None:
        """Should shut an owned pool down in a thread, not on the event loop."""
        pool = MagicMock(wraps=ThreadPoolExecutor(max_workers=1))
        with patch(
            "docgrounder.index.background.ProcessPoolExecutor", return_value=pool
        ), patch(
            "docgrounder.index.background.asyncio.to_thread", wraps=asyncio.to_thread
        ) as mock_to_thread:
            built = asyncio.run(build_model_async(CONTENTS))

        assert built.model == build_model(CONTENTS)
        assert built.background is True
        mock_to_thread.assert_called_once_with(pool.shutdown)
        pool.shutdown.assert_called_once_with()

    def test_falls_back_when_pool_cannot_start(self) -> None:
        """Should build inline and report it when no worker can start."""
        with patch(
            "docgrounder.index.background.ProcessPoolExecutor",
            side_effect=OSError("cannot fork"),
        ):
            built = asyncio.run(build_model_async(CONTENTS))

        assert built.model == build_model(CONTENTS)
        assert built.background is False

    def test_falls_back_inline(self) -> None:
        """Should build inline when the worker fails."""
        built = asyncio.run(build_model_async(CONTENTS, executor=shutdown_executor()))

        assert built.model == build_model(CONTENTS)
        assert built.background is False

    def test_raises_without_fallback(self) -> None:
        """Should raise IndexBuildError when fallback is disabled."""
        with pytest.raises(IndexBuildError):
            asyncio.run(
                build_model_async(CONTENTS, executor=shutdown_executor(), fallback_inline=False)
            )
