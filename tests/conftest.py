"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

SCENARIO = {
    "doc1.txt": "the cat sat on the mat",
    "doc2.txt": "the dog sat on the log",
    "doc3.txt": "birds fly in the sky",
}


def write_corpus(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def scenario_dir(tmp_path: Path) -> Path:
    """Directory holding the cat/dog/birds corpus."""
    return write_corpus(tmp_path / "documents", SCENARIO)
