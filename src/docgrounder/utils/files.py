"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

TEXT_EXTENSIONS = (".txt",)


def ensure_directory(path: Path) -> Path:
    """Create ``path`` (and parents) if it does not exist yet."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def iter_text_paths(directory: Path, extensions: Iterable[str] = TEXT_EXTENSIONS) -> Iterator[Path]:
    """Yield plain-text files directly under ``directory``, ordered by name."""
    suffixes = {ext.lower() for ext in extensions}
    for child in sorted(directory.iterdir(), key=lambda item: item.name):
        if child.is_file() and child.suffix.lower() in suffixes:
            yield child
