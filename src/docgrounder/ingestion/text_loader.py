"""Plain-text corpus loading."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from docgrounder.models import Document
from docgrounder.utils.files import TEXT_EXTENSIONS, ensure_directory, iter_text_paths

LOGGER = logging.getLogger(__name__)


def read_document(path: Path, *, encoding: str = "utf-8") -> Document:
    """Read a single text file into a :class:`Document`."""
    with path.open("r", encoding=encoding, newline="") as handle:
        content = handle.read()
    mtime = path.stat().st_mtime
    return Document(
        content=content,
        file_name=path.name,
        last_modified=datetime.fromtimestamp(mtime, tz=timezone.utc),
    )


def load_documents(
    directory: Path,
    *,
    extensions: Iterable[str] = TEXT_EXTENSIONS,
    encoding: str = "utf-8",
) -> List[Document]:
    """Load every plain-text file in ``directory``.

    The directory is created when missing, in which case the corpus is empty.
    Read and decode errors propagate to the caller.
    """
    directory = ensure_directory(Path(directory))
    documents = []
    for path in iter_text_paths(directory, extensions):
        LOGGER.debug("Loading %s", path)
        documents.append(read_document(path, encoding=encoding))

    LOGGER.info("Loaded %d documents from %s", len(documents), directory)
    return documents
