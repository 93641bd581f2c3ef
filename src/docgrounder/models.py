"""Core DocGrounder data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Document:
    """A loaded plain-text document."""

    content: str
    file_name: str
    last_modified: datetime


@dataclass(slots=True)
class ScoredResult:
    """Document text paired with its relevance score for one query."""

    content: str
    score: float
    index: int = -1
    file_name: str = ""
