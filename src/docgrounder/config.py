"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docgrounder.utils.files import TEXT_EXTENSIONS

DEFAULT_DOCUMENTS_DIR = Path("documents")


@dataclass(slots=True)
class AppConfig:
    documents_dir: Path = DEFAULT_DOCUMENTS_DIR
    extensions: tuple[str, ...] = TEXT_EXTENSIONS
    encoding: str = "utf-8"
    top_n: int = 3
    background_build: bool = False
    remove_stopwords: bool = True
    fail_on_load_error: bool = True

    def __post_init__(self) -> None:
        self.documents_dir = Path(self.documents_dir)
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1")

    def resolve_documents_dir(self, base_dir: Path | None = None) -> Path:
        if self.documents_dir.is_absolute() or base_dir is None:
            return self.documents_dir
        return base_dir / self.documents_dir
