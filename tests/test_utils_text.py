"""Tests for text utilities."""

from __future__ import annotations

from docgrounder.utils.text import STOPWORDS, tokenize


class TestTokenize:
    """Test tokenize function."""

    def test_lowercases_and_splits_on_punctuation(self) -> None:
        """Should split on whitespace and punctuation, case-insensitively."""
        assert tokenize("Cats, DOGS; birds!") == ["cats", "dogs", "birds"]

    def test_removes_stopwords(self) -> None:
        """Should drop stop words by default."""
        assert tokenize("the cat sat on the mat") == ["cat", "sat", "mat"]

    def test_keeps_stopwords_when_disabled(self) -> None:
        """Should keep every token when stop-word removal is off."""
        assert tokenize("the cat", remove_stopwords=False) == ["the", "cat"]

    def test_unicode_words(self) -> None:
        """Should keep accented letters inside tokens."""
        assert tokenize("Không tìm thấy") == ["không", "tìm", "thấy"]

    def test_numbers_and_underscores(self) -> None:
        """Should treat digits and underscores as word characters."""
        assert tokenize("task_42 due 2024") == ["task_42", "due", "2024"]

    def test_empty_text(self) -> None:
        """Should return no tokens for empty text."""
        assert tokenize("") == []
        assert tokenize("  ...  ") == []

    def test_stopwords_are_lowercase(self) -> None:
        """Stop words must be comparable with lower-cased tokens."""
        assert all(word == word.lower() for word in STOPWORDS)
        assert "the" in STOPWORDS
