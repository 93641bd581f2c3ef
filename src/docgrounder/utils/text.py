"""Text helpers: tokenization shared by indexing and querying."""

from __future__ import annotations

import re
from typing import List

_WORD_RE = re.compile(r"\w+", re.UNICODE)

STOPWORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because been
    before being below between both but by can could did do does doing down during
    each few for from further had has have having he her here hers herself him
    himself his how i if in into is it its itself just me more most my myself no nor
    not now of off on once only or other our ours ourselves out over own same she
    should so some such than that the their theirs them themselves then there these
    they this those through to too under until up very was we were what when where
    which while who whom why will with would you your yours yourself yourselves
    """.split()
)


def tokenize(text: str, *, remove_stopwords: bool = True) -> List[str]:
    """Split text into lower-cased word tokens.

    Tokens are unicode word runs, so punctuation and whitespace both act as
    delimiters. Stop words are dropped when ``remove_stopwords`` is set.
    """
    tokens = _WORD_RE.findall(text.lower())
    if remove_stopwords:
        return [token for token in tokens if token not in STOPWORDS]
    return tokens
