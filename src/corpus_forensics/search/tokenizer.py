"""Word tokenizer shared by the index and its queries."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterator

MIN_TOKEN_LENGTH = 2

# A word is a run of Unicode letters, digits and apostrophes; everything
# else, underscores included, separates words.
_WORD_RE = re.compile(r"(?:[^\W_]|')+")


def iter_token_spans(text: str) -> Iterator[tuple[str, int, int]]:
    """Lowercased tokens with their ``[start, end)`` positions in ``text``.

    Apostrophes at either end of a word are not part of the token or its span.
    """
    if not text:
        return
    for match in _WORD_RE.finditer(text):
        word = match.group()
        stripped = word.strip("'")
        if len(stripped) < MIN_TOKEN_LENGTH:
            continue
        start = match.start() + (len(word) - len(word.lstrip("'")))
        yield stripped.lower(), start, start + len(stripped)


def iter_tokens(text: str) -> Iterator[str]:
    """Lowercased word tokens in order, duplicates included."""
    for token, _start, _end in iter_token_spans(text):
        yield token


def tokenize(text: str) -> list[str]:
    """Distinct tokens in first-seen order."""
    return list(dict.fromkeys(iter_tokens(text)))


def token_counts(text: str) -> Counter[str]:
    return Counter(iter_tokens(text))
