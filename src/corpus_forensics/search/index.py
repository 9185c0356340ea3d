"""Incremental inverted index over every commit's snapshot.

Building the whole index in one pass would block interactive use, so the
caller (usually :class:`~corpus_forensics.search.scheduler.IndexBuilder`)
invokes :meth:`CorpusSearchIndex.index_batch` repeatedly and yields between
calls. Searches only see commits indexed so far.

Usage:
    index = CorpusSearchIndex()
    index.init(documents)
    while index.index_batch(3):
        pass
    hits = index.search("frame budget", limit=100)
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Iterable, Optional

from ..exceptions import ErrorCode, SearchError
from ..logging_config import get_logger
from .models import IndexProgress, Posting, SearchDocument, SearchHit
from .single import DEFAULT_AFTER, DEFAULT_BEFORE, build_snippet
from .tokenizer import iter_token_spans, token_counts, tokenize

logger = get_logger(__name__)

LineKey = tuple[int, int, int]  # (document position, file index, line number)


class CorpusSearchIndex:
    """Token -> postings index, filled a batch of commits at a time."""

    def __init__(self, snippet_before: int = DEFAULT_BEFORE, snippet_after: int = DEFAULT_AFTER):
        self._snippet_before = snippet_before
        self._snippet_after = snippet_after
        self._postings: dict[str, list[Posting]] = {}
        self._documents: list[SearchDocument] = []
        self._indexed = 0
        self._done = False
        self._skipped: list[int] = []

    def init(self, documents: Iterable[SearchDocument]) -> None:
        """Reset and record the document set. Does not start indexing."""
        self._postings = {}
        self._documents = sorted(documents, key=lambda d: d.idx)
        self._indexed = 0
        self._done = False
        self._skipped = []
        logger.debug(f"Search index initialised with {len(self._documents)} documents")

    @property
    def progress(self) -> IndexProgress:
        return IndexProgress(indexed=self._indexed, total=len(self._documents), done=self._done)

    @property
    def done(self) -> bool:
        return self._done

    @property
    def skipped(self) -> list[int]:
        """Commit indices whose documents failed to index."""
        return list(self._skipped)

    @property
    def token_count(self) -> int:
        return len(self._postings)

    def index_batch(self, n: int) -> bool:
        """Index up to ``n`` more documents; return whether more remain."""
        if n < 1:
            raise SearchError(
                "Batch size must be at least 1",
                ErrorCode.CF401,
                context={"batch_size": n},
                recoverable=False,
            )

        end = min(self._indexed + n, len(self._documents))
        for position in range(self._indexed, end):
            document = self._documents[position]
            try:
                postings = self._tokenize_document(position, document)
            except Exception as e:
                logger.warning(f"Skipping commit {document.idx} in search index: {e}")
                self._skipped.append(document.idx)
                continue
            for token, entries in postings.items():
                self._postings.setdefault(token, []).extend(entries)

        self._indexed = end
        if self._indexed >= len(self._documents):
            if not self._done:
                logger.debug(
                    f"Search index complete: {len(self._postings)} tokens, "
                    f"{len(self._skipped)} skipped"
                )
            self._done = True
        return not self._done

    def _tokenize_document(self, position: int, document: SearchDocument) -> dict[str, list[Posting]]:
        # Built locally so a failing document leaves no partial postings behind.
        postings: dict[str, list[Posting]] = defaultdict(list)
        for file_idx, file in enumerate(document.files):
            for line_no, line in enumerate(file.content.split("\n"), start=1):
                for token, count in token_counts(line).items():
                    postings[token].append(Posting(position, file_idx, line_no, count))
        return postings

    def search(self, query: str, limit: int = 100) -> list[SearchHit]:
        """Lines containing every query token, best score first.

        Score is the sum over query tokens of ``count / df`` where ``df`` is the
        number of indexed lines containing the token, so rare tokens weigh
        more. Ties go to the newest commit, then path, then line.
        """
        if not query or limit <= 0:
            return []
        tokens = tokenize(query)
        if not tokens:
            return []

        lists = [self._postings.get(t) for t in tokens]
        if any(not entries for entries in lists):
            return []

        # Start from the rarest token to keep the candidate set small.
        order = sorted(range(len(tokens)), key=lambda i: len(lists[i]))
        scores: Optional[dict[LineKey, float]] = None
        for i in order:
            entries = lists[i]
            weight = 1.0 / len(entries)
            if scores is None:
                scores = {(p.commit_idx, p.file_idx, p.line_no): p.count * weight for p in entries}
                continue
            next_scores: dict[LineKey, float] = {}
            for p in entries:
                key = (p.commit_idx, p.file_idx, p.line_no)
                if key in scores:
                    next_scores[key] = scores[key] + p.count * weight
            scores = next_scores
            if not scores:
                return []

        ranked = sorted(
            scores.items(),
            key=lambda item: (
                -item[1],
                -self._documents[item[0][0]].idx,
                self._documents[item[0][0]].files[item[0][1]].path,
                item[0][2],
            ),
        )
        return self._build_hits(ranked[:limit], query, tokens)

    def _build_hits(
        self, ranked: list[tuple[LineKey, float]], query: str, tokens: list[str]
    ) -> list[SearchHit]:
        phrase = _whole_word_pattern(query.strip())
        wanted = set(tokens)
        line_cache: dict[tuple[int, int], list[str]] = {}

        hits = []
        for (position, file_idx, line_no), _score in ranked:
            document = self._documents[position]
            file = document.files[file_idx]
            lines = line_cache.get((position, file_idx))
            if lines is None:
                lines = file.content.split("\n")
                line_cache[(position, file_idx)] = lines
            line = lines[line_no - 1]

            start, length = _highlight(line, phrase, wanted)

            snippet, offset = build_snippet(line, start, length, self._snippet_before, self._snippet_after)
            hits.append(
                SearchHit(
                    commit_idx=document.idx,
                    commit_short=document.short,
                    commit_date=document.date,
                    commit_subject=document.subject,
                    file_path=file.path,
                    line_no=line_no,
                    snippet=snippet,
                    match_offset=offset,
                    match_length=length,
                )
            )
        return hits

    def clear(self) -> None:
        """Drop all postings and documents."""
        self._postings = {}
        self._documents = []
        self._indexed = 0
        self._done = False
        self._skipped = []


def _whole_word_pattern(phrase: str) -> Optional[re.Pattern[str]]:
    if not phrase:
        return None
    return re.compile(rf"(?<![\w']){re.escape(phrase)}(?![\w'])", re.IGNORECASE)


def _highlight(line: str, phrase: Optional[re.Pattern[str]], wanted: set[str]) -> tuple[int, int]:
    """Start and length of the text to highlight in a hit line.

    The whole query as a phrase wins; otherwise the first word whose token
    is one of the query tokens.
    """
    if phrase is not None:
        match = phrase.search(line)
        if match is not None:
            return match.start(), len(match.group())
    for token, start, end in iter_token_spans(line):
        if token in wanted:
            return start, end - start
    return 0, 0
