"""Linear search within one commit.

Used when the scope is the selected commit: no dependency on the global
index, which may still be building.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import SearchDocument, SearchHit

ELLIPSIS = "…"
DEFAULT_BEFORE = 40
DEFAULT_AFTER = 60


def build_snippet(
    line: str,
    match_pos: int,
    match_len: int,
    before: int = DEFAULT_BEFORE,
    after: int = DEFAULT_AFTER,
) -> tuple[str, int]:
    """Cut a window around a match; returns the snippet and the match offset in it."""
    start = max(0, match_pos - before)
    end = min(len(line), match_pos + match_len + after)
    snippet = line[start:end]
    offset = match_pos - start
    if start > 0:
        snippet = ELLIPSIS + snippet
        offset += len(ELLIPSIS)
    if end < len(line):
        snippet += ELLIPSIS
    return snippet, offset


def compile_query(query: str) -> Optional[re.Pattern[str]]:
    if not query:
        return None
    return re.compile(re.escape(query), re.IGNORECASE)


def search_one(
    document: SearchDocument,
    query: str,
    limit: int = 50,
    before: int = DEFAULT_BEFORE,
    after: int = DEFAULT_AFTER,
) -> list[SearchHit]:
    """Every case-insensitive occurrence of ``query`` in the document, up to ``limit``."""
    pattern = compile_query(query)
    if pattern is None or limit <= 0:
        return []

    hits: list[SearchHit] = []
    for file in document.files:
        for line_no, line in enumerate(file.content.split("\n"), start=1):
            match = pattern.search(line)
            while match is not None:
                snippet, offset = build_snippet(line, match.start(), len(match.group()), before, after)
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
                        match_length=len(match.group()),
                    )
                )
                if len(hits) >= limit:
                    return hits
                match = pattern.search(line, match.start() + 1)
    return hits
