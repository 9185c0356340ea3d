"""Corpus search: single-commit scan and the incremental all-commits index."""

from .index import CorpusSearchIndex
from .models import IndexProgress, Posting, SearchDocument, SearchHit, SearchScope
from .scheduler import BackgroundScheduler, CooperativeScheduler, IndexBuilder
from .single import build_snippet, search_one
from .tokenizer import tokenize

__all__ = [
    "BackgroundScheduler",
    "CooperativeScheduler",
    "CorpusSearchIndex",
    "IndexBuilder",
    "IndexProgress",
    "Posting",
    "SearchDocument",
    "SearchHit",
    "SearchScope",
    "build_snippet",
    "search_one",
    "tokenize",
]
