"""Data models for corpus search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple, Optional, Sequence

if TYPE_CHECKING:
    from ..compare.corpus import SnapshotFile
    from ..dataset.views import CommitView


class SearchScope(str, Enum):
    THIS_COMMIT = "thisCommit"
    ALL_COMMITS = "allCommits"

    @classmethod
    def _missing_(cls, value: object) -> Optional["SearchScope"]:
        aliases = {"this_commit": cls.THIS_COMMIT, "all_commits": cls.ALL_COMMITS}
        return aliases.get(value) if isinstance(value, str) else None


@dataclass(frozen=True)
class SearchDocument:
    """One commit's snapshot as seen by search."""

    idx: int
    short: str
    date: str
    subject: str = ""
    files: Sequence["SnapshotFile"] = field(default_factory=tuple)

    @classmethod
    def from_view(cls, view: "CommitView") -> "SearchDocument":
        return cls(
            idx=view.idx,
            short=view.short,
            date=view.date,
            subject=view.subject,
            files=tuple(view.files),
        )


@dataclass(frozen=True)
class SearchHit:
    commit_idx: int
    commit_short: str
    commit_date: str
    commit_subject: str
    file_path: str
    line_no: int  # 1-based
    snippet: str
    match_offset: int  # into snippet, not the full line
    match_length: int


@dataclass(frozen=True)
class IndexProgress:
    indexed: int
    total: int
    done: bool


class Posting(NamedTuple):
    commit_idx: int
    file_idx: int
    line_no: int
    count: int
