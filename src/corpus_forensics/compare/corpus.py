"""Snapshot-to-snapshot comparison helpers.

Inputs are a commit's full file snapshot (``path``/``content`` records);
everything here is a pure function of two snapshots and a file choice.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .models import FileChangeSummary, FileContribution, TextStats

ALL_FILES = "__ALL__"
DEFAULT_SNAPSHOT_TITLE = "Spec Corpus (snapshot)"


class SnapshotFile(Protocol):
    path: str
    content: str


def _is_all(file_choice: Optional[str]) -> bool:
    return not file_choice or file_choice == ALL_FILES


def index_files(files: Iterable[SnapshotFile]) -> dict[str, str]:
    return {f.path: f.content or "" for f in files}


def compute_file_change_summary(
    a_files: Iterable[SnapshotFile], b_files: Iterable[SnapshotFile]
) -> FileChangeSummary:
    """Classify every path in either snapshot as added/removed/modified/unchanged."""
    a = index_files(a_files)
    b = index_files(b_files)
    added = sorted(p for p in b if p not in a)
    removed = sorted(p for p in a if p not in b)
    shared = [p for p in a if p in b]
    modified = sorted(p for p in shared if a[p] != b[p])
    unchanged = sorted(p for p in shared if a[p] == b[p])
    return FileChangeSummary(added=added, removed=removed, modified=modified, unchanged=unchanged)


def build_corpus_text(files: Iterable[SnapshotFile], file_choice: Optional[str] = None) -> str:
    """Text compared between two snapshots.

    A single file yields its content ("" when absent). All files are sorted by
    path and joined as ``## path`` sections so comparisons are stable.
    """
    files = list(files)
    if not _is_all(file_choice):
        for f in files:
            if f.path == file_choice:
                return f.content or ""
        return ""

    ordered = sorted(files, key=lambda f: f.path)
    return "\n\n---\n\n".join(f"## {f.path}\n\n{f.content or ''}" for f in ordered)


def build_snapshot_text(
    files: Iterable[SnapshotFile],
    file_choice: Optional[str] = None,
    title: str = DEFAULT_SNAPSHOT_TITLE,
) -> str:
    """Readable snapshot document for the snapshot and raw tabs."""
    files = list(files)
    if not _is_all(file_choice):
        for f in files:
            if f.path == file_choice:
                return f"# {f.path}\n\n{f.content}"
        return ""

    parts = [f"# {title}\n"]
    for f in files:
        parts.append(f"\n---\n\n## {f.path}\n\n{f.content}")
    return "\n".join(parts)


def compute_text_stats(text: str) -> TextStats:
    if not text:
        return TextStats(lines=0, bytes=0, words=0)
    return TextStats(
        lines=text.count("\n") + 1,
        bytes=len(text.encode("utf-8")),
        words=len(text.split()),
    )


def compute_per_file_contribution(
    a_files: Iterable[SnapshotFile], b_files: Iterable[SnapshotFile]
) -> list[FileContribution]:
    """Per-path line/byte deltas, biggest absolute byte change first."""
    a = index_files(a_files)
    b = index_files(b_files)
    result = []
    for path in sorted(set(a) | set(b)):
        a_stats = compute_text_stats(a.get(path, ""))
        b_stats = compute_text_stats(b.get(path, ""))
        result.append(
            FileContribution(
                path=path,
                delta_lines=b_stats.lines - a_stats.lines,
                delta_bytes=b_stats.bytes - a_stats.bytes,
            )
        )
    result.sort(key=lambda c: abs(c.delta_bytes), reverse=True)
    return result
