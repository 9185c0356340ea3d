"""Snapshot comparison: patch parsing, line diffs, edit distance."""

from .corpus import (
    ALL_FILES,
    build_corpus_text,
    build_snapshot_text,
    compute_file_change_summary,
    compute_per_file_contribution,
    compute_text_stats,
)
from .distance import bounded_distance, default_upper_bound
from .models import (
    DiffKind,
    DiffOp,
    EditDistance,
    FileChangeSummary,
    FileContribution,
    LineDiff,
    LineKind,
    PatchFile,
    PatchHunk,
    PatchLine,
    SideCell,
    SideRow,
    TextStats,
)
from .myers import diff_lines, diff_text_lines, guarded_diff_lines, split_lines
from .patch import parse_patch
from .rows import hunk_to_side_by_side_rows, ops_to_side_by_side_rows

__all__ = [
    "ALL_FILES",
    "DiffKind",
    "DiffOp",
    "EditDistance",
    "FileChangeSummary",
    "FileContribution",
    "LineDiff",
    "LineKind",
    "PatchFile",
    "PatchHunk",
    "PatchLine",
    "SideCell",
    "SideRow",
    "TextStats",
    "bounded_distance",
    "build_corpus_text",
    "build_snapshot_text",
    "compute_file_change_summary",
    "compute_per_file_contribution",
    "compute_text_stats",
    "default_upper_bound",
    "diff_lines",
    "diff_text_lines",
    "guarded_diff_lines",
    "hunk_to_side_by_side_rows",
    "ops_to_side_by_side_rows",
    "parse_patch",
    "split_lines",
]
