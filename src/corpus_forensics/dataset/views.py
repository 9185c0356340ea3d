"""Read-only per-commit decorations computed once at load time."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .buckets import OTHER_BUCKET, UNREVIEWED_BUCKET, BucketMask, mask_from, set_bucket
from .models import Commit, Dataset, FileSnapshot, Review


class Metric(str, Enum):
    """Per-commit magnitude metric."""

    GROUPS = "groups"
    LINES = "lines"
    PATCH_BYTES = "patchBytes"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Metric"]:
        if value == "patch_bytes":
            return cls.PATCH_BYTES
        return None


@dataclass(frozen=True)
class Magnitude:
    groups: int
    lines: int
    patch_bytes: int

    def value(self, metric: Metric | str) -> int:
        metric = Metric(metric)
        if metric is Metric.GROUPS:
            return self.groups
        if metric is Metric.LINES:
            return self.lines
        return self.patch_bytes


@dataclass(frozen=True)
class CommitView:
    """A commit plus the derived fields analytics and filtering need."""

    commit: Commit
    idx: int
    reviewed: bool
    bucket_mask: BucketMask
    magnitude: Magnitude
    date_short: str

    @property
    def sha(self) -> str:
        return self.commit.sha

    @property
    def short(self) -> str:
        return self.commit.short

    @property
    def date(self) -> str:
        return self.commit.date

    @property
    def subject(self) -> str:
        return self.commit.subject

    @property
    def files(self) -> list[FileSnapshot]:
        return self.commit.files

    @property
    def patch(self) -> str:
        return self.commit.patch

    @property
    def review(self) -> Review | None:
        return self.commit.review


def compute_bucket_mask(commit: Commit) -> BucketMask:
    """Buckets touched by any review group; bucket 0 alone when unreviewed.

    A bucketless group touches bucket 10, and so does a review with no groups.
    """
    if commit.review is None:
        return mask_from([UNREVIEWED_BUCKET])
    mask = mask_from([])
    for group in commit.review.groups:
        if not group.buckets:
            mask = set_bucket(mask, OTHER_BUCKET)
            continue
        for bucket in group.buckets:
            mask = set_bucket(mask, bucket)
    if mask == 0:
        mask = set_bucket(mask, OTHER_BUCKET)
    return mask


def compute_magnitude(commit: Commit) -> Magnitude:
    groups = len(commit.review.groups) if commit.review is not None else 0
    return Magnitude(
        groups=groups or 1,
        lines=commit.totals.added + commit.totals.deleted,
        patch_bytes=len(commit.patch.encode("utf-8")),
    )


def build_commit_view(commit: Commit, idx: int) -> CommitView:
    return CommitView(
        commit=commit,
        idx=idx,
        reviewed=commit.review is not None,
        bucket_mask=compute_bucket_mask(commit),
        magnitude=compute_magnitude(commit),
        date_short=commit.date.replace("T", " ")[:19],
    )


def build_commit_views(dataset: Dataset) -> tuple[CommitView, ...]:
    """Decorate every commit, in dataset order."""
    return tuple(build_commit_view(c, i) for i, c in enumerate(dataset.commits))
