"""Attribute per-commit magnitudes to taxonomy buckets over time.

Per commit, the magnitude is split evenly across review groups (the
``groups`` metric instead counts each group as 1), then each group's share
goes to its buckets according to the weighting mode. Commits are then
grouped by a truncated wall-clock key of their own ISO date, so keys sort
lexicographically in chronological order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

import numpy as np

from ..dataset.buckets import BUCKET_COUNT, OTHER_BUCKET, UNREVIEWED_BUCKET, has_bucket
from ..dataset.views import CommitView, Metric
from ..exceptions import CompareError, ErrorCode
from .models import BucketSeries, TimeResolution, WeightMode


def _metric(metric: Metric | str) -> Metric:
    try:
        return Metric(metric)
    except ValueError:
        raise CompareError(
            f"Unknown metric: {metric}",
            ErrorCode.CF300,
            context={"metric": str(metric)},
            recoverable=False,
        )


def _mode(mode: WeightMode | str) -> WeightMode:
    try:
        return WeightMode(mode)
    except ValueError:
        raise CompareError(
            f"Unknown weighting mode: {mode}",
            ErrorCode.CF300,
            context={"mode": str(mode)},
            recoverable=False,
        )


def _resolution(resolution: TimeResolution | str) -> TimeResolution:
    try:
        return TimeResolution(resolution)
    except ValueError:
        raise CompareError(
            f"Unknown time resolution: {resolution}",
            ErrorCode.CF301,
            context={"resolution": str(resolution)},
            recoverable=False,
        )


def bucket_weights(
    view: CommitView, metric: Metric | str, mode: WeightMode | str = WeightMode.SOFT
) -> dict[int, float]:
    """Map bucket id -> weight for a single commit."""
    metric = _metric(metric)
    mode = _mode(mode)
    magnitude = float(view.magnitude.value(metric))

    if view.review is None:
        return {UNREVIEWED_BUCKET: magnitude}

    groups = view.review.groups
    if not groups:
        return {OTHER_BUCKET: magnitude}

    share = 1.0 if metric is Metric.GROUPS else magnitude / len(groups)

    weights: dict[int, float] = defaultdict(float)
    for group in groups:
        if not group.buckets:
            weights[OTHER_BUCKET] += share
            continue
        per_bucket = share / len(group.buckets) if mode is WeightMode.SOFT else share
        for bucket in group.buckets:
            weights[bucket] += per_bucket
    return dict(weights)


def time_bucket_key(date: str, resolution: TimeResolution | str) -> str:
    """Truncate an ISO-8601 date to the resolution, keeping its own offset's wall clock."""
    resolution = _resolution(resolution)
    day = date[:10]
    if resolution is TimeResolution.DAY:
        return day
    hour = date[11:13] or "00"
    if resolution is TimeResolution.HOUR:
        return f"{day} {hour}:00"
    try:
        minute = int(date[14:16])
    except ValueError:
        minute = 0
    step = 15 if resolution is TimeResolution.QUARTER_HOUR else 5
    return f"{day} {hour}:{minute // step * step:02d}"


def build_bucket_series(
    views: Iterable[CommitView],
    metric: Metric | str,
    mode: WeightMode | str = WeightMode.SOFT,
    resolution: TimeResolution | str = TimeResolution.DAY,
    reviewed_only: bool = False,
    bucket_filter: Optional[int] = None,
) -> BucketSeries:
    """Sum per-commit bucket weights into a ``[bucket][time key]`` matrix.

    Args:
        views: Commits in dataset order
        metric: groups, lines or patchBytes
        mode: hard or soft weighting
        resolution: day, hour, 15m or 5m
        reviewed_only: Skip unreviewed commits
        bucket_filter: Keep only commits whose mask contains this bucket
    """
    metric = _metric(metric)
    mode = _mode(mode)
    resolution = _resolution(resolution)

    by_key: dict[str, list[CommitView]] = defaultdict(list)
    for view in views:
        if reviewed_only and not view.reviewed:
            continue
        if bucket_filter is not None and not has_bucket(view.bucket_mask, bucket_filter):
            continue
        by_key[time_bucket_key(view.date, resolution)].append(view)

    time_keys = sorted(by_key)
    values = np.zeros((BUCKET_COUNT, len(time_keys)), dtype=float)
    first_commit_by_key: dict[str, int] = {}

    for t, key in enumerate(time_keys):
        commits = by_key[key]
        first_commit_by_key[key] = commits[0].idx
        for view in commits:
            for bucket, weight in bucket_weights(view, metric, mode).items():
                values[bucket, t] += weight

    return BucketSeries(time_keys=time_keys, values=values, first_commit_by_key=first_commit_by_key)
