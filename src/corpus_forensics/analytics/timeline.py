"""Timeline mini-map: sparkline values, position mapping and playback timing."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..dataset.buckets import has_bucket
from ..dataset.views import CommitView, Metric
from ..exceptions import ErrorCode, SessionError
from .models import TimelineData, TimelinePoint

BASE_INTERVAL_MS = 600

PLAYBACK_SPEEDS: tuple[float, ...] = (0.25, 0.5, 1.0, 2.0)

# Larger multiplier, shorter pause between automatic advances.
PLAYBACK_INTERVALS_MS: dict[float, int] = {
    speed: int(BASE_INTERVAL_MS / speed + 0.5) for speed in PLAYBACK_SPEEDS
}


def build_timeline(
    views: Sequence[CommitView],
    metric: Metric | str,
    bucket_filter: Optional[int] = None,
) -> TimelineData:
    """Per-commit sparkline points.

    ``value`` is the raw magnitude divided by the largest magnitude among
    commits matching ``bucket_filter`` (all commits when None), clamped to
    [0, 1]; non-matching commits are still listed so the sparkline keeps
    its x-axis.
    """
    if not views:
        return TimelineData(points=[], max_raw_value=0.0, min_raw_value=0.0)

    metric = Metric(metric)
    raw = np.array([v.magnitude.value(metric) for v in views], dtype=float)
    matches = np.array(
        [bucket_filter is None or has_bucket(v.bucket_mask, bucket_filter) for v in views],
        dtype=bool,
    )

    reference = raw[matches] if matches.any() else raw
    peak = float(reference.max())
    if peak > 0:
        normalized = np.clip(raw / peak, 0.0, 1.0)
    else:
        normalized = np.zeros_like(raw)

    points = [
        TimelinePoint(
            idx=view.idx,
            value=float(normalized[i]),
            raw_value=float(raw[i]),
            reviewed=view.reviewed,
            matches_bucket_filter=bool(matches[i]),
        )
        for i, view in enumerate(views)
    ]
    return TimelineData(points=points, max_raw_value=float(raw.max()), min_raw_value=float(raw.min()))


def position_to_commit_index(fraction: float, total_commits: int) -> int:
    """Nearest commit index for a 0..1 position along the timeline."""
    if total_commits <= 0:
        return 0
    clamped = min(1.0, max(0.0, fraction))
    return int(clamped * (total_commits - 1) + 0.5)


def commit_index_to_position(idx: int, total_commits: int) -> float:
    """0..1 position of a commit index along the timeline."""
    if total_commits <= 1:
        return 0.0
    return min(1.0, max(0.0, idx / (total_commits - 1)))


def playback_interval_ms(speed: float) -> int:
    """Milliseconds between automatic advances at a playback multiplier."""
    try:
        return PLAYBACK_INTERVALS_MS[float(speed)]
    except (KeyError, TypeError, ValueError):
        raise SessionError(
            f"Unsupported playback speed: {speed}",
            ErrorCode.CF501,
            context={"speed": str(speed), "supported": ", ".join(str(s) for s in PLAYBACK_SPEEDS)},
            recoverable=False,
        )


def next_playback_speed(speed: float) -> float:
    """Cycle to the next multiplier, wrapping to the slowest."""
    try:
        position = PLAYBACK_SPEEDS.index(float(speed))
    except ValueError:
        return 1.0
    return PLAYBACK_SPEEDS[(position + 1) % len(PLAYBACK_SPEEDS)]


def next_playback_index(current: int, order: Sequence[int]) -> Optional[int]:
    """Commit to show after ``current`` while autoplaying through ``order``.

    ``order`` is the (possibly filtered) list of commit indices. Returns None
    at the end, which stops playback. A current commit outside ``order``
    resumes at the first ordered commit after it.
    """
    if not order:
        return None
    try:
        position = order.index(current)
    except ValueError:
        later = [idx for idx in order if idx > current]
        return later[0] if later else None
    if position + 1 >= len(order):
        return None
    return order[position + 1]
