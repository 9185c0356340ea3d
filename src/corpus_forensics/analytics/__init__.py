"""Bucket attribution analytics and the timeline model."""

from .attribution import bucket_weights, build_bucket_series, time_bucket_key
from .models import BucketSeries, TimeResolution, TimelineData, TimelinePoint, WeightMode
from .timeline import (
    PLAYBACK_SPEEDS,
    build_timeline,
    commit_index_to_position,
    next_playback_index,
    next_playback_speed,
    playback_interval_ms,
    position_to_commit_index,
)

__all__ = [
    "BucketSeries",
    "PLAYBACK_SPEEDS",
    "TimeResolution",
    "TimelineData",
    "TimelinePoint",
    "WeightMode",
    "bucket_weights",
    "build_bucket_series",
    "build_timeline",
    "commit_index_to_position",
    "next_playback_index",
    "next_playback_speed",
    "playback_interval_ms",
    "position_to_commit_index",
]
