"""Data models for bucket analytics and the timeline mini-map."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from ..dataset.buckets import BUCKET_IDS


class WeightMode(str, Enum):
    """How a group's share is spread over its buckets.

    SOFT divides the share evenly. HARD credits the full share to every listed
    bucket, so totals across buckets exceed the commit's magnitude whenever a
    group has several buckets.
    """

    HARD = "hard"
    SOFT = "soft"


class TimeResolution(str, Enum):
    DAY = "day"
    HOUR = "hour"
    QUARTER_HOUR = "15m"
    FIVE_MINUTES = "5m"


@dataclass(frozen=True)
class BucketSeries:
    """Stacked series: ``values[bucket, t]`` is the weight of bucket in ``time_keys[t]``."""

    time_keys: list[str]
    values: np.ndarray  # shape (11, len(time_keys))
    first_commit_by_key: dict[str, int] = field(default_factory=dict)

    def series(self, bucket: int) -> list[float]:
        return [float(v) for v in self.values[bucket]]

    def column(self, time_key: str) -> dict[int, float]:
        """Non-zero bucket weights for one time key."""
        t = self.time_keys.index(time_key)
        return {b: float(self.values[b, t]) for b in BUCKET_IDS if self.values[b, t] != 0}

    def totals(self) -> dict[int, float]:
        """Summed weight per bucket over the whole range."""
        sums = self.values.sum(axis=1)
        return {b: float(sums[b]) for b in BUCKET_IDS}

    def stack_heights(self) -> list[float]:
        """Total stacked height per time key."""
        return [float(v) for v in self.values.sum(axis=0)]


@dataclass(frozen=True)
class TimelinePoint:
    idx: int
    value: float  # normalized to [0, 1]
    raw_value: float
    reviewed: bool
    matches_bucket_filter: bool


@dataclass(frozen=True)
class TimelineData:
    points: list[TimelinePoint]
    max_raw_value: float
    min_raw_value: float
