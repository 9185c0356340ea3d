"""Dataset schema, decoding, and derived commit views."""

from .buckets import (
    BUCKET_COUNT,
    BUCKET_IDS,
    OTHER_BUCKET,
    UNREVIEWED_BUCKET,
    BucketMask,
    buckets_in,
    has_bucket,
    mask_from,
    set_bucket,
)
from .loader import decode_dataset, load_dataset
from .models import Author, Commit, Dataset, FileSnapshot, NumStat, Review, ReviewGroup, Totals
from .views import CommitView, Magnitude, Metric, build_commit_views

__all__ = [
    "Author",
    "BUCKET_COUNT",
    "BUCKET_IDS",
    "BucketMask",
    "Commit",
    "CommitView",
    "Dataset",
    "FileSnapshot",
    "Magnitude",
    "Metric",
    "NumStat",
    "OTHER_BUCKET",
    "Review",
    "ReviewGroup",
    "Totals",
    "UNREVIEWED_BUCKET",
    "build_commit_views",
    "buckets_in",
    "decode_dataset",
    "has_bucket",
    "load_dataset",
    "mask_from",
    "set_bucket",
]
