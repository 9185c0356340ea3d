"""Taxonomy bucket ids and the 11-bit presence mask.

Bucket 0 is reserved for unreviewed commits and bucket 10 for change-groups
that carry no category. Human-readable definitions travel with the dataset
(``bucket_defs``); only the ids are fixed here.
"""

from __future__ import annotations

from typing import Iterable, NewType

BUCKET_COUNT = 11
UNREVIEWED_BUCKET = 0
OTHER_BUCKET = 10
BUCKET_IDS: tuple[int, ...] = tuple(range(BUCKET_COUNT))

BucketMask = NewType("BucketMask", int)

EMPTY_MASK = BucketMask(0)
FULL_MASK = BucketMask((1 << BUCKET_COUNT) - 1)


def is_valid_bucket(bucket: object) -> bool:
    """True for integer bucket ids in [0, 10] (bools excluded)."""
    return isinstance(bucket, int) and not isinstance(bucket, bool) and 0 <= bucket < BUCKET_COUNT


def _check(bucket: int) -> None:
    if not is_valid_bucket(bucket):
        raise ValueError(f"bucket must be an integer in [0, {BUCKET_COUNT - 1}], got {bucket!r}")


def has_bucket(mask: BucketMask, bucket: int) -> bool:
    """Whether ``bucket`` is set in ``mask``."""
    _check(bucket)
    return (mask >> bucket) & 1 == 1


def set_bucket(mask: BucketMask, bucket: int) -> BucketMask:
    """Return ``mask`` with ``bucket`` set."""
    _check(bucket)
    return BucketMask(mask | (1 << bucket))


def clear_bucket(mask: BucketMask, bucket: int) -> BucketMask:
    """Return ``mask`` with ``bucket`` cleared."""
    _check(bucket)
    return BucketMask(mask & ~(1 << bucket) & FULL_MASK)


def mask_from(buckets: Iterable[int]) -> BucketMask:
    """Build a mask from bucket ids."""
    mask = EMPTY_MASK
    for bucket in buckets:
        mask = set_bucket(mask, bucket)
    return mask


def buckets_in(mask: BucketMask) -> list[int]:
    """Bucket ids present in ``mask``, ascending."""
    return [b for b in BUCKET_IDS if (mask >> b) & 1]
