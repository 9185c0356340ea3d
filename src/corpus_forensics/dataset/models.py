"""Typed dataset schema.

The dataset is one JSON document fetched by the host. Decoding is lenient in
the small (missing numbers become 0, missing strings become "", explicit
nulls fall back to defaults, confidences are clamped, unknown bucket ids are
dropped) and strict in the large (a commit list that is not a list of
objects is a validation error).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..logging_config import get_logger
from .buckets import is_valid_bucket

logger = get_logger(__name__)


class _Record(BaseModel):
    """Frozen record that ignores unknown keys and treats null as absent."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Author(_Record):
    name: str = ""
    email: str = ""


class NumStat(_Record):
    path: str = ""
    added: int = 0
    deleted: int = 0


class Totals(_Record):
    added: int = 0
    deleted: int = 0
    files: int = 0


class SnapshotMeta(_Record):
    lines: int = 0
    words: int = 0
    bytes: int = 0


class FileSnapshot(_Record):
    path: str = ""
    content: str = ""


class ReviewGroup(_Record):
    title: str | None = None
    confidence: float = 0.0
    rationale: str | None = None
    evidence: list[str] = Field(default_factory=list)
    buckets: list[int] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(1.0, max(0.0, value))

    @field_validator("buckets", mode="before")
    @classmethod
    def _drop_unknown_buckets(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        kept = [b for b in value if is_valid_bucket(b)]
        if len(kept) != len(value):
            dropped = [b for b in value if not is_valid_bucket(b)]
            logger.warning(f"Dropping out-of-range bucket ids {dropped}")
        return kept


class Review(_Record):
    groups: list[ReviewGroup] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class Commit(_Record):
    sha: str = ""
    short: str = ""
    epoch: int = 0
    date: str = ""
    subject: str = ""
    author: Author | None = None
    numstat: list[NumStat] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    patch: str = ""
    files: list[FileSnapshot] = Field(default_factory=list)
    snapshot: SnapshotMeta | None = None
    review: Review | None = None

    @model_validator(mode="before")
    @classmethod
    def _reconcile(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {k: v for k, v in data.items() if v is not None}

        sha = data.get("sha")
        if not data.get("short") and isinstance(sha, str):
            data["short"] = sha[:7]

        epoch = data.get("epoch")
        date = data.get("date")
        if date and not epoch:
            parsed = _parse_iso(date)
            if parsed is not None:
                data["epoch"] = int(parsed.timestamp())
        elif epoch and not date and isinstance(epoch, (int, float)):
            data["date"] = datetime.fromtimestamp(int(epoch), tz=timezone.utc).isoformat()
        elif epoch and date and isinstance(epoch, (int, float)):
            parsed = _parse_iso(date)
            if parsed is not None and int(parsed.timestamp()) != int(epoch):
                logger.warning(f"Commit {data.get('short') or sha}: epoch {epoch} disagrees with date {date}")

        numstat = data.get("numstat")
        if isinstance(numstat, list) and numstat and all(isinstance(n, dict) for n in numstat):
            derived = {
                "added": sum(_as_int(n.get("added")) for n in numstat),
                "deleted": sum(_as_int(n.get("deleted")) for n in numstat),
                "files": len(numstat),
            }
            totals = data.get("totals")
            if isinstance(totals, dict) and any(
                _as_int(totals.get(k)) != v for k, v in derived.items()
            ):
                logger.warning(
                    f"Commit {data.get('short') or sha}: totals {totals} disagree with numstat, using numstat"
                )
            data["totals"] = derived

        return data

    @property
    def reviewed(self) -> bool:
        return self.review is not None


class Dataset(_Record):
    generated_at: str = ""
    scope_paths: list[str] = Field(default_factory=list)
    bucket_defs: dict[str, str] = Field(default_factory=dict)
    commits: list[Commit] = Field(default_factory=list)

    def bucket_definition(self, bucket: int) -> str:
        """Definition text for a bucket id, or "" when the dataset has none."""
        return self.bucket_defs.get(str(bucket), "")


def _parse_iso(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
