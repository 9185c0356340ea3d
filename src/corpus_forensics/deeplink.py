"""Encode a small slice of view state into a URL fragment and back.

Keys are short (``c``, ``tab``, ``f``, ``d``, ``q``, ``ro``, ``b``) and fields
equal to their defaults are omitted. Decoding never fails: unknown keys are
ignored and invalid values fall back to defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import parse_qsl, urlencode

from .dataset.buckets import is_valid_bucket
from .logging_config import get_logger

logger = get_logger(__name__)


class ViewTab(str, Enum):
    DIFF = "diff"
    SNAPSHOT = "snapshot"
    RAW = "raw"
    LEDGER = "ledger"
    FILES = "files"


class DiffLayout(str, Enum):
    UNIFIED = "unified"
    SIDE_BY_SIDE = "sideBySide"


ALL_FILES_TOKEN = "__ALL__"


@dataclass(frozen=True)
class HashState:
    commit_short: Optional[str] = None
    tab: ViewTab = ViewTab.DIFF
    file: Optional[str] = None  # None means all files
    diff_layout: DiffLayout = DiffLayout.UNIFIED
    query: str = ""
    reviewed_only: bool = False
    bucket: Optional[int] = None


DEFAULT_STATE = HashState()


def encode_hash_state(state: HashState) -> str:
    """Fragment for ``state`` including the leading ``#``, or "" when all defaults."""
    params: list[tuple[str, str]] = []
    if state.commit_short:
        params.append(("c", state.commit_short))
    if state.tab != ViewTab.DIFF:
        params.append(("tab", ViewTab(state.tab).value))
    if state.file and state.file != ALL_FILES_TOKEN:
        params.append(("f", state.file))
    if state.diff_layout != DiffLayout.UNIFIED:
        params.append(("d", DiffLayout(state.diff_layout).value))
    if state.query:
        params.append(("q", state.query))
    if state.reviewed_only:
        params.append(("ro", "1"))
    if state.bucket is not None and is_valid_bucket(state.bucket):
        params.append(("b", str(state.bucket)))
    encoded = urlencode(params)
    return f"#{encoded}" if encoded else ""


def decode_hash_state(fragment: str) -> HashState:
    """Parse a fragment (with or without ``#``) into a full state."""
    raw = (fragment or "").lstrip("#")
    if not raw:
        return DEFAULT_STATE

    values: dict[str, str] = {}
    for key, value in parse_qsl(raw, keep_blank_values=True):
        values.setdefault(key, value)

    fields: dict = {}

    if values.get("c"):
        fields["commit_short"] = values["c"]

    tab = _enum_or_none(ViewTab, values.get("tab"))
    if tab is not None:
        fields["tab"] = tab

    f = values.get("f")
    if f and f != ALL_FILES_TOKEN:
        fields["file"] = f

    layout = _enum_or_none(DiffLayout, values.get("d"))
    if layout is not None:
        fields["diff_layout"] = layout

    if values.get("q"):
        fields["query"] = values["q"]

    if values.get("ro") == "1":
        fields["reviewed_only"] = True

    b = values.get("b")
    if b is not None:
        try:
            bucket = int(b)
        except ValueError:
            bucket = None
        if bucket is not None and is_valid_bucket(bucket):
            fields["bucket"] = bucket

    ignored = set(values) - {"c", "tab", "f", "d", "q", "ro", "b"}
    if ignored:
        logger.debug(f"Ignoring unknown fragment keys: {sorted(ignored)}")

    return HashState(**fields)


def _enum_or_none(enum_cls, value: Optional[str]):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None
