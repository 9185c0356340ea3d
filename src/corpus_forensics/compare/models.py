"""Data models for patch parsing, line diffs, and snapshot comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class LineKind(str, Enum):
    META = "meta"
    HUNK_HEADER = "hunk-header"
    CONTEXT = "context"
    ADD = "add"
    DEL = "del"


@dataclass(frozen=True)
class PatchLine:
    kind: LineKind
    text: str  # raw line, leading marker included


@dataclass
class PatchHunk:
    header: str
    old_start: Optional[int] = None
    old_length: Optional[int] = None  # None when the header omits it (means 1)
    new_start: Optional[int] = None
    new_length: Optional[int] = None
    lines: list[PatchLine] = field(default_factory=list)

    @property
    def header_line(self) -> PatchLine:
        return PatchLine(LineKind.HUNK_HEADER, self.header)

    def old_text_lines(self) -> list[str]:
        """Pre-image of the hunk: context and deleted lines, markers stripped."""
        return [
            line.text[1:]
            for line in self.lines
            if line.kind in (LineKind.CONTEXT, LineKind.DEL)
        ]

    def new_text_lines(self) -> list[str]:
        """Post-image of the hunk: context and added lines, markers stripped."""
        return [
            line.text[1:]
            for line in self.lines
            if line.kind in (LineKind.CONTEXT, LineKind.ADD)
        ]

    @property
    def added(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.ADD)

    @property
    def deleted(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.DEL)


@dataclass
class PatchFile:
    path_a: str
    path_b: str
    header_lines: list[PatchLine] = field(default_factory=list)
    hunks: list[PatchHunk] = field(default_factory=list)

    def iter_lines(self) -> Iterator[PatchLine]:
        """Every line in patch order, hunk headers included."""
        yield from self.header_lines
        for hunk in self.hunks:
            yield hunk.header_line
            yield from hunk.lines

    @property
    def added(self) -> int:
        return sum(h.added for h in self.hunks)

    @property
    def deleted(self) -> int:
        return sum(h.deleted for h in self.hunks)


class DiffKind(str, Enum):
    EQUAL = "equal"
    ADD = "add"
    DEL = "del"


@dataclass(frozen=True)
class DiffOp:
    kind: DiffKind
    text: str


@dataclass(frozen=True)
class LineDiff:
    """Outcome of a size-guarded diff.

    When ``exceeded`` is set no diff was computed and ``ops`` is empty; the
    caller should narrow the scope (one file) or fall back to an edit
    distance.
    """

    ops: tuple[DiffOp, ...]
    exceeded: bool
    total_lines: int
    max_lines: int


@dataclass(frozen=True)
class EditDistance:
    value: int
    early_exit: bool  # value is then the bound, an upper estimate


class CellKind(str, Enum):
    CONTEXT = "context"
    ADD = "add"
    DEL = "del"
    EMPTY = "empty"


@dataclass(frozen=True)
class SideCell:
    kind: CellKind
    line_no: Optional[int] = None
    text: Optional[str] = None


@dataclass(frozen=True)
class SideRow:
    left: SideCell
    right: SideCell


@dataclass(frozen=True)
class TextStats:
    lines: int
    bytes: int
    words: int


@dataclass(frozen=True)
class FileChangeSummary:
    added: list[str]
    removed: list[str]
    modified: list[str]
    unchanged: list[str]


@dataclass(frozen=True)
class FileContribution:
    path: str
    delta_lines: int
    delta_bytes: int
