"""Side-by-side row models for hunks and corpus edit scripts."""

from __future__ import annotations

from typing import Iterable

from .models import CellKind, DiffKind, DiffOp, LineKind, PatchHunk, PatchLine, SideCell, SideRow

_EMPTY = SideCell(CellKind.EMPTY)


def hunk_to_side_by_side_rows(hunk: PatchHunk) -> list[SideRow]:
    """Pair each run of deletions with the following run of additions.

    Line numbers start at the hunk header's old/new starts (0 when the
    header could not be parsed). Meta lines inside a hunk become blank rows.
    """
    old_line = hunk.old_start or 0
    new_line = hunk.new_start or 0
    rows: list[SideRow] = []
    dels: list[PatchLine] = []
    adds: list[PatchLine] = []

    def flush() -> None:
        nonlocal old_line, new_line
        for i in range(max(len(dels), len(adds))):
            left = _EMPTY
            right = _EMPTY
            if i < len(dels):
                left = SideCell(CellKind.DEL, old_line, dels[i].text[1:])
                old_line += 1
            if i < len(adds):
                right = SideCell(CellKind.ADD, new_line, adds[i].text[1:])
                new_line += 1
            rows.append(SideRow(left, right))
        dels.clear()
        adds.clear()

    for line in hunk.lines:
        if line.kind is LineKind.DEL:
            dels.append(line)
            continue
        if line.kind is LineKind.ADD:
            adds.append(line)
            continue
        flush()
        if line.kind is LineKind.CONTEXT:
            text = line.text[1:]
            rows.append(
                SideRow(
                    SideCell(CellKind.CONTEXT, old_line, text),
                    SideCell(CellKind.CONTEXT, new_line, text),
                )
            )
            old_line += 1
            new_line += 1
            continue
        rows.append(SideRow(_EMPTY, _EMPTY))
    flush()
    return rows


def ops_to_side_by_side_rows(ops: Iterable[DiffOp]) -> list[SideRow]:
    """One row per edit op, numbering each side from 1."""
    left_line = 1
    right_line = 1
    rows: list[SideRow] = []
    for op in ops:
        if op.kind is DiffKind.EQUAL:
            rows.append(
                SideRow(
                    SideCell(CellKind.CONTEXT, left_line, op.text),
                    SideCell(CellKind.CONTEXT, right_line, op.text),
                )
            )
            left_line += 1
            right_line += 1
        elif op.kind is DiffKind.DEL:
            rows.append(SideRow(SideCell(CellKind.DEL, left_line, op.text), _EMPTY))
            left_line += 1
        else:
            rows.append(SideRow(_EMPTY, SideCell(CellKind.ADD, right_line, op.text)))
            right_line += 1
    return rows
