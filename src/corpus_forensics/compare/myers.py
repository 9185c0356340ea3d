"""Myers shortest-edit-script diff over lines.

Lines are interned to integers, lines that never occur on the other side
are set aside (they can only be deleted or added), and the rest is solved
with the linear-space middle-snake bisection. Memory stays O(N+M); time is
O((N+M)·D) in the worst case, so whole-corpus comparisons go through
:func:`guarded_diff_lines`, which refuses inputs above a combined line
ceiling instead of running the algorithm.
"""

from __future__ import annotations

from typing import Sequence

from .models import DiffKind, DiffOp, LineDiff

DEFAULT_MAX_LINES = 8000

Match = tuple[int, int]  # (index in a, index in b) of an unchanged line


def split_lines(text: str) -> list[str]:
    """Split on newlines; empty text has no lines, a trailing newline keeps its empty line."""
    if not text:
        return []
    return text.split("\n")


def diff_lines(a: Sequence[str], b: Sequence[str]) -> list[DiffOp]:
    """Minimal edit script turning ``a`` into ``b``.

    Concatenating the ``equal`` and ``del`` texts yields ``a``; the ``equal``
    and ``add`` texts yield ``b``. Within each changed region deletions come
    before additions.
    """
    n, m = len(a), len(b)
    if n == 0:
        return [DiffOp(DiffKind.ADD, text) for text in b]
    if m == 0:
        return [DiffOp(DiffKind.DEL, text) for text in a]

    ids: dict[str, int] = {}
    a_ids = [ids.setdefault(line, len(ids)) for line in a]
    b_ids = [ids.setdefault(line, len(ids)) for line in b]

    # Every common subsequence uses only lines present on both sides.
    shared = set(a_ids) & set(b_ids)
    a_keep = [i for i, line in enumerate(a_ids) if line in shared]
    b_keep = [j for j, line in enumerate(b_ids) if line in shared]

    matches: list[Match] = []
    _collect_matches(
        [a_ids[i] for i in a_keep], [b_ids[j] for j in b_keep], 0, len(a_keep), 0, len(b_keep), matches
    )

    ops: list[DiffOp] = []
    x = y = 0
    for i, j in matches:
        ai, bj = a_keep[i], b_keep[j]
        ops.extend(DiffOp(DiffKind.DEL, text) for text in a[x:ai])
        ops.extend(DiffOp(DiffKind.ADD, text) for text in b[y:bj])
        ops.append(DiffOp(DiffKind.EQUAL, a[ai]))
        x, y = ai + 1, bj + 1
    ops.extend(DiffOp(DiffKind.DEL, text) for text in a[x:])
    ops.extend(DiffOp(DiffKind.ADD, text) for text in b[y:])
    return ops


def _collect_matches(
    a: list[int], b: list[int], a_lo: int, a_hi: int, b_lo: int, b_hi: int, out: list[Match]
) -> None:
    """Append, in order, the matched pairs of a longest common subsequence of the two ranges."""
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        out.append((a_lo, b_lo))
        a_lo += 1
        b_lo += 1
    suffix: list[Match] = []
    while a_lo < a_hi and b_lo < b_hi and a[a_hi - 1] == b[b_hi - 1]:
        a_hi -= 1
        b_hi -= 1
        suffix.append((a_hi, b_hi))

    if a_lo < a_hi and b_lo < b_hi:
        split = _middle_snake(a, b, a_lo, a_hi, b_lo, b_hi)
        if split is not None:
            x, y = split
            _collect_matches(a, b, a_lo, x, b_lo, y, out)
            _collect_matches(a, b, x, a_hi, y, b_hi, out)

    suffix.reverse()
    out.extend(suffix)


def _middle_snake(
    a: list[int], b: list[int], a_lo: int, a_hi: int, b_lo: int, b_hi: int
) -> tuple[int, int] | None:
    """Point on an optimal path where the forward and reverse searches meet.

    Returns None when the ranges share no line at all. Called only on ranges
    whose first and last lines differ, so the point is never a corner.
    """
    n, m = a_hi - a_lo, b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d + 2
    # forward[k] / reverse[k]: furthest x on diagonal k, -1 when not reached
    forward = [-1] * size
    reverse = [-1] * size
    forward[offset + 1] = 0
    reverse[offset + 1] = 0
    delta = n - m
    odd = delta % 2 != 0
    # Diagonals that ran off the grid are trimmed from later rounds.
    f_start = f_end = r_start = r_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            ko = offset + k
            if k == -d or (k != d and forward[ko - 1] < forward[ko + 1]):
                x = forward[ko + 1]
            else:
                x = forward[ko - 1] + 1
            y = x - k
            while x < n and y < m and a[a_lo + x] == b[b_lo + y]:
                x += 1
                y += 1
            forward[ko] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif odd:
                ro = offset + delta - k
                if 0 <= ro < size and reverse[ro] != -1 and x >= n - reverse[ro]:
                    return a_lo + x, b_lo + y

        for k in range(-d + r_start, d + 1 - r_end, 2):
            ko = offset + k
            if k == -d or (k != d and reverse[ko - 1] < reverse[ko + 1]):
                x = reverse[ko + 1]
            else:
                x = reverse[ko - 1] + 1
            y = x - k
            while x < n and y < m and a[a_hi - 1 - x] == b[b_hi - 1 - y]:
                x += 1
                y += 1
            reverse[ko] = x
            if x > n:
                r_end += 2
            elif y > m:
                r_start += 2
            elif not odd:
                fo = offset + delta - k
                if 0 <= fo < size and forward[fo] != -1:
                    fx = forward[fo]
                    if fx >= n - x:
                        return a_lo + fx, b_lo + fx - (fo - offset)

    return None


def guarded_diff_lines(
    a: Sequence[str], b: Sequence[str], max_lines: int = DEFAULT_MAX_LINES
) -> LineDiff:
    """Diff only when ``len(a) + len(b)`` is within ``max_lines``."""
    total = len(a) + len(b)
    if total > max_lines:
        return LineDiff(ops=(), exceeded=True, total_lines=total, max_lines=max_lines)
    return LineDiff(ops=tuple(diff_lines(a, b)), exceeded=False, total_lines=total, max_lines=max_lines)


def diff_text_lines(a_text: str, b_text: str, max_lines: int = DEFAULT_MAX_LINES) -> LineDiff:
    """Guarded line diff of two texts."""
    return guarded_diff_lines(split_lines(a_text), split_lines(b_text), max_lines)
