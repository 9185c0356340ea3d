"""Bounded line-level Levenshtein distance.

Only the diagonal band ``|i - j| <= upper_bound`` is evaluated: any edit
path leaving the band already costs more than the bound. Computation stops
as soon as a whole row exceeds the bound, and the result then reports
``early_exit`` with the bound as an upper estimate.
"""

from __future__ import annotations

from typing import Sequence

from .models import EditDistance


def default_upper_bound(len_a: int, len_b: int) -> int:
    """Slack for mostly-localized edits: 4 per net line plus 200."""
    return abs(len_b - len_a) * 4 + 200


def _intern(a: Sequence[str], b: Sequence[str]) -> tuple[list[int], list[int]]:
    ids: dict[str, int] = {}
    a_ids = [ids.setdefault(line, len(ids)) for line in a]
    b_ids = [ids.setdefault(line, len(ids)) for line in b]
    return a_ids, b_ids


def bounded_distance(a: Sequence[str], b: Sequence[str], upper_bound: int) -> EditDistance:
    """Insert/delete/substitute-one-line distance, capped at ``upper_bound``."""
    if upper_bound < 0:
        raise ValueError("upper_bound must be non-negative")

    n, m = len(a), len(b)
    k = upper_bound
    if abs(n - m) > k:
        return EditDistance(value=k, early_exit=True)
    if n == 0 or m == 0:
        return EditDistance(value=max(n, m), early_exit=False)

    a_ids, b_ids = _intern(a, b)
    cap = k + 1

    prev = [j if j <= k else cap for j in range(m + 1)]
    for i in range(1, n + 1):
        curr = [cap] * (m + 1)
        if i <= k:
            curr[0] = i
        row_min = curr[0]
        ai = a_ids[i - 1]

        for j in range(max(1, i - k), min(m, i + k) + 1):
            value = prev[j - 1] + (0 if ai == b_ids[j - 1] else 1)
            deletion = prev[j] + 1
            if deletion < value:
                value = deletion
            insertion = curr[j - 1] + 1
            if insertion < value:
                value = insertion
            if value > cap:
                value = cap
            curr[j] = value
            if value < row_min:
                row_min = value

        if row_min > k:
            return EditDistance(value=k, early_exit=True)
        prev = curr

    if prev[m] > k:
        return EditDistance(value=k, early_exit=True)
    return EditDistance(value=prev[m], early_exit=False)
