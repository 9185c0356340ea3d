"""Tests for the Myers line diff."""

import random
import time
import tracemalloc

import pytest

from corpus_forensics.compare import DiffKind, diff_lines, diff_text_lines, guarded_diff_lines, split_lines


def _lcs_length(a, b):
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])
    return table[len(a)][len(b)]


def _old_side(ops):
    return [op.text for op in ops if op.kind in (DiffKind.EQUAL, DiffKind.DEL)]


def _new_side(ops):
    return [op.text for op in ops if op.kind in (DiffKind.EQUAL, DiffKind.ADD)]


class TestDiffLines:
    def test_identical(self):
        ops = diff_lines(["a", "b"], ["a", "b"])
        assert [op.kind for op in ops] == [DiffKind.EQUAL, DiffKind.EQUAL]

    def test_empty_sides(self):
        assert diff_lines([], []) == []
        assert [op.kind for op in diff_lines([], ["x", "y"])] == [DiffKind.ADD, DiffKind.ADD]
        assert [op.kind for op in diff_lines(["x"], [])] == [DiffKind.DEL]

    def test_single_replacement(self):
        ops = diff_lines(["a", "b", "c"], ["a", "x", "c"])
        changed = [op for op in ops if op.kind is not DiffKind.EQUAL]
        assert sorted(op.kind.value for op in changed) == ["add", "del"]
        assert ops[0].text == "a" and ops[-1].text == "c"

    def test_classic_example(self):
        a = list("ABCABBA")
        b = list("CBABAC")
        ops = diff_lines(a, b)
        assert _old_side(ops) == a
        assert _new_side(ops) == b
        assert sum(op.kind is not DiffKind.EQUAL for op in ops) == 5

    @pytest.mark.parametrize("seed", range(20))
    def test_reconstructs_and_is_minimal(self, seed):
        rng = random.Random(seed)
        a = [rng.choice("abc") for _ in range(rng.randint(0, 12))]
        b = [rng.choice("abc") for _ in range(rng.randint(0, 12))]
        ops = diff_lines(a, b)
        assert _old_side(ops) == a
        assert _new_side(ops) == b
        edits = sum(op.kind is not DiffKind.EQUAL for op in ops)
        assert edits == len(a) + len(b) - 2 * _lcs_length(a, b)

    @pytest.mark.parametrize("seed", range(10))
    def test_minimal_on_longer_inputs(self, seed):
        rng = random.Random(100 + seed)
        a = [rng.choice("abcdefgh") for _ in range(rng.randint(20, 60))]
        b = [rng.choice("abcdefgh") for _ in range(rng.randint(20, 60))]
        ops = diff_lines(a, b)
        assert _old_side(ops) == a
        assert _new_side(ops) == b
        edits = sum(op.kind is not DiffKind.EQUAL for op in ops)
        assert edits == len(a) + len(b) - 2 * _lcs_length(a, b)

    def test_deletions_precede_additions_in_a_change(self):
        ops = diff_lines(["a", "x", "y", "c"], ["a", "p", "q", "c"])
        assert [op.kind.value for op in ops] == ["equal", "del", "del", "add", "add", "equal"]

    def test_disjoint_sides(self):
        ops = diff_lines([f"a{i}" for i in range(300)], [f"b{i}" for i in range(200)])
        assert sum(op.kind is DiffKind.DEL for op in ops) == 300
        assert sum(op.kind is DiffKind.ADD for op in ops) == 200
        assert not any(op.kind is DiffKind.EQUAL for op in ops)

    def test_memory_stays_linear(self):
        # Shared lines in reverse order force a long edit script.
        a = [f"line {i}" for i in range(600)]
        b = list(reversed(a))
        tracemalloc.start()
        try:
            ops = diff_lines(a, b)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()
        assert _new_side(ops) == b
        assert sum(op.kind is DiffKind.EQUAL for op in ops) == 1
        assert peak < 8 * 1024 * 1024


class TestGuardedDiff:
    def test_within_limit(self):
        result = guarded_diff_lines(["a"], ["b"], max_lines=2)
        assert not result.exceeded
        assert len(result.ops) == 2

    def test_over_limit_skips_diff(self):
        result = guarded_diff_lines(["a", "b"], ["c"], max_lines=2)
        assert result.exceeded
        assert result.ops == ()
        assert result.total_lines == 3

    def test_text_diff(self):
        result = diff_text_lines("a\nb", "a\nc")
        assert _new_side(result.ops) == ["a", "c"]


class TestSplitLines:
    def test_empty_text_has_no_lines(self):
        assert split_lines("") == []

    def test_trailing_newline_keeps_empty_line(self):
        assert split_lines("a\n") == ["a", ""]


@pytest.mark.slow
class TestDiffAtCeiling:
    def test_disjoint_inputs_at_ceiling(self):
        a = [f"a{i}" for i in range(4000)]
        b = [f"b{i}" for i in range(4000)]
        start = time.perf_counter()
        result = guarded_diff_lines(a, b)
        elapsed = time.perf_counter() - start
        assert not result.exceeded
        assert len(result.ops) == 8000
        assert elapsed < 2.0

    def test_scattered_edits_at_ceiling(self):
        a = [f"line {i}" for i in range(4000)]
        b = [f"edited {i}" if i % 50 == 0 else line for i, line in enumerate(a)]
        tracemalloc.start()
        try:
            start = time.perf_counter()
            result = guarded_diff_lines(a, b)
            elapsed = time.perf_counter() - start
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()
        assert sum(op.kind is DiffKind.DEL for op in result.ops) == 80
        assert _new_side(result.ops) == b
        assert elapsed < 5.0
        assert peak < 32 * 1024 * 1024
