"""Tests for unified patch parsing."""

from corpus_forensics.compare import LineKind, parse_patch
from corpus_forensics.compare.patch import UNKNOWN_PATH, classify_line, parse_hunk_header

TWO_FILE_PATCH = (
    "diff --git a/spec/core.md b/spec/core.md\n"
    "index 1111111..2222222 100644\n"
    "--- a/spec/core.md\n"
    "+++ b/spec/core.md\n"
    "@@ -1,3 +1,3 @@\n"
    " # Core\n"
    "-The frame budget is 16ms.\n"
    "+The frame budget is 8ms.\n"
    " Jitter must stay low.\n"
    "diff --git a/spec/old.md b/spec/new.md\n"
    "similarity index 90%\n"
    "@@ -10 +10,2 @@ Section heading\n"
    "-old line\n"
    "+new line\n"
    "+another line"
)


class TestParsePatch:
    def test_files_and_paths(self):
        files = parse_patch(TWO_FILE_PATCH)
        assert [(f.path_a, f.path_b) for f in files] == [
            ("spec/core.md", "spec/core.md"),
            ("spec/old.md", "spec/new.md"),
        ]

    def test_hunk_positions(self):
        files = parse_patch(TWO_FILE_PATCH)
        hunk = files[0].hunks[0]
        assert (hunk.old_start, hunk.old_length, hunk.new_start, hunk.new_length) == (1, 3, 1, 3)

    def test_omitted_hunk_length_is_none(self):
        hunk = parse_patch(TWO_FILE_PATCH)[1].hunks[0]
        assert hunk.old_start == 10
        assert hunk.old_length is None
        assert hunk.new_length == 2

    def test_line_kinds(self):
        core = parse_patch(TWO_FILE_PATCH)[0]
        assert [line.kind for line in core.header_lines] == [LineKind.META] * 4
        assert [line.kind for line in core.hunks[0].lines] == [
            LineKind.CONTEXT,
            LineKind.DEL,
            LineKind.ADD,
            LineKind.CONTEXT,
        ]

    def test_added_and_deleted_counts(self):
        files = parse_patch(TWO_FILE_PATCH)
        assert (files[0].added, files[0].deleted) == (1, 1)
        assert (files[1].added, files[1].deleted) == (2, 1)

    def test_every_line_is_kept(self):
        files = parse_patch(TWO_FILE_PATCH)
        total = sum(len(list(f.iter_lines())) for f in files)
        assert total == len(TWO_FILE_PATCH.split("\n"))

    def test_hunk_text_images(self):
        hunk = parse_patch(TWO_FILE_PATCH)[0].hunks[0]
        assert hunk.old_text_lines() == ["# Core", "The frame budget is 16ms.", "Jitter must stay low."]
        assert hunk.new_text_lines() == ["# Core", "The frame budget is 8ms.", "Jitter must stay low."]

    def test_empty_text(self):
        assert parse_patch("") == []


class TestMalformedPatches:
    """Parsing never raises; bad structure degrades to placeholders."""

    def test_malformed_file_marker(self):
        files = parse_patch("diff --git nonsense\n+added")
        assert (files[0].path_a, files[0].path_b) == (UNKNOWN_PATH, UNKNOWN_PATH)

    def test_lines_before_first_marker(self):
        files = parse_patch("\nFrom: someone\nSubject: x\ndiff --git a/a.md b/a.md\n+x")
        assert len(files) == 2
        assert files[0].path_a == UNKNOWN_PATH
        assert [line.text for line in files[0].header_lines] == ["", "From: someone", "Subject: x"]
        assert files[1].path_a == "a.md"

    def test_unparseable_hunk_header(self):
        files = parse_patch("@@ garbage @@\n+x")
        hunk = files[0].hunks[0]
        assert hunk.old_start is None
        assert hunk.header == "@@ garbage @@"
        assert [line.kind for line in hunk.lines] == [LineKind.ADD]

    def test_parse_hunk_header_without_match(self):
        assert parse_hunk_header("@@ nope").new_start is None


class TestClassifyLine:
    def test_file_headers_are_meta(self):
        assert classify_line("+++ b/x.md") is LineKind.META
        assert classify_line("--- a/x.md") is LineKind.META

    def test_markers(self):
        assert classify_line("+x") is LineKind.ADD
        assert classify_line("-x") is LineKind.DEL
        assert classify_line(" x") is LineKind.CONTEXT
        assert classify_line("\\ No newline at end of file") is LineKind.META
